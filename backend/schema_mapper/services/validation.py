"""Schema-level validation services used before persisting a mapping."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal

from schema_mapper.config import get_settings
from schema_mapper.mapping.completeness import (
    CompletenessResult,
    CompletenessRule,
    build_rules,
    check_completeness,
    has_schema_content,
    required_field_highlights,
)
from schema_mapper.mapping.compatibility import resolve_value_mapping
from schema_mapper.mapping.ledger import ValidationLedger
from schema_mapper.mapping.paths import is_valid_path, statement_path
from schema_mapper.mapping.types import (
    TERM_KINDS,
    ColumnDescriptor,
    MappingInfo,
    SchemaTarget,
    TargetKind,
    ValidationIssue,
)
from schema_mapper.mapping.validator import MappingValidator
from schema_mapper.schemas.schema_mapping import ColumnMappingModel, SchemaMappingTree

logger = logging.getLogger(__name__)

SchemaStatus = Literal["not_started", "incomplete", "complete"]
_TERM_SECTIONS = (("label", "labels"), ("description", "descriptions"))
# Ledger source for completeness highlights and mapping issues.
LEDGER_SOURCE = "schema-evaluation"


@dataclass(slots=True)
class SchemaEvaluation:
    """Completeness plus per-mapping issues for one schema tree."""

    status: SchemaStatus
    completeness: CompletenessResult
    highlights: list[ValidationIssue] = field(default_factory=list)
    issues: list[ValidationIssue] = field(default_factory=list)


@dataclass(slots=True)
class MappingCheck:
    """Single-pair validation with feedback for the rendering layer."""

    is_valid: bool
    issue: ValidationIssue | None
    feedback_kind: Literal["success", "error", "warning"]
    feedback_message: str
    suggestions: list[str]
    resolved_type: str | None = None


def get_validator() -> MappingValidator:
    return MappingValidator.from_settings(get_settings())


def check_mapping(
    column: ColumnDescriptor,
    target: SchemaTarget,
    *,
    validator: MappingValidator | None = None,
) -> MappingCheck:
    """Validate one column against one target."""

    validator = validator or get_validator()
    outcome = validator.validate(column, target)
    feedback = validator.get_validation_feedback(column, target)
    resolved_type = resolve_value_mapping(column, target).resolved_type if outcome.is_valid else None
    return MappingCheck(
        is_valid=outcome.is_valid,
        issue=outcome.issue,
        feedback_kind=feedback.kind,
        feedback_message=feedback.message,
        suggestions=validator.get_validation_suggestions(column, target),
        resolved_type=resolved_type,
    )


def collect_mapping_infos(tree: SchemaMappingTree) -> list[MappingInfo]:
    """Flatten every column-backed mapping of the tree for cross-mapping checks."""

    infos: list[MappingInfo] = []
    terms = tree.item.terms
    for kind, section in _TERM_SECTIONS:
        for language_code, mapping in getattr(terms, section).items():
            infos.append(_term_info(kind, f"item.terms.{section}.{language_code}", language_code, mapping))
    for language_code, aliases in terms.aliases.items():
        for position, mapping in enumerate(aliases):
            infos.append(
                _term_info("alias", f"item.terms.aliases.{language_code}[{position}]", language_code, mapping)
            )

    for index, statement in enumerate(tree.item.statements):
        infos.append(
            _property_info(
                "statement",
                statement_path(index, "value"),
                statement.property.id,
                statement.value.source,
                statement.value.data_type,
            )
        )
        for section, kind in (("qualifiers", "qualifier"), ("references", "reference")):
            for position, snak in enumerate(getattr(statement, section)):
                infos.append(
                    _property_info(
                        kind,
                        statement_path(index, f"{section}[{position}]", "value"),
                        snak.property.id,
                        snak.value.source,
                        snak.value.data_type,
                    )
                )
    return infos


def _term_info(kind: TargetKind, path: str, language_code: str, mapping: ColumnMappingModel) -> MappingInfo:
    return MappingInfo(
        path=path,
        column_name=mapping.column_name,
        storage_type=mapping.data_type or None,
        target_types=frozenset(("string", "monolingualtext")),
        language_code=language_code,
        kind=kind,
    )


def _property_info(
    kind: TargetKind,
    path: str,
    property_id: str,
    source: ColumnMappingModel | str,
    data_type: str,
) -> MappingInfo:
    column_name = source.column_name if isinstance(source, ColumnMappingModel) else ""
    storage_type = source.data_type if isinstance(source, ColumnMappingModel) else None
    return MappingInfo(
        path=path,
        column_name=column_name,
        storage_type=storage_type or None,
        target_types=frozenset((data_type,)) if data_type else frozenset(),
        property_id=property_id or None,
        kind=kind,
    )


def mapping_issues(tree: SchemaMappingTree, validator: MappingValidator) -> list[ValidationIssue]:
    """Language codes, statement values, data types and duplicate mappings of the whole tree."""

    issues: list[ValidationIssue] = []
    terms = tree.item.terms
    for section in ("labels", "descriptions", "aliases"):
        for language_code in getattr(terms, section):
            candidate = f"item.terms.{section}.{language_code}"
            issue = validator.validate_language_code(
                language_code,
                candidate if is_valid_path(candidate) else f"item.terms.{section}",
            )
            if issue is not None:
                issues.append(issue)

    for index, statement in enumerate(tree.item.statements):
        if statement.property.id:
            report = validator.validate_statement_value(
                statement.property.id,
                statement.value.to_value_mapping(),
                statement_path(index, "value"),
            )
            issues.extend(report.errors)
            issues.extend(report.warnings)

    infos = collect_mapping_infos(tree)
    term_infos = [info for info in infos if info.kind in TERM_KINDS]
    issues.extend(validator.validate_all_mappings(term_infos).errors)
    for position, info in enumerate(infos):
        issues.extend(validator.detect_invalid_mappings(infos[:position], info))
    return issues


def evaluate_schema(
    tree: SchemaMappingTree,
    *,
    rules: list[CompletenessRule] | None = None,
    validator: MappingValidator | None = None,
    ledger: ValidationLedger | None = None,
) -> SchemaEvaluation:
    """Check completeness and mapping consistency of a schema tree.

    A tree without any content is reported as ``not_started`` and produces no
    highlights or issues even though its required rules fail.
    """

    validator = validator or get_validator()
    rules = rules if rules is not None else build_rules(tree)
    completeness = check_completeness(tree, rules)

    if not has_schema_content(tree):
        logger.info("Schema %s has no content; skipping highlights", tree.id or "<unsaved>")
        if ledger is not None:
            _sync_ledger(ledger, [])
        return SchemaEvaluation(status="not_started", completeness=completeness)

    highlights = required_field_highlights(tree, rules)
    issues = mapping_issues(tree, validator)
    status: SchemaStatus = "complete" if completeness.is_complete else "incomplete"
    logger.info(
        "Evaluated schema %s: status=%s missing=%d issues=%d",
        tree.id or "<unsaved>",
        status,
        len(completeness.missing_paths),
        len(issues),
    )
    if ledger is not None:
        _sync_ledger(ledger, [*highlights, *issues])
    return SchemaEvaluation(status=status, completeness=completeness, highlights=highlights, issues=issues)


def _sync_ledger(ledger: ValidationLedger, issues: list[ValidationIssue]) -> None:
    recorded: list[ValidationIssue] = []
    for issue in issues:
        if not is_valid_path(issue.path):
            logger.warning("Skipping ledger update for malformed path %s", issue.path)
            continue
        recorded.append(issue)
    ledger.replace_from(LEDGER_SOURCE, recorded)

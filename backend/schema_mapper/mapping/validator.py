"""Single-pair and cross-mapping validation rules."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from schema_mapper.mapping.compatibility import (
    compatible_types,
    explain,
    is_compatible,
    is_optimal,
    storage_types_for,
)
from schema_mapper.mapping.issues import create_error, create_warning
from schema_mapper.mapping.paths import is_valid_path
from schema_mapper.mapping.types import (
    PROPERTY_KINDS,
    ColumnDescriptor,
    ColumnSource,
    DropFeedback,
    MappingInfo,
    SchemaTarget,
    ValidationIssue,
    ValidationOutcome,
    ValidationReport,
    ValueMapping,
)

if TYPE_CHECKING:
    from schema_mapper.config import Settings
    from schema_mapper.mapping.ledger import ValidationLedger

COMPATIBLE_MESSAGE = "Compatible mapping"
_PROPERTY_ID_RE = re.compile(r"^P[1-9][0-9]*$")
_LANGUAGE_CODE_RE = re.compile(r"^[a-z]{2,3}(-[a-z0-9]+)*$")
_PROPERTY_PATH_MARKERS = (".statements[", ".qualifiers[", ".references[")


def is_valid_property_id(value: str | None) -> bool:
    return bool(value) and _PROPERTY_ID_RE.match(value) is not None


def is_valid_language_code(value: str | None) -> bool:
    return bool(value) and _LANGUAGE_CODE_RE.match(value) is not None


def is_well_formed(target: SchemaTarget) -> bool:
    """Whether a target carries enough configuration to receive a drop at all."""

    if not target.accepted_types or not is_valid_path(target.path):
        return False
    if target.is_term and not target.language_code:
        return False
    return True


class MappingValidator:
    """Applies the mapping rule set to (column, target) pairs."""

    def __init__(self, *, label_max_length: int = 250, alias_max_length: int = 100) -> None:
        self.label_max_length = label_max_length
        self.alias_max_length = alias_max_length

    @classmethod
    def from_settings(cls, settings: "Settings") -> "MappingValidator":
        return cls(
            label_max_length=settings.label_max_length,
            alias_max_length=settings.alias_max_length,
        )

    def validate(self, column: ColumnDescriptor, target: SchemaTarget) -> ValidationOutcome:
        """Run every rule in order; the first failing rule produces the only issue."""

        issue = self._first_issue(column, target, check_length=True)
        return ValidationOutcome(is_valid=issue is None, issue=issue)

    def validate_core(self, column: ColumnDescriptor, target: SchemaTarget) -> ValidationOutcome:
        """Type, nullability and property checks without sample inspection."""

        issue = self._first_issue(column, target, check_length=False)
        return ValidationOutcome(is_valid=issue is None, issue=issue)

    def compatible_target_paths(
        self,
        column: ColumnDescriptor,
        targets: Iterable[SchemaTarget],
    ) -> frozenset[str]:
        """Paths of well-formed targets that pass the core checks for ``column``."""

        return frozenset(
            target.path
            for target in targets
            if is_well_formed(target) and self.validate_core(column, target).is_valid
        )

    def max_length_for(self, target: SchemaTarget) -> int | None:
        if target.kind == "label":
            return self.label_max_length
        if target.kind == "alias":
            return self.alias_max_length
        return None

    def _first_issue(
        self,
        column: ColumnDescriptor,
        target: SchemaTarget,
        *,
        check_length: bool,
    ) -> ValidationIssue | None:
        context = {
            "columnName": column.name,
            "dataType": column.storage_type,
            "targetType": ", ".join(sorted(target.accepted_types)),
        }

        if not is_compatible(column.storage_type, target.accepted_types):
            return create_error(
                "INCOMPATIBLE_DATA_TYPE",
                target.path,
                context=context,
                message=explain(column.storage_type, target.accepted_types),
            )

        if target.is_required and column.nullable:
            return create_error(
                "MISSING_REQUIRED_MAPPING",
                target.path,
                context=context,
                message="Required field cannot accept nullable column",
            )

        if target.kind in PROPERTY_KINDS and not is_valid_property_id(target.property_id):
            detail = "must have a property ID" if not target.property_id else "has a malformed property ID"
            return create_error(
                "INVALID_PROPERTY_ID",
                target.path,
                context={**context, "propertyId": target.property_id},
                message=f"{target.kind} target {detail}",
            )

        if check_length:
            max_length = self.max_length_for(target)
            if max_length is not None and any(len(value) > max_length for value in column.sample_values):
                return create_error(
                    "INCOMPATIBLE_DATA_TYPE",
                    target.path,
                    context={**context, "maxLength": max_length, "languageCode": target.language_code},
                    message=f"{target.kind} values should be shorter than {max_length} characters",
                )

        return None

    def validate_for_drop(
        self,
        column: ColumnDescriptor,
        target: SchemaTarget,
        existing_aliases: Sequence[ColumnSource] = (),
    ) -> ValidationOutcome:
        """Full validation plus duplicate detection for alias targets."""

        outcome = self.validate(column, target)
        if not outcome.is_valid or target.kind != "alias":
            return outcome
        duplicate = any(
            alias.column_name == column.name and alias.storage_type == column.storage_type
            for alias in existing_aliases
        )
        if duplicate:
            return ValidationOutcome(
                is_valid=False,
                issue=create_error(
                    "DUPLICATE_LANGUAGE_MAPPING",
                    target.path,
                    context={"columnName": column.name, "languageCode": target.language_code},
                    message="This alias already exists",
                ),
            )
        return outcome

    def validate_drag_operation(
        self,
        column: ColumnDescriptor,
        target: SchemaTarget,
        ledger: "ValidationLedger | None" = None,
    ) -> ValidationReport:
        """Validate one drag pairing, optionally replacing the ledger entry for the target path."""

        outcome = self.validate(column, target)
        report = ValidationReport()
        if outcome.issue is not None:
            report.extend([outcome.issue])
        if ledger is not None:
            ledger.replace(target.path, [outcome.issue] if outcome.issue is not None else [])
        return report

    def get_validation_feedback(self, column: ColumnDescriptor, target: SchemaTarget) -> DropFeedback:
        outcome = self.validate(column, target)
        if outcome.is_valid:
            return DropFeedback(kind="success", message=f"{COMPATIBLE_MESSAGE} for {target.kind}")
        message = outcome.issue.message if outcome.issue is not None else "Invalid mapping"
        return DropFeedback(kind="error", message=message)

    def get_validation_suggestions(self, column: ColumnDescriptor, target: SchemaTarget) -> list[str]:
        """Remediation hints for every failing rule, not only the first."""

        suggestions: list[str] = []
        if not is_compatible(column.storage_type, target.accepted_types):
            accepted = sorted(target.accepted_types)
            suggestions.append(f"Consider using a column with data type: {' or '.join(accepted)}")
            feeding = sorted({storage for semantic in accepted for storage in storage_types_for(semantic)})
            if feeding:
                suggestions.append(f"Compatible column types: {', '.join(feeding)}")
        if target.is_required and column.nullable:
            suggestions.append("Use a non-nullable column for required fields")
        if target.kind in PROPERTY_KINDS and not is_valid_property_id(target.property_id):
            suggestions.append(f"Select a property ID for this {target.kind}")
        max_length = self.max_length_for(target)
        if max_length is not None and any(len(value) > max_length for value in column.sample_values):
            suggestions.append(f"Consider using shorter text values (max {max_length} characters)")
        return suggestions

    def detect_invalid_mappings(
        self,
        existing: Sequence[MappingInfo],
        candidate: MappingInfo,
    ) -> list[ValidationIssue]:
        """Cross-mapping duplicate checks for a candidate against committed mappings."""

        issues: list[ValidationIssue] = []

        if candidate.language_code:
            duplicate_language = next(
                (
                    mapping
                    for mapping in existing
                    if mapping.language_code == candidate.language_code
                    and mapping.path == candidate.path
                    and mapping.column_name != candidate.column_name
                    and (mapping.kind is None or candidate.kind is None or mapping.kind == candidate.kind)
                ),
                None,
            )
            if duplicate_language is not None:
                issues.append(
                    create_error(
                        "DUPLICATE_LANGUAGE_MAPPING",
                        candidate.path,
                        context={
                            "columnName": candidate.column_name,
                            "languageCode": candidate.language_code,
                            "existingColumnName": duplicate_language.column_name,
                        },
                    )
                )

        if candidate.property_id:
            duplicate_property = next(
                (
                    mapping
                    for mapping in existing
                    if mapping.property_id == candidate.property_id
                    and mapping.path != candidate.path
                    and _is_property_mapping(mapping)
                ),
                None,
            )
            if duplicate_property is not None:
                issues.append(
                    create_error(
                        "DUPLICATE_PROPERTY_MAPPING",
                        candidate.path,
                        context={
                            "columnName": candidate.column_name,
                            "propertyId": candidate.property_id,
                            "existingPath": duplicate_property.path,
                        },
                    )
                )

        return issues

    def detect_missing_required_mappings(
        self,
        targets: Iterable[SchemaTarget],
        mappings: Sequence[MappingInfo],
    ) -> list[ValidationIssue]:
        mapped_paths = {mapping.path for mapping in mappings}
        return [
            create_error(
                "MISSING_REQUIRED_MAPPING",
                target.path,
                context={
                    "targetType": target.kind,
                    "propertyId": target.property_id,
                    "languageCode": target.language_code,
                },
            )
            for target in targets
            if target.is_required and target.path not in mapped_paths
        ]

    def validate_all_mappings(self, mappings: Sequence[MappingInfo]) -> ValidationReport:
        """Re-check type compatibility of every committed mapping."""

        report = ValidationReport()
        for mapping in mappings:
            if not mapping.storage_type or not mapping.target_types:
                continue
            if not is_compatible(mapping.storage_type, mapping.target_types):
                report.extend(
                    [
                        create_error(
                            "INCOMPATIBLE_DATA_TYPE",
                            mapping.path,
                            context={
                                "columnName": mapping.column_name,
                                "dataType": mapping.storage_type,
                                "targetType": ", ".join(sorted(mapping.target_types)),
                            },
                            message=explain(mapping.storage_type, mapping.target_types),
                        )
                    ]
                )
        return report

    def validate_statement_value(
        self,
        property_id: str | None,
        value: ValueMapping,
        path: str,
    ) -> ValidationReport:
        """Check a committed statement/qualifier/reference value against its property."""

        report = ValidationReport()
        if not is_valid_property_id(property_id):
            report.extend([create_error("INVALID_PROPERTY_ID", path, context={"propertyId": property_id})])
            return report

        if value.mapping_type != "column":
            if not isinstance(value.source, str) or not value.source.strip():
                report.extend(
                    [create_error("MISSING_STATEMENT_VALUE", path, context={"propertyId": property_id})]
                )
            return report

        source = value.source
        if not isinstance(source, ColumnSource) or not source.column_name.strip():
            report.extend([create_error("MISSING_STATEMENT_VALUE", path, context={"propertyId": property_id})])
            return report

        context = {
            "columnName": source.column_name,
            "dataType": source.storage_type,
            "targetType": value.resolved_type,
            "propertyId": property_id,
        }
        if value.resolved_type not in compatible_types(source.storage_type):
            report.extend(
                [
                    create_error(
                        "INCOMPATIBLE_DATA_TYPE",
                        path,
                        context=context,
                        message=f"Column type {source.storage_type} is not compatible with {value.resolved_type}",
                    )
                ]
            )
        elif not is_optimal(source.storage_type, value.resolved_type):
            report.extend(
                [
                    create_warning(
                        "INCOMPATIBLE_DATA_TYPE",
                        path,
                        context=context,
                        message=(
                            f"Data type {value.resolved_type} may not be optimal "
                            f"for column type {source.storage_type}"
                        ),
                    )
                ]
            )
        return report

    def validate_language_code(self, language_code: str | None, path: str) -> ValidationIssue | None:
        if is_valid_language_code(language_code):
            return None
        return create_error("INVALID_LANGUAGE_CODE", path, context={"languageCode": language_code})


def _is_property_mapping(mapping: MappingInfo) -> bool:
    if mapping.kind is not None:
        return mapping.kind in PROPERTY_KINDS
    return any(marker in mapping.path for marker in _PROPERTY_PATH_MARKERS)

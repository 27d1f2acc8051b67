"""Declarative completeness rules evaluated over an assembled schema tree."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from schema_mapper.mapping.issues import create_issue
from schema_mapper.mapping.paths import statement_path
from schema_mapper.mapping.types import IssueCode, Severity, ValidationIssue
from schema_mapper.mapping.validator import is_valid_property_id

if TYPE_CHECKING:
    from schema_mapper.schemas.schema_mapping import (
        PropertyValueModel,
        SchemaMappingTree,
        StatementModel,
        ValueMappingModel,
    )

Predicate = Callable[[Any], bool]


@dataclass(frozen=True, slots=True)
class CompletenessRule:
    """A requirement on one schema path; ``predicate`` reports whether it is satisfied."""

    id: str
    path: str
    predicate: Predicate
    message: str = "Required field is missing"
    severity: Severity = "error"
    enabled: bool = True
    code: IssueCode = "MISSING_REQUIRED_MAPPING"


@dataclass(frozen=True, slots=True)
class CompletenessResult:
    is_complete: bool
    missing_paths: tuple[str, ...] = ()


def check_completeness(schema_tree: Any, rules: Iterable[CompletenessRule]) -> CompletenessResult:
    """Evaluate every enabled rule in order and collect the paths that fail."""

    missing = [rule.path for rule in _failing_rules(schema_tree, rules)]
    return CompletenessResult(is_complete=not missing, missing_paths=tuple(missing))


def required_field_highlights(schema_tree: Any, rules: Iterable[CompletenessRule]) -> list[ValidationIssue]:
    """Issues for failing rules, tagged with the editor component responsible for the path."""

    return [
        create_issue(
            rule.code,
            rule.path,
            severity=rule.severity,
            message=rule.message,
            context={"component": component_for_path(rule.path), "ruleId": rule.id},
        )
        for rule in _failing_rules(schema_tree, rules)
    ]


def _failing_rules(schema_tree: Any, rules: Iterable[CompletenessRule]) -> Iterator[CompletenessRule]:
    for rule in rules:
        if rule.enabled and not rule.predicate(schema_tree):
            yield rule


def component_for_path(path: str) -> str:
    if path.startswith("schema."):
        return "WikibaseSchemaEditor"
    if ".terms." in path:
        return "TermsEditor"
    if ".statements" in path:
        return "StatementEditor"
    return "WikibaseSchemaEditor"


class RuleSet:
    """Ordered, id-keyed collection of completeness rules."""

    def __init__(self, rules: Iterable[CompletenessRule] = ()) -> None:
        self._rules: dict[str, CompletenessRule] = {}
        for rule in rules:
            self.add(rule)

    def add(self, rule: CompletenessRule) -> None:
        """Add a rule, replacing any rule with the same id in place."""

        self._rules[rule.id] = rule

    def remove(self, rule_id: str) -> None:
        self._rules.pop(rule_id, None)

    def update(self, rule_id: str, **changes: Any) -> CompletenessRule | None:
        rule = self._rules.get(rule_id)
        if rule is None:
            return None
        updated = replace(rule, **changes)
        self._rules[rule_id] = updated
        return updated

    def get(self, rule_id: str) -> CompletenessRule | None:
        return self._rules.get(rule_id)

    def by_path(self, path: str) -> list[CompletenessRule]:
        return [rule for rule in self.enabled if rule.path == path]

    @property
    def rules(self) -> list[CompletenessRule]:
        return list(self._rules.values())

    @property
    def enabled(self) -> list[CompletenessRule]:
        return [rule for rule in self._rules.values() if rule.enabled]

    @property
    def error_rules(self) -> list[CompletenessRule]:
        return [rule for rule in self.enabled if rule.severity == "error"]

    @property
    def warning_rules(self) -> list[CompletenessRule]:
        return [rule for rule in self.enabled if rule.severity == "warning"]

    def __iter__(self) -> Iterator[CompletenessRule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self._rules)


def default_rules() -> list[CompletenessRule]:
    """Schema-level requirements: a name, a target Wikibase and at least one label."""

    return [
        CompletenessRule(
            id="schema-name-required",
            path="schema.name",
            predicate=lambda tree: bool(tree.name.strip()),
            message="Schema name is required",
            code="MISSING_ITEM_CONFIGURATION",
        ),
        CompletenessRule(
            id="wikibase-required",
            path="schema.wikibase",
            predicate=lambda tree: bool(tree.wikibase.strip()),
            message="Target Wikibase instance is required",
            code="MISSING_ITEM_CONFIGURATION",
        ),
        CompletenessRule(
            id="labels-required",
            path="item.terms.labels",
            predicate=lambda tree: any(
                mapping.column_name.strip() for mapping in tree.item.terms.labels.values()
            ),
            message="At least one label mapping is required",
        ),
    ]


def statement_rules(schema_tree: "SchemaMappingTree") -> list[CompletenessRule]:
    """Per-statement rules for the statements currently in ``schema_tree``."""

    rules: list[CompletenessRule] = []
    for index, statement in enumerate(schema_tree.item.statements):
        base = statement_path(index)
        rules.append(
            CompletenessRule(
                id=f"{base}.property",
                path=f"{base}.property.id",
                predicate=_statement_check(index, lambda stmt: is_valid_property_id(stmt.property.id)),
                message="Statement property ID is required",
                code="INVALID_PROPERTY_ID",
            )
        )
        rules.append(_value_rule(base, "Statement", statement.value, _statement_check(index, _value_of)))
        for section, label in (("qualifiers", "Qualifier"), ("references", "Reference")):
            for position, snak in enumerate(getattr(statement, section)):
                snak_path = f"{base}.{section}[{position}]"
                rules.append(
                    CompletenessRule(
                        id=f"{snak_path}.property",
                        path=f"{snak_path}.property.id",
                        predicate=_snak_check(
                            index, section, position, lambda item: is_valid_property_id(item.property.id)
                        ),
                        message=f"{label} property ID is required",
                        code="INVALID_PROPERTY_ID",
                    )
                )
                rules.append(
                    _value_rule(
                        snak_path,
                        label,
                        snak.value,
                        _snak_check(index, section, position, _value_of),
                    )
                )
    return rules


def build_rules(schema_tree: "SchemaMappingTree") -> list[CompletenessRule]:
    return [*default_rules(), *statement_rules(schema_tree)]


def has_schema_content(schema_tree: "SchemaMappingTree") -> bool:
    """Whether the user has entered anything at all."""

    terms = schema_tree.item.terms
    return bool(
        schema_tree.name.strip()
        or schema_tree.wikibase.strip()
        or terms.labels
        or terms.descriptions
        or terms.aliases
        or schema_tree.item.statements
    )


def _value_rule(
    base: str,
    label: str,
    value: "ValueMappingModel",
    value_getter: Callable[[Any], "ValueMappingModel | None"],
) -> CompletenessRule:
    if value.type == "column":
        return CompletenessRule(
            id=f"{base}.value",
            path=f"{base}.value.source.columnName",
            predicate=lambda tree: _has_column(value_getter(tree)),
            message=f"{label} value column mapping is required",
            code="MISSING_STATEMENT_VALUE",
        )
    return CompletenessRule(
        id=f"{base}.value",
        path=f"{base}.value.source",
        predicate=lambda tree: _has_literal(value_getter(tree)),
        message=f"{label} value is required",
        code="MISSING_STATEMENT_VALUE",
    )


def _value_of(node: "StatementModel | PropertyValueModel") -> "ValueMappingModel":
    return node.value


def _statement_check(index: int, check: Callable[["StatementModel"], Any]) -> Callable[[Any], Any]:
    def evaluate(tree: "SchemaMappingTree") -> Any:
        statements = tree.item.statements
        if index >= len(statements):
            return None
        return check(statements[index])

    return evaluate


def _snak_check(
    index: int,
    section: str,
    position: int,
    check: Callable[["PropertyValueModel"], Any],
) -> Callable[[Any], Any]:
    def evaluate(tree: "SchemaMappingTree") -> Any:
        statements = tree.item.statements
        if index >= len(statements):
            return None
        snaks = getattr(statements[index], section)
        if position >= len(snaks):
            return None
        return check(snaks[position])

    return evaluate


def _has_column(value: "ValueMappingModel | None") -> bool:
    if value is None or isinstance(value.source, str):
        return False
    return bool(value.source.column_name.strip())


def _has_literal(value: "ValueMappingModel | None") -> bool:
    if value is None or not isinstance(value.source, str):
        return False
    return bool(value.source.strip())

"""Typed values exchanged with the mapping engine, independent of rendering and persistence."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

SemanticType = Literal[
    "string",
    "wikibase-item",
    "wikibase-property",
    "quantity",
    "time",
    "globe-coordinate",
    "url",
    "external-id",
    "monolingualtext",
    "commonsMedia",
]
SEMANTIC_TYPE_VALUES: tuple[str, ...] = (
    "string",
    "wikibase-item",
    "wikibase-property",
    "quantity",
    "time",
    "globe-coordinate",
    "url",
    "external-id",
    "monolingualtext",
    "commonsMedia",
)

TargetKind = Literal["label", "description", "alias", "statement", "qualifier", "reference"]
TERM_KINDS: frozenset[str] = frozenset({"label", "description", "alias"})
PROPERTY_KINDS: frozenset[str] = frozenset({"statement", "qualifier", "reference"})

MappingType = Literal["column", "constant", "expression"]
Severity = Literal["error", "warning"]
DragPhase = Literal["idle", "dragging", "dropping", "invalid"]
FeedbackKind = Literal["success", "error", "warning"]

IssueCode = Literal[
    "INCOMPATIBLE_DATA_TYPE",
    "MISSING_REQUIRED_MAPPING",
    "INVALID_PROPERTY_ID",
    "DUPLICATE_LANGUAGE_MAPPING",
    "DUPLICATE_PROPERTY_MAPPING",
    "MISSING_STATEMENT_VALUE",
    "INVALID_LANGUAGE_CODE",
    "MISSING_ITEM_CONFIGURATION",
]


@dataclass(frozen=True, slots=True)
class ColumnDescriptor:
    """One source-table column as produced by ingestion."""

    name: str
    storage_type: str
    sample_values: tuple[str, ...] = ()
    nullable: bool = False
    unique_count: int | None = None


@dataclass(frozen=True, slots=True)
class SchemaTarget:
    """One addressable slot of the item schema that can receive a mapping."""

    kind: TargetKind
    path: str
    accepted_types: frozenset[str] = frozenset()
    language_code: str | None = None
    property_id: str | None = None
    is_required: bool = False

    @property
    def is_term(self) -> bool:
        return self.kind in TERM_KINDS

    @property
    def is_property_slot(self) -> bool:
        return self.kind in PROPERTY_KINDS


@dataclass(frozen=True, slots=True)
class ColumnSource:
    """Column reference stored inside a value mapping."""

    column_name: str
    storage_type: str


@dataclass(frozen=True, slots=True)
class ValueMapping:
    """Result of a committed drop."""

    mapping_type: MappingType
    source: ColumnSource | str
    resolved_type: str

    @property
    def column_name(self) -> str | None:
        if isinstance(self.source, ColumnSource):
            return self.source.column_name
        return None


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """Structured error or warning tied to a schema path."""

    severity: Severity
    code: IssueCode
    path: str
    message: str
    context: dict[str, object] = field(default_factory=dict)
    suggestions: tuple[str, ...] = ()

    @property
    def is_error(self) -> bool:
        return self.severity == "error"


@dataclass(frozen=True, slots=True)
class MappingInfo:
    """A committed mapping flattened for cross-mapping checks."""

    path: str
    column_name: str
    storage_type: str | None = None
    target_types: frozenset[str] = frozenset()
    language_code: str | None = None
    property_id: str | None = None
    kind: TargetKind | None = None


@dataclass(frozen=True, slots=True)
class ValidationOutcome:
    """Single-pair validation result; at most one issue."""

    is_valid: bool
    issue: ValidationIssue | None = None


@dataclass(slots=True)
class ValidationReport:
    """Aggregated errors and warnings."""

    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def extend(self, issues: list[ValidationIssue]) -> None:
        for issue in issues:
            if issue.is_error:
                self.errors.append(issue)
            else:
                self.warnings.append(issue)


@dataclass(frozen=True, slots=True)
class DropFeedback:
    """Hover/drop feedback painted by the rendering layer."""

    kind: FeedbackKind
    message: str

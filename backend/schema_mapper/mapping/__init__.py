"""Column-to-schema mapping compatibility and validation engine."""

from schema_mapper.mapping.compatibility import (
    compatible_types,
    explain,
    is_compatible,
    resolve_value_mapping,
)
from schema_mapper.mapping.completeness import (
    CompletenessResult,
    CompletenessRule,
    RuleSet,
    build_rules,
    check_completeness,
    default_rules,
)
from schema_mapper.mapping.drag import DragInteraction, DragSession, DropResult, InvalidTransitionError
from schema_mapper.mapping.ledger import ValidationLedger
from schema_mapper.mapping.paths import InvalidPathError
from schema_mapper.mapping.types import (
    ColumnDescriptor,
    MappingInfo,
    SchemaTarget,
    ValidationIssue,
    ValueMapping,
)
from schema_mapper.mapping.validator import MappingValidator

__all__ = [
    "ColumnDescriptor",
    "CompletenessResult",
    "CompletenessRule",
    "DragInteraction",
    "DragSession",
    "DropResult",
    "InvalidPathError",
    "InvalidTransitionError",
    "MappingInfo",
    "MappingValidator",
    "RuleSet",
    "SchemaTarget",
    "ValidationIssue",
    "ValidationLedger",
    "ValueMapping",
    "build_rules",
    "check_completeness",
    "compatible_types",
    "default_rules",
    "explain",
    "is_compatible",
    "resolve_value_mapping",
]

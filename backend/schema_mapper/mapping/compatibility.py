"""Storage type to Wikibase semantic type compatibility table."""

from __future__ import annotations

from collections.abc import Iterable

from schema_mapper.mapping.types import (
    ColumnDescriptor,
    ColumnSource,
    SchemaTarget,
    SemanticType,
    ValueMapping,
)

_TEXT_TYPES: tuple[SemanticType, ...] = ("string", "url", "external-id", "monolingualtext")
_NUMERIC_TYPES: tuple[SemanticType, ...] = ("quantity",)
_TEMPORAL_TYPES: tuple[SemanticType, ...] = ("time",)
_SERIALIZED_TYPES: tuple[SemanticType, ...] = ("string",)

# Ordered: earlier entries are the more natural targets for the storage type.
STORAGE_TYPE_COMPATIBILITY: dict[str, tuple[SemanticType, ...]] = {
    "VARCHAR": _TEXT_TYPES,
    "STRING": _TEXT_TYPES,
    "CHAR": _TEXT_TYPES,
    "TEXT": _TEXT_TYPES,
    "INTEGER": _NUMERIC_TYPES,
    "BIGINT": _NUMERIC_TYPES,
    "SMALLINT": _NUMERIC_TYPES,
    "DECIMAL": _NUMERIC_TYPES,
    "NUMERIC": _NUMERIC_TYPES,
    "FLOAT": _NUMERIC_TYPES,
    "DOUBLE": _NUMERIC_TYPES,
    "DATE": _TEMPORAL_TYPES,
    "DATETIME": _TEMPORAL_TYPES,
    "TIMESTAMP": _TEMPORAL_TYPES,
    "JSON": _SERIALIZED_TYPES,
    "ARRAY": _SERIALIZED_TYPES,
    "BOOLEAN": (),
}
_OPTIMAL_RANK = 2


def normalize_storage_type(storage_type: str | None) -> str:
    """Upper-case and trim a storage type name."""

    if not storage_type:
        return ""
    return storage_type.strip().upper()


def compatible_types(storage_type: str | None) -> tuple[SemanticType, ...]:
    """Return the semantic types a storage type can feed; unknown types yield ``()``."""

    return STORAGE_TYPE_COMPATIBILITY.get(normalize_storage_type(storage_type), ())


def storage_types_for(semantic_type: str) -> list[str]:
    """List storage types able to feed ``semantic_type``."""

    return sorted(
        storage_type
        for storage_type, semantic_types in STORAGE_TYPE_COMPATIBILITY.items()
        if semantic_type in semantic_types
    )


def is_compatible(storage_type: str | None, accepted_types: Iterable[str]) -> bool:
    """True iff the storage type feeds at least one accepted semantic type."""

    available = set(compatible_types(storage_type))
    return any(accepted in available for accepted in accepted_types)


def explain(storage_type: str | None, accepted_types: Iterable[str]) -> str:
    """Human-readable reason for an incompatible pairing."""

    accepted = sorted(set(accepted_types))
    if not accepted:
        return "Target does not accept any data type"
    if not compatible_types(storage_type):
        return (
            f"Column type '{storage_type}' cannot be mapped to any Wikibase data type "
            f"(target types: {', '.join(accepted)})"
        )
    return f"Column type '{storage_type}' is not compatible with target types: {', '.join(accepted)}"


def is_optimal(storage_type: str | None, semantic_type: str) -> bool:
    """Whether ``semantic_type`` is one of the most natural targets for the storage type."""

    ranked = compatible_types(storage_type)
    return semantic_type in ranked[:_OPTIMAL_RANK]


def resolve_value_mapping(column: ColumnDescriptor, target: SchemaTarget) -> ValueMapping:
    """Build the committed column mapping for a validated drop.

    The resolved type is the most natural semantic type of the column that the
    target accepts. Raises ``ValueError`` when the pair is incompatible, which
    callers avoid by validating first.
    """

    resolved = next(
        (candidate for candidate in compatible_types(column.storage_type) if candidate in target.accepted_types),
        None,
    )
    if resolved is None:
        raise ValueError(f"column '{column.name}' has no data type accepted by '{target.path}'")
    return ValueMapping(
        mapping_type="column",
        source=ColumnSource(column_name=column.name, storage_type=column.storage_type),
        resolved_type=resolved,
    )

"""Pydantic models for an assembled Wikibase item schema mapping."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from schema_mapper.mapping.types import ColumnSource, ValueMapping


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ColumnMappingModel(_CamelModel):
    """Column reference inside a term or value mapping."""

    column_name: str = ""
    data_type: str = ""


class PropertyReferenceModel(_CamelModel):
    id: str = ""
    label: str | None = None
    data_type: str = "string"


class ValueMappingModel(_CamelModel):
    """Serialized ``ValueMapping``; ``data_type`` is the resolved semantic type."""

    type: Literal["column", "constant", "expression"] = "column"
    source: ColumnMappingModel | str = Field(default_factory=ColumnMappingModel)
    data_type: str = "string"

    def to_value_mapping(self) -> ValueMapping:
        if isinstance(self.source, ColumnMappingModel):
            source: ColumnSource | str = ColumnSource(
                column_name=self.source.column_name,
                storage_type=self.source.data_type,
            )
        else:
            source = self.source
        return ValueMapping(mapping_type=self.type, source=source, resolved_type=self.data_type)


class PropertyValueModel(_CamelModel):
    """Qualifier or reference snak."""

    property: PropertyReferenceModel = Field(default_factory=PropertyReferenceModel)
    value: ValueMappingModel = Field(default_factory=ValueMappingModel)


class StatementModel(_CamelModel):
    id: str | None = None
    property: PropertyReferenceModel = Field(default_factory=PropertyReferenceModel)
    value: ValueMappingModel = Field(default_factory=ValueMappingModel)
    rank: Literal["preferred", "normal", "deprecated"] = "normal"
    qualifiers: list[PropertyValueModel] = Field(default_factory=list)
    references: list[PropertyValueModel] = Field(default_factory=list)


class TermsModel(_CamelModel):
    """Language code to column mapping for each term kind."""

    labels: dict[str, ColumnMappingModel] = Field(default_factory=dict)
    descriptions: dict[str, ColumnMappingModel] = Field(default_factory=dict)
    aliases: dict[str, list[ColumnMappingModel]] = Field(default_factory=dict)


class ItemModel(_CamelModel):
    id: str | None = None
    terms: TermsModel = Field(default_factory=TermsModel)
    statements: list[StatementModel] = Field(default_factory=list)


class SchemaMappingTree(_CamelModel):
    """Whole schema as edited by the user and persisted by the API layer."""

    id: str | None = None
    project_id: str | None = None
    name: str = ""
    wikibase: str = ""
    item: ItemModel = Field(default_factory=ItemModel)

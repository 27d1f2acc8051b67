"""Schemas for mapping validation endpoints."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from schema_mapper.mapping.types import (
    ColumnDescriptor,
    DropFeedback,
    MappingInfo,
    SchemaTarget,
    SemanticType,
    TargetKind,
    ValidationIssue,
)
from schema_mapper.schemas.schema_mapping import SchemaMappingTree


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ColumnDescriptorIn(_CamelModel):
    name: str = Field(min_length=1)
    storage_type: str = Field(min_length=1)
    sample_values: list[str] = Field(default_factory=list)
    nullable: bool = False
    unique_count: int | None = Field(default=None, ge=0)

    def to_descriptor(self) -> ColumnDescriptor:
        return ColumnDescriptor(
            name=self.name,
            storage_type=self.storage_type,
            sample_values=tuple(self.sample_values),
            nullable=self.nullable,
            unique_count=self.unique_count,
        )


class SchemaTargetIn(_CamelModel):
    kind: TargetKind
    path: str = Field(min_length=1)
    accepted_types: list[SemanticType] = Field(default_factory=list)
    language_code: str | None = None
    property_id: str | None = None
    is_required: bool = False

    def to_target(self) -> SchemaTarget:
        return SchemaTarget(
            kind=self.kind,
            path=self.path,
            accepted_types=frozenset(self.accepted_types),
            language_code=self.language_code,
            property_id=self.property_id,
            is_required=self.is_required,
        )


class MappingInfoIn(_CamelModel):
    path: str = Field(min_length=1)
    column_name: str
    storage_type: str | None = None
    target_types: list[SemanticType] = Field(default_factory=list)
    language_code: str | None = None
    property_id: str | None = None
    kind: TargetKind | None = None

    def to_info(self) -> MappingInfo:
        return MappingInfo(
            path=self.path,
            column_name=self.column_name,
            storage_type=self.storage_type,
            target_types=frozenset(self.target_types),
            language_code=self.language_code,
            property_id=self.property_id,
            kind=self.kind,
        )


class ValidationIssueRead(_CamelModel):
    """Serialized validation issue."""

    severity: Literal["error", "warning"]
    code: str
    path: str
    message: str
    context: dict[str, Any] = Field(default_factory=dict)
    suggestions: list[str] = Field(default_factory=list)

    @classmethod
    def from_issue(cls, issue: ValidationIssue) -> "ValidationIssueRead":
        return cls(
            severity=issue.severity,
            code=issue.code,
            path=issue.path,
            message=issue.message,
            context=dict(issue.context),
            suggestions=list(issue.suggestions),
        )


class DropFeedbackRead(_CamelModel):
    kind: Literal["success", "error", "warning"]
    message: str

    @classmethod
    def from_feedback(cls, feedback: DropFeedback) -> "DropFeedbackRead":
        return cls(kind=feedback.kind, message=feedback.message)


class MappingValidationRequest(_CamelModel):
    column: ColumnDescriptorIn
    target: SchemaTargetIn


class MappingValidationData(_CamelModel):
    is_valid: bool
    issue: ValidationIssueRead | None = None
    feedback: DropFeedbackRead
    suggestions: list[str] = Field(default_factory=list)
    resolved_type: str | None = None


class MappingConflictRequest(_CamelModel):
    existing: list[MappingInfoIn] = Field(default_factory=list)
    candidate: MappingInfoIn


class CompatibilityData(_CamelModel):
    storage_type: str
    compatible_types: list[str]


class CompletenessRequest(_CamelModel):
    mapping: SchemaMappingTree


class CompletenessData(_CamelModel):
    status: Literal["not_started", "incomplete", "complete"]
    is_complete: bool
    missing_paths: list[str] = Field(default_factory=list)
    highlights: list[ValidationIssueRead] = Field(default_factory=list)
    issues: list[ValidationIssueRead] = Field(default_factory=list)

"""Mapping validation routes for the schema editor."""

from fastapi import APIRouter, Depends, HTTPException, Path

from schema_mapper.mapping.compatibility import compatible_types, normalize_storage_type
from schema_mapper.mapping.paths import InvalidPathError, ensure_path
from schema_mapper.mapping.types import DropFeedback
from schema_mapper.mapping.validator import MappingValidator
from schema_mapper.schemas.common import ApiListResponse, ApiResponse
from schema_mapper.schemas.validation import (
    CompatibilityData,
    CompletenessData,
    CompletenessRequest,
    DropFeedbackRead,
    MappingConflictRequest,
    MappingValidationData,
    MappingValidationRequest,
    ValidationIssueRead,
)
from schema_mapper.services.validation import check_mapping, evaluate_schema, get_validator

router = APIRouter(prefix="/validation")


@router.get("/compatibility/{storage_type}", response_model=ApiResponse[CompatibilityData])
def get_compatible_types(
    storage_type: str = Path(..., min_length=1),
) -> ApiResponse[CompatibilityData]:
    """List the Wikibase data types a column storage type can feed."""

    return ApiResponse(
        data=CompatibilityData(
            storage_type=normalize_storage_type(storage_type),
            compatible_types=list(compatible_types(storage_type)),
        )
    )


@router.post("/mapping", response_model=ApiResponse[MappingValidationData])
def validate_mapping(
    payload: MappingValidationRequest,
    validator: MappingValidator = Depends(get_validator),
) -> ApiResponse[MappingValidationData]:
    """Validate one column against one schema target."""

    _require_path(payload.target.path)
    result = check_mapping(payload.column.to_descriptor(), payload.target.to_target(), validator=validator)
    return ApiResponse(
        data=MappingValidationData(
            is_valid=result.is_valid,
            issue=ValidationIssueRead.from_issue(result.issue) if result.issue is not None else None,
            feedback=DropFeedbackRead.from_feedback(
                DropFeedback(kind=result.feedback_kind, message=result.feedback_message)
            ),
            suggestions=result.suggestions,
            resolved_type=result.resolved_type,
        )
    )


@router.post("/mappings/conflicts", response_model=ApiListResponse[ValidationIssueRead])
def detect_mapping_conflicts(
    payload: MappingConflictRequest,
    validator: MappingValidator = Depends(get_validator),
) -> ApiListResponse[ValidationIssueRead]:
    """Report duplicate language or property mappings for a candidate mapping."""

    issues = validator.detect_invalid_mappings(
        [mapping.to_info() for mapping in payload.existing],
        payload.candidate.to_info(),
    )
    return ApiListResponse[ValidationIssueRead].of([ValidationIssueRead.from_issue(issue) for issue in issues])


@router.post("/completeness", response_model=ApiResponse[CompletenessData])
def check_schema_completeness(
    payload: CompletenessRequest,
    validator: MappingValidator = Depends(get_validator),
) -> ApiResponse[CompletenessData]:
    """Check whether a schema is complete enough to be saved."""

    evaluation = evaluate_schema(payload.mapping, validator=validator)
    return ApiResponse(
        data=CompletenessData(
            status=evaluation.status,
            is_complete=evaluation.completeness.is_complete,
            missing_paths=list(evaluation.completeness.missing_paths),
            highlights=[ValidationIssueRead.from_issue(issue) for issue in evaluation.highlights],
            issues=[ValidationIssueRead.from_issue(issue) for issue in evaluation.issues],
        )
    )


def _require_path(path: str) -> None:
    try:
        ensure_path(path)
    except InvalidPathError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

"""Issue codes, default messages and constructors."""

from __future__ import annotations

from collections.abc import Mapping

from schema_mapper.mapping.types import IssueCode, Severity, ValidationIssue

ISSUE_CODE_VALUES: tuple[str, ...] = (
    "INCOMPATIBLE_DATA_TYPE",
    "MISSING_REQUIRED_MAPPING",
    "INVALID_PROPERTY_ID",
    "DUPLICATE_LANGUAGE_MAPPING",
    "DUPLICATE_PROPERTY_MAPPING",
    "MISSING_STATEMENT_VALUE",
    "INVALID_LANGUAGE_CODE",
    "MISSING_ITEM_CONFIGURATION",
)

ISSUE_MESSAGES: dict[str, str] = {
    "MISSING_REQUIRED_MAPPING": "Required mapping is missing",
    "INCOMPATIBLE_DATA_TYPE": "Column data type is incompatible with target",
    "DUPLICATE_LANGUAGE_MAPPING": "Multiple mappings exist for the same language",
    "INVALID_PROPERTY_ID": "Invalid or non-existent property ID",
    "MISSING_STATEMENT_VALUE": "Statement is missing a required value mapping",
    "INVALID_LANGUAGE_CODE": "Invalid language code format",
    "MISSING_ITEM_CONFIGURATION": "Item configuration is required",
    "DUPLICATE_PROPERTY_MAPPING": "Property is already mapped in this context",
}


def create_issue(
    code: IssueCode,
    path: str,
    *,
    severity: Severity = "error",
    context: Mapping[str, object] | None = None,
    message: str | None = None,
    suggestions: tuple[str, ...] = (),
) -> ValidationIssue:
    """Build an issue, falling back to the default message for ``code``."""

    cleaned_context = {key: value for key, value in (context or {}).items() if value is not None}
    return ValidationIssue(
        severity=severity,
        code=code,
        path=path,
        message=message or ISSUE_MESSAGES[code],
        context=cleaned_context,
        suggestions=suggestions,
    )


def create_error(code: IssueCode, path: str, **kwargs) -> ValidationIssue:
    return create_issue(code, path, severity="error", **kwargs)


def create_warning(code: IssueCode, path: str, **kwargs) -> ValidationIssue:
    return create_issue(code, path, severity="warning", **kwargs)


def format_issue_message(issue: ValidationIssue) -> str:
    """Append column/property/language context to the issue message for display."""

    message = issue.message
    column_name = issue.context.get("columnName")
    if column_name:
        message += f" (Column: {column_name})"
    property_id = issue.context.get("propertyId")
    if property_id:
        message += f" (Property: {property_id})"
    language_code = issue.context.get("languageCode")
    if language_code:
        message += f" (Language: {language_code})"
    return message

"""Check a saved schema mapping for completeness and mapping issues.

Usage (from repository root):
    python backend/scripts/check_schema.py path/to/schema.json

Usage (from backend directory):
    python scripts/check_schema.py path/to/schema.json --json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

# Make `schema_mapper` imports work whether the script is run from repo root or backend/.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from schema_mapper.config import get_settings
from schema_mapper.mapping.issues import format_issue_message
from schema_mapper.schemas.schema_mapping import SchemaMappingTree
from schema_mapper.schemas.validation import ValidationIssueRead
from schema_mapper.services.validation import SchemaEvaluation, evaluate_schema

logger = logging.getLogger("check_schema")


def load_schema(path: Path) -> SchemaMappingTree:
    """Read and validate a schema mapping document."""

    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if isinstance(payload, dict) and "mapping" in payload:
        payload = payload["mapping"]
    return SchemaMappingTree.model_validate(payload)


def render_text(evaluation: SchemaEvaluation) -> str:
    lines = [f"status: {evaluation.status}"]
    for path in evaluation.completeness.missing_paths:
        lines.append(f"  missing: {path}")
    for issue in [*evaluation.highlights, *evaluation.issues]:
        lines.append(f"  [{issue.severity}] {issue.code} {issue.path}: {format_issue_message(issue)}")
    return "\n".join(lines)


def render_json(evaluation: SchemaEvaluation) -> str:
    return json.dumps(
        {
            "status": evaluation.status,
            "isComplete": evaluation.completeness.is_complete,
            "missingPaths": list(evaluation.completeness.missing_paths),
            "issues": [
                ValidationIssueRead.from_issue(issue).model_dump(by_alias=True)
                for issue in [*evaluation.highlights, *evaluation.issues]
            ],
        },
        indent=2,
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate a Wikibase schema mapping document.")
    parser.add_argument("schema", type=Path, help="Path to a schema mapping JSON file.")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=get_settings().log_level.upper())

    try:
        tree = load_schema(args.schema)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        logger.error("Could not load %s: %s", args.schema, exc)
        return 2

    evaluation = evaluate_schema(tree)
    print(render_json(evaluation) if args.json else render_text(evaluation))
    has_errors = any(issue.is_error for issue in evaluation.issues)
    return 0 if evaluation.completeness.is_complete and not has_errors else 1


if __name__ == "__main__":
    raise SystemExit(main())

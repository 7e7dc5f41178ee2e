"""JSON export of lint results."""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from bashlint.issues import IssueSink

SCHEMA_DIR = Path(__file__).parent / "schemas"


@lru_cache(maxsize=None)
def load_schema(schema_name: str) -> dict:
    """
    Load a bundled JSON Schema.

    Args:
        schema_name: Schema name (e.g., "report", "config")

    Raises:
        FileNotFoundError: If schema file doesn't exist
    """
    schema_path = SCHEMA_DIR / f"{schema_name}.schema.json"
    with open(schema_path, encoding="utf-8") as f:
        return json.load(f)


def build_report(sink: IssueSink, read_error: str | None = None) -> dict[str, Any]:
    report: dict[str, Any] = {
        "file": sink.file,
        "issue_count": sink.count,
        "issues": [issue.to_dict() for issue in sink.issues],
    }
    if read_error is not None:
        report["read_error"] = read_error
    return report


def to_json(obj: Any) -> str:
    """Deterministic JSON: sorted keys, 2-space indent, trailing newline."""
    return json.dumps(obj, indent=2, sort_keys=True) + "\n"


def issues_to_json(sink: IssueSink, read_error: str | None = None) -> str:
    return to_json(build_report(sink, read_error))


def validate_report(document: dict[str, Any]) -> tuple[bool, list[str]]:
    """
    Validate a report document against report.schema.json.

    Returns:
        Tuple of (is_valid, error_messages)
    """
    validator = Draft202012Validator(load_schema("report"))
    errors = list(validator.iter_errors(document))
    if errors:
        return False, [f"{'.'.join(str(p) for p in e.path)}: {e.message}" for e in errors]
    return True, []

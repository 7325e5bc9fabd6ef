"""Schema validation for extraction run reports."""

import json
from pathlib import Path

import jsonschema

SCHEMAS_DIR = Path(__file__).resolve().parent.parent / "schemas"


def _load_schema(name: str) -> dict:
    path = SCHEMAS_DIR / f"{name}.schema.json"
    return json.loads(path.read_text(encoding="utf-8"))


def validate_extraction_report(data: dict) -> None:
    """Validate a run report against schema. Raises jsonschema.ValidationError if invalid."""
    schema = _load_schema("extraction_report")
    jsonschema.validate(data, schema)

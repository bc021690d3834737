"""Schema validation for marking sheets and assessment records."""

import json
from pathlib import Path

import jsonschema

SCHEMAS_DIR = Path(__file__).resolve().parent / "schemas"


def _load_schema(name: str) -> dict:
    path = SCHEMAS_DIR / f"{name}.schema.json"
    return json.loads(path.read_text(encoding="utf-8"))


def validate_marking_sheet(data: dict) -> None:
    """Validate a marking sheet definition against schema. Raises jsonschema.ValidationError if invalid."""
    schema = _load_schema("marking_sheet")
    jsonschema.validate(data, schema)


def validate_assessment(data: dict) -> None:
    """Validate an assessment record against schema. Raises jsonschema.ValidationError if invalid."""
    schema = _load_schema("assessment")
    jsonschema.validate(data, schema)

from __future__ import annotations
from typing import Any, Dict, List
from jsonschema import Draft202012Validator, FormatChecker, ValidationError

_INT_LIKE = {"anyOf": [{"type": "integer"}, {"type": "string", "pattern": r"^\s*[0-9]+\s*$"}]}
_BOOL_LIKE = {"anyOf": [{"type": "boolean"}, {"type": "string"}]}

FIELD_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["name"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "length": _INT_LIKE,
        "position": {"type": "integer", "minimum": 1},
        "start": {"type": "integer", "minimum": 1},
        "end": {"type": "integer", "minimum": 1},
        "type": {"type": "string"},
        "required": _BOOL_LIKE,
        "regex": {"type": "string", "format": "regex"},
        "pattern": {"type": "string", "format": "regex"},
        "default": {"type": ["string", "number", "boolean"]},
        "trim": {"type": "boolean"},
    },
    "not": {"required": ["position", "start"]},
}

RECORD_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["type"],
    "properties": {
        "type": {"type": "string", "minLength": 1},
        "layout": {"enum": ["sequential", "positional"]},
        "total_length": {"type": "integer", "minimum": 1},
        "trim_output": {"type": "boolean"},
        "allow_overlap": {"type": "boolean"},
        "fields": {"type": "array", "items": FIELD_SCHEMA},
    },
}

TREE_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "sources": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["source"],
                "properties": {
                    "source": {"type": "string", "minLength": 1},
                    "size": _INT_LIKE,
                    "records": {"type": "array", "items": RECORD_SCHEMA},
                },
            },
        },
    },
}


class TreeValidator:
    """Structural check of a schema description tree before model construction."""

    def __init__(self, schema: Dict[str, Any] | None = None):
        self.fc = FormatChecker()
        self._validator = Draft202012Validator(schema or TREE_SCHEMA, format_checker=self.fc)

    def errors(self, tree: Any) -> List[ValidationError]:
        return sorted(self._validator.iter_errors(tree), key=lambda e: [str(p) for p in e.absolute_path])

    @staticmethod
    def describe(error: ValidationError) -> str:
        path = "/".join(str(p) for p in error.absolute_path) or "<root>"
        return f"{path}: {error.message}"

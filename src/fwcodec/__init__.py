"""Schema-driven fixed-width record codec."""
from __future__ import annotations

__version__ = "0.1.0"

from .codec.record import Record
from .engine.parser import FixedWidthParser
from .engine.registry import SchemaRegistry
from .errors import OverlapError, SchemaDefinitionError
from .schema.field import FieldSchema, FieldType
from .schema.positional import PositionalField, positional_schema
from .schema.record import Layout, RecordSchema, SourceSchema

__all__ = [
    "FieldSchema",
    "FieldType",
    "FixedWidthParser",
    "Layout",
    "OverlapError",
    "PositionalField",
    "Record",
    "RecordSchema",
    "SchemaDefinitionError",
    "SchemaRegistry",
    "SourceSchema",
    "positional_schema",
    "__version__",
]

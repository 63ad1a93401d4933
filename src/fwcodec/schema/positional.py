"""Positional schemas declared as an explicit field-descriptor table.

Positions are 1-based as written in record layouts; they are normalized to
0-based offsets when the :class:`RecordSchema` is built::

    CUSTOMER = positional_schema("customer", [
        PositionalField("first_name", position=1, length=10),
        PositionalField("last_name", position=11, length=15, trim=False),
        PositionalField("email", position=26, length=25, default="email@fm.com"),
    ], total_length=50, trim_output=True)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..errors import SchemaDefinitionError
from .field import FieldSchema, FieldType
from .record import Layout, RecordSchema


@dataclass(frozen=True)
class PositionalField:
    name: str
    position: int
    length: int
    type: FieldType | str = FieldType.STRING
    trim: bool = True
    default: Optional[str] = None
    required: bool = False
    pattern: Optional[str] = None

    def to_field(self) -> FieldSchema:
        if not isinstance(self.position, int) or self.position < 1:
            raise SchemaDefinitionError(f"Field '{self.name}' position must be >= 1, got {self.position!r}.")
        return FieldSchema(
            name=self.name,
            length=self.length,
            type=FieldType.parse(self.type),
            offset=self.position - 1,
            required=self.required,
            pattern=self.pattern,
            default=self.default or None,
            trim=self.trim,
        )


def positional_schema(
    name: str,
    fields: Iterable[PositionalField],
    *,
    total_length: Optional[int] = None,
    trim_output: bool = True,
    allow_overlap: bool = True,
) -> RecordSchema:
    """Build a sealed positional :class:`RecordSchema` from descriptors.

    Fields keep their declaration order for decoding and encoding; offsets
    come only from ``position``.
    """
    schema = RecordSchema(
        name,
        layout=Layout.POSITIONAL,
        total_length=total_length,
        trim_output=trim_output,
        allow_overlap=allow_overlap,
    )
    for descriptor in fields:
        schema.add_field(descriptor.to_field())
    return schema.seal()

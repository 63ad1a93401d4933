from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..errors import OverlapError, SchemaDefinitionError
from .field import FieldSchema


class Layout(str, Enum):
    """How field offsets are determined."""

    SEQUENTIAL = "sequential"
    POSITIONAL = "positional"


class RecordSchema:
    """Ordered field collection describing one record type.

    Sequential schemas assign each added field the running sum of the
    preceding lengths as its offset, so insertion order matters. Positional
    schemas keep the offset carried by each field.

    A schema accepts :meth:`add_field` until it is sealed; sources and the
    registry seal what they hold, after which the schema is read-only and can
    be shared between threads.

    :param name: Record-type name.
    :param fields: Optional initial fields, added in order.
    :param layout: :class:`Layout` of the schema.
    :param total_length: Declared total for positional schemas; derived when
        omitted.
    :param trim_output: Strip the encoded line as a whole.
    :param allow_overlap: When ``False`` positional fields may not share
        characters.
    """

    def __init__(
        self,
        name: str,
        fields: Iterable[FieldSchema] = (),
        *,
        layout: Layout | str = Layout.SEQUENTIAL,
        total_length: Optional[int] = None,
        trim_output: bool = False,
        allow_overlap: bool = True,
    ) -> None:
        if not name:
            raise SchemaDefinitionError("Record type name must be non-empty.")
        self.name = name
        self.layout = Layout(layout)
        if total_length is not None:
            if self.layout is Layout.SEQUENTIAL:
                raise SchemaDefinitionError(
                    f"Record type '{name}': total_length is derived for sequential schemas."
                )
            if total_length <= 0:
                raise SchemaDefinitionError(f"Record type '{name}': total_length must be positive.")
        self.declared_total_length = total_length
        self.trim_output = trim_output
        self.allow_overlap = allow_overlap
        self._fields: List[FieldSchema] = []
        self._cursor = 0
        self._sealed = False
        for f in fields:
            self.add_field(f)

    # ---------------- assembly -------------------
    def add_field(self, field: FieldSchema) -> "RecordSchema":
        """Append a field, assigning its offset for sequential schemas."""
        if self._sealed:
            raise SchemaDefinitionError(f"Record type '{self.name}' is sealed; cannot add '{field.name}'.")
        if any(existing.name == field.name for existing in self._fields):
            raise SchemaDefinitionError(f"Record type '{self.name}' already has a field named '{field.name}'.")
        if self.layout is Layout.SEQUENTIAL:
            field = dataclasses.replace(field, offset=self._cursor)
            self._cursor += field.length
        elif not self.allow_overlap:
            for existing in self._fields:
                if field.offset < existing.end and existing.offset < field.end:
                    raise OverlapError(self.name, existing.name, field.name)
        self._fields.append(field)
        return self

    def seal(self) -> "RecordSchema":
        self._sealed = True
        return self

    @property
    def sealed(self) -> bool:
        return self._sealed

    # ---------------- lookup ---------------------
    @property
    def fields(self) -> Tuple[FieldSchema, ...]:
        return tuple(self._fields)

    def get_field(self, name: str) -> Optional[FieldSchema]:
        for f in self._fields:
            if f.name == name:
                return f
        return None

    @property
    def field_count(self) -> int:
        return len(self._fields)

    def field_names(self) -> List[str]:
        return [f.name for f in self._fields]

    def total_length(self) -> int:
        if self.layout is Layout.SEQUENTIAL:
            return sum(f.length for f in self._fields)
        if self.declared_total_length is not None:
            return self.declared_total_length
        return max((f.end for f in self._fields), default=0)

    def has_valid_length(self, raw: Optional[str]) -> bool:
        return raw is not None and len(raw) == self.total_length()

    def overlaps(self) -> List[Tuple[str, str]]:
        """Return every pair of field names whose windows intersect."""
        pairs = []
        for i, a in enumerate(self._fields):
            for b in self._fields[i + 1:]:
                if a.offset < b.end and b.offset < a.end:
                    pairs.append((a.name, b.name))
        return pairs

    def __iter__(self) -> Iterator[FieldSchema]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return (
            f"RecordSchema(name={self.name!r}, layout={self.layout.value}, "
            f"field_count={len(self._fields)}, total_length={self.total_length()})"
        )


class SourceSchema:
    """Named collection of record schemas for one data source.

    :param name: Source name.
    :param max_size: Informational maximum record size; never enforced.
    """

    def __init__(self, name: str, max_size: int = 0, record_types: Iterable[RecordSchema] = ()) -> None:
        if not name:
            raise SchemaDefinitionError("Source name must be non-empty.")
        self.name = name
        self.max_size = max_size
        self._record_types: Dict[str, RecordSchema] = {}
        for rt in record_types:
            self.add_record_type(rt)

    def add_record_type(self, schema: RecordSchema) -> "SourceSchema":
        if schema.name in self._record_types:
            raise SchemaDefinitionError(f"Source '{self.name}' already defines record type '{schema.name}'.")
        self._record_types[schema.name] = schema.seal()
        return self

    def get_record_type(self, name: str) -> Optional[RecordSchema]:
        return self._record_types.get(name)

    def has_record_type(self, name: str) -> bool:
        return name in self._record_types

    def record_type_names(self) -> List[str]:
        return list(self._record_types)

    @property
    def record_types(self) -> Dict[str, RecordSchema]:
        return dict(self._record_types)

    @property
    def record_type_count(self) -> int:
        return len(self._record_types)

    def __repr__(self) -> str:
        return f"SourceSchema(name={self.name!r}, max_size={self.max_size}, record_type_count={len(self._record_types)})"

from __future__ import annotations

import datetime
import json
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional

from ..types import TypedValue
from ..utils.date_parser import to_date

_TRUE_TEXT = {"true", "yes", "1"}


class Record:
    """Decoded fixed-width record: ordered field values tagged with a record type.

    Field order is the order values were first stored; storing a name again
    replaces the value in place. Typed accessors never raise and fall back to
    ``""``, ``0``, ``0.0`` and ``False`` respectively.
    """

    __slots__ = ("_record_type", "_fields")

    def __init__(self, record_type: str, fields: Optional[Mapping[str, TypedValue]] = None) -> None:
        self._record_type = record_type
        self._fields: Dict[str, TypedValue] = {}
        for name, value in (fields or {}).items():
            self.put(name, value)

    @property
    def record_type(self) -> str:
        return self._record_type

    def put(self, name: str, value: TypedValue) -> "Record":
        self._fields[name] = value
        return self

    def get(self, name: str, default: Any = None) -> Any:
        return self._fields.get(name, default)

    def has(self, name: str) -> bool:
        return name in self._fields

    def field_names(self) -> List[str]:
        return list(self._fields)

    def fields(self) -> Mapping[str, TypedValue]:
        return MappingProxyType(self._fields)

    def size(self) -> int:
        return len(self._fields)

    def is_empty(self) -> bool:
        return not self._fields

    # ---------------- typed accessors ------------
    def as_string(self, name: str) -> str:
        value = self._fields.get(name)
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def as_int(self, name: str) -> int:
        value = self._fields.get(name)
        if value is None or isinstance(value, bool):
            return int(value or 0)
        if isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError:
            return 0

    def as_float(self, name: str) -> float:
        value = self._fields.get(name)
        if value is None or isinstance(value, bool):
            return float(value or 0)
        if isinstance(value, (int, float)):
            return float(value)
        try:
            return float(str(value).strip())
        except ValueError:
            return 0.0

    as_double = as_float

    def as_bool(self, name: str) -> bool:
        value = self._fields.get(name)
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in _TRUE_TEXT

    def as_date(self, name: str, fmt: str | None = None) -> Optional[datetime.date]:
        value = self._fields.get(name)
        return to_date(value, fmt) if isinstance(value, str) else None

    # ---------------- mapping protocol -----------
    def __getitem__(self, name: str) -> TypedValue:
        return self._fields[name]

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self._record_type == other._record_type and self._fields == other._fields

    __hash__ = None  # type: ignore[assignment]

    # ---------------- rendering ------------------
    def to_dict(self) -> Dict[str, TypedValue]:
        return dict(self._fields)

    def to_json(self) -> str:
        return json.dumps(self._fields, ensure_ascii=False, separators=(",", ":"))

    def to_formatted_string(self) -> str:
        lines = [f"Record Type: {self._record_type}"]
        lines.extend(f"{name}: {value}" for name, value in self._fields.items())
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return f"Record(record_type={self._record_type!r}, fields={self._fields!r})"

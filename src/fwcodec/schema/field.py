"""Field definitions and the per-type validation / conversion rules.

Each :class:`FieldType` variant owns exactly one validator and one converter;
the dispatch tables below are checked for completeness at import time so a
new variant cannot silently fall through to a default branch.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional, Pattern

from ..errors import SchemaDefinitionError
from ..logging_setup import get_logger
from ..types import TypedValue

log = get_logger(__name__)

_INT_RE = re.compile(r"[+-]?[0-9]+")
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_BOOL_TOKENS = {"true", "false", "yes", "no", "1", "0"}
_TRUE_TOKENS = {"true", "yes", "1"}


class FieldType(str, Enum):
    STRING = "STRING"
    INTEGER = "INTEGER"
    DECIMAL = "DECIMAL"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"

    @classmethod
    def parse(cls, value: "FieldType | str | None") -> "FieldType":
        """Resolve a case-insensitive type name; unknown names degrade to STRING."""
        if isinstance(value, FieldType):
            return value
        if value is None:
            return cls.STRING
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            log.warning("Unknown field type %r, falling back to STRING", value)
            return cls.STRING


# ---------------------------------------------------------------------------
# Per-variant helpers
# ---------------------------------------------------------------------------

def _parse_int(token: str) -> Optional[int]:
    token = token.strip()
    if not _INT_RE.fullmatch(token):
        return None
    return int(token)


def _parse_float(token: str) -> Optional[float]:
    token = token.strip()
    # float() also takes nan, inf and digit-group underscores
    if not _DECIMAL_RE.fullmatch(token):
        return None
    value = float(token)
    return value if math.isfinite(value) else None


def _accept_any(value: str) -> bool:
    return True


def _valid_int(value: str) -> bool:
    return _parse_int(value) is not None


def _valid_float(value: str) -> bool:
    return _parse_float(value) is not None


def _valid_bool(value: str) -> bool:
    return value.strip().lower() in _BOOL_TOKENS


def _to_text(value: str) -> str:
    return value


def _to_bool(value: str) -> bool:
    return value.strip().lower() in _TRUE_TOKENS


_VALIDATORS: Dict[FieldType, Callable[[str], bool]] = {
    FieldType.STRING: _accept_any,
    FieldType.INTEGER: _valid_int,
    FieldType.DECIMAL: _valid_float,
    FieldType.BOOLEAN: _valid_bool,
    FieldType.DATE: _accept_any,
}

_CONVERTERS: Dict[FieldType, Callable[[str], TypedValue]] = {
    FieldType.STRING: _to_text,
    FieldType.INTEGER: _parse_int,
    FieldType.DECIMAL: _parse_float,
    FieldType.BOOLEAN: _to_bool,
    FieldType.DATE: _to_text,
}

for _table in (_VALIDATORS, _CONVERTERS):
    _missing = set(FieldType) - set(_table)
    if _missing:  # pragma: no cover
        raise RuntimeError(f"Field type dispatch incomplete: {sorted(m.value for m in _missing)}")


# ---------------------------------------------------------------------------
# FieldSchema
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FieldSchema:
    """One field of a fixed-width record.

    :param name: Field name, unique within its record schema.
    :param length: Number of characters the field occupies.
    :param type: Declared :class:`FieldType` (names are accepted too).
    :param offset: Zero-based start position. Sequential schemas assign it
        when the field is added.
    :param required: A blank value fails validation when set.
    :param pattern: Regular expression the extracted window must fully match.
    :param default: String substituted when the extracted value is blank.
    :param trim: Strip surrounding whitespace before conversion.
    """

    name: str
    length: int
    type: FieldType = FieldType.STRING
    offset: int = 0
    required: bool = False
    pattern: Optional[str] = None
    default: Optional[str] = None
    trim: bool = True
    _regex: Optional[Pattern[str]] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise SchemaDefinitionError("Field name must be a non-empty string.")
        if not isinstance(self.length, int) or isinstance(self.length, bool) or self.length <= 0:
            raise SchemaDefinitionError(f"Field '{self.name}' must have a positive length, got {self.length!r}.")
        if not isinstance(self.offset, int) or self.offset < 0:
            raise SchemaDefinitionError(f"Field '{self.name}' has negative offset {self.offset!r}.")
        object.__setattr__(self, "type", FieldType.parse(self.type))
        if self.pattern:
            try:
                object.__setattr__(self, "_regex", re.compile(self.pattern))
            except re.error as exc:
                raise SchemaDefinitionError(f"Field '{self.name}' has invalid pattern {self.pattern!r}: {exc}") from exc

    @property
    def end(self) -> int:
        """Exclusive end offset of the field window."""
        return self.offset + self.length

    def validate(self, raw: Optional[str]) -> bool:
        """Check an extracted window against ``required``, ``pattern`` and type."""
        if raw is None or not raw.strip():
            return not self.required
        if self._regex is not None and not self._regex.fullmatch(raw):
            return False
        return _VALIDATORS[self.type](raw)

    def convert(self, raw: Optional[str]) -> TypedValue:
        """Convert an extracted window to its typed value.

        Blank input yields ``default`` (left as a string) or ``None``. Text that
        does not parse for a numeric type yields ``None``; BOOLEAN maps
        ``true``/``yes``/``1`` to ``True`` and anything else to ``False``.
        """
        if raw is None or not raw.strip():
            return self.default
        value = raw.strip() if self.trim else raw
        converted = _CONVERTERS[self.type](value)
        if converted is None:
            log.debug("Field %s could not convert %r as %s", self.name, raw, self.type.value)
        return converted

    def format(self, value: object) -> str:
        """Render ``value`` left-justified to exactly ``length`` characters."""
        text = "" if value is None else stringify(value)
        return text.ljust(self.length)[: self.length]


def stringify(value: object) -> str:
    """Text written for a value on encode; booleans render as true/false."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)

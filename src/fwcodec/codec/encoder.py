"""Encode field values into fixed-width lines."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping

from ..logging_setup import get_logger
from ..schema.field import stringify
from ..schema.record import RecordSchema
from .record import Record

log = get_logger(__name__)

PAD = " "

ValueGetter = Callable[[str], Any]


@dataclass
class EncodeResult:
    """Encoded line plus the fields whose values did not fit."""
    text: str
    truncated: List[str] = field(default_factory=list)

    @property
    def lossless(self) -> bool:
        return not self.truncated


def getter_for(values: Any) -> ValueGetter:
    """Return a name -> value accessor for a Record, a mapping or a plain object."""
    if isinstance(values, (Record, Mapping)):
        return lambda name: values.get(name)
    return lambda name: getattr(values, name, None)


def encode_detailed(schema: RecordSchema, values: Any) -> EncodeResult:
    """
    Render ``values`` into a line of ``schema.total_length()`` characters.

    The buffer starts as spaces; each field is left-justified, padded or cut to
    its length and written at its offset in declaration order, so a later
    field wins where windows overlap. Values wider than their field are
    truncated from the right and reported, as are fields cut by a declared
    total length or starting beyond it. When ``schema.trim_output`` is set
    the finished line is stripped, which can make it shorter than the total.

    :param RecordSchema schema: Record definition.
    :param values: :class:`Record`, mapping, or object with matching attributes.
    :rtype: EncodeResult
    """
    get = getter_for(values)
    total = schema.total_length()
    buffer = [PAD] * total
    truncated: List[str] = []
    for f in schema:
        value = get(f.name)
        text = "" if value is None else stringify(value)
        if f.offset >= total:
            log.warning("Field %s of %s starts beyond the record length %d; not written", f.name, schema.name, total)
            if text:
                truncated.append(f.name)
            continue
        end = min(f.end, total)
        if len(text) > end - f.offset:
            truncated.append(f.name)
            log.warning(
                "Value for field %s of %s truncated to %d characters (had %d)",
                f.name, schema.name, end - f.offset, len(text),
            )
        formatted = f.format(value)
        buffer[f.offset:end] = formatted[: end - f.offset]
    text = "".join(buffer)
    if schema.trim_output:
        text = text.strip()
    return EncodeResult(text=text, truncated=truncated)


def encode_record(schema: RecordSchema, values: Any) -> str:
    return encode_detailed(schema, values).text

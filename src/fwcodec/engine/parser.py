from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, Type, TypeVar, Union

from ..codec.decoder import decode_record, validate_record
from ..codec.encoder import EncodeResult, encode_detailed, getter_for
from ..codec.record import Record
from ..inputs.line_input import LineInput
from ..logging_setup import get_logger
from ..types import RecordTypeDetector
from .registry import SchemaRegistry

log = get_logger(__name__)

T = TypeVar("T")


class FixedWidthParser:
    """Entry points for decoding, validating and encoding fixed-width lines.

    Unknown source or record-type names never raise: decode methods return
    ``None`` (or skip the line) and :meth:`validate` returns ``False``.

    :param registry: Schema registry to resolve names against.
    """

    def __init__(self, registry: SchemaRegistry) -> None:
        self.registry = registry

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "FixedWidthParser":
        parser = cls(SchemaRegistry.from_file(path))
        log.info("FixedWidthParser initialized with schema from: %s", path)
        return parser

    @classmethod
    def from_yaml(cls, text: str) -> "FixedWidthParser":
        return cls(SchemaRegistry.from_yaml(text))

    # ---------------- decoding -------------------
    def decode(self, source: str, record_type: str, raw: Optional[str]) -> Optional[Record]:
        if not raw:
            log.warning("Empty record data provided")
            return None
        schema = self.registry.resolve(source, record_type)
        if schema is None:
            return None
        return decode_record(schema, raw)

    def decode_all(self, source: str, record_type: str, lines: Iterable[str]) -> Iterator[Record]:
        """Lazily decode every non-blank line, preserving input order."""
        count = 0
        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            record = self.decode(source, record_type, line)
            if record is None:
                log.warning("Failed to parse record at line %d", line_number)
                continue
            count += 1
            yield record
        log.info("Parsed %d records of %s/%s", count, source, record_type)

    def decode_with_type_detection(
        self, source: str, lines: Iterable[str], detector: RecordTypeDetector
    ) -> Iterator[Record]:
        """Decode lines whose record type is chosen per line by ``detector``."""
        count = 0
        for line in lines:
            if not line.strip():
                continue
            record_type = detector(line)
            if record_type is None:
                log.warning("Could not determine record type for line: %s", line)
                continue
            record = self.decode(source, record_type, line)
            if record is not None:
                count += 1
                yield record
        log.info("Parsed %d records from %s with type detection", count, source)

    def decode_file(self, source: str, record_type: str, path: Union[str, Path], encoding: str = "utf-8") -> Iterator[Record]:
        return self.decode_all(source, record_type, LineInput(str(path), encoding=encoding).iter_lines())

    def decode_into(self, raw: str, cls: Type[T]) -> T:
        """Decode ``raw`` with the schema bound to ``cls`` and build ``cls(**values)``."""
        schema = self.registry.schema_for(cls)
        record = decode_record(schema, raw)
        values = record.to_dict() if record is not None else {f.name: f.default for f in schema}
        return cls(**values)

    # ---------------- validation -----------------
    def validate(self, source: str, record_type: str, raw: Optional[str]) -> bool:
        schema = self.registry.resolve(source, record_type)
        if schema is None:
            return False
        return validate_record(schema, raw)

    # ---------------- encoding -------------------
    def encode_detailed(self, values: Any, source: str | None = None, record_type: str | None = None) -> EncodeResult:
        """
        Encode a :class:`Record`, mapping or bound object.

        The schema is taken from ``source``/``record_type`` when given, from the
        class binding for plain objects, otherwise from the record's own type
        looked up across all sources.
        """
        schema = None
        if source is not None:
            schema = self.registry.resolve(source, record_type or getattr(values, "record_type", ""))
            if schema is None:
                raise KeyError(f"No schema for {source}/{record_type}")
        elif isinstance(values, Record):
            for name in self.registry.source_names():
                schema = self.registry.get_source(name).get_record_type(values.record_type)
                if schema is not None:
                    break
            if schema is None:
                raise KeyError(f"No source defines record type {values.record_type}")
        else:
            schema = self.registry.schema_for(type(values))
        return encode_detailed(schema, values)

    def encode(self, values: Any, source: str | None = None, record_type: str | None = None) -> str:
        return self.encode_detailed(values, source, record_type).text

    def to_json(self, obj: Any) -> str:
        """Compact JSON of the bound fields of ``obj``; ``None`` becomes ``null``."""
        schema = self.registry.schema_for(type(obj))
        get = getter_for(obj)
        payload = {}
        for f in schema:
            value = get(f.name)
            payload[f.name] = None if value is None else str(value)
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))

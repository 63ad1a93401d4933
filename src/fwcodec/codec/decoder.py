"""Decode fixed-width lines into :class:`Record` objects.

Decoding is lenient: a field that fails validation is logged and still
converted, unparseable numbers become ``None`` and short lines produce
partial records. :func:`validate_record` is the strict gate; both paths share
:meth:`FieldSchema.validate` for the per-field decision.
"""
from __future__ import annotations

from typing import Optional

from ..logging_setup import get_logger
from ..schema.field import FieldSchema
from ..schema.record import Layout, RecordSchema
from .record import Record

log = get_logger(__name__)


class FieldExtractor:
    @staticmethod
    def extract_field_value(text, start, field_length):
        """
        Extract the raw window of a field from the record text.

        :param str text: The record line.
        :param int start: Zero-based start index of the field.
        :param int field_length: Number of characters to extract.
        :returns: The extracted window; shorter than ``field_length`` when the
                  line ends inside the field.
        :rtype: str
        """
        return text[start:start + field_length]

    @staticmethod
    def decode_field(field: FieldSchema, window: str, record_type: str):
        """
        Validate (advisory) and convert one extracted window.

        :param FieldSchema field: Field definition.
        :param str window: Extracted text.
        :param str record_type: Record type name, for diagnostics.
        :returns: The converted value.
        """
        if not field.validate(window):
            log.warning("Field %s of %s failed validation. Value: '%s'", field.name, record_type, window)
        return field.convert(window)


def _decode_sequential(schema: RecordSchema, raw: str, record: Record) -> None:
    position = 0
    for field in schema:
        end = position + field.length
        if end > len(raw):
            log.warning(
                "Record data for %s is shorter than expected. Expected at least %d characters, got %d",
                schema.name, end, len(raw),
            )
            remainder = raw[position:].strip()
            if remainder:
                record.put(field.name, field.convert(remainder))
            break
        window = FieldExtractor.extract_field_value(raw, position, field.length)
        record.put(field.name, FieldExtractor.decode_field(field, window, schema.name))
        position = end


def _decode_positional(schema: RecordSchema, raw: str, record: Record) -> None:
    for field in schema:
        if field.offset >= len(raw):
            log.debug("Field %s of %s starts beyond the record; using default", field.name, schema.name)
            record.put(field.name, field.default)
            continue
        window = FieldExtractor.extract_field_value(raw, field.offset, field.length)
        record.put(field.name, FieldExtractor.decode_field(field, window, schema.name))


def decode_record(schema: RecordSchema, raw: Optional[str]) -> Optional[Record]:
    """
    Decode one raw line according to ``schema``.

    Sequential schemas walk a cursor through the line; when the line ends
    inside a field, the trimmed remainder (if any) becomes that field's value
    and decoding stops. Positional schemas read each field at its own offset;
    a field starting past the end of the line takes its default. A window that
    is blank after trimming also takes the default, even for a field with
    ``trim`` off; ``trim`` only controls whether non-blank text is stripped.

    :param RecordSchema schema: Record definition.
    :param str raw: The raw line without its line terminator.
    :returns: The decoded :class:`Record`, or ``None`` for empty input.
    """
    if not raw:
        log.warning("Empty record data provided for %s", schema.name)
        return None
    record = Record(schema.name)
    if schema.layout is Layout.POSITIONAL:
        _decode_positional(schema, raw, record)
    else:
        _decode_sequential(schema, raw, record)
    return record


def validate_record(schema: RecordSchema, raw: Optional[str]) -> bool:
    """
    Strictly validate a raw line: exact total length, then every field in
    order, stopping at the first failure.

    :returns: ``True`` only if the length matches and every field validates.
    """
    if not schema.has_valid_length(raw):
        log.warning(
            "Record length mismatch for type %s. Expected %d, got %s",
            schema.name, schema.total_length(), None if raw is None else len(raw),
        )
        return False
    for field in schema:
        window = FieldExtractor.extract_field_value(raw, field.offset, field.length)
        if not field.validate(window):
            log.warning("Field %s validation failed for value: '%s'", field.name, window)
            return False
    return True

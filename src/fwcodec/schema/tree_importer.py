"""Build :class:`SourceSchema` objects from a parsed schema description tree.

The tree is the plain ``dict``/``list`` structure produced by a YAML or JSON
loader::

    {"sources": [{"source": "s1", "size": 45, "records": [
        {"type": "r1", "fields": [{"name": "id", "length": 5, "type": "INTEGER"}]}
    ]}]}

Records whose fields carry ``position`` (or ``start``) are positional; all
others are sequential and derive offsets from declaration order.
"""
from __future__ import annotations

from typing import Any, Dict, List

from ..errors import SchemaDefinitionError
from ..logging_setup import get_logger
from .field import FieldSchema, FieldType
from .jsonschema_validator import TreeValidator
from .record import Layout, RecordSchema, SourceSchema

log = get_logger(__name__)


class FieldSpecParser:
    @staticmethod
    def start_of(field: Dict[str, Any]):
        """
        Return the 1-based start position of a field, or ``None`` when it has none.

        :param dict field: The field entry from the description tree.
        :rtype: int | None
        """
        if "position" in field:
            return field["position"]
        return field.get("start")

    @staticmethod
    def calculate_field_length(field):
        """
        Calculate the length of a field from ``length`` or an inclusive ``end``.

        :param dict field: The field entry from the description tree.
        :returns: The length of the field.
        :rtype: int
        :raises SchemaDefinitionError: If both 'length' and 'end' are specified, or neither is
                                       specified, or if 'end' is less than the start.
        """
        length = field.get("length")
        end = field.get("end")
        if length is not None and end is not None:
            raise SchemaDefinitionError(f"Field '{field['name']}' cannot have both 'length' and 'end'.")
        if length is not None:
            return FieldSpecParser.as_int(length, f"length of field '{field['name']}'")
        elif end is not None:
            start = FieldSpecParser.start_of(field)
            if start is None:
                raise SchemaDefinitionError(f"Field '{field['name']}' uses 'end' without a start position.")
            field_length = end - start + 1
            if field_length < 1:
                raise SchemaDefinitionError(f"Field '{field['name']}' has invalid 'end' < 'start'.")
            return field_length
        else:
            raise SchemaDefinitionError(f"Field '{field['name']}' must have either 'length' or 'end'.")

    @staticmethod
    def as_int(value, what):
        if isinstance(value, bool):
            raise SchemaDefinitionError(f"Invalid {what}: {value!r}")
        if isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError as exc:
            raise SchemaDefinitionError(f"Invalid {what}: {value!r}") from exc

    @staticmethod
    def as_bool(value):
        """Booleans pass through; strings are true only when they read 'true'."""
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return False

    @staticmethod
    def build_field(field: Dict[str, Any], layout: Layout) -> FieldSchema:
        """
        Build a :class:`FieldSchema` from one field entry.

        :param dict field: The field entry from the description tree.
        :param Layout layout: Layout of the owning record.
        :rtype: FieldSchema
        """
        start = FieldSpecParser.start_of(field)
        if layout is Layout.SEQUENTIAL and start is not None:
            raise SchemaDefinitionError(
                f"Field '{field['name']}' declares a position inside a sequential record."
            )
        if layout is Layout.POSITIONAL and start is None:
            raise SchemaDefinitionError(f"Field '{field['name']}' needs 'position' in a positional record.")
        default = field.get("default")
        return FieldSchema(
            name=field["name"],
            length=FieldSpecParser.calculate_field_length(field),
            type=FieldType.parse(field.get("type")),
            offset=0 if start is None else start - 1,
            required=FieldSpecParser.as_bool(field.get("required", False)),
            pattern=field.get("regex") or field.get("pattern"),
            default=None if default is None else str(default),
            trim=field.get("trim", True),
        )


def _record_layout(record_map: Dict[str, Any]) -> Layout:
    declared = record_map.get("layout")
    if declared:
        return Layout(declared)
    fields = record_map.get("fields") or []
    if any(FieldSpecParser.start_of(f) is not None for f in fields):
        return Layout.POSITIONAL
    return Layout.SEQUENTIAL


def import_record(record_map: Dict[str, Any]) -> RecordSchema:
    """Build a sealed :class:`RecordSchema` from one ``records`` entry."""
    layout = _record_layout(record_map)
    positional = layout is Layout.POSITIONAL
    schema = RecordSchema(
        record_map["type"],
        layout=layout,
        total_length=record_map.get("total_length") if positional else None,
        trim_output=record_map.get("trim_output", positional),
        allow_overlap=record_map.get("allow_overlap", True),
    )
    for field in record_map.get("fields") or []:
        schema.add_field(FieldSpecParser.build_field(field, layout))
    return schema.seal()


def import_source(source_map: Dict[str, Any]) -> SourceSchema:
    """Build a :class:`SourceSchema` from one ``sources`` entry."""
    name = source_map["source"]
    size = source_map.get("size")
    source = SourceSchema(name, FieldSpecParser.as_int(size, f"size of source '{name}'") if size is not None else 0)
    for record_map in source_map.get("records") or []:
        source.add_record_type(import_record(record_map))
    log.info("Loaded source: %s (%d record types)", name, source.record_type_count)
    return source


def import_tree(tree: Any, validator: TreeValidator | None = None) -> List[SourceSchema]:
    """Validate a schema description tree and build every source it declares.

    :param tree: Parsed YAML/JSON document.
    :param validator: Optional :class:`TreeValidator` to reuse.
    :returns: Sources in declaration order; empty when the tree has none.
    :raises SchemaDefinitionError: On structural or semantic problems.
    """
    if not tree:
        log.warning("Schema description is empty")
        return []
    errors = (validator or TreeValidator()).errors(tree)
    if errors:
        details = "; ".join(TreeValidator.describe(e) for e in errors)
        raise SchemaDefinitionError(f"Invalid schema description: {details}")
    sources = tree.get("sources") or []
    if not sources:
        log.warning("No sources defined in schema description")
    return [import_source(s) for s in sources]

import json
import pytest
from fwcodec.errors import SchemaDefinitionError
from fwcodec.schema.field import FieldType
from fwcodec.schema.loader import load_file, load_string
from fwcodec.schema.record import Layout
from fwcodec.schema.tree_importer import FieldSpecParser, import_tree


def test_load_sources_from_yaml(schema_yaml):
    sources = load_string(schema_yaml)
    assert [s.name for s in sources] == ["source_1"]
    source = sources[0]
    assert source.max_size == 45
    assert source.record_type_names() == ["record_1", "record_2", "customer"]


def test_sequential_record_fields(schema_yaml):
    record = load_string(schema_yaml)[0].get_record_type("record_1")
    assert record.layout is Layout.SEQUENTIAL
    assert record.field_count == 5
    assert record.total_length() == 45
    id_field = record.get_field("id")
    assert id_field.type is FieldType.INTEGER
    assert id_field.required is True
    assert id_field.length == 5
    assert record.get_field("amount").offset == 36


def test_positional_record_fields(schema_yaml):
    record = load_string(schema_yaml)[0].get_record_type("customer")
    assert record.layout is Layout.POSITIONAL
    assert record.total_length() == 50
    assert record.trim_output is True
    last = record.get_field("last_name")
    assert (last.offset, last.length, last.trim) == (10, 15, False)
    assert record.get_field("email").default == "email@fm.com"


def test_string_size_length_and_required():
    tree = {"sources": [{"source": "s", "size": "12", "records": [
        {"type": "r", "fields": [{"name": "a", "length": "4", "required": "TRUE"},
                                 {"name": "b", "length": 8, "required": "no"}]}]}]}
    source = import_tree(tree)[0]
    record = source.get_record_type("r")
    assert source.max_size == 12
    assert record.get_field("a").length == 4
    assert record.get_field("a").required is True
    assert record.get_field("b").required is False


def test_numeric_default_is_kept_as_string():
    tree = {"sources": [{"source": "s", "records": [
        {"type": "r", "fields": [{"name": "n", "length": 3, "type": "INTEGER", "default": 0}]}]}]}
    assert import_tree(tree)[0].get_record_type("r").get_field("n").default == "0"


def test_unknown_type_falls_back_to_string():
    tree = {"sources": [{"source": "s", "records": [
        {"type": "r", "fields": [{"name": "n", "length": 3, "type": "money"}]}]}]}
    assert import_tree(tree)[0].get_record_type("r").get_field("n").type is FieldType.STRING


def test_empty_tree_yields_no_sources():
    assert import_tree(None) == []
    assert import_tree({"sources": []}) == []
    assert load_string("") == []


@pytest.mark.parametrize("tree, message", [
    ({"sources": [{"size": 3}]}, "source"),
    ({"sources": [{"source": "s", "records": [{"fields": []}]}]}, "type"),
    ({"sources": [{"source": "s", "records": [{"type": "r", "fields": [{"length": 3}]}]}]}, "name"),
    ({"sources": [{"source": "s", "records": [{"type": "r", "fields": [{"name": "a", "length": 2, "regex": "("}]}]}]}, "regex"),
])
def test_structural_errors_are_reported(tree, message):
    with pytest.raises(SchemaDefinitionError, match=message):
        import_tree(tree)


def test_length_and_end_rules():
    with pytest.raises(SchemaDefinitionError, match="cannot have both 'length' and 'end'"):
        FieldSpecParser.calculate_field_length({"name": "A", "start": 1, "length": 2, "end": 3})
    with pytest.raises(SchemaDefinitionError, match="must have either 'length' or 'end'"):
        FieldSpecParser.calculate_field_length({"name": "A", "start": 1})
    with pytest.raises(SchemaDefinitionError, match="invalid 'end' < 'start'"):
        FieldSpecParser.calculate_field_length({"name": "A", "start": 3, "end": 2})
    assert FieldSpecParser.calculate_field_length({"name": "A", "position": 4, "end": 5}) == 2


def test_position_in_sequential_record_is_rejected():
    tree = {"sources": [{"source": "s", "records": [
        {"type": "r", "layout": "sequential", "fields": [{"name": "a", "position": 1, "length": 2}]}]}]}
    with pytest.raises(SchemaDefinitionError, match="sequential"):
        import_tree(tree)


def test_positional_overlap_toggle():
    fields = [{"name": "id", "position": 1, "length": 6}, {"name": "sub_id", "position": 4, "length": 3}]
    allowed = {"sources": [{"source": "s", "records": [{"type": "r", "fields": fields}]}]}
    assert import_tree(allowed)[0].get_record_type("r").overlaps() == [("id", "sub_id")]
    strict = {"sources": [{"source": "s", "records": [{"type": "r", "allow_overlap": False, "fields": fields}]}]}
    with pytest.raises(SchemaDefinitionError, match="overlaps"):
        import_tree(strict)


def test_load_file_yaml_and_json(tmp_path, schema_file):
    assert load_file(schema_file)[0].name == "source_1"
    tree = {"sources": [{"source": "js", "records": [{"type": "r", "fields": [{"name": "a", "length": 1}]}]}]}
    p = tmp_path / "schema.json"
    p.write_text(json.dumps(tree), encoding="utf-8")
    assert load_file(p)[0].name == "js"
    with pytest.raises(FileNotFoundError):
        load_file(tmp_path / "missing.yaml")


def test_invalid_yaml_text():
    with pytest.raises(SchemaDefinitionError, match="YAML"):
        load_string("sources: [unclosed")

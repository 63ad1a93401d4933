import json
import logging
from dataclasses import dataclass
import pytest
from fwcodec.codec.record import Record
from fwcodec.engine.parser import FixedWidthParser
from fwcodec.schema.positional import PositionalField, positional_schema


def test_decode_concrete_record(parser, record_1_line):
    record = parser.decode("source_1", "record_1", record_1_line)
    assert record.record_type == "record_1"
    assert record.as_int("id") == 1
    assert record.as_string("name") == "John"
    assert record.as_string("email") == "john@exam.com"
    assert record.as_string("status") == "Y"
    assert record.as_double("amount") == pytest.approx(1234.5678)


def test_unknown_names_yield_absence(parser, record_1_line, caplog):
    with caplog.at_level(logging.ERROR, logger="fwcodec"):
        assert parser.decode("nope", "record_1", record_1_line) is None
        assert parser.decode("source_1", "nope", record_1_line) is None
    assert "Source configuration not found: nope" in caplog.text
    assert "Record type configuration not found: nope" in caplog.text
    assert parser.validate("nope", "record_1", record_1_line) is False
    assert parser.validate("source_1", "nope", record_1_line) is False


def test_empty_input_yields_absence(parser):
    assert parser.decode("source_1", "record_1", "") is None
    assert parser.decode("source_1", "record_1", None) is None


def test_validate_entry_point(parser, record_1_line):
    assert parser.validate("source_1", "record_1", record_1_line)
    assert not parser.validate("source_1", "record_1", "InvalidData")


def test_decode_all_skips_blank_lines_and_keeps_order(parser, record_1_line):
    second = "00002Jane" + record_1_line[9:]
    records = list(parser.decode_all("source_1", "record_1", [record_1_line, "", "   ", second]))
    assert [r.as_int("id") for r in records] == [1, 2]
    assert records[1].get("name") == "Jane"


def test_decode_all_is_lazy(parser, record_1_line):
    pulled = []

    def lines():
        for i in range(3):
            pulled.append(i)
            yield record_1_line

    it = parser.decode_all("source_1", "record_1", lines())
    next(it)
    assert pulled == [0]


def test_decode_all_unknown_record_type_yields_nothing(parser, record_1_line):
    assert list(parser.decode_all("source_1", "nope", [record_1_line])) == []


def test_decode_with_type_detection(parser, record_1_line):
    record_2_line = "01true 0052024-03-01      "
    lines = [record_1_line, record_2_line, "??garbage", ""]

    def detect(line):
        if line.startswith("0000"):
            return "record_1"
        if line.startswith("01"):
            return "record_2"
        return None

    records = list(parser.decode_with_type_detection("source_1", lines, detect))
    assert [r.record_type for r in records] == ["record_1", "record_2"]
    r2 = records[1]
    assert r2.to_dict() == {"type_code": "01", "active": True, "count": 5, "opened": "2024-03-01", "note": "N/A"}


def test_decode_file(parser, record_1_line, tmp_path):
    p = tmp_path / "data.txt"
    p.write_text(record_1_line + "\r\n\r\n" + record_1_line + "\n", encoding="utf-8")
    records = list(parser.decode_file("source_1", "record_1", p))
    assert len(records) == 2
    assert records[1].get("amount") == pytest.approx(1234.5678)


def test_encode_record_finds_schema_by_record_type(parser, record_1_line):
    record = parser.decode("source_1", "record_1", record_1_line)
    record.put("id", "00001")
    assert parser.encode(record) == record_1_line


def test_encode_mapping_with_explicit_schema(parser):
    line = parser.encode({"type_code": "02", "active": False, "count": 12}, "source_1", "record_2")
    assert line == "02false12 " + " " * 16
    assert len(line) == 26


def test_encode_unknown_schema_raises(parser):
    with pytest.raises(KeyError):
        parser.encode({"a": 1}, "source_1", "nope")
    with pytest.raises(KeyError):
        parser.encode(Record("unknown_type", {"a": 1}))
    with pytest.raises(KeyError):
        parser.encode(object())


@dataclass
class Customer:
    first_name: str = None
    last_name: str = None
    email: str = None


CUSTOMER = positional_schema("customer", [
    PositionalField("first_name", position=1, length=10),
    PositionalField("last_name", position=11, length=15, trim=False),
    PositionalField("email", position=26, length=25, default="email@fm.com"),
], total_length=50, trim_output=True)


@pytest.fixture
def bound_parser(registry):
    registry.bind(Customer, CUSTOMER)
    return FixedWidthParser(registry)


def test_decode_into_bound_class(bound_parser):
    customer = bound_parser.decode_into("Shyam     JoseR            ", Customer)
    assert customer == Customer("Shyam", "JoseR          ", "email@fm.com")


def test_decode_into_empty_line_uses_defaults(bound_parser):
    assert bound_parser.decode_into("", Customer) == Customer(None, None, "email@fm.com")


def test_encode_bound_object(bound_parser):
    line = bound_parser.encode(Customer("Shyam", "JoseR", "s@x.io"))
    assert line == "Shyam     JoseR          s@x.io"


def test_to_json_of_bound_object(bound_parser):
    payload = json.loads(bound_parser.to_json(Customer("Shyam", None, "s@x.io")))
    assert payload == {"first_name": "Shyam", "last_name": None, "email": "s@x.io"}
    assert " " not in bound_parser.to_json(Customer("A", "B", "C"))


def test_from_file(schema_file):
    parser = FixedWidthParser.from_file(schema_file)
    assert parser.registry.has_source("source_1")

import threading
import pytest
from fwcodec.engine.registry import SchemaRegistry, get_output_cls
from fwcodec.schema.positional import PositionalField, positional_schema
from fwcodec.schema.record import RecordSchema, SourceSchema


def test_registry_loads_yaml(registry):
    assert registry.has_source("source_1")
    assert registry.source_count == 1
    assert registry.source_names() == ["source_1"]
    assert registry.get_source("missing") is None
    assert registry.resolve("source_1", "record_1").total_length() == 45
    assert registry.resolve("source_1", "missing") is None
    assert registry.resolve("missing", "record_1") is None


def test_registry_load_more_sources_replaces_same_name(registry):
    registry.load_yaml("sources:\n  - source: extra\n    records: []\n")
    assert registry.source_names() == ["source_1", "extra"]
    replacement = SourceSchema("source_1", 10)
    registry.add_source(replacement)
    assert registry.get_source("source_1") is replacement


def test_registry_from_file(schema_file):
    registry = SchemaRegistry()
    registry.load_file(schema_file)
    assert registry.get_source("source_1").record_type_count == 3


def test_bind_is_insert_if_absent():
    class Thing:
        pass

    registry = SchemaRegistry()
    first = positional_schema("a", [PositionalField("x", position=1, length=1)])
    second = positional_schema("b", [PositionalField("y", position=1, length=1)])
    assert registry.bind(Thing, first) is first
    assert registry.bind(Thing, second) is first
    assert registry.schema_for(Thing) is first
    assert registry.is_bound(Thing)


def test_bind_seals_schema():
    class Thing:
        pass

    schema = RecordSchema("open")
    SchemaRegistry().bind(Thing, schema)
    assert schema.sealed


def test_concurrent_binds_converge():
    class Thing:
        pass

    registry = SchemaRegistry()
    candidates = [positional_schema(f"s{i}", [PositionalField("x", position=1, length=1)]) for i in range(16)]
    results = []
    barrier = threading.Barrier(len(candidates))

    def worker(schema):
        barrier.wait()
        results.append(registry.bind(Thing, schema))

    threads = [threading.Thread(target=worker, args=(s,)) for s in candidates]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len({id(r) for r in results}) == 1
    assert registry.schema_for(Thing) is results[0]


def test_unbound_class_raises_key_error():
    with pytest.raises(KeyError, match="not bound"):
        SchemaRegistry().schema_for(int)


def test_output_lookups():
    assert get_output_cls("parquet").__name__ == "ParquetOutput"
    assert get_output_cls("jsonl").__name__ == "JsonlOutput"
    with pytest.raises(KeyError):
        get_output_cls("bogus")

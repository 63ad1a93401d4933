from __future__ import annotations
import json
from pathlib import Path
import pytest

from fwcodec.engine.parser import FixedWidthParser
from fwcodec.engine.registry import SchemaRegistry
from fwcodec.logging_setup import _reset_for_tests

SCHEMA_YAML = """
sources:
  - source: source_1
    size: 45
    records:
      - type: record_1
        fields:
          - name: id
            length: 5
            type: INTEGER
            required: true
          - name: name
            length: 15
            type: STRING
          - name: email
            length: 15
            type: STRING
          - name: status
            length: 1
            type: STRING
          - name: amount
            length: 9
            type: DECIMAL
      - type: record_2
        fields:
          - name: type_code
            length: 2
            type: STRING
            required: true
            regex: "0[0-9]"
          - name: active
            length: 5
            type: BOOLEAN
          - name: count
            length: 3
            type: INTEGER
          - name: opened
            length: 10
            type: DATE
            regex: "\\\\d{4}-\\\\d{2}-\\\\d{2}"
          - name: note
            length: 6
            default: N/A
      - type: customer
        total_length: 50
        trim_output: true
        fields:
          - name: first_name
            position: 1
            length: 10
          - name: last_name
            start: 11
            end: 25
            trim: false
          - name: email
            position: 26
            length: 25
            default: email@fm.com
"""

RECORD_1_LINE = "00001John           john@exam.com  Y1234.5678"


@pytest.fixture(autouse=True)
def _isolate_logging():
    yield
    _reset_for_tests()


@pytest.fixture
def schema_yaml() -> str:
    return SCHEMA_YAML


@pytest.fixture
def registry() -> SchemaRegistry:
    return SchemaRegistry.from_yaml(SCHEMA_YAML)


@pytest.fixture
def parser(registry: SchemaRegistry) -> FixedWidthParser:
    return FixedWidthParser(registry)


@pytest.fixture
def record_1_line() -> str:
    return RECORD_1_LINE


@pytest.fixture
def schema_file(tmp_path: Path) -> Path:
    p = tmp_path / "schema.yaml"
    p.write_text(SCHEMA_YAML, encoding="utf-8")
    return p


@pytest.fixture
def tmp_out(tmp_path: Path) -> Path:
    d = tmp_path / "out"
    d.mkdir(parents=True, exist_ok=True)
    return d


def get_manifest(dest: Path) -> dict:
    m = dest / "_manifest.json"
    return json.loads(m.read_text(encoding="utf-8"))


def get_quarantine_lines(dest: Path) -> list[str]:
    q = dest / "_quarantine.jsonl"
    if not q.exists():
        return []
    return q.read_text(encoding="utf-8").splitlines()

from __future__ import annotations
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Type, Union

from ..logging_setup import get_logger
from ..outputs.base import BaseOutput
from ..schema.loader import load_file, load_string
from ..schema.record import RecordSchema, SourceSchema

log = get_logger(__name__)


class SchemaRegistry:
    """Owns every source schema and positional class binding in a process.

    Populate it at startup; afterwards lookups never mutate it. Class bindings
    use ``dict.setdefault`` so concurrent first use of the same class converges
    on a single cached schema.
    """

    def __init__(self, sources: Iterable[SourceSchema] = ()) -> None:
        self._sources: Dict[str, SourceSchema] = {}
        self._bindings: Dict[type, RecordSchema] = {}
        for source in sources:
            self.add_source(source)

    @classmethod
    def from_yaml(cls, text: str) -> "SchemaRegistry":
        return cls(load_string(text))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "SchemaRegistry":
        return cls(load_file(path))

    # ---------------- sources --------------------
    def add_source(self, source: SourceSchema) -> SourceSchema:
        if source.name in self._sources:
            log.info("Replacing source: %s", source.name)
        self._sources[source.name] = source
        return source

    def load_yaml(self, text: str) -> List[SourceSchema]:
        return [self.add_source(s) for s in load_string(text)]

    def load_file(self, path: Union[str, Path]) -> List[SourceSchema]:
        return [self.add_source(s) for s in load_file(path)]

    def get_source(self, name: str) -> Optional[SourceSchema]:
        return self._sources.get(name)

    def has_source(self, name: str) -> bool:
        return name in self._sources

    def source_names(self) -> List[str]:
        return list(self._sources)

    @property
    def source_count(self) -> int:
        return len(self._sources)

    def resolve(self, source: str, record_type: str) -> Optional[RecordSchema]:
        """Look up a record schema, logging when either name is unknown."""
        source_schema = self._sources.get(source)
        if source_schema is None:
            log.error("Source configuration not found: %s", source)
            return None
        schema = source_schema.get_record_type(record_type)
        if schema is None:
            log.error("Record type configuration not found: %s for source: %s", record_type, source)
        return schema

    # ---------------- class bindings -------------
    def bind(self, cls: type, schema: RecordSchema) -> RecordSchema:
        """Associate ``cls`` with a positional schema; the first binding wins."""
        bound = self._bindings.setdefault(cls, schema.seal())
        if bound is not schema:
            log.debug("Class %s already bound to %s", cls.__name__, bound.name)
        return bound

    def schema_for(self, cls: type) -> RecordSchema:
        try:
            return self._bindings[cls]
        except KeyError:
            raise KeyError(f"Class {cls.__name__} is not bound to a fixed-width schema") from None

    def is_bound(self, cls: type) -> bool:
        return cls in self._bindings


def get_output_cls(kind: str) -> Type[BaseOutput]:
    if kind == "parquet":
        from ..outputs.parquet_output import ParquetOutput
        return ParquetOutput
    if kind == "jsonl":
        from ..outputs.jsonl_output import JsonlOutput
        return JsonlOutput
    raise KeyError(f"Unknown output kind: {kind}")

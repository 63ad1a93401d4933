from __future__ import annotations
from typing import Any, Iterable, Iterator, Optional

from .registry import SchemaRegistry, get_output_cls
from ..codec.decoder import decode_record, validate_record
from ..inputs.line_input import LineInput
from ..logging_setup import get_logger
from ..types import LineResult, RecordTypeDetector

log = get_logger(__name__)


class Engine:
    def __init__(
            self,
            registry: SchemaRegistry,
            source: str,
            record_type: Optional[str] = None,
            detector: Optional[RecordTypeDetector] = None,
            strict: bool = False,
            output_kind: str = "parquet",
            encoding: str = "utf-8",
            **output_opts: Any,
    ) -> None:
        """Initialize the batch decoding pipeline.

        :param registry: Registry holding the source schema.
        :param source: Source name to decode against.
        :param record_type: Record type applied to every line. Mutually
            exclusive with ``detector``.
        :param detector: Callable choosing a record type per line.
        :param strict: Gate each line through strict validation; failures
            are quarantined instead of written.
        :param output_kind: Registered output kind (``"parquet"`` or ``"jsonl"``).
        :param encoding: Text encoding of input files.
        :param output_opts: Additional keyword options forwarded to the output class.
        """
        if (record_type is None) == (detector is None):
            raise ValueError("Provide exactly one of record_type or detector")
        self.registry = registry
        self.source = source
        self.record_type = record_type
        self.detector = detector
        self.strict = strict
        self.encoding = encoding
        self.output_opts = output_opts
        self.Output = get_output_cls(output_kind)

    def _type_of(self, line: str) -> Optional[str]:
        if self.detector is not None:
            return self.detector(line)
        return self.record_type

    def process_lines(self, lines: Iterable[str]) -> Iterator[LineResult]:
        """Decode lines in order, yielding one result per non-blank line."""
        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                record_type = self._type_of(line)
                if record_type is None:
                    raise ValueError("could not determine record type")
                schema = self.registry.resolve(self.source, record_type)
                if schema is None:
                    raise LookupError(f"unknown record type {self.source}/{record_type}")
                if self.strict and not validate_record(schema, line):
                    raise ValueError(f"line failed strict validation as {record_type}")
                yield LineResult(line_number, line, decode_record(schema, line), None)
            except (ValueError, LookupError) as exc:
                yield LineResult(line_number, line, None, exc)

    def run(self, path: str, dest: str) -> None:
        """Execute read → decode → output for one input file.

        :param path: Fixed-width input file.
        :param dest: Output directory.
        """
        output_plugin = self.Output(dest, **self.output_opts)
        output_plugin.open()
        try:
            lines = LineInput(path, encoding=self.encoding).iter_lines()
            for lr in self.process_lines(lines):
                if lr.error is None:
                    output_plugin.write(lr.record)
                else:
                    output_plugin.quarantine(lr)
        finally:
            output_plugin.close()
        log.info("Processed %s: %s", path, output_plugin.counters)

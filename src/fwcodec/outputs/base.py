from __future__ import annotations
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict
from ..codec.record import Record
from ..types import LineResult

MANIFEST_NAME = "_manifest.json"
QUARANTINE_NAME = "_quarantine.jsonl"


class BaseOutput(ABC):
    """Abstract base for decoded-record writers.

    Subclasses buffer or stream accepted records; this base owns the shared
    artifacts: ``_quarantine.jsonl`` with one object per rejected line and
    ``_manifest.json`` with ``read``/``kept``/``rejected`` counters.

    :param dest: Destination directory.
    :param opts: Writer specific options.
    """
    def __init__(self, dest: str, **opts: Any):
        self.dest = dest
        self.opts = opts
        self.output_dir = Path(dest)
        self.counters: Dict[str, int] = {"read": 0, "kept": 0, "rejected": 0}
        self.quarantine_handle = None

    def open(self) -> None:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.quarantine_handle = (self.output_dir / QUARANTINE_NAME).open("w", encoding="utf-8")

    @abstractmethod
    def write(self, record: Record) -> None:
        """Accept one decoded record; implementations bump ``read`` and ``kept``."""
        ...

    def quarantine(self, lr: LineResult) -> None:
        """Append a rejected line with its line number and error text.

        :param lr: Result whose ``error`` is set.
        """
        self.counters["read"] += 1
        self.counters["rejected"] += 1
        payload = {"line_number": lr.line_number, "line": lr.line, "error": str(lr.error)}
        self.quarantine_handle.write(json.dumps(payload, ensure_ascii=False) + "\n")

    @abstractmethod
    def flush(self) -> None:
        ...

    def close(self) -> None:
        """Flush records, close the quarantine file and write the manifest."""
        try:
            self.flush()
            if self.quarantine_handle is not None and not self.quarantine_handle.closed:
                self.quarantine_handle.close()
        finally:
            (self.output_dir / MANIFEST_NAME).write_text(json.dumps(self.counters, indent=2), encoding="utf-8")

from __future__ import annotations

import json
from typing import Any

from ..codec.record import Record
from .base import BaseOutput


class JsonlOutput(BaseOutput):
    """Streams accepted records to ``records.jsonl`` as ``{"record_type", "fields"}`` objects."""

    def __init__(self, dest: str, **opts: Any):
        super().__init__(dest, **opts)
        self.records_handle = None

    def open(self) -> None:  # type: ignore[override]
        super().open()
        self.records_handle = (self.output_dir / "records.jsonl").open("w", encoding="utf-8")

    def write(self, record: Record) -> None:  # type: ignore[override]
        self.counters["read"] += 1
        self.counters["kept"] += 1
        payload = {"record_type": record.record_type, "fields": record.to_dict()}
        self.records_handle.write(json.dumps(payload, ensure_ascii=False) + "\n")

    def flush(self) -> None:  # type: ignore[override]
        if self.records_handle is not None and not self.records_handle.closed:
            self.records_handle.close()

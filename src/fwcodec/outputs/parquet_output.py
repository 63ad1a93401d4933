from __future__ import annotations

"""Parquet output writer.

Buffers accepted records per record type and, on close, builds one
``polars`` DataFrame per type and writes ``<record_type>.parquet``.
Column order follows the field order of the first record of each type;
fields missing from a partial record are written as nulls.

Artifacts written under ``dest``:

* ``<record_type>.parquet`` – one per record type seen
* ``_quarantine.jsonl`` – one JSON object per rejected line (may be empty)
* ``_manifest.json`` – summary counters: ``read``, ``kept``, ``rejected``
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Literal

import polars as pl

from ..codec.record import Record
from ..types import Row
from .base import BaseOutput


def records_to_frame(records: Iterable[Record]) -> pl.DataFrame:
    """Build a DataFrame from records; the union of field names becomes the columns."""
    rows: List[Row] = []
    columns: Dict[str, None] = {}
    for record in records:
        rows.append(record.to_dict())
        for name in record.field_names():
            columns.setdefault(name)
    if not rows:
        return pl.DataFrame()
    data: Dict[str, List[Any]] = {c: [row.get(c) for row in rows] for c in columns}
    for name, values in data.items():
        kinds = {type(v) for v in values if v is not None}
        # a string default in a numeric field leaves the column mixed
        if len(kinds) > 1 and not kinds <= {int, float}:
            data[name] = [None if v is None else str(v) for v in values]
    return pl.DataFrame(data, strict=False)


class ParquetOutput(BaseOutput):
    """Parquet writer with one file per record type.

    :param dest: Output directory path (created if missing).
    :param compression: Parquet compression codec (default ``snappy``).
    """

    def __init__(self, dest: str, *, compression: str = "snappy", **kwargs: Any):
        super().__init__(dest, **kwargs)
        allowed_comp: set[str] = {"snappy", "gzip", "brotli", "zstd", "lz4", "uncompressed"}
        if compression not in allowed_comp:
            raise ValueError(f"Unsupported compression '{compression}'. Allowed: {sorted(allowed_comp)}")
        self.compression: Literal["snappy", "gzip", "brotli", "zstd", "lz4", "uncompressed"] = compression  # type: ignore[assignment]
        self.record_buffers: Dict[str, List[Record]] = {}

    def write(self, record: Record) -> None:  # type: ignore[override]
        self.counters["read"] += 1
        self.counters["kept"] += 1
        self.record_buffers.setdefault(record.record_type, []).append(record)

    @staticmethod
    def _sanitize_name(name: str) -> str:
        base = Path(name).name
        return base.replace("/", "_").replace("\\", "_")

    def flush(self) -> None:  # type: ignore[override]
        for record_type, records in self.record_buffers.items():
            if not records:
                continue
            out_path = self.output_dir / f"{self._sanitize_name(record_type)}.parquet"
            records_to_frame(records).write_parquet(out_path, compression=self.compression)
            records.clear()

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Union

Row = Dict[str, Any]

# Converted field value: str for STRING/DATE (and defaults), int, float, bool, or None.
TypedValue = Union[str, int, float, bool, None]

# Maps a raw line to a record-type name, or None when it cannot tell.
RecordTypeDetector = Callable[[str], Optional[str]]


@dataclass
class LineResult:
    line_number: int
    line: str
    record: Optional[Any]
    error: Optional[Exception]

from __future__ import annotations
import datetime
import re
from typing import List, Optional
from dateutil import parser

# Layouts commonly found in fixed-width DATE fields, tried in order.
COMMON_DATE_FORMATS = [
    "%Y%m%d",        # 20250827
    "%Y-%m-%d",      # 2025-08-27
    "%m/%d/%Y",      # 08/27/2025
    "%d/%m/%Y",      # 27/08/2025
    "%Y/%m/%d",      # 2025/08/27
    "%d%m%Y",        # 27082025
    "%d-%b-%Y",      # 27-Aug-2025
    "%Y.%m.%d",      # 2025.08.27
]

# Schema tokens -> strptime, longer tokens first to avoid partial replacements.
_TOKEN_MAP = [
    (re.compile(r"YYYY", re.IGNORECASE), "%Y"),
    (re.compile(r"YY", re.IGNORECASE), "%y"),
    (re.compile(r"MMMM", re.IGNORECASE), "%B"),
    (re.compile(r"MMM", re.IGNORECASE), "%b"),
    (re.compile(r"MM", re.IGNORECASE), "%m"),
    (re.compile(r"DD", re.IGNORECASE), "%d"),
]


def normalize_format(fmt: str) -> str:
    """
    Converts schema-style tokens (YYYY, YY, MM, DD, MMM, MMMM) to strptime tokens.
    Formats that already contain ``%`` directives are returned unchanged.

    :param fmt: The format string to normalize.
    :return: Normalized format string compatible with strptime.
    """
    if "%" in fmt:
        return fmt
    out = fmt
    for pat, repl in _TOKEN_MAP:
        out = pat.sub(repl, out)
    return out


def _strict_strptime(value: str, fmt: str) -> Optional[datetime.date]:
    """Parse with strptime and require the value to re-render identically."""
    try:
        dt = datetime.datetime.strptime(value, fmt)
    except ValueError:
        return None
    if dt.strftime(fmt) != value:
        return None
    return dt.date()


def to_date(value: Optional[str], fmt: str | None = None, formats: List[str] | None = None) -> Optional[datetime.date]:
    """
    Interpret a DATE field value as a calendar date.

    With ``fmt`` only that layout is accepted (exact match, zero padding enforced).
    Otherwise ``formats`` (or :data:`COMMON_DATE_FORMATS`) are tried in order and
    ``dateutil.parser.parse`` is the last resort.

    :param value: Text of the field; surrounding whitespace is ignored.
    :return: The parsed date, or ``None`` when the value is blank or unparseable.
    """
    if not value or not isinstance(value, str):
        return None
    token = value.strip()
    if not token:
        return None

    if fmt:
        return _strict_strptime(token, normalize_format(fmt))

    for f in formats or COMMON_DATE_FORMATS:
        parsed = _strict_strptime(token, normalize_format(f))
        if parsed:
            return parsed

    try:
        return parser.parse(token, fuzzy=False).date()
    except (ValueError, OverflowError):
        return None


__all__ = ["COMMON_DATE_FORMATS", "normalize_format", "to_date"]

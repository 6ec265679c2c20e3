"""Field coercion policies applied while ingesting and scoring rows.

Each function here is a named fallback: malformed cells are resolved to a
defined value instead of raising, so one bad row never sinks a batch.

- ``coerce_amount``: leading-number parse (``parse_amount``); anything else
  becomes ``0.0``.
- ``try_parse_date``: ISO date/date-time (plus a few common export formats);
  ``None`` when the cell is not a date.
- ``coerce_extra_value``: pass-through columns become ``int``/``float`` when
  the cell is a plain number, otherwise the trimmed string.
- ``format_number``: render a number the way the source exports did
  (``100`` rather than ``100.0``); used by duplicate keys and CSV export.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime

# Longest numeric prefix, e.g. "12.5abc" -> "12.5". Thousands separators and
# currency symbols are not understood ("1,200" -> 1.0, "$5" -> 0.0).
_LEADING_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

_PLAIN_INT_RE = re.compile(r"^[+-]?(?:0|[1-9]\d*)$")
_PLAIN_FLOAT_RE = re.compile(r"^[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?$")

# Tried after ISO parsing fails; first match wins.
_FALLBACK_DATE_FORMATS: tuple[str, ...] = (
    "%m/%d/%Y",
    "%m/%d/%y",
    "%Y/%m/%d",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
)


def parse_amount(raw: str | float | int | None) -> float | None:
    """Return the leading number of ``raw``, or ``None`` when there is none."""

    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
        return value if math.isfinite(value) else None
    m = _LEADING_NUMBER_RE.match(raw.strip())
    if not m:
        return None
    value = float(m.group(0))
    return value if math.isfinite(value) else None


def coerce_amount(raw: str | float | int | None) -> float:
    """Return ``raw`` as a float, or ``0.0`` when it does not start with a number."""

    value = parse_amount(raw)
    return 0.0 if value is None else value


def try_parse_date(raw: str | None) -> date | None:
    """Parse a transaction date, returning ``None`` when it is not a date.

    The calendar date is taken as written: a ``Z`` or offset suffix on a
    date-time does not shift the day.
    """

    if raw is None:
        return None
    s = raw.strip()
    if not s:
        return None
    try:
        return datetime.fromisoformat(s).date()
    except ValueError:
        pass
    for fmt in _FALLBACK_DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    return None


def coerce_extra_value(raw: str) -> str | int | float:
    """Type a pass-through cell: plain integers/decimals become numbers.

    Values with leading zeros (``"00123"``) stay strings so identifiers such as
    postal codes survive unchanged.
    """

    s = raw.strip()
    if _PLAIN_INT_RE.fullmatch(s):
        return int(s)
    if _PLAIN_FLOAT_RE.fullmatch(s) and not re.match(r"^[+-]?0\d", s):
        value = float(s)
        if math.isfinite(value):
            return value
    return s


def format_number(value: float | int) -> str:
    """Render ``value`` without a trailing ``.0`` for integral floats."""

    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, int):
        return str(value)
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return repr(value)


__all__ = [
    "coerce_amount",
    "coerce_extra_value",
    "format_number",
    "parse_amount",
    "try_parse_date",
]

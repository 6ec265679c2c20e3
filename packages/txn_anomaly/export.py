"""Export of flagged (Suspicious or Anomalous) transactions as CSV text.

The header row comes from the field names of the flagged records (input
columns, then ``anomaly_score``, ``anomaly_status``, ``reason``). Cells that
contain the delimiter, a quote, or a line break are quoted; numbers print
without a trailing ``.0``. Asking to export when nothing is flagged raises
:class:`~txn_anomaly.errors.NothingToExportError` instead of producing an
empty file.
"""

from __future__ import annotations

import csv
from collections.abc import Iterable, Sequence
from io import StringIO
from os import PathLike
from pathlib import Path
from typing import Any

from .coercion import format_number
from .errors import NothingToExportError
from .logging_setup import get_logger
from .models import ScoredTransaction

_logger = get_logger("txn_anomaly.export")

DEFAULT_EXPORT_FILENAME = "flagged_transactions.csv"


def select_flagged(records: Iterable[ScoredTransaction]) -> list[ScoredTransaction]:
    """Suspicious and Anomalous records, in input order."""

    return [r for r in records if r.is_flagged]


def _render(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_number(value)
    return str(value)


def _header_for(rows: Sequence[dict[str, Any]]) -> list[str]:
    header: list[str] = []
    seen: set[str] = set()
    for row in rows:
        for key in row:
            if key not in seen:
                seen.add(key)
                header.append(key)
    return header


def export_flagged_csv(records: Iterable[ScoredTransaction], *, delimiter: str = ",") -> str:
    """Render the flagged subset of ``records`` as CSV text.

    Raises
    ------
    NothingToExportError
        When no record is Suspicious or Anomalous.
    """

    flagged = select_flagged(records)
    if not flagged:
        raise NothingToExportError()

    rows = [r.as_dict() for r in flagged]
    header = _header_for(rows)

    with StringIO() as buf:
        writer = csv.writer(
            buf, delimiter=delimiter, lineterminator="\n", quoting=csv.QUOTE_MINIMAL
        )
        writer.writerow(header)
        for row in rows:
            writer.writerow([_render(row.get(key)) for key in header])
        return buf.getvalue()


def write_flagged_csv(
    records: Iterable[ScoredTransaction],
    path: str | PathLike[str] = DEFAULT_EXPORT_FILENAME,
) -> int:
    """Write the flagged export to ``path`` (UTF-8); return the row count."""

    flagged = select_flagged(records)
    text = export_flagged_csv(flagged)
    Path(path).write_text(text, encoding="utf-8", newline="")
    _logger.info("exported %d flagged transactions to %s", len(flagged), path)
    return len(flagged)


__all__ = [
    "DEFAULT_EXPORT_FILENAME",
    "export_flagged_csv",
    "select_flagged",
    "write_flagged_csv",
]

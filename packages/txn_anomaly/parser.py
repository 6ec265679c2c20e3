"""CSV → :class:`~txn_anomaly.models.Transaction` parsing.

Header rules
------------
- The first non-blank line is the header; every later line is a data row.
- The six required columns (``transaction_id, date, amount, category,
  account, vendor``) match case-insensitively and may appear in any order.
  When a name repeats, the first occurrence wins.
- Any other header is carried through on ``Transaction.extra`` under its
  trimmed name.
- A missing required column raises :class:`~txn_anomaly.errors.SchemaError`
  before a single record is produced.

Row rules
---------
- Blank lines are skipped.
- Cells are trimmed; a short row reads missing cells as ``""``.
- ``amount`` goes through :func:`~txn_anomaly.coercion.parse_amount` (``0.0``
  when the cell has no leading number) and never raises.

Each physical line is one row. Lines are split with the stdlib :mod:`csv`
module, so quoted cells may contain commas; a line with malformed quoting
(an unmatched ``"``) falls back to a plain comma split instead of absorbing
the lines after it.
"""

from __future__ import annotations

import csv
from collections.abc import Iterator, Sequence
from io import StringIO
from os import PathLike
from pathlib import Path

from .coercion import coerce_extra_value, parse_amount
from .errors import SchemaError
from .logging_setup import get_logger
from .models import REQUIRED_COLUMNS, ExtraValue, Transaction

_logger = get_logger("txn_anomaly.parser")

_BOM = "\ufeff"


def _split_line(line: str) -> list[str]:
    try:
        return next(csv.reader(StringIO(line), strict=True), [])
    except csv.Error:
        _logger.debug("malformed quoting, splitting on commas: %r", line)
        return line.split(",")


def _iter_rows(csv_text: str) -> Iterator[list[str]]:
    # ",," is not blank; it yields a row of empty cells.
    for line in csv_text.lstrip(_BOM).split("\n"):
        line = line.rstrip("\r")
        if line.strip():
            yield _split_line(line)


def _cell(values: Sequence[str], index: int) -> str:
    return values[index].strip() if index < len(values) else ""


def resolve_columns(headers: Sequence[str]) -> tuple[dict[str, int], list[tuple[str, int]]]:
    """Map required columns to indices and list the pass-through columns.

    Returns ``(required, extras)`` where ``required`` maps each required name
    to its column index and ``extras`` holds ``(header, index)`` pairs in
    header order. Raises :class:`SchemaError` when a required name is absent.
    """

    found = [h.strip() for h in headers]
    lowered = [h.lower() for h in found]

    missing = [col for col in REQUIRED_COLUMNS if col not in lowered]
    if missing:
        raise SchemaError(missing, found)

    required = {col: lowered.index(col) for col in REQUIRED_COLUMNS}
    required_names = set(REQUIRED_COLUMNS)
    extras = [(name, i) for i, name in enumerate(found) if lowered[i] not in required_names]
    return required, extras


def parse_transactions(csv_text: str) -> list[Transaction]:
    """Parse delimited text into transactions in input order.

    Empty text yields ``[]``. A header-only input is still validated, so a
    broken header raises even when there are no data rows.
    """

    rows = _iter_rows(csv_text)
    header = next(rows, None)
    if header is None:
        return []

    required, extras = resolve_columns(header)

    transactions: list[Transaction] = []
    for row_no, values in enumerate(rows, start=1):
        raw_amount = _cell(values, required["amount"])
        amount = parse_amount(raw_amount)
        if amount is None:
            _logger.debug("data row %d: amount %r coerced to 0", row_no, raw_amount)
            amount = 0.0

        extra: dict[str, ExtraValue] = {}
        for name, index in extras:
            extra[name] = coerce_extra_value(_cell(values, index))

        transactions.append(
            Transaction(
                transaction_id=_cell(values, required["transaction_id"]),
                date=_cell(values, required["date"]),
                amount=amount,
                category=_cell(values, required["category"]),
                account=_cell(values, required["account"]),
                vendor=_cell(values, required["vendor"]),
                extra=extra,
            )
        )

    _logger.debug("parsed %d transactions (%d extra columns)", len(transactions), len(extras))
    return transactions


def load_transactions_from_csv(csv_path: str | PathLike[str]) -> list[Transaction]:
    """Read a UTF-8 CSV file and parse it with :func:`parse_transactions`.

    ``FileNotFoundError``/``PermissionError`` propagate to the caller.
    """

    p = Path(csv_path)
    with p.open(encoding="utf-8", newline="") as f:
        return parse_transactions(f.read())


__all__ = ["load_transactions_from_csv", "parse_transactions", "resolve_columns"]

"""Exact-repeat detection within one batch.

A :class:`DuplicateTracker` is owned by the caller of the scoring pass and
lives for exactly one batch. Keys join ``vendor``, ``amount``, ``category``
and ``date`` with a literal hyphen, matching the reference exports. Fields
that themselves contain a hyphen can collide (``"A-1"`` + ``"2"`` vs ``"A"`` +
``"1-2"``); pass a different ``separator`` to harden the key.

Records must be fed in input order: the first occurrence of a key is never
flagged, every later one is.
"""

from __future__ import annotations

from .coercion import format_number
from .models import Transaction

DEFAULT_SEPARATOR = "-"


def composite_key(tx: Transaction, *, separator: str = DEFAULT_SEPARATOR) -> str:
    """Identity key over vendor, amount, category and date."""

    return separator.join((tx.vendor, format_number(tx.amount), tx.category, tx.date))


class DuplicateTracker:
    """Append-only set of composite keys seen so far in a batch."""

    __slots__ = ("_seen", "separator")

    def __init__(self, *, separator: str = DEFAULT_SEPARATOR) -> None:
        self.separator = separator
        self._seen: set[str] = set()

    def __len__(self) -> int:
        return len(self._seen)

    def __contains__(self, tx: object) -> bool:
        if not isinstance(tx, Transaction):
            return False
        return composite_key(tx, separator=self.separator) in self._seen

    def check_and_record(self, tx: Transaction) -> bool:
        """Return ``True`` when ``tx`` repeats an earlier key; record it otherwise."""

        key = composite_key(tx, separator=self.separator)
        if key in self._seen:
            return True
        self._seen.add(key)
        return False


__all__ = ["DEFAULT_SEPARATOR", "DuplicateTracker", "composite_key"]

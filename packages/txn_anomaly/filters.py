"""Filter predicates over scored transactions.

:class:`TransactionFilters` mirrors the review dashboard's filter bar. Every
criterion is optional; the defaults (``"All"``, empty search, no dates) keep
every record. Filtering never reorders records.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator

from .coercion import try_parse_date
from .models import STATUS_ALL, AnomalyStatus, ScoredTransaction


class TransactionFilters(BaseModel):
    """Criteria combined with logical AND.

    - ``start_date`` / ``end_date``: inclusive bounds on the parsed calendar
      date. A record whose date does not parse fails any date bound.
    - ``account`` / ``category``: exact match unless ``"All"``.
    - ``status``: exact match unless ``"All"``.
    - ``search_term``: case-insensitive substring of vendor or transaction id.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    start_date: date | None = None
    end_date: date | None = None
    account: str = STATUS_ALL
    category: str = STATUS_ALL
    status: AnomalyStatus | Literal["All"] = STATUS_ALL
    search_term: str = ""

    @model_validator(mode="after")
    def _check_range(self) -> TransactionFilters:
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self

    def matches(self, record: ScoredTransaction) -> bool:
        tx = record.transaction

        if self.start_date is not None or self.end_date is not None:
            tx_date = try_parse_date(tx.date)
            if tx_date is None:
                return False
            if self.start_date is not None and tx_date < self.start_date:
                return False
            if self.end_date is not None and tx_date > self.end_date:
                return False

        if self.account != STATUS_ALL and tx.account != self.account:
            return False
        if self.category != STATUS_ALL and tx.category != self.category:
            return False
        if self.status != STATUS_ALL and record.anomaly_status != self.status:
            return False

        if self.search_term:
            needle = self.search_term.lower()
            if needle not in tx.vendor.lower() and needle not in tx.transaction_id.lower():
                return False
        return True


def apply_filters(
    records: Iterable[ScoredTransaction], filters: TransactionFilters | None = None
) -> list[ScoredTransaction]:
    """Return the records that satisfy ``filters`` (all of them when ``None``)."""

    if filters is None:
        return list(records)
    return [r for r in records if filters.matches(r)]


__all__ = ["TransactionFilters", "apply_filters"]

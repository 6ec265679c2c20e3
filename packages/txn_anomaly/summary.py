"""Batch-level aggregates over scored transactions.

These are the numbers a review dashboard plots: records per status, the
largest flagged amounts, flagged share per category and flagged records per
day.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date

from .coercion import try_parse_date
from .models import AnomalyStatus, ScoredTransaction


@dataclass(frozen=True, slots=True)
class CategoryAnomalyRate:
    """Flagged share of one category; ``rate`` is a percentage in [0, 100]."""

    category: str
    total: int
    anomalies: int

    @property
    def rate(self) -> float:
        return (self.anomalies / self.total) * 100 if self.total > 0 else 0.0


@dataclass(frozen=True, slots=True)
class Outlier:
    label: str
    amount: float


@dataclass(frozen=True, slots=True)
class DateSpike:
    """Flagged records on one day; ``day`` is the date cell up to any ``T``."""

    day: str
    flagged: int


@dataclass(frozen=True, slots=True)
class BatchSummary:
    total: int
    status_counts: dict[AnomalyStatus, int]
    top_outliers: tuple[Outlier, ...]
    category_rates: tuple[CategoryAnomalyRate, ...]
    anomaly_spikes: tuple[DateSpike, ...]
    accounts: tuple[str, ...]
    categories: tuple[str, ...]

    @property
    def flagged(self) -> int:
        return sum(
            n for status, n in self.status_counts.items() if status is not AnomalyStatus.NORMAL
        )


def status_distribution(records: Iterable[ScoredTransaction]) -> dict[AnomalyStatus, int]:
    """Count records per status; only statuses present appear, first-seen order."""

    counts: dict[AnomalyStatus, int] = {}
    for r in records:
        counts[r.anomaly_status] = counts.get(r.anomaly_status, 0) + 1
    return counts


def top_outliers_by_amount(records: Iterable[ScoredTransaction], limit: int = 5) -> list[Outlier]:
    """Largest flagged amounts, labelled ``"<transaction_id> (<vendor>)"``."""

    flagged = [r for r in records if r.is_flagged]
    flagged.sort(key=lambda r: r.transaction.amount, reverse=True)
    return [
        Outlier(
            label=f"{r.transaction.transaction_id} ({r.transaction.vendor})",
            amount=r.transaction.amount,
        )
        for r in flagged[:limit]
    ]


def category_anomaly_rates(records: Iterable[ScoredTransaction]) -> list[CategoryAnomalyRate]:
    """Per-category flagged share, highest rate first (ties keep first-seen order)."""

    totals: dict[str, list[int]] = {}
    for r in records:
        bucket = totals.setdefault(r.transaction.category, [0, 0])
        bucket[0] += 1
        if r.is_flagged:
            bucket[1] += 1
    rates = [
        CategoryAnomalyRate(category=c, total=t, anomalies=a) for c, (t, a) in totals.items()
    ]
    rates.sort(key=lambda x: x.rate, reverse=True)
    return rates


def anomaly_spikes_by_date(records: Iterable[ScoredTransaction]) -> list[DateSpike]:
    """Flagged counts per day, oldest first.

    Days that do not parse as dates sort after the rest, in first-seen order.
    """

    counts: dict[str, int] = {}
    for r in records:
        if r.is_flagged:
            day = r.transaction.date.split("T")[0]
            counts[day] = counts.get(day, 0) + 1

    def _key(day: str) -> tuple[int, date]:
        parsed = try_parse_date(day)
        return (0, parsed) if parsed is not None else (1, date.min)

    return [DateSpike(day=d, flagged=counts[d]) for d in sorted(counts, key=_key)]


def filter_options(records: Sequence[ScoredTransaction]) -> tuple[list[str], list[str]]:
    """Sorted distinct accounts and categories, for building filter choices."""

    accounts = sorted({r.transaction.account for r in records})
    categories = sorted({r.transaction.category for r in records})
    return accounts, categories


def summarize(records: Iterable[ScoredTransaction], *, top_n: int = 5) -> BatchSummary:
    items = list(records)
    accounts, categories = filter_options(items)
    return BatchSummary(
        total=len(items),
        status_counts=status_distribution(items),
        top_outliers=tuple(top_outliers_by_amount(items, limit=top_n)),
        category_rates=tuple(category_anomaly_rates(items)),
        anomaly_spikes=tuple(anomaly_spikes_by_date(items)),
        accounts=tuple(accounts),
        categories=tuple(categories),
    )


__all__ = [
    "BatchSummary",
    "CategoryAnomalyRate",
    "DateSpike",
    "Outlier",
    "anomaly_spikes_by_date",
    "category_anomaly_rates",
    "filter_options",
    "status_distribution",
    "summarize",
    "top_outliers_by_amount",
]

"""Per-category baselines computed once over a whole batch.

- :func:`build_category_stats`: mean and population standard deviation of
  amounts per category.
- :func:`build_vendor_frequencies`: category → vendor → occurrence count.

Both are pure and independent of each other; the scorer needs both complete
before it looks at the first record.
"""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from .models import Transaction

type VendorFrequencyTable = Mapping[str, Mapping[str, int]]
"""category -> vendor -> number of records in the batch."""


def population_std_dev(values: Sequence[float], mean: float) -> float:
    """``sqrt(mean((x - mean)^2))``; divisor is the count, not count - 1."""

    if not values:
        return 0.0
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance)


@dataclass(frozen=True, slots=True)
class CategoryStats:
    """Amount baseline for one category.

    A single-sample category has ``standard_deviation == 0``; the scorer
    skips the z-score check for it.
    """

    mean: float
    standard_deviation: float
    sample_amounts: tuple[float, ...]

    @property
    def count(self) -> int:
        return len(self.sample_amounts)

    @classmethod
    def from_amounts(cls, amounts: Sequence[float]) -> CategoryStats:
        samples = tuple(amounts)
        if not samples:
            return cls(mean=0.0, standard_deviation=0.0, sample_amounts=())
        mean = sum(samples) / len(samples)
        return cls(
            mean=mean,
            standard_deviation=population_std_dev(samples, mean),
            sample_amounts=samples,
        )

    def z_score(self, amount: float) -> float | None:
        """Absolute z-score of ``amount``, or ``None`` when std-dev is zero."""

        if self.standard_deviation <= 0:
            return None
        return abs(amount - self.mean) / self.standard_deviation


def build_category_stats(transactions: Iterable[Transaction]) -> dict[str, CategoryStats]:
    """Group amounts by category (input order) and compute each baseline."""

    amounts_by_category: dict[str, list[float]] = {}
    for tx in transactions:
        amounts_by_category.setdefault(tx.category, []).append(tx.amount)
    return {
        category: CategoryStats.from_amounts(amounts)
        for category, amounts in amounts_by_category.items()
    }


def build_vendor_frequencies(transactions: Iterable[Transaction]) -> dict[str, Counter[str]]:
    """Count every record per (category, vendor), the scored record included."""

    table: dict[str, Counter[str]] = {}
    for tx in transactions:
        table.setdefault(tx.category, Counter())[tx.vendor] += 1
    return table


__all__ = [
    "CategoryStats",
    "VendorFrequencyTable",
    "build_category_stats",
    "build_vendor_frequencies",
    "population_std_dev",
]

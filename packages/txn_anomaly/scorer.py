"""Anomaly scoring: combine weak per-record signals into a score and status.

For every transaction, in input order, the scorer adds the weight of each
signal that fires:

==========================  =====================================================
Signal                      Fires when
==========================  =====================================================
strong amount outlier       category std-dev > 0 and z > ``strong_z``
moderate amount outlier     category std-dev > 0 and ``moderate_z`` < z <= ``strong_z``
rare vendor                 vendor count in category <= ``rare_vendor_max_count``
                            and category size > ``rare_vendor_min_category_size``
weekend                     the date parses and falls on Saturday or Sunday
duplicate                   vendor/amount/category/date already seen in the batch
==========================  =====================================================

The total is clamped to ``[0, 1]`` and classified against
``anomalous_threshold`` / ``suspicious_threshold``. The reason is the
space-joined messages of the fired signals in the order above.

Nothing here raises for a single malformed record: a zero std-dev skips the
z-score, an unparseable date skips the weekend check.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import NamedTuple

from .baselines import (
    CategoryStats,
    VendorFrequencyTable,
    build_category_stats,
    build_vendor_frequencies,
)
from .coercion import try_parse_date
from .config import DEFAULT_CONFIG, ScoringConfig
from .duplicates import DuplicateTracker
from .logging_setup import get_logger
from .models import AnomalyStatus, ScoredTransaction, Transaction

_logger = get_logger("txn_anomaly.scorer")

NORMAL_REASON = "Normal transaction."
ELEVATED_REASON = "No specific anomaly flags, but score elevated."
WEEKEND_REASON = "Transaction occurred on a weekend."
DUPLICATE_REASON = (
    "Potential duplicate of an earlier transaction (same vendor, amount, category, date)."
)

# date.weekday(): Saturday=5, Sunday=6
_WEEKEND_DAYS = frozenset({5, 6})


class SignalHit(NamedTuple):
    """A fired signal: its name, the score it adds, and its reason sentence."""

    name: str
    weight: float
    message: str


def clamp_score(score: float) -> float:
    return min(1.0, max(0.0, score))


def classify(score: float, config: ScoringConfig = DEFAULT_CONFIG) -> AnomalyStatus:
    """Map a clamped score to a status; both thresholds are inclusive lower bounds."""

    if score >= config.anomalous_threshold:
        return AnomalyStatus.ANOMALOUS
    if score >= config.suspicious_threshold:
        return AnomalyStatus.SUSPICIOUS
    return AnomalyStatus.NORMAL


def build_reason(messages: Iterable[str], status: AnomalyStatus) -> str:
    joined = " ".join(messages)
    if joined:
        return joined
    return NORMAL_REASON if status is AnomalyStatus.NORMAL else ELEVATED_REASON


class AnomalyScorer:
    """Score a batch of transactions against baselines built from that batch.

    The scorer itself holds only configuration, so one instance can score any
    number of batches; all per-batch state (baselines and the duplicate
    tracker) is created per call or passed in by the caller.
    """

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self.config = config or DEFAULT_CONFIG

    # -- batch ------------------------------------------------------------

    def score_batch(
        self,
        transactions: Iterable[Transaction],
        *,
        tracker: DuplicateTracker | None = None,
    ) -> list[ScoredTransaction]:
        """Score every transaction in input order.

        ``tracker`` defaults to a fresh :class:`DuplicateTracker`; pass one in
        to inspect or share duplicate state explicitly.
        """

        txs = list(transactions)
        if not txs:
            return []

        category_stats = build_category_stats(txs)
        vendor_frequencies = build_vendor_frequencies(txs)
        if tracker is None:
            tracker = DuplicateTracker()

        return [
            self.score_transaction(
                tx,
                category_stats=category_stats,
                vendor_frequencies=vendor_frequencies,
                tracker=tracker,
            )
            for tx in txs
        ]

    # -- single record ----------------------------------------------------

    def score_transaction(
        self,
        tx: Transaction,
        *,
        category_stats: Mapping[str, CategoryStats],
        vendor_frequencies: VendorFrequencyTable,
        tracker: DuplicateTracker,
    ) -> ScoredTransaction:
        hits = self.evaluate_signals(
            tx,
            category_stats=category_stats,
            vendor_frequencies=vendor_frequencies,
            tracker=tracker,
        )

        raw = 0.0
        for hit in hits:
            raw += hit.weight
        score = clamp_score(raw)
        status = classify(score, self.config)

        return ScoredTransaction(
            transaction=tx,
            anomaly_score=score,
            anomaly_status=status,
            reason=build_reason((h.message for h in hits), status),
        )

    def evaluate_signals(
        self,
        tx: Transaction,
        *,
        category_stats: Mapping[str, CategoryStats],
        vendor_frequencies: VendorFrequencyTable,
        tracker: DuplicateTracker,
    ) -> list[SignalHit]:
        """Return the fired signals for ``tx`` in reporting order.

        Records ``tx`` in ``tracker`` as a side effect, so call it exactly once
        per record and in input order.
        """

        cfg = self.config
        hits: list[SignalHit] = []
        stats = category_stats.get(tx.category)

        amount_hit = self._amount_signal(tx, stats)
        if amount_hit is not None:
            hits.append(amount_hit)

        vendors = vendor_frequencies.get(tx.category)
        if vendors is not None:
            vendor_count = vendors.get(tx.vendor, 0)
            category_size = stats.count if stats is not None else 0
            if (
                vendor_count <= cfg.rare_vendor_max_count
                and category_size > cfg.rare_vendor_min_category_size
            ):
                hits.append(
                    SignalHit(
                        "rare_vendor",
                        cfg.rare_vendor_weight,
                        f"Rare vendor '{tx.vendor}' for category '{tx.category}'.",
                    )
                )

        tx_date = try_parse_date(tx.date)
        if tx_date is None:
            _logger.debug(
                "could not parse date for transaction %s: %r", tx.transaction_id, tx.date
            )
        elif tx_date.weekday() in _WEEKEND_DAYS:
            hits.append(SignalHit("weekend", cfg.weekend_weight, WEEKEND_REASON))

        if tracker.check_and_record(tx):
            hits.append(SignalHit("duplicate", cfg.duplicate_weight, DUPLICATE_REASON))

        return hits

    def _amount_signal(self, tx: Transaction, stats: CategoryStats | None) -> SignalHit | None:
        # Singleton categories (std-dev 0) never reach this bracket check.
        if stats is None:
            return None
        z = stats.z_score(tx.amount)
        if z is None:
            return None
        cfg = self.config
        if z > cfg.strong_z:
            return SignalHit(
                "strong_outlier",
                cfg.strong_outlier_weight,
                f"Amount significantly deviates from category average (Z-score: {z:.2f}).",
            )
        if z > cfg.moderate_z:
            return SignalHit(
                "moderate_outlier",
                cfg.moderate_outlier_weight,
                f"Amount deviates from category average (Z-score: {z:.2f}).",
            )
        return None


def score_transactions(
    transactions: Iterable[Transaction],
    *,
    config: ScoringConfig | None = None,
    tracker: DuplicateTracker | None = None,
) -> list[ScoredTransaction]:
    """Convenience wrapper around :meth:`AnomalyScorer.score_batch`."""

    return AnomalyScorer(config).score_batch(transactions, tracker=tracker)


__all__ = [
    "DUPLICATE_REASON",
    "ELEVATED_REASON",
    "NORMAL_REASON",
    "WEEKEND_REASON",
    "AnomalyScorer",
    "SignalHit",
    "build_reason",
    "clamp_score",
    "classify",
    "score_transactions",
]

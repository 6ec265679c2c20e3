"""Data models and type aliases for ``txn_anomaly``.

Records are frozen dataclasses with an explicit field order. Required columns
are typed attributes; any other header from the input travels in the ordered
``extra`` mapping so consumers never need duck-typed field access.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

# ---------------------------------------------------------------------------
# Column names
# ---------------------------------------------------------------------------

# Canonical order; also the order used when a record is flattened.
REQUIRED_COLUMNS: tuple[str, ...] = (
    "transaction_id",
    "date",
    "amount",
    "category",
    "account",
    "vendor",
)

type ExtraValue = str | int | float
"""A pass-through cell: number when the cell is a plain number, else text."""


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


class AnomalyStatus(str, Enum):
    """Tri-state classification assigned to every scored transaction."""

    NORMAL = "Normal"
    SUSPICIOUS = "Suspicious"
    ANOMALOUS = "Anomalous"

    def __str__(self) -> str:
        return self.value


# Filter-only sentinel meaning "any status"; never assigned to a record.
STATUS_ALL = "All"

FLAGGED_STATUSES: frozenset[AnomalyStatus] = frozenset(
    {AnomalyStatus.SUSPICIOUS, AnomalyStatus.ANOMALOUS}
)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


def _freeze(extra: Mapping[str, ExtraValue] | None) -> Mapping[str, ExtraValue]:
    return MappingProxyType(dict(extra or {}))


@dataclass(frozen=True, slots=True)
class Transaction:
    """A single input row.

    ``amount`` is already coerced (unparseable cells are ``0.0``); ``date`` is
    kept verbatim so scoring and filtering decide how to read it.
    ``transaction_id`` is expected to be unique but this is not enforced.
    """

    transaction_id: str
    date: str
    amount: float
    category: str
    account: str
    vendor: str
    extra: Mapping[str, ExtraValue] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra", _freeze(self.extra))

    def as_dict(self) -> dict[str, Any]:
        """Flatten to required fields (canonical order) followed by extras."""

        out: dict[str, Any] = {
            "transaction_id": self.transaction_id,
            "date": self.date,
            "amount": self.amount,
            "category": self.category,
            "account": self.account,
            "vendor": self.vendor,
        }
        for key, value in self.extra.items():
            out.setdefault(key, value)
        return out


@dataclass(frozen=True, slots=True)
class ScoredTransaction:
    """A transaction paired with its anomaly score, status and rationale.

    ``anomaly_score`` is clamped to ``[0, 1]``. ``reason`` is one or more
    space-joined sentences naming every signal that fired.
    """

    transaction: Transaction
    anomaly_score: float
    anomaly_status: AnomalyStatus
    reason: str

    @property
    def is_flagged(self) -> bool:
        return self.anomaly_status in FLAGGED_STATUSES

    def as_dict(self) -> dict[str, Any]:
        out = self.transaction.as_dict()
        out["anomaly_score"] = self.anomaly_score
        out["anomaly_status"] = self.anomaly_status.value
        out["reason"] = self.reason
        return out


type Transactions = Iterable[Transaction]
"""An iterable of parsed transactions in input order."""

type ScoredTransactions = list[ScoredTransaction]
"""Scoring output: one entry per input transaction, same order."""


__all__ = [
    "FLAGGED_STATUSES",
    "REQUIRED_COLUMNS",
    "STATUS_ALL",
    "AnomalyStatus",
    "ExtraValue",
    "ScoredTransaction",
    "ScoredTransactions",
    "Transaction",
    "Transactions",
]

"""Public pipeline entry points for ``txn_anomaly``.

``analyze_transactions`` is a pure batch transform: CSV text in, one
:class:`~txn_anomaly.models.ScoredTransaction` per non-blank data row out, in
input order. A broken header raises :class:`~txn_anomaly.errors.SchemaError`
before anything is scored; there is no partial output.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from os import PathLike
from pathlib import Path

from .config import ScoringConfig
from .errors import SchemaError
from .logging_setup import batch_context, get_logger
from .models import ScoredTransaction
from .parser import parse_transactions
from .scorer import AnomalyScorer

_logger = get_logger("txn_anomaly.api")


def _log_outcome(results: Sequence[ScoredTransaction]) -> None:
    counts = Counter(r.anomaly_status.value for r in results)
    _logger.info(
        "scored %d transactions (%s)",
        len(results),
        ", ".join(f"{k}={v}" for k, v in sorted(counts.items())) or "empty",
    )


def analyze_transactions(
    csv_text: str, *, config: ScoringConfig | None = None, label: str = "<text>"
) -> list[ScoredTransaction]:
    """Parse ``csv_text`` and score every row.

    ``label`` names the batch in log records (the file path for
    :func:`analyze_csv_file`).

    Raises
    ------
    SchemaError
        When a required column is missing from the header.
    """

    with batch_context(label):
        try:
            transactions = parse_transactions(csv_text)
        except SchemaError as e:
            _logger.error("rejecting batch: %s", e)
            raise

        results = AnomalyScorer(config).score_batch(transactions)
        _log_outcome(results)
    return results


def analyze_csv_file(
    csv_path: str | PathLike[str], *, config: ScoringConfig | None = None
) -> list[ScoredTransaction]:
    """Read a UTF-8 CSV file and run :func:`analyze_transactions` on it."""

    text = Path(csv_path).read_text(encoding="utf-8")
    _logger.debug("read %d characters from %s", len(text), csv_path)
    return analyze_transactions(text, config=config, label=str(csv_path))


__all__ = ["analyze_csv_file", "analyze_transactions"]

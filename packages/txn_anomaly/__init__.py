"""Public interface for the ``txn_anomaly`` package.

Re-exports the pipeline entry points, models, and the building blocks of the
scoring engine. There is no runtime logic here, only symbol re-exports.
"""

from .api import analyze_csv_file, analyze_transactions
from .baselines import CategoryStats, build_category_stats, build_vendor_frequencies
from .coercion import coerce_amount, try_parse_date
from .config import ScoringConfig
from .duplicates import DuplicateTracker, composite_key
from .errors import AnalysisError, NothingToExportError, SchemaError
from .export import export_flagged_csv, select_flagged, write_flagged_csv
from .filters import TransactionFilters, apply_filters
from .models import (
    REQUIRED_COLUMNS,
    STATUS_ALL,
    AnomalyStatus,
    ScoredTransaction,
    Transaction,
)
from .parser import load_transactions_from_csv, parse_transactions
from .scorer import AnomalyScorer, classify, score_transactions
from .summary import BatchSummary, summarize

__all__ = [
    # Pipeline
    "analyze_transactions",
    "analyze_csv_file",
    # Engine
    "parse_transactions",
    "load_transactions_from_csv",
    "build_category_stats",
    "build_vendor_frequencies",
    "CategoryStats",
    "DuplicateTracker",
    "composite_key",
    "AnomalyScorer",
    "score_transactions",
    "classify",
    "coerce_amount",
    "try_parse_date",
    "ScoringConfig",
    # Consumers
    "TransactionFilters",
    "apply_filters",
    "export_flagged_csv",
    "write_flagged_csv",
    "select_flagged",
    "summarize",
    "BatchSummary",
    # Models / errors
    "REQUIRED_COLUMNS",
    "STATUS_ALL",
    "AnomalyStatus",
    "Transaction",
    "ScoredTransaction",
    "AnalysisError",
    "SchemaError",
    "NothingToExportError",
]

"""Exception types raised by ``txn_anomaly``.

Malformed cells never raise (see :mod:`txn_anomaly.coercion`); only a broken
header or an empty export request surfaces as an exception.
"""

from __future__ import annotations

from collections.abc import Sequence

NOTHING_TO_EXPORT_MESSAGE = "No flagged transactions (Suspicious or Anomalous) to export."


class AnalysisError(Exception):
    """Base class for failures reported to callers of the package."""


class SchemaError(AnalysisError, ValueError):
    """The header row lacks one or more required columns.

    ``missing`` lists the required column names that were not found and
    ``found`` the header cells exactly as written (trimmed).
    """

    def __init__(self, missing: Sequence[str], found: Sequence[str]) -> None:
        self.missing: tuple[str, ...] = tuple(missing)
        self.found: tuple[str, ...] = tuple(found)
        super().__init__(
            f"CSV is missing required columns: {', '.join(self.missing)}. "
            f"Found headers: {', '.join(self.found)}"
        )


class NothingToExportError(AnalysisError):
    """No Suspicious or Anomalous transactions were available to export."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or NOTHING_TO_EXPORT_MESSAGE)


__all__ = [
    "NOTHING_TO_EXPORT_MESSAGE",
    "AnalysisError",
    "NothingToExportError",
    "SchemaError",
]

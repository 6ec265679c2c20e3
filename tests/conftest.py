"""Pytest configuration for test isolation.

Makes the workspace ``packages/`` directory importable when the project is not
installed, and keeps logging state hermetic: each test starts with the package
handler detached (``reset_logging``) and ``TXN_ANOMALY_LOG_LEVEL`` unset.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
if str(_PKG_DIR) not in sys.path:
    sys.path.insert(0, str(_PKG_DIR))

from txn_anomaly.logging_setup import reset_logging  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_logging(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("TXN_ANOMALY_LOG_LEVEL", raising=False)
    reset_logging()
    yield
    reset_logging()

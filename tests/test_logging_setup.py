import io
import logging

import pytest

from txn_anomaly import analyze_transactions
from txn_anomaly.logging_setup import (
    batch_context,
    configure_logging,
    get_logger,
    reset_logging,
    resolve_level,
)


def test_package_logger_is_silent_until_configured():
    handlers = logging.getLogger("txn_anomaly").handlers

    assert [type(h) for h in handlers] == [logging.NullHandler]


def test_get_logger_namespaces_short_names():
    assert get_logger("parser").name == "txn_anomaly.parser"
    assert get_logger("txn_anomaly.scorer").name == "txn_anomaly.scorer"
    assert get_logger("txn_anomaly").name == "txn_anomaly"


def test_configure_logging_installs_one_handler():
    first = configure_logging("DEBUG", stream=io.StringIO())
    second = configure_logging("ERROR", stream=io.StringIO())

    pkg = logging.getLogger("txn_anomaly")
    assert first is second
    assert first in pkg.handlers
    assert pkg.level == logging.DEBUG
    assert pkg.propagate is False


def test_reset_logging_allows_reconfiguration():
    configure_logging("DEBUG", stream=io.StringIO())
    reset_logging()
    handler = configure_logging("WARNING", stream=io.StringIO())

    pkg = logging.getLogger("txn_anomaly")
    assert pkg.level == logging.WARNING
    assert [h for h in pkg.handlers if not isinstance(h, logging.NullHandler)] == [handler]


def test_records_carry_the_batch_label():
    buf = io.StringIO()
    configure_logging("DEBUG", fmt="[%(batch)s] %(message)s", stream=buf)
    log = get_logger("test")

    log.info("outside")
    with batch_context("jan.csv"):
        log.info("inside")

    assert buf.getvalue() == "[-] outside\n[jan.csv] inside\n"


def test_degraded_amount_is_logged_at_debug_with_batch_and_row():
    buf = io.StringIO()
    configure_logging("DEBUG", fmt="%(levelname)s [%(batch)s] %(message)s", stream=buf)

    analyze_transactions(
        "transaction_id,date,amount,category,account,vendor\nT1,2024-01-02,n/a,C,A,V\n",
        label="feb.csv",
    )

    assert "DEBUG [feb.csv] data row 1: amount 'n/a' coerced to 0" in buf.getvalue()
    assert "INFO [feb.csv] scored 1 transactions (Normal=1)" in buf.getvalue()


@pytest.mark.parametrize(
    ("level", "expected"),
    [
        ("debug", logging.DEBUG),
        (" Warning ", logging.WARNING),
        ("15", 15),
        (logging.ERROR, logging.ERROR),
        ("LOUD", logging.INFO),
    ],
)
def test_resolve_level(level, expected):
    assert resolve_level(level) == expected


def test_resolve_level_falls_back_to_environment(monkeypatch):
    monkeypatch.setenv("TXN_ANOMALY_LOG_LEVEL", "warning")

    assert resolve_level() == logging.WARNING
    assert resolve_level("ERROR") == logging.ERROR


def test_resolve_level_defaults_to_info():
    assert resolve_level() == logging.INFO

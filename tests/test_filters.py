from datetime import date

import pytest
from pydantic import ValidationError

from txn_anomaly.filters import TransactionFilters, apply_filters
from txn_anomaly.models import AnomalyStatus, ScoredTransaction, Transaction


def _rec(tx_id, day, account, category, vendor, status=AnomalyStatus.NORMAL):
    return ScoredTransaction(
        transaction=Transaction(tx_id, day, 10.0, category, account, vendor),
        anomaly_score=0.0,
        anomaly_status=status,
        reason="",
    )


@pytest.fixture()
def records():
    return [
        _rec("TX-001", "2024-01-02", "Ops", "Travel", "Delta Air"),
        _rec("TX-002", "2024-01-10", "Ops", "Meals", "Cafe Uno", AnomalyStatus.SUSPICIOUS),
        _rec("TX-003", "2024-01-20", "Sales", "Travel", "Hertz", AnomalyStatus.ANOMALOUS),
        _rec("TX-004", "garbled", "Sales", "Meals", "Deli"),
    ]


def _ids(rs):
    return [r.transaction.transaction_id for r in rs]


def test_defaults_keep_everything_in_order(records):
    assert _ids(apply_filters(records, TransactionFilters())) == _ids(records)
    assert apply_filters(records) == records


def test_inclusive_date_range_drops_unparseable_dates(records):
    f = TransactionFilters(start_date=date(2024, 1, 2), end_date=date(2024, 1, 10))

    assert _ids(apply_filters(records, f)) == ["TX-001", "TX-002"]


def test_open_ended_date_bound(records):
    f = TransactionFilters(start_date=date(2024, 1, 11))

    assert _ids(apply_filters(records, f)) == ["TX-003"]


def test_account_category_and_status_are_exact(records):
    assert _ids(apply_filters(records, TransactionFilters(account="Sales"))) == [
        "TX-003",
        "TX-004",
    ]
    assert _ids(apply_filters(records, TransactionFilters(category="Meals"))) == [
        "TX-002",
        "TX-004",
    ]
    assert _ids(apply_filters(records, TransactionFilters(account="sales"))) == []
    assert _ids(apply_filters(records, TransactionFilters(status="Anomalous"))) == ["TX-003"]


def test_search_matches_vendor_or_id_case_insensitively(records):
    assert _ids(apply_filters(records, TransactionFilters(search_term="DEL"))) == [
        "TX-001",
        "TX-004",
    ]
    assert _ids(apply_filters(records, TransactionFilters(search_term="tx-002"))) == ["TX-002"]


def test_criteria_combine_with_and(records):
    f = TransactionFilters(account="Ops", category="Travel", search_term="delta")

    assert _ids(apply_filters(records, f)) == ["TX-001"]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"start_date": date(2024, 2, 1), "end_date": date(2024, 1, 1)},
        {"status": "Weird"},
        {"colour": "red"},
    ],
)
def test_invalid_filters_are_rejected(kwargs):
    with pytest.raises(ValidationError):
        TransactionFilters(**kwargs)

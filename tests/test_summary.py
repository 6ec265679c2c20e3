import pytest

from txn_anomaly.models import AnomalyStatus, ScoredTransaction, Transaction
from txn_anomaly.summary import (
    CategoryAnomalyRate,
    DateSpike,
    Outlier,
    anomaly_spikes_by_date,
    category_anomaly_rates,
    status_distribution,
    summarize,
    top_outliers_by_amount,
)

N, S, A = AnomalyStatus.NORMAL, AnomalyStatus.SUSPICIOUS, AnomalyStatus.ANOMALOUS


def _rec(tx_id, amount, category, status, account="Acc", vendor="V", day="2024-01-02"):
    return ScoredTransaction(
        transaction=Transaction(tx_id, day, amount, category, account, vendor),
        anomaly_score=0.0,
        anomaly_status=status,
        reason="",
    )


@pytest.fixture()
def records():
    return [
        _rec("T1", 50.0, "Meals", N, account="Ops"),
        _rec("T2", 900.0, "Travel", A, vendor="Air"),
        _rec("T3", 30.0, "Meals", S, vendor="Deli"),
        _rec("T4", 5000.0, "Travel", N, account="Ops"),
        _rec("T5", 400.0, "Travel", S, vendor="Rail"),
        _rec("T6", 20.0, "Office", N),
    ]


def test_status_distribution_counts_present_statuses(records):
    assert status_distribution(records) == {N: 3, A: 1, S: 2}
    assert status_distribution([]) == {}


def test_top_outliers_only_consider_flagged_records(records):
    assert top_outliers_by_amount(records, limit=2) == [
        Outlier("T2 (Air)", 900.0),
        Outlier("T5 (Rail)", 400.0),
    ]
    assert len(top_outliers_by_amount(records)) == 3


def test_category_rates_sorted_highest_first(records):
    rates = category_anomaly_rates(records)

    assert [(r.category, r.total, r.anomalies) for r in rates] == [
        ("Travel", 3, 2),
        ("Meals", 2, 1),
        ("Office", 1, 0),
    ]
    assert rates[0].rate == pytest.approx(200 / 3)
    assert CategoryAnomalyRate("Empty", 0, 0).rate == 0.0


def test_summarize(records):
    summary = summarize(records, top_n=1)

    assert summary.total == 6
    assert summary.flagged == 3
    assert summary.top_outliers == (Outlier("T2 (Air)", 900.0),)
    assert summary.accounts == ("Acc", "Ops")
    assert summary.categories == ("Meals", "Office", "Travel")


def test_summarize_empty_batch():
    summary = summarize([])

    assert summary.total == 0
    assert summary.flagged == 0
    assert summary.top_outliers == ()
    assert summary.category_rates == ()
    assert summary.anomaly_spikes == ()


def test_anomaly_spikes_count_flagged_per_day_oldest_first():
    records = [
        _rec("T1", 1.0, "C", A, day="2024-03-10T09:00:00"),
        _rec("T2", 1.0, "C", S, day="2024-01-05"),
        _rec("T3", 1.0, "C", N, day="2023-12-31"),
        _rec("T4", 1.0, "C", S, day="2024-03-10"),
        _rec("T5", 1.0, "C", A, day="someday"),
        _rec("T6", 1.0, "C", S, day="2024-02-29T23:59:00Z"),
    ]

    assert anomaly_spikes_by_date(records) == [
        DateSpike("2024-01-05", 1),
        DateSpike("2024-02-29", 1),
        DateSpike("2024-03-10", 2),
        DateSpike("someday", 1),
    ]


def test_summarize_includes_anomaly_spikes(records):
    assert summarize(records).anomaly_spikes == (DateSpike("2024-01-02", 3),)

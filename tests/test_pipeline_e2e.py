"""End-to-end: CSV text through parsing, baselines and scoring."""

import logging
from datetime import date, timedelta

import pytest

from txn_anomaly import AnomalyStatus, SchemaError, analyze_csv_file, analyze_transactions
from txn_anomaly.scorer import NORMAL_REASON, WEEKEND_REASON

HEADER = "transaction_id,date,amount,category,account,vendor"


def _travel_csv() -> str:
    """Thirty unremarkable weekday Travel rows, then a weekend pair of 5000s.

    The background rows cycle amounts 100..150 and vendors A/C/D so no vendor
    is rare and no row repeats another.
    """

    lines = [HEADER]
    amounts = [100, 110, 120, 130, 140, 150]
    vendors = ["VendorA", "VendorC", "VendorD"]
    d = date(2024, 1, 8)
    i = 0
    while i < 30:
        if d.weekday() < 5:
            lines.append(
                f"B{i},{d.isoformat()},{amounts[i % 6]},Travel,Acc1,{vendors[i % 3]}"
            )
            i += 1
        d += timedelta(days=1)
    lines += [
        "T1,2024-01-06,100,Travel,Acc1,VendorA",
        "T2,2024-01-07,5000,Travel,Acc1,VendorB",
        "T3,2024-01-07,5000,Travel,Acc1,VendorB",
    ]
    return "\n".join(lines) + "\n"


def test_weekend_outlier_pair_escalates_to_anomalous():
    results = analyze_transactions(_travel_csv())
    by_id = {r.transaction.transaction_id: r for r in results}

    t1, t2, t3 = by_id["T1"], by_id["T2"], by_id["T3"]

    assert t1.anomaly_score == pytest.approx(0.1)
    assert t1.anomaly_status is AnomalyStatus.NORMAL
    assert t1.reason == WEEKEND_REASON

    assert t2.anomaly_score == pytest.approx(0.5)
    assert t2.anomaly_status is AnomalyStatus.SUSPICIOUS
    assert t2.reason == (
        "Amount significantly deviates from category average (Z-score: 3.94). "
        + WEEKEND_REASON
    )

    assert t3.anomaly_score == pytest.approx(0.9)
    assert t3.anomaly_status is AnomalyStatus.ANOMALOUS
    assert t3.reason.startswith(t2.reason + " Potential duplicate")

    background = [r for r in results if r.transaction.transaction_id.startswith("B")]
    assert len(background) == 30
    assert all(r.anomaly_score == 0.0 and r.reason == NORMAL_REASON for r in background)


def test_output_matches_input_rows_one_to_one():
    text = _travel_csv()
    results = analyze_transactions(text)

    ids = [line.split(",", 1)[0] for line in text.splitlines()[1:]]
    assert [r.transaction.transaction_id for r in results] == ids


def test_repeated_runs_are_independent():
    text = _travel_csv()

    first = analyze_transactions(text)
    second = analyze_transactions(text)

    assert [r.anomaly_score for r in first] == [r.anomaly_score for r in second]


def test_scored_record_flattens_with_result_fields():
    text = f"{HEADER},memo\nT1,2024-01-06,12.5,Meals,Acc1,Cafe,lunch\n"

    [r] = analyze_transactions(text)

    assert r.as_dict() == {
        "transaction_id": "T1",
        "date": "2024-01-06",
        "amount": 12.5,
        "category": "Meals",
        "account": "Acc1",
        "vendor": "Cafe",
        "memo": "lunch",
        "anomaly_score": pytest.approx(0.1),
        "anomaly_status": "Normal",
        "reason": WEEKEND_REASON,
    }


def test_schema_error_is_logged_and_raised(caplog):
    caplog.set_level(logging.ERROR, logger="txn_anomaly")

    with pytest.raises(SchemaError):
        analyze_transactions("id,amount\n1,2\n")

    assert any("missing required columns" in rec.getMessage() for rec in caplog.records)


def test_empty_input_scores_nothing():
    assert analyze_transactions("") == []
    assert analyze_transactions(HEADER + "\n") == []


def test_analyze_csv_file(tmp_path):
    p = tmp_path / "batch.csv"
    p.write_text(_travel_csv(), encoding="utf-8")

    results = analyze_csv_file(p)

    assert len(results) == 33
    assert sum(r.is_flagged for r in results) == 2

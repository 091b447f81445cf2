from turnaround_metrics import (
    BELOW_TARGET,
    ERROR,
    INVALID,
    MET_TARGET,
    NOT_AVAILABLE,
    compute_metrics,
    format_datetime,
    parse_local_datetime,
    round2,
    round_half_up,
)


def _record(received: str, finished: str) -> dict:
    return {
        "itemDescription": "Valve body",
        "dateTimeReceivedQC": received,
        "dateTimeQCStart": "",
        "dateTimeQCFinished": finished,
    }


def test_compute_metrics_ten_hour_turnaround_meets_target() -> None:
    out = compute_metrics(_record("2024-01-10T08:00", "2024-01-10T18:00"))

    assert out["turnaround_time_hours"] == 10.0
    assert out["target_productivity_hours"] == 9.8
    assert out["rounded_target_productivity"] == 10
    assert out["actual_efficiency"] == 100.0
    assert out["efficiency_result"] == MET_TARGET


def test_compute_metrics_finish_before_receipt_is_invalid() -> None:
    out = compute_metrics(_record("2024-01-10T18:00", "2024-01-10T08:00"))

    assert out["turnaround_time_hours"] == INVALID
    assert "before QC Receive Time" in out["turnaround_time_explanation"]
    assert out["target_productivity_hours"] == NOT_AVAILABLE
    assert out["actual_efficiency"] == NOT_AVAILABLE
    assert out["efficiency_result"] == NOT_AVAILABLE


def test_compute_metrics_zero_turnaround_reports_error_efficiency() -> None:
    out = compute_metrics(_record("2024-01-10T08:00", "2024-01-10T08:00"))

    assert out["turnaround_time_hours"] == 0.0
    assert out["rounded_target_productivity"] == 0
    assert out["actual_efficiency"] == ERROR
    assert "Cannot divide by zero" in out["actual_efficiency_explanation"]
    assert out["efficiency_result"] == NOT_AVAILABLE


def test_compute_metrics_missing_timestamp_is_not_available() -> None:
    out = compute_metrics(_record("2024-01-10T08:00", ""))

    assert out["turnaround_time_hours"] == NOT_AVAILABLE
    assert "Requires both" in out["turnaround_time_explanation"]
    assert out["rounded_target_productivity"] == NOT_AVAILABLE
    assert out["efficiency_result"] == NOT_AVAILABLE


def test_compute_metrics_rounds_target_before_dividing() -> None:
    # 26h -> target 25.48 -> rounded 25 -> 25 / 26
    out = compute_metrics(_record("2024-01-10T08:00", "2024-01-11T10:00"))

    assert out["turnaround_time_hours"] == 26.0
    assert out["target_productivity_hours"] == 25.48
    assert out["rounded_target_productivity"] == 25
    assert out["actual_efficiency"] == 96.15
    assert out["efficiency_result"] == BELOW_TARGET


def test_compute_metrics_fractional_hours() -> None:
    out = compute_metrics(_record("2024-01-10T08:00", "2024-01-10T09:30"))

    assert out["turnaround_time_hours"] == 1.5
    assert out["rounded_target_productivity"] == 1
    assert out["actual_efficiency"] == 66.67
    assert out["efficiency_result"] == BELOW_TARGET


def test_compute_metrics_is_idempotent() -> None:
    record = _record("2024-02-01T07:15", "2024-02-03T16:45")
    assert compute_metrics(record) == compute_metrics(record)
    assert record["dateTimeQCFinished"] == "2024-02-03T16:45"


def test_compute_metrics_explanations_quote_operands() -> None:
    out = compute_metrics(_record("2024-01-10T08:00", "2024-01-10T18:00"))

    assert "Jan 10, 2024, 06:00:00 PM" in out["turnaround_time_explanation"]
    assert "Jan 10, 2024, 08:00:00 AM" in out["turnaround_time_explanation"]
    assert "10.00 hours" in out["target_productivity_explanation"]
    assert "(10)" in out["actual_efficiency_explanation"]


def test_parse_local_datetime_accepts_seconds_and_rejects_noise() -> None:
    assert parse_local_datetime("2024-01-10T08:00:30").second == 30
    assert parse_local_datetime("bad-date") is None
    assert parse_local_datetime(None) is None
    assert format_datetime("") == ""


def test_rounding_is_half_up() -> None:
    assert round2(0.125) == 0.13
    assert round_half_up(2.5) == 3
    assert round_half_up(9.8) == 10
    assert round_half_up(0.49) == 0

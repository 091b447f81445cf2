import datetime

from parsing import (
    RECORD_FIELDS,
    coerce_assembly,
    coerce_local_datetime,
    coerce_quantity,
    combine_date_time,
    normalize_record_fields,
    split_local_datetime,
)


def test_normalize_record_fields_coerces_each_field() -> None:
    out = normalize_record_fields(
        {
            "itemDescription": "  Valve body ",
            "totalQty": "12",
            "tcnNumber": " TCN-9 ",
            "totalQtyInspected": 7.0,
            "dateTimeReceivedQC": "2024-01-10T08:00",
            "dateTimeQCStart": "",
            "dateTimeQCFinished": "2024-01-10 18:30:00",
            "assemblyRequired": "yes",
            "unexpected": "dropped",
        }
    )

    assert list(out) == list(RECORD_FIELDS)
    assert out["itemDescription"] == "Valve body"
    assert out["totalQty"] == 12
    assert out["tcnNumber"] == "TCN-9"
    assert out["totalQtyInspected"] == 7
    assert out["dateTimeReceivedQC"] == "2024-01-10T08:00"
    assert out["dateTimeQCStart"] == ""
    assert out["dateTimeQCFinished"] == "2024-01-10T18:30"
    assert out["assemblyRequired"] == "Yes"


def test_normalize_record_fields_allows_inspected_above_total() -> None:
    out = normalize_record_fields({"totalQty": 2, "totalQtyInspected": 5})
    assert out["totalQty"] == 2
    assert out["totalQtyInspected"] == 5


def test_coerce_quantity_handles_blank_and_negative() -> None:
    assert coerce_quantity("") == 0
    assert coerce_quantity(None) == 0
    assert coerce_quantity("abc") == 0
    assert coerce_quantity(-4) == 0
    assert coerce_quantity("3.9") == 3


def test_coerce_local_datetime_keeps_seconds_only_when_present() -> None:
    assert coerce_local_datetime("2024-01-10T08:00:45") == "2024-01-10T08:00:45"
    assert coerce_local_datetime(datetime.datetime(2024, 1, 10, 8, 5)) == "2024-01-10T08:05"
    assert coerce_local_datetime("31/01/2024") == ""


def test_coerce_assembly_defaults_to_no() -> None:
    assert coerce_assembly("Yes") == "Yes"
    assert coerce_assembly(True) == "Yes"
    assert coerce_assembly("") == "No"
    assert coerce_assembly("maybe") == "No"


def test_combine_and_split_date_time() -> None:
    joined = combine_date_time(datetime.date(2024, 3, 1), datetime.time(14, 30))
    assert joined == "2024-03-01T14:30"
    assert combine_date_time(datetime.date(2024, 3, 1), None) == "2024-03-01T00:00"
    assert combine_date_time(None, datetime.time(14, 30)) == ""
    assert split_local_datetime(joined) == (datetime.date(2024, 3, 1), datetime.time(14, 30))
    assert split_local_datetime("") == (None, None)

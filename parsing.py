"""Form input coercion for inspection records."""

import datetime
from typing import Any

from turnaround_metrics import parse_local_datetime

RECORD_FIELDS = (
    "itemDescription",
    "totalQty",
    "tcnNumber",
    "totalQtyInspected",
    "dateTimeReceivedQC",
    "dateTimeQCStart",
    "dateTimeQCFinished",
    "assemblyRequired",
)

DATETIME_FIELDS = ("dateTimeReceivedQC", "dateTimeQCStart", "dateTimeQCFinished")
QUANTITY_FIELDS = ("totalQty", "totalQtyInspected")

ASSEMBLY_OPTIONS = ("Yes", "No")


def coerce_quantity(value: Any) -> int:
    """Integer quantity >= 0; blank or unreadable input becomes 0."""
    if isinstance(value, bool):
        return int(value)
    try:
        number = int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(number, 0)


def coerce_local_datetime(value: Any) -> str:
    """Normalize to "YYYY-MM-DDTHH:MM" (seconds kept when present); "" when missing or invalid."""
    if isinstance(value, datetime.datetime):
        parsed = value.replace(tzinfo=None)
    else:
        parsed = parse_local_datetime(value)
    if parsed is None:
        return ""
    if parsed.second:
        return parsed.strftime("%Y-%m-%dT%H:%M:%S")
    return parsed.strftime("%Y-%m-%dT%H:%M")


def coerce_assembly(value: Any) -> str:
    if isinstance(value, bool):
        return "Yes" if value else "No"
    text = str(value or "").strip().lower()
    if text in {"yes", "y", "true", "1"}:
        return "Yes"
    return "No"


def combine_date_time(date_value: datetime.date | None, time_value: datetime.time | None) -> str:
    """Join Streamlit date and time widget values into a local date-time string."""
    if date_value is None:
        return ""
    moment = datetime.datetime.combine(date_value, time_value or datetime.time(0, 0))
    return coerce_local_datetime(moment)


def split_local_datetime(value: Any) -> tuple[datetime.date | None, datetime.time | None]:
    parsed = parse_local_datetime(value)
    if parsed is None:
        return None, None
    return parsed.date(), parsed.time()


def normalize_record_fields(raw: dict[str, Any]) -> dict[str, Any]:
    """Coerce a submitted form into the stored record fields.

    Only per-field coercion is applied; relationships between fields (for example inspected
    quantity against total quantity) are not checked.
    """
    fields: dict[str, Any] = {
        "itemDescription": str(raw.get("itemDescription") or "").strip(),
        "tcnNumber": str(raw.get("tcnNumber") or "").strip(),
        "assemblyRequired": coerce_assembly(raw.get("assemblyRequired")),
    }
    for name in QUANTITY_FIELDS:
        fields[name] = coerce_quantity(raw.get(name))
    for name in DATETIME_FIELDS:
        fields[name] = coerce_local_datetime(raw.get(name))
    return {name: fields[name] for name in RECORD_FIELDS}

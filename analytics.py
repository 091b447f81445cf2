"""Filtering, aggregation and view shaping for the turnaround dashboard."""

from __future__ import annotations

from typing import Any, Callable

import pandas as pd

from turnaround_metrics import (
    BELOW_TARGET,
    MET_TARGET,
    NOT_AVAILABLE,
    RECEIVED_FIELD,
    compute_metrics,
    format_datetime,
    is_number,
    round2,
)

ALL_MONTHS = "all"

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

TABLE_COLUMNS = [
    "ITEM DESCRIPTION",
    "TOTAL QTY.",
    "TCN #",
    "TOTAL QTY. INSPECTED",
    "DATE & TIME RECEIVED FOR QC",
    "DATE & TIME QC START",
    "DATE & TIME QC FINISHED",
    "ASSEMBLY REQUIRED",
    "TARGET EFFICIENCY (98%)",
    "ACTUAL EFFICIENCY",
    "EFFICIENCY RESULT",
    "TURNAROUND TIME (HOURS)",
]

NO_MATCHES_MESSAGE = "No items found matching the current filters."
NO_CHART_DATA_MESSAGE = "No turnaround data available for the chart."

CHART_SERIES_LABEL = "Turnaround Time (Hours)"
CHART_COLORS = {
    MET_TARGET: "#4bc0c0",
    BELOW_TARGET: "#ff6384",
}
CHART_DEFAULT_COLOR = "#c8c8c8"


def _creation_time(record: dict[str, Any]) -> pd.Timestamp:
    return pd.to_datetime(record.get("timestamp"), utc=True, errors="coerce")


def sort_by_creation(records: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Stable chronological sort on creation timestamp; undated records go last."""
    keyed = [(_creation_time(record), record) for record in records]
    dated = [item for item in keyed if pd.notna(item[0])]
    undated = [record for stamp, record in keyed if pd.isna(stamp)]
    dated.sort(key=lambda item: item[0])
    return [record for _, record in dated] + undated


def month_buckets(records: list[dict[str, Any]]) -> list[str]:
    """Distinct YYYY-MM buckets of received timestamps, ascending."""
    months = {
        str(record.get(RECEIVED_FIELD))[:7]
        for record in records
        if str(record.get(RECEIVED_FIELD) or "").strip()
    }
    return sorted(months)


def month_label(year_month: str) -> str:
    if year_month == ALL_MONTHS:
        return "All Months"
    try:
        year, month = year_month.split("-")
        return f"{MONTH_NAMES[int(month) - 1]} {year}"
    except (ValueError, IndexError):
        return year_month


def matches_month(record: dict[str, Any], month_filter: str) -> bool:
    if not month_filter or month_filter == ALL_MONTHS:
        return True
    received = str(record.get(RECEIVED_FIELD) or "")
    return bool(received) and received.startswith(month_filter)


def matches_search(record: dict[str, Any], search_text: str) -> bool:
    query = str(search_text or "").lower()
    if not query:
        return True
    description = str(record.get("itemDescription") or "")
    return query in description.lower()


def filter_records(
    records: list[dict[str, Any]], month_filter: str = ALL_MONTHS, search_text: str = ""
) -> list[dict[str, Any]]:
    """Keep records matching both the month bucket and the description search."""
    return [
        record
        for record in records
        if matches_month(record, month_filter) and matches_search(record, search_text)
    ]


def attach_metrics(records: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [{**record, **compute_metrics(record)} for record in records]


def summarize(visible: list[dict[str, Any]]) -> dict[str, Any]:
    """Summary panel values; means skip sentinel values and fall back to "N/A"."""
    if not visible:
        return {
            "total_records": 0,
            "avg_turnaround_hours": NOT_AVAILABLE,
            "avg_actual_efficiency": NOT_AVAILABLE,
            "met_count": 0,
            "below_count": 0,
        }

    frame = pd.DataFrame(visible)
    turnaround = pd.to_numeric(frame["turnaround_time_hours"], errors="coerce").dropna()
    efficiency = pd.to_numeric(frame["actual_efficiency"], errors="coerce").dropna()
    results = frame["efficiency_result"]

    return {
        "total_records": int(len(frame)),
        "avg_turnaround_hours": round2(float(turnaround.mean())) if len(turnaround) else NOT_AVAILABLE,
        "avg_actual_efficiency": round2(float(efficiency.mean())) if len(efficiency) else NOT_AVAILABLE,
        "met_count": int((results == MET_TARGET).sum()),
        "below_count": int((results == BELOW_TARGET).sum()),
    }


def select_and_summarize(
    all_records: list[dict[str, Any]],
    month_filter: str = ALL_MONTHS,
    search_text: str = "",
) -> dict[str, Any]:
    """Sort, filter and enrich the stored collection and aggregate the summary panel.

    ``months`` is derived from the whole collection so the month selector keeps every option
    regardless of the active filters.
    """
    ordered = sort_by_creation(all_records)
    visible = attach_metrics(filter_records(ordered, month_filter, search_text))
    return {
        "visible": visible,
        "summary": summarize(visible),
        "months": month_buckets(ordered),
        "has_rows": bool(visible),
    }


def _fmt_decimal(value: Any) -> str:
    if is_number(value):
        return f"{value:.2f}"
    return str(value)


def _fmt_percent(value: Any) -> str:
    if is_number(value):
        return f"{value:.2f}%"
    return str(value)


def table_row(record: dict[str, Any]) -> list[Any]:
    """Cells of one display row in ``TABLE_COLUMNS`` order."""
    return [
        record.get("itemDescription", ""),
        record.get("totalQty", ""),
        record.get("tcnNumber", ""),
        record.get("totalQtyInspected", ""),
        format_datetime(record.get("dateTimeReceivedQC")),
        format_datetime(record.get("dateTimeQCStart")),
        format_datetime(record.get("dateTimeQCFinished")),
        record.get("assemblyRequired", ""),
        _fmt_decimal(record.get("target_productivity_hours", NOT_AVAILABLE)),
        _fmt_percent(record.get("actual_efficiency", NOT_AVAILABLE)),
        record.get("efficiency_result", NOT_AVAILABLE),
        _fmt_decimal(record.get("turnaround_time_hours", NOT_AVAILABLE)),
    ]


def records_table(visible: list[dict[str, Any]]) -> pd.DataFrame:
    """Display table for the visible records, indexed by record id."""
    rows = [table_row(record) for record in visible]
    table = pd.DataFrame(rows, columns=TABLE_COLUMNS)
    table.index = pd.Index([record.get("id") for record in visible], name="id")
    return table


def explanation_table(visible: list[dict[str, Any]]) -> pd.DataFrame:
    """How each derived value was computed, one row per visible record."""
    rows = [
        {
            "ITEM DESCRIPTION": record.get("itemDescription", ""),
            "TURNAROUND TIME": record.get("turnaround_time_explanation", ""),
            "TARGET EFFICIENCY (98%)": record.get("target_productivity_explanation", ""),
            "ACTUAL EFFICIENCY": record.get("actual_efficiency_explanation", ""),
        }
        for record in visible
    ]
    return pd.DataFrame(
        rows,
        columns=["ITEM DESCRIPTION", "TURNAROUND TIME", "TARGET EFFICIENCY (98%)", "ACTUAL EFFICIENCY"],
    )


def chart_label(description: Any, position: int) -> str:
    text = str(description or "")
    if not text:
        return f"Item #{position}"
    short = text[:20] + ("..." if len(text) > 20 else "")
    return f"{short} (#{position})"


def chart_color(result: str) -> str:
    return CHART_COLORS.get(result, CHART_DEFAULT_COLOR)


def _fmt_axis_value(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def format_chart_tooltip(index: int, record: dict[str, Any]) -> str:
    """Hover text for one bar: turnaround, efficiency and target result."""
    hours = record.get("turnaround_time_hours")
    label = f"{CHART_SERIES_LABEL}: "
    if is_number(hours):
        label += f"{_fmt_axis_value(hours)} hours"
    efficiency = record.get("actual_efficiency", NOT_AVAILABLE)
    efficiency_text = f"{efficiency:.2f}%" if is_number(efficiency) else str(efficiency)
    label += f" | Actual Efficiency: {efficiency_text} | Result: {record.get('efficiency_result', NOT_AVAILABLE)}"
    return label


def chart_series(
    visible: list[dict[str, Any]],
    tooltip: Callable[[int, dict[str, Any]], str] = format_chart_tooltip,
) -> pd.DataFrame:
    """Bar chart dataset: one bar per visible record with a numeric turnaround time."""
    charted = [record for record in visible if is_number(record.get("turnaround_time_hours"))]
    rows = [
        {
            "Label": chart_label(record.get("itemDescription"), position),
            "TurnaroundHours": float(record["turnaround_time_hours"]),
            "Color": chart_color(record.get("efficiency_result", NOT_AVAILABLE)),
            "Tooltip": tooltip(position - 1, record),
        }
        for position, record in enumerate(charted, start=1)
    ]
    return pd.DataFrame(rows, columns=["Label", "TurnaroundHours", "Color", "Tooltip"])

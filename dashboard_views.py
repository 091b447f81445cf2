"""Streamlit renderers for the turnaround tracker page."""

from __future__ import annotations

from typing import Any, Callable

import pandas as pd
import streamlit as st

from analytics import (
    NO_CHART_DATA_MESSAGE,
    NO_MATCHES_MESSAGE,
    chart_series,
    explanation_table,
    records_table,
)
from metric_guide import METRIC_GUIDE
from parsing import ASSEMBLY_OPTIONS, combine_date_time, split_local_datetime
from report_export import (
    REPORT_DOWNLOADED_MESSAGE,
    REPORT_FILE_NAME,
    XLSX_MIME,
    EmptyExportError,
    build_excel_report,
)
from turnaround_metrics import is_number


def _fmt_hours(value: Any) -> str:
    if is_number(value):
        return f"{value:.2f} hours"
    return str(value)


def _fmt_pct(value: Any) -> str:
    if is_number(value):
        return f"{value:.2f}%"
    return str(value)


def _datetime_inputs(label: str, value: str, key: str) -> str:
    date_value, time_value = split_local_datetime(value)
    left, right = st.columns(2)
    picked_date = left.date_input(label, value=date_value, key=f"{key}_date", format="YYYY-MM-DD")
    picked_time = right.time_input(f"{label} (time)", value=time_value, key=f"{key}_time", step=60)
    return combine_date_time(picked_date, picked_time)


def render_record_form(editing: dict[str, Any] | None) -> tuple[str, dict[str, Any]]:
    """Add/edit form. Returns ("submit" | "cancel" | "", raw field values)."""
    editing = editing or {}
    form_key = f"record_form_{editing.get('id', 'new')}"
    st.subheader("Update item" if editing else "Add item")

    with st.form(key=form_key, clear_on_submit=not editing):
        description = st.text_input("Item description", value=str(editing.get("itemDescription", "")))
        q1, q2, q3 = st.columns(3)
        total_qty = q1.number_input(
            "Total qty.", min_value=0, step=1, value=int(editing.get("totalQty", 0) or 0)
        )
        tcn_number = q2.text_input("TCN #", value=str(editing.get("tcnNumber", "")))
        inspected_qty = q3.number_input(
            "Total qty. inspected",
            min_value=0,
            step=1,
            value=int(editing.get("totalQtyInspected", 0) or 0),
        )
        received = _datetime_inputs(
            "Date & time received for QC", editing.get("dateTimeReceivedQC", ""), f"{form_key}_received"
        )
        started = _datetime_inputs(
            "Date & time QC start", editing.get("dateTimeQCStart", ""), f"{form_key}_start"
        )
        finished = _datetime_inputs(
            "Date & time QC finished", editing.get("dateTimeQCFinished", ""), f"{form_key}_finished"
        )
        assembly_value = editing.get("assemblyRequired", "No")
        assembly = st.radio(
            "Assembly required",
            ASSEMBLY_OPTIONS,
            index=ASSEMBLY_OPTIONS.index(assembly_value) if assembly_value in ASSEMBLY_OPTIONS else 1,
            horizontal=True,
        )

        b1, b2 = st.columns(2)
        submitted = b1.form_submit_button("Update Item" if editing else "Add Item")
        cancelled = b2.form_submit_button("Cancel Edit", disabled=not editing)

    raw = {
        "itemDescription": description,
        "totalQty": total_qty,
        "tcnNumber": tcn_number,
        "totalQtyInspected": inspected_qty,
        "dateTimeReceivedQC": received,
        "dateTimeQCStart": started,
        "dateTimeQCFinished": finished,
        "assemblyRequired": assembly,
    }
    if cancelled:
        return "cancel", raw
    if submitted:
        return "submit", raw
    return "", raw


def render_summary(summary: dict[str, Any]) -> None:
    st.subheader("QA Performance Overview")
    cols = st.columns(5)
    cols[0].metric("Total records", f"{int(summary['total_records']):,}")
    cols[1].metric("Avg turnaround time", _fmt_hours(summary["avg_turnaround_hours"]))
    cols[2].metric("Avg actual efficiency", _fmt_pct(summary["avg_actual_efficiency"]))
    cols[3].metric("Met target", f"{int(summary['met_count']):,}")
    cols[4].metric("Below target", f"{int(summary['below_count']):,}")


def render_records_table(visible: list[dict[str, Any]], has_rows: bool) -> None:
    st.subheader("Turnaround items")
    if not has_rows:
        st.info(NO_MATCHES_MESSAGE)
        return

    st.dataframe(records_table(visible), use_container_width=True)
    with st.expander("How each value was computed", expanded=False):
        st.dataframe(explanation_table(visible), use_container_width=True, hide_index=True)


def render_row_actions(visible: list[dict[str, Any]]) -> tuple[str, Any]:
    """Edit/Delete controls for one selected row. Returns (action, record id)."""
    if not visible:
        return "", None

    options = {
        record.get("id"): f"{record.get('itemDescription') or 'Item'} (TCN {record.get('tcnNumber') or '-'})"
        for record in visible
    }
    pick_col, edit_col, delete_col = st.columns([4, 1, 1])
    selected = pick_col.selectbox(
        "Actions",
        list(options.keys()),
        format_func=lambda record_id: options[record_id],
        key="row_action_target",
    )
    if edit_col.button("Edit", use_container_width=True):
        return "edit", selected
    if delete_col.button("Delete", type="primary", use_container_width=True):
        return "delete", selected
    return "", selected


def render_chart(visible: list[dict[str, Any]]) -> None:
    st.subheader("Turnaround Time for Each Item")
    series = chart_series(visible)
    if series.empty:
        st.info(NO_CHART_DATA_MESSAGE)
        return

    st.bar_chart(series, x="Label", y="TurnaroundHours", color="Color")
    with st.expander("Chart data", expanded=False):
        st.dataframe(
            series[["Label", "TurnaroundHours", "Tooltip"]], use_container_width=True, hide_index=True
        )


def render_export(visible: list[dict[str, Any]], on_download: Callable[[str], None] | None = None) -> None:
    """Excel download button; `on_download` receives the success notice once the file is served."""
    try:
        workbook = build_excel_report(visible)
    except EmptyExportError as exc:
        if st.button("Download Excel report (.xlsx)"):
            st.toast(str(exc), icon="⚠️")
        return

    st.download_button(
        "Download Excel report (.xlsx)",
        data=workbook,
        file_name=REPORT_FILE_NAME,
        mime=XLSX_MIME,
        on_click=on_download,
        args=(REPORT_DOWNLOADED_MESSAGE,),
    )


def render_metric_guide() -> None:
    st.header("Metric Guide")
    st.caption("Definitions of every derived value shown in the tracker.")
    st.dataframe(pd.DataFrame(METRIC_GUIDE), use_container_width=True, hide_index=True)

"""QC Turnaround Tracker Streamlit entrypoint."""

from __future__ import annotations

import logging
from typing import Any

import streamlit as st

from analytics import ALL_MONTHS, month_label, select_and_summarize
from dashboard_views import (
    render_chart,
    render_export,
    render_metric_guide,
    render_record_form,
    render_records_table,
    render_row_actions,
    render_summary,
)
from parsing import normalize_record_fields
from record_store import (
    DEFAULT_STORE_PATH,
    RecordNotFoundError,
    RecordStore,
    open_record_store,
    remove_record,
    submit_record,
)

logger = logging.getLogger(__name__)

st.set_page_config(page_title="QC Turnaround Tracker", page_icon="⏱", layout="wide")

VIEW_STATE_KEY = "view_state"
NOTICES_KEY = "pending_notices"
MONTH_WIDGET_KEY = "month_filter_widget"
SEARCH_WIDGET_KEY = "search_text_widget"


def _inject_styles() -> None:
    st.markdown(
        """
        <style>
        .hero {
            margin-bottom: 0.6rem;
            padding: 1rem 1.2rem;
            border: 1px solid rgba(30, 80, 145, 0.23);
            border-radius: 14px;
            background: rgba(255,255,255,0.82);
            box-shadow: 0 16px 36px rgba(42, 77, 140, 0.12);
        }
        .hero h1 {
            margin: 0;
        }
        .hero p {
            margin: 0.35rem 0 0 0;
            color: #244674;
        }
        [data-testid="stMetric"] {
            background: rgba(255,255,255,0.90);
            border: 1px solid rgba(45, 88, 162, 0.25);
            border-radius: 12px;
            padding: 0.45rem 0.6rem;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


def _render_header() -> None:
    st.markdown(
        """
        <div class="hero">
          <h1>QC Turnaround Tracker</h1>
          <p>Log inspections, track turnaround against the 98% productivity target, export the report.</p>
        </div>
        """,
        unsafe_allow_html=True,
    )


def _view_state() -> dict[str, Any]:
    if VIEW_STATE_KEY not in st.session_state:
        st.session_state[VIEW_STATE_KEY] = {
            "month_filter": ALL_MONTHS,
            "search_text": "",
            "editing_id": None,
        }
    return st.session_state[VIEW_STATE_KEY]


def _notify(message: str, is_error: bool = False) -> None:
    st.session_state.setdefault(NOTICES_KEY, []).append((message, is_error))


def _show_notices() -> None:
    for message, is_error in st.session_state.pop(NOTICES_KEY, []):
        st.toast(message, icon="⚠️" if is_error else "✅")


def _select_visible(state: dict[str, Any], records: list[dict[str, Any]]) -> dict[str, Any]:
    state["month_filter"] = st.session_state.get(MONTH_WIDGET_KEY, state["month_filter"])
    state["search_text"] = st.session_state.get(SEARCH_WIDGET_KEY, state["search_text"])
    result = select_and_summarize(records, state["month_filter"], state["search_text"])
    if state["month_filter"] not in [ALL_MONTHS] + result["months"]:
        # Selected month vanished (e.g. its last record was deleted).
        state["month_filter"] = ALL_MONTHS
        st.session_state[MONTH_WIDGET_KEY] = ALL_MONTHS
        result = select_and_summarize(records, ALL_MONTHS, state["search_text"])
    return result


def _render_filters(months: list[str]) -> None:
    st.sidebar.header("Filters")
    st.sidebar.selectbox("Month", [ALL_MONTHS] + months, format_func=month_label, key=MONTH_WIDGET_KEY)
    st.sidebar.text_input("Search item description", key=SEARCH_WIDGET_KEY)


def _handle_form(store: RecordStore, state: dict[str, Any]) -> None:
    editing = None
    if state["editing_id"] is not None:
        try:
            editing = store.get_record(state["editing_id"])
        except RecordNotFoundError as exc:
            _notify(f"Error: {exc}", is_error=True)
            state["editing_id"] = None

    action, raw = render_record_form(editing)
    if action == "cancel":
        state["editing_id"] = None
        st.rerun()
    if action != "submit":
        return

    fields = normalize_record_fields(raw)
    _notify(*submit_record(store, editing["id"] if editing is not None else None, fields))
    state["editing_id"] = None
    st.rerun()


def _handle_row_actions(store: RecordStore, state: dict[str, Any], visible: list[dict[str, Any]]) -> None:
    action, record_id = render_row_actions(visible)
    if action == "edit":
        state["editing_id"] = record_id
        st.rerun()
    if action == "delete":
        _notify(*remove_record(store, record_id))
        if state["editing_id"] == record_id:
            state["editing_id"] = None
        st.rerun()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    _inject_styles()
    _render_header()
    _show_notices()

    view = st.sidebar.radio("Navigate", ["Tracker", "Metric Guide"])
    if view == "Metric Guide":
        render_metric_guide()
        return

    st.sidebar.header("Data Setup")
    store_folder = st.sidebar.text_input("Store folder", value=DEFAULT_STORE_PATH).strip()
    store = open_record_store(store_folder or DEFAULT_STORE_PATH)
    state = _view_state()

    records = store.load_all()
    result = _select_visible(state, records)
    _render_filters(result["months"])

    form_col, overview_col = st.columns([2, 3])
    with form_col:
        _handle_form(store, state)

    with overview_col:
        render_summary(result["summary"])
        render_export(result["visible"], on_download=_notify)

    render_records_table(result["visible"], result["has_rows"])
    _handle_row_actions(store, state, result["visible"])
    render_chart(result["visible"])


if __name__ == "__main__":
    main()

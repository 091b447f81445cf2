#!/usr/bin/env python3
"""Build the turnaround report from a store folder without opening the app."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from analytics import ALL_MONTHS, month_label, select_and_summarize
from record_store import DEFAULT_STORE_PATH, open_record_store
from report_export import REPORT_FILE_NAME, EmptyExportError, write_excel_report


def _fmt_summary(summary: dict, month_filter: str, search_text: str) -> list[str]:
    avg_turnaround = summary["avg_turnaround_hours"]
    avg_efficiency = summary["avg_actual_efficiency"]
    lines = [
        f"Month: {month_label(month_filter)}",
        f"Search: {search_text or '(none)'}",
        f"Total records: {summary['total_records']}",
        "Avg turnaround time: "
        + (f"{avg_turnaround:.2f} hours" if isinstance(avg_turnaround, float) else str(avg_turnaround)),
        "Avg actual efficiency: "
        + (f"{avg_efficiency:.2f}%" if isinstance(avg_efficiency, float) else str(avg_efficiency)),
        f"Met target: {summary['met_count']}",
        f"Below target: {summary['below_count']}",
    ]
    return lines


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export QC turnaround records to an Excel report.")
    parser.add_argument(
        "--store",
        default=DEFAULT_STORE_PATH,
        help="Folder holding the persisted record collection.",
    )
    parser.add_argument(
        "--month",
        default=ALL_MONTHS,
        help="Month bucket to include (YYYY-MM) or 'all'.",
    )
    parser.add_argument(
        "--search",
        default="",
        help="Case-insensitive item description filter.",
    )
    parser.add_argument(
        "--out",
        default=REPORT_FILE_NAME,
        help="Destination .xlsx path.",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print the performance overview instead of writing a workbook.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = _parse_args(argv)
    store = open_record_store(str(args.store))
    result = select_and_summarize(store.load_all(), str(args.month), str(args.search))

    if args.summary:
        for line in _fmt_summary(result["summary"], str(args.month), str(args.search)):
            print(line)
        return 0

    try:
        target = write_excel_report(result["visible"], Path(str(args.out)))
    except EmptyExportError as exc:
        print(f"[warn] {exc}", file=sys.stderr)
        return 1

    print(f"[saved] {target}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

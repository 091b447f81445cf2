"""Spreadsheet export of the visible turnaround records."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.utils import get_column_letter

from analytics import TABLE_COLUMNS, table_row

logger = logging.getLogger(__name__)

REPORT_FILE_NAME = "Turnaround_Report.xlsx"
REPORT_SHEET_NAME = "Turnaround Report"
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
REPORT_DOWNLOADED_MESSAGE = "Report downloaded successfully!"

COLUMN_WIDTHS = [25, 10, 15, 20, 25, 25, 25, 15, 20, 20, 20, 20]


class EmptyExportError(ValueError):
    """Raised when an export is requested with no visible records."""


def export_rows(visible: list[dict[str, Any]]) -> list[list[Any]]:
    """Header row plus one row per visible record, in table column order."""
    return [list(TABLE_COLUMNS)] + [table_row(record) for record in visible]


def build_excel_report(visible: list[dict[str, Any]]) -> bytes:
    """Render the visible records into an .xlsx workbook and return its bytes."""
    if not visible:
        raise EmptyExportError("No data to download.")

    rows = export_rows(visible)
    frame = pd.DataFrame(rows[1:], columns=rows[0])

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        frame.to_excel(writer, sheet_name=REPORT_SHEET_NAME, index=False)
        sheet = writer.sheets[REPORT_SHEET_NAME]
        for idx, width in enumerate(COLUMN_WIDTHS, start=1):
            sheet.column_dimensions[get_column_letter(idx)].width = width

    logger.info("Built turnaround report with %d rows", len(frame))
    return output.getvalue()


def write_excel_report(visible: list[dict[str, Any]], path: str | Path) -> Path:
    target = Path(path).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(build_excel_report(visible))
    return target

"""Per-record turnaround, productivity and efficiency metrics."""

from __future__ import annotations

import datetime
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

NOT_AVAILABLE = "N/A"
INVALID = "Invalid"
ERROR = "Error"

MET_TARGET = "MET TARGET"
BELOW_TARGET = "BELOW TARGET"

TARGET_PRODUCTIVITY_FACTOR = 0.98
EFFICIENCY_TARGET_PCT = 98.0

RECEIVED_FIELD = "dateTimeReceivedQC"
START_FIELD = "dateTimeQCStart"
FINISHED_FIELD = "dateTimeQCFinished"

_LOCAL_FORMATS = ("%Y-%m-%dT%H:%M", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%d %H:%M:%S")


def parse_local_datetime(value: Any) -> datetime.datetime | None:
    """Parse an ISO local date-time ("YYYY-MM-DDTHH:MM[:SS]"); None when missing or malformed."""
    text = str(value or "").strip()
    if not text:
        return None
    for fmt in _LOCAL_FORMATS:
        try:
            return datetime.datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        parsed = datetime.datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed.replace(tzinfo=None)


def format_datetime(value: Any) -> str:
    """Readable form used in tables, exports and explanations, e.g. "Jan 10, 2024, 08:00:00 AM"."""
    parsed = parse_local_datetime(value)
    if parsed is None:
        return ""
    return f"{parsed:%b} {parsed.day}, {parsed:%Y}, {parsed:%I:%M:%S %p}"


def is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, float)) and not math.isnan(value)


def round2(value: float) -> float:
    """Round half-up to two decimals on the exact binary value."""
    return float(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _fmt_hours(value: float) -> str:
    return f"{value:.2f}"


def _turnaround(record: dict[str, Any]) -> tuple[float | str, str]:
    received = parse_local_datetime(record.get(RECEIVED_FIELD))
    finished = parse_local_datetime(record.get(FINISHED_FIELD))
    if received is None or finished is None:
        return (
            NOT_AVAILABLE,
            'Requires both "Date & Time Received for QC" and "Date & Time QC Finished".',
        )

    delta_seconds = (finished - received).total_seconds()
    if delta_seconds < 0:
        return INVALID, "QC Finish Time is before QC Receive Time. Please check dates."

    hours = round2(delta_seconds / 3600.0)
    explanation = (
        f"Computed as (Date & Time QC Finished ({format_datetime(record.get(FINISHED_FIELD))}) - "
        f"Date & Time Received for QC ({format_datetime(record.get(RECEIVED_FIELD))})) in hours."
    )
    return hours, explanation


def compute_metrics(record: dict[str, Any]) -> dict[str, Any]:
    """Derive turnaround time, target productivity, actual efficiency and the target result.

    Missing inputs yield the ``"N/A"`` sentinel, a finish before receipt yields ``"Invalid"`` and a
    zero turnaround yields ``"Error"`` for efficiency. Nothing is raised; every computed field is
    paired with a human-readable explanation of the operands used.
    """
    turnaround, turnaround_explanation = _turnaround(record)

    target = NOT_AVAILABLE
    rounded_target: int | str = NOT_AVAILABLE
    target_explanation = 'Requires a valid "Turnaround Time (Hours)" calculation.'
    if is_number(turnaround):
        raw_target = turnaround * TARGET_PRODUCTIVITY_FACTOR
        target = round2(raw_target)
        rounded_target = round_half_up(raw_target)
        target_explanation = (
            f"Computed as Turnaround Time ({_fmt_hours(turnaround)} hours) x "
            f"{TARGET_PRODUCTIVITY_FACTOR} = {_fmt_hours(target)} hours. This is a target duration "
            "reflecting 98% productivity for this specific turnaround, not a percentage goal for "
            "overall efficiency."
        )

    efficiency: float | str = NOT_AVAILABLE
    efficiency_explanation = (
        'Requires valid "Turnaround Time (Hours)" and "Target Productivity Hours" calculations.'
    )
    if is_number(turnaround) and is_number(rounded_target):
        if turnaround != 0:
            efficiency = round2(rounded_target / turnaround * 100.0)
            efficiency_explanation = (
                f"Computed as (ROUND OFF Target Productivity Hours ({rounded_target}) / "
                f"TURNAROUND TIME ({_fmt_hours(turnaround)})) x 100%. This reflects how closely the "
                "actual turnaround time aligns with its 98% productivity goal."
            )
        else:
            efficiency = ERROR
            efficiency_explanation = "Error: Turnaround Time is 0. Cannot divide by zero."

    result = NOT_AVAILABLE
    if is_number(efficiency):
        result = MET_TARGET if efficiency >= EFFICIENCY_TARGET_PCT else BELOW_TARGET

    return {
        "turnaround_time_hours": turnaround,
        "turnaround_time_explanation": turnaround_explanation,
        "target_productivity_hours": target,
        "rounded_target_productivity": rounded_target,
        "target_productivity_explanation": target_explanation,
        "actual_efficiency": efficiency,
        "actual_efficiency_explanation": efficiency_explanation,
        "efficiency_result": result,
    }

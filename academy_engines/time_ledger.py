"""
Time Ledger Engine (``academy_engines.time_ledger``).

Responsibility
--------------
Pure functions that turn logged shifts into worked minutes:

* ``worked_minutes`` -- one shift: (end - start) - break
* ``effective_shifts`` -- drop shifts superseded by a correction
* ``summarize_month`` -- per-month totals, split by shift category

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O, ZERO database,
ZERO clock reads.  Imports only the payroll value objects.

Invariants enforced
-------------------
* Clock values have minute resolution; seconds are ignored.
* A shift must end strictly after it starts on the same calendar day.
* ``0 <= break_minutes < end - start``, so worked minutes are always positive.

Failure modes
-------------
* ``InvalidShiftError`` for any shift violating the invariants above.
  Nothing is silently corrected.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from datetime import time

from academy_kernel.exceptions import InvalidShiftError
from academy_kernel.logging_config import get_logger
from academy_modules.payroll.models import (
    MonthlyWorkSummary,
    ShiftCategory,
    WorkShift,
)

logger = get_logger("engines.time_ledger")


def _clock_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def worked_minutes(shift: WorkShift) -> int:
    """Return minutes worked on a single same-day shift.

    Preconditions:
        - ``shift.end_time`` is after ``shift.start_time`` on the same day.
        - ``0 <= shift.break_minutes < span``.
    Postconditions:
        - Returns ``span - break_minutes``, always > 0.
    Raises:
        InvalidShiftError: if a precondition does not hold.
    """
    start = _clock_minutes(shift.start_time)
    end = _clock_minutes(shift.end_time)

    if end <= start:
        logger.warning(
            "shift_end_not_after_start",
            extra={
                "shift_id": str(shift.id),
                "start_time": shift.start_time.isoformat(),
                "end_time": shift.end_time.isoformat(),
            },
        )
        raise InvalidShiftError(
            str(shift.id),
            f"end {shift.end_time:%H:%M} is not after start {shift.start_time:%H:%M}",
        )

    span = end - start
    if not 0 <= shift.break_minutes < span:
        logger.warning(
            "shift_break_out_of_range",
            extra={
                "shift_id": str(shift.id),
                "break_minutes": shift.break_minutes,
                "span_minutes": span,
            },
        )
        raise InvalidShiftError(
            str(shift.id),
            f"break of {shift.break_minutes} minutes is outside [0, {span})",
        )

    return span - shift.break_minutes


def effective_shifts(shifts: Iterable[WorkShift]) -> list[WorkShift]:
    """Return shifts that have not been superseded by a correction."""
    shifts = list(shifts)
    superseded = {s.corrects_shift_id for s in shifts if s.corrects_shift_id is not None}
    return [s for s in shifts if s.id not in superseded]


def summarize_month(
    shifts: Iterable[WorkShift],
    year: int,
    month: int,
) -> MonthlyWorkSummary:
    """Total worked minutes for the shifts falling in ``year``/``month``.

    Superseded shifts are skipped.  Every counted shift is validated, so a
    single malformed shift fails the whole summary.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")

    in_month = [
        s for s in effective_shifts(shifts)
        if s.work_date.year == year and s.work_date.month == month
    ]

    by_category: dict[ShiftCategory, int] = defaultdict(int)
    total = 0
    for shift in in_month:
        minutes = worked_minutes(shift)
        by_category[shift.category] += minutes
        total += minutes

    logger.debug(
        "month_summarized",
        extra={
            "year": year,
            "month": month,
            "shift_count": len(in_month),
            "total_minutes": total,
        },
    )

    return MonthlyWorkSummary(
        year=year,
        month=month,
        total_minutes=total,
        minutes_by_category=dict(by_category),
        shift_count=len(in_month),
    )


def format_minutes(minutes: int) -> str:
    """Render minutes as ``"{hours}h {minutes}m"``."""
    return f"{minutes // 60}h {minutes % 60}m"

"""
worktime_engines.monthly -- Period aggregation and flextime balance.

Responsibility:
    Sum a period's daily results and roll the flextime balance forward:

    * ``flextime_start``     -- the prior period's ``flextime_end``, or the
                                configured initial balance for a first period.
    * ``flextime_change``    -- sum of (net - target) over every day.
    * ``flextime_end``       -- start + change.
    * ``flextime_carryover`` -- ``calculate_carryover(flextime_end, max)``.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Trusts the supplied daily results; performs no daily recomputation.
    Closing or locking a period is the caller's concern.

Invariants enforced:
    - ``flextime_end == flextime_start + flextime_change`` exactly (integer
      minutes, no intermediate rounding).
    - Totals are plain per-field sums.
"""

from __future__ import annotations

from collections.abc import Iterable

from worktime_kernel.domain.results import AbsenceKind, DailyResult, MonthlyResult
from worktime_kernel.logging_config import get_logger
from worktime_engines.capping import calculate_carryover
from worktime_engines.tracer import traced_engine

logger = get_logger("engines.monthly")


@traced_engine(
    "monthly", "1.0",
    fingerprint_fields=("days", "previous_flextime_end", "initial_flextime", "max_carryover"),
)
def aggregate_month(
    days: Iterable[DailyResult],
    previous_flextime_end: int | None = None,
    initial_flextime: int = 0,
    max_carryover: int = 0,
) -> MonthlyResult:
    """Aggregate one period of daily results.

    Args:
        days: Every day of the period in order, off days included.
        previous_flextime_end: Closing balance of the prior period, or None
            for the employee's first period.
        initial_flextime: Opening balance used when there is no prior period.
        max_carryover: Carryover cap in minutes; zero or less means no cap.

    Returns:
        MonthlyResult with totals, counters and the flextime roll-forward.
    """
    days = tuple(days)

    gross = net = target = overtime = undertime = breaks = capped = 0
    work_days = days_with_errors = 0
    absence_counts = {kind: 0 for kind in AbsenceKind}
    change = 0

    for day in days:
        gross += day.gross_minutes
        net += day.net_minutes
        target += day.target_minutes
        overtime += day.overtime_minutes
        undertime += day.undertime_minutes
        breaks += day.break_minutes
        capped += day.capped_minutes
        change += day.net_minutes - day.target_minutes

        if day.gross_minutes > 0:
            work_days += 1
        if day.has_error:
            days_with_errors += 1
        if day.absence is not None:
            absence_counts[day.absence] += 1

    start = previous_flextime_end if previous_flextime_end is not None else initial_flextime
    end = start + change

    result = MonthlyResult(
        days=len(days),
        total_gross_minutes=gross,
        total_net_minutes=net,
        total_target_minutes=target,
        total_overtime_minutes=overtime,
        total_undertime_minutes=undertime,
        total_break_minutes=breaks,
        total_capped_minutes=capped,
        flextime_start=start,
        flextime_change=change,
        flextime_end=end,
        flextime_carryover=calculate_carryover(end, max_carryover),
        work_days=work_days,
        days_with_errors=days_with_errors,
        absence_days=sum(absence_counts.values()),
        vacation_days=absence_counts[AbsenceKind.VACATION],
        sick_days=absence_counts[AbsenceKind.SICK],
        holiday_days=absence_counts[AbsenceKind.HOLIDAY],
    )

    logger.info("monthly_aggregation_completed", extra={
        "days": result.days,
        "flextime_start": start,
        "flextime_change": change,
        "flextime_end": end,
        "flextime_carryover": result.flextime_carryover,
        "days_with_errors": days_with_errors,
    })
    return result

"""
worktime_services.period_calculation -- Day and period recalculation.

Responsibility:
    Orchestrate the pure engines for one employee: resolve the plan,
    bookings and absence for each date through injected collaborators,
    run the daily calculator, and aggregate a date range into a
    MonthlyResult.

Architecture position:
    Services -- orchestration over engines + kernel.
    Collaborators (plan resolution, booking and absence lookup) are
    injected as Protocol implementations; this module performs no I/O of
    its own and never reads the clock.

Invariants enforced:
    - Every date in ``[start, end]`` is calculated exactly once, in order.
    - Each daily calculation runs inside a LogContext bound to the
      employee and date, so engine traces carry both.
    - The service returns fresh results; persisting them (and deciding
      whether to overwrite earlier values) is the caller's concern.

Failure modes:
    - MissingPlanError propagates from the daily calculator when bookings
      exist for a date the resolver has no plan for.
    - ValueError if ``end`` precedes ``start``.

Usage:
    service = PeriodCalculationService(plans, bookings, absences)
    days, month = service.calculate_period("E-1", date(2026, 1, 1), date(2026, 1, 31))
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Iterator, Mapping, Sequence
from datetime import date, timedelta
from typing import Protocol

from worktime_config.schema import WorktimeCatalog
from worktime_engines.daily import DailyCalculator
from worktime_engines.monthly import aggregate_month
from worktime_kernel.domain.bookings import BookingEvent
from worktime_kernel.domain.findings import FindingCode
from worktime_kernel.domain.plans import WorkTimePlan
from worktime_kernel.domain.results import DailyResult, DayAbsence, MonthlyResult
from worktime_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.period_calculation")


class PlanResolver(Protocol):
    """Resolves the work-time plan in force for an employee and date."""

    def resolve_plan(self, employee_id: str, work_date: date) -> WorkTimePlan | None: ...


class BookingStore(Protocol):
    """Provides the raw booking events of an employee-day."""

    def bookings_for(self, employee_id: str, work_date: date) -> Sequence[BookingEvent]: ...


class AbsenceResolver(Protocol):
    """Provides the absence or holiday indicator of an employee-day."""

    def absence_for(self, employee_id: str, work_date: date) -> DayAbsence | None: ...


class WeekdayPlanResolver:
    """PlanResolver backed by a catalog and a weekday -> plan code table.

    ``weekly`` maps ``date.weekday()`` (0 = Monday) to a plan code; missing
    weekdays are days off.  The same table applies to every employee.
    """

    def __init__(self, catalog: WorktimeCatalog, weekly: Mapping[int, str]):
        self._plans = {day: catalog.plan(code) for day, code in weekly.items()}

    def resolve_plan(self, employee_id: str, work_date: date) -> WorkTimePlan | None:
        return self._plans.get(work_date.weekday())


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Every date from ``start`` to ``end`` inclusive."""
    if end < start:
        raise ValueError(f"Period end {end} precedes start {start}")
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


class PeriodCalculationService:
    """
    Recalculates days and periods for one employee at a time.

    Contract:
        Receives PlanResolver, BookingStore and AbsenceResolver via
        constructor injection.
    Guarantees:
        - ``calculate_day`` returns exactly what ``DailyCalculator`` returns
          for the resolved inputs.
        - ``calculate_period`` satisfies
          ``month.flextime_end == month.flextime_start + month.flextime_change``.
    Non-goals:
        - Does not persist results, lock closed periods or serialize
          concurrent recalculations of the same employee-day.
    """

    def __init__(
        self,
        plans: PlanResolver,
        bookings: BookingStore,
        absences: AbsenceResolver,
        calculator: DailyCalculator | None = None,
    ):
        self._plans = plans
        self._bookings = bookings
        self._absences = absences
        self._calculator = calculator or DailyCalculator()

    def calculate_day(
        self,
        employee_id: str,
        work_date: date,
        prior_findings: Iterable[FindingCode] = (),
    ) -> DailyResult:
        """Resolve inputs for one date and run the daily calculator."""
        with LogContext.bind(employee_id=employee_id, work_date=work_date.isoformat()):
            return self._calculator.calculate(
                plan=self._plans.resolve_plan(employee_id, work_date),
                bookings=self._bookings.bookings_for(employee_id, work_date),
                absence=self._absences.absence_for(employee_id, work_date),
                prior_findings=prior_findings,
                work_date=work_date,
            )

    def calculate_period(
        self,
        employee_id: str,
        start: date,
        end: date,
        previous_flextime_end: int | None = None,
        initial_flextime: int = 0,
        max_carryover: int = 0,
        prior_findings: Mapping[date, Iterable[FindingCode]] | None = None,
    ) -> tuple[tuple[DailyResult, ...], MonthlyResult]:
        """Calculate every date in ``[start, end]`` and aggregate them.

        Args:
            employee_id: The employee to calculate.
            start: First date of the period.
            end: Last date of the period (inclusive).
            previous_flextime_end: Closing balance of the prior period.
            initial_flextime: Opening balance for a first period.
            max_carryover: Flextime carryover cap in minutes (0 = none).
            prior_findings: Unresolved findings from the last run, per date.

        Returns:
            ``(daily_results, monthly_result)``.
        """
        t0 = time.monotonic()
        prior_findings = prior_findings or {}

        with LogContext.bind(employee_id=employee_id):
            logger.info("period_calculation_started", extra={
                "period_start": start,
                "period_end": end,
            })
            days = tuple(
                self.calculate_day(employee_id, d, prior_findings.get(d, ()))
                for d in iter_dates(start, end)
            )
            month = aggregate_month(
                days=days,
                previous_flextime_end=previous_flextime_end,
                initial_flextime=initial_flextime,
                max_carryover=max_carryover,
            )
            logger.info("period_calculation_completed", extra={
                "period_start": start,
                "period_end": end,
                "days": month.days,
                "days_with_errors": month.days_with_errors,
                "flextime_end": month.flextime_end,
                "duration_ms": round((time.monotonic() - t0) * 1000, 2),
            })
        return days, month

    def calculate_period_from_catalog(
        self,
        employee_id: str,
        start: date,
        end: date,
        catalog: WorktimeCatalog,
        previous_flextime_end: int | None = None,
    ) -> tuple[tuple[DailyResult, ...], MonthlyResult]:
        """``calculate_period`` using the catalog's flextime settings."""
        return self.calculate_period(
            employee_id,
            start,
            end,
            previous_flextime_end=previous_flextime_end,
            initial_flextime=catalog.monthly.initial_flextime,
            max_carryover=catalog.monthly.max_carryover_minutes,
        )

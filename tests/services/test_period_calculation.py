"""
Tests for PeriodCalculationService.

Uses in-memory resolvers; no persistence is involved.
"""

from datetime import date

import pytest

from worktime_config import load_catalog
from worktime_engines.daily import calculate_day
from worktime_kernel.domain.bookings import BookingEvent, Direction
from worktime_kernel.domain.findings import FindingCode
from worktime_kernel.domain.results import AbsenceKind, DayAbsence
from worktime_kernel.exceptions import MissingPlanError, PlanNotFoundError
from worktime_services import PeriodCalculationService, WeekdayPlanResolver, iter_dates

EMPLOYEE = "E-100"
MONDAY = date(2026, 3, 2)
SUNDAY = date(2026, 3, 8)


class _Bookings:
    def __init__(self, by_date: dict[date, list[BookingEvent]] | None = None):
        self.by_date = by_date or {}

    def bookings_for(self, employee_id, work_date):
        return self.by_date.get(work_date, [])


class _Absences:
    def __init__(self, by_date: dict[date, DayAbsence] | None = None):
        self.by_date = by_date or {}

    def absence_for(self, employee_id, work_date):
        return self.by_date.get(work_date)


def _work(day: date, in_minute: int, out_minute: int) -> list[BookingEvent]:
    tag = day.isoformat()
    return [
        BookingEvent(f"{tag}-in", Direction.IN, in_minute),
        BookingEvent(f"{tag}-out", Direction.OUT, out_minute),
    ]


WEEKDAYS = {0: "FLEX-8", 1: "FLEX-8", 2: "FLEX-8", 3: "FLEX-8", 4: "FLEX-8"}


class TestWeekdayPlanResolver:

    def setup_method(self):
        self.resolver = WeekdayPlanResolver(load_catalog(), WEEKDAYS)

    def test_weekday_plan(self):
        assert self.resolver.resolve_plan(EMPLOYEE, MONDAY).plan_code == "FLEX-8"

    def test_weekend_is_day_off(self):
        assert self.resolver.resolve_plan(EMPLOYEE, SUNDAY) is None

    def test_unknown_plan_code(self):
        with pytest.raises(PlanNotFoundError):
            WeekdayPlanResolver(load_catalog(), {0: "MISSING"})


class TestIterDates:

    def test_inclusive(self):
        assert len(list(iter_dates(MONDAY, SUNDAY))) == 7

    def test_single_day(self):
        assert list(iter_dates(MONDAY, MONDAY)) == [MONDAY]

    def test_reversed_range(self):
        with pytest.raises(ValueError, match="precedes"):
            list(iter_dates(SUNDAY, MONDAY))


class TestPeriodCalculationService:

    def setup_method(self):
        self.catalog = load_catalog()
        self.plans = WeekdayPlanResolver(self.catalog, WEEKDAYS)
        bookings = {}
        for offset, (come, go) in enumerate([(480, 990), (480, 1050), (480, 930)]):
            day = date(2026, 3, 2 + offset)
            bookings[day] = _work(day, come, go)
        self.bookings = _Bookings(bookings)
        self.absences = _Absences({date(2026, 3, 5): DayAbsence(AbsenceKind.VACATION)})
        self.service = PeriodCalculationService(self.plans, self.bookings, self.absences)

    def test_day_matches_engine(self):
        result = self.service.calculate_day(EMPLOYEE, MONDAY)
        expected = calculate_day(
            self.plans.resolve_plan(EMPLOYEE, MONDAY),
            self.bookings.bookings_for(EMPLOYEE, MONDAY),
            work_date=MONDAY,
        )
        assert result == expected
        assert result.net_minutes == 480

    def test_week(self):
        days, month = self.service.calculate_period(EMPLOYEE, MONDAY, SUNDAY)

        assert [d.work_date for d in days] == list(iter_dates(MONDAY, SUNDAY))
        assert [d.net_minutes for d in days[:3]] == [480, 540, 420]
        assert days[3].absence == AbsenceKind.VACATION
        assert days[4].findings == (FindingCode.NO_BOOKINGS,)
        assert days[5].plan_code is None

        assert month.days == 7
        assert month.vacation_days == 1
        assert month.days_with_errors == 1
        # +60 -60 on the worked days, 0 on vacation, -480 on the empty Friday
        assert month.flextime_change == -480
        assert month.flextime_end == month.flextime_start + month.flextime_change

    def test_previous_balance_rolls_forward(self):
        _, month = self.service.calculate_period(
            EMPLOYEE, MONDAY, date(2026, 3, 4), previous_flextime_end=100,
        )
        assert month.flextime_start == 100
        assert month.flextime_end == 100

    def test_catalog_settings(self):
        _, month = self.service.calculate_period_from_catalog(
            EMPLOYEE, MONDAY, date(2026, 3, 3), self.catalog, previous_flextime_end=3000,
        )
        assert month.flextime_end == 3060
        assert month.flextime_carryover == self.catalog.monthly.max_carryover_minutes

    def test_prior_findings_per_date(self):
        days, _ = self.service.calculate_period(
            EMPLOYEE, MONDAY, MONDAY,
            prior_findings={MONDAY: (FindingCode.MISSING_OUT,)},
        )
        assert days[0].resolved_findings == (FindingCode.MISSING_OUT,)

    def test_bookings_on_day_without_plan(self):
        bookings = _Bookings({SUNDAY: _work(SUNDAY, 480, 600)})
        service = PeriodCalculationService(self.plans, bookings, _Absences())

        with pytest.raises(MissingPlanError):
            service.calculate_day(EMPLOYEE, SUNDAY)

    def test_logs_carry_employee_and_date(self, captured_logs):
        self.service.calculate_day(EMPLOYEE, MONDAY)

        completed = [r for r in captured_logs() if r["message"] == "daily_calculation_completed"]
        assert completed[0]["employee_id"] == EMPLOYEE
        assert completed[0]["work_date"] == "2026-03-02"

    def test_period_logs(self, captured_logs):
        self.service.calculate_period(EMPLOYEE, MONDAY, date(2026, 3, 3))

        messages = [r["message"] for r in captured_logs()]
        assert "period_calculation_started" in messages
        assert "period_calculation_completed" in messages
        assert "monthly_aggregation_completed" in messages

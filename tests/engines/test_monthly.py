"""Tests for monthly aggregation and the flextime roll-forward."""

from datetime import date, timedelta

import pytest

from worktime_engines.monthly import aggregate_month
from worktime_kernel.domain.findings import FindingCode
from worktime_kernel.domain.results import AbsenceKind, DailyResult, MonthlyResult


def _day(net: int, target: int = 480, gross: int | None = None, **kwargs) -> DailyResult:
    gross = net + 30 if gross is None else gross
    return DailyResult(
        work_date=kwargs.pop("work_date", None),
        plan_code="STD",
        gross_minutes=gross,
        net_minutes=net,
        target_minutes=target,
        overtime_minutes=max(0, net - target),
        undertime_minutes=max(0, target - net),
        break_minutes=max(0, gross - net),
        capped_minutes=kwargs.pop("capped_minutes", 0),
        has_error=kwargs.pop("has_error", False),
        **kwargs,
    )


class TestTotals:

    def setup_method(self):
        self.days = [_day(480), _day(540), _day(420), _day(0, gross=0)]

    def test_sums(self):
        month = aggregate_month(days=self.days)

        assert month.days == 4
        assert month.total_net_minutes == 1440
        assert month.total_target_minutes == 1920
        assert month.total_overtime_minutes == 60
        assert month.total_undertime_minutes == 60 + 480
        assert month.total_gross_minutes == 1530
        assert month.total_break_minutes == 90

    def test_work_days_count_positive_gross(self):
        assert aggregate_month(days=self.days).work_days == 3

    def test_empty_period(self):
        month = aggregate_month(days=[], previous_flextime_end=90)

        assert month.days == 0
        assert month.flextime_change == 0
        assert month.flextime_end == 90


class TestFlextime:

    def test_change_is_sum_of_balances(self):
        month = aggregate_month(days=[_day(500), _day(470), _day(480)])
        assert month.flextime_change == 20 - 10

    def test_first_period_starts_from_initial(self):
        month = aggregate_month(days=[_day(540)], initial_flextime=120)

        assert month.flextime_start == 120
        assert month.flextime_end == 180

    def test_previous_end_takes_precedence(self):
        month = aggregate_month(days=[_day(540)], previous_flextime_end=-30, initial_flextime=120)

        assert month.flextime_start == -30
        assert month.flextime_end == 30

    def test_carryover_capped(self):
        month = aggregate_month(days=[_day(900)], max_carryover=300)

        assert month.flextime_end == 420
        assert month.flextime_carryover == 300

    def test_negative_balance_carries_nothing(self):
        month = aggregate_month(days=[_day(300)], max_carryover=300)

        assert month.flextime_end == -180
        assert month.flextime_carryover == 0

    def test_chained_periods(self):
        january = aggregate_month(days=[_day(540), _day(500)])
        february = aggregate_month(days=[_day(420)], previous_flextime_end=january.flextime_end)

        assert february.flextime_start == january.flextime_end == 80
        assert february.flextime_end == 20

    def test_result_rejects_inconsistent_balance(self):
        with pytest.raises(ValueError):
            MonthlyResult(
                days=0, total_gross_minutes=0, total_net_minutes=0, total_target_minutes=0,
                total_overtime_minutes=0, total_undertime_minutes=0, total_break_minutes=0,
                total_capped_minutes=0, flextime_start=10, flextime_change=5,
                flextime_end=20, flextime_carryover=0,
            )


class TestCounters:

    def test_error_and_absence_counters(self):
        start = date(2026, 3, 2)
        days = [
            _day(480, work_date=start),
            _day(0, gross=0, has_error=True, findings=(FindingCode.NO_BOOKINGS,),
                 work_date=start + timedelta(days=1)),
            _day(480, gross=0, absence=AbsenceKind.VACATION, work_date=start + timedelta(days=2)),
            _day(480, gross=0, absence=AbsenceKind.SICK, work_date=start + timedelta(days=3)),
            _day(480, gross=0, absence=AbsenceKind.HOLIDAY, work_date=start + timedelta(days=4)),
        ]
        month = aggregate_month(days=days)

        assert month.days_with_errors == 1
        assert month.absence_days == 3
        assert month.vacation_days == 1
        assert month.sick_days == 1
        assert month.holiday_days == 1
        assert month.work_days == 1

    def test_capped_total(self):
        month = aggregate_month(days=[_day(600, capped_minutes=60), _day(600, capped_minutes=15)])
        assert month.total_capped_minutes == 75

"""Tests for window and net caps, overtime/undertime and carryover caps."""

from decimal import Decimal

import pytest

from worktime_engines.capping import (
    aggregate_capping,
    apply_net_cap,
    apply_window_capping,
    arrival_window_start,
    calculate_carryover,
    calculate_early_arrival_capping,
    calculate_late_departure_capping,
    calculate_max_net_capping,
    calculate_overtime_undertime,
    departure_window_end,
)
from worktime_kernel.domain.plans import BoundaryRule
from worktime_kernel.domain.results import CappedTime, CappingSource


class TestApplyNetCap:

    def test_no_cap(self):
        assert apply_net_cap(700, None) == (700, 0)

    def test_under_cap(self):
        assert apply_net_cap(500, 600) == (500, 0)

    def test_over_cap(self):
        assert apply_net_cap(700, 600) == (600, 100)

    def test_parts_sum_to_input(self):
        for net in (0, 599, 600, 601, 900):
            credited, capped = apply_net_cap(net, 600)
            assert credited + capped == net


class TestOvertimeUndertime:

    def test_overtime(self):
        assert calculate_overtime_undertime(540, 480) == (60, 0)

    def test_undertime(self):
        assert calculate_overtime_undertime(420, 480) == (0, 60)

    def test_balanced(self):
        assert calculate_overtime_undertime(480, 480) == (0, 0)


class TestCalculateCarryover:

    @pytest.mark.parametrize("available,maximum,expected", [
        (10, 5, 5),
        (3, 5, 3),
        (10, 0, 10),
        (-5, 10, 0),
        (0, 10, 0),
        (7, -1, 7),
    ])
    def test_minutes(self, available, maximum, expected):
        assert calculate_carryover(available, maximum) == expected

    def test_decimal_days(self):
        assert calculate_carryover(Decimal("12.5"), Decimal("10")) == Decimal("10")
        assert calculate_carryover(Decimal("4.5"), Decimal("10")) == Decimal("4.5")

    def test_negative_decimal_returns_decimal_zero(self):
        result = calculate_carryover(Decimal("-2"), Decimal("10"))
        assert result == Decimal("0")
        assert isinstance(result, Decimal)


class TestWindowCapping:
    """Arrivals before ``earliest`` and departures after ``latest``."""

    def setup_method(self):
        self.come = BoundaryRule(expected=480, tolerance_minus=15, earliest=420)
        self.go = BoundaryRule(expected=990, tolerance_plus=10, latest=1080)

    def test_early_arrival_clamped(self):
        adjusted, item = apply_window_capping(390, self.come, is_arrival=True)

        assert adjusted == 420
        assert item == CappedTime(CappingSource.EARLY_ARRIVAL, 30)

    def test_variable_work_time_widens_arrival_window(self):
        adjusted, item = apply_window_capping(
            390, self.come, is_arrival=True, variable_work_time=True,
        )

        assert adjusted == 405
        assert item.minutes == 15
        assert arrival_window_start(self.come, variable_work_time=True) == 405

    def test_arrival_inside_window(self):
        assert apply_window_capping(420, self.come, is_arrival=True) == (420, None)

    def test_late_departure_uses_go_tolerance(self):
        assert departure_window_end(self.go) == 1090
        adjusted, item = apply_window_capping(1120, self.go, is_arrival=False)

        assert adjusted == 1090
        assert item == CappedTime(CappingSource.LATE_LEAVE, 30)

    def test_open_window_never_caps(self):
        assert apply_window_capping(0, BoundaryRule(), is_arrival=True) == (0, None)
        assert calculate_late_departure_capping(1439, BoundaryRule()) is None

    def test_next_day_window_end(self):
        go = BoundaryRule(expected=360, latest=420, next_day=True)
        item = calculate_late_departure_capping(1440 + 450, go)
        assert item.minutes == 30

    def test_early_arrival_helper(self):
        assert calculate_early_arrival_capping(400, self.come).minutes == 20
        assert calculate_early_arrival_capping(500, self.come) is None


class TestAggregateCapping:

    def test_drops_empty_items_keeps_order(self):
        items = aggregate_capping([
            CappedTime(CappingSource.LATE_LEAVE, 10),
            None,
            CappedTime(CappingSource.EARLY_ARRIVAL, 0),
            calculate_max_net_capping(700, 600),
        ])

        assert items == (
            CappedTime(CappingSource.LATE_LEAVE, 10),
            CappedTime(CappingSource.MAX_NET_TIME, 100),
        )

    def test_max_net_capping_without_cap(self):
        assert calculate_max_net_capping(900, None) is None
        assert calculate_max_net_capping(600, 600) is None

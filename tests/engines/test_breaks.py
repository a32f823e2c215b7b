"""
Tests for break deduction.

Covers:
- Fixed, variable and minimum rules on their own and combined
- Booked break pairs counting toward the minimum
- Zero-gross days
"""

import pytest

from worktime_engines.breaks import (
    calculate_break_deduction,
    calculate_net_time,
    fixed_break_minutes,
    required_minimum_break,
    variable_break_minutes,
)
from worktime_kernel.domain.findings import FindingCode
from worktime_kernel.domain.plans import BreakRule, BreakType

VARIABLE_TABLE = (
    BreakRule(BreakType.VARIABLE, threshold=540, duration=45),
    BreakRule(BreakType.VARIABLE, threshold=360, duration=30),
)


class TestFixedBreaks:

    def test_threshold_zero_always_applies(self):
        rules = (BreakRule(BreakType.FIXED, duration=30),)
        assert fixed_break_minutes(60, rules) == 30

    def test_below_threshold(self):
        rules = (BreakRule(BreakType.FIXED, threshold=360, duration=30),)
        assert fixed_break_minutes(359, rules) == 0
        assert fixed_break_minutes(360, rules) == 30

    def test_multiple_fixed_rules_add_up(self):
        rules = (
            BreakRule(BreakType.FIXED, duration=15),
            BreakRule(BreakType.FIXED, threshold=480, duration=15),
        )
        assert fixed_break_minutes(500, rules) == 30


class TestVariableBreaks:

    @pytest.mark.parametrize("gross,expected", [
        (300, 0),
        (360, 30),
        (539, 30),
        (540, 45),
        (700, 45),
    ])
    def test_highest_bracket_only(self, gross, expected):
        assert variable_break_minutes(gross, VARIABLE_TABLE) == expected

    def test_ignores_other_types(self):
        assert variable_break_minutes(600, (BreakRule(BreakType.FIXED, duration=30),)) == 0


class TestMinimumBreaks:

    def test_largest_applicable_minimum(self):
        rules = (
            BreakRule(BreakType.MINIMUM, threshold=360, duration=30),
            BreakRule(BreakType.MINIMUM, threshold=540, duration=45),
        )
        assert required_minimum_break(400, rules) == 30
        assert required_minimum_break(600, rules) == 45
        assert required_minimum_break(100, rules) == 0

    def test_booked_break_satisfies_minimum(self):
        rules = (BreakRule(BreakType.MINIMUM, threshold=360, duration=30),)
        deduction = calculate_break_deduction(gross_minutes=510, booked_minutes=30, rules=rules)

        assert deduction.minimum_topup_minutes == 0
        assert deduction.total_minutes == 30
        assert deduction.findings == ()

    def test_shortfall_is_topped_up(self):
        rules = (BreakRule(BreakType.MINIMUM, threshold=360, duration=30),)
        deduction = calculate_break_deduction(gross_minutes=510, booked_minutes=10, rules=rules)

        assert deduction.minimum_topup_minutes == 20
        assert deduction.total_minutes == 30
        assert deduction.findings == (FindingCode.BREAK_MINIMUM_VIOLATION,)

    def test_rule_breaks_count_toward_minimum(self):
        rules = (
            BreakRule(BreakType.FIXED, duration=15),
            BreakRule(BreakType.MINIMUM, threshold=360, duration=30),
        )
        deduction = calculate_break_deduction(gross_minutes=400, booked_minutes=0, rules=rules)

        assert deduction.fixed_minutes == 15
        assert deduction.minimum_topup_minutes == 15
        assert deduction.total_minutes == 30


class TestCalculateBreakDeduction:

    def test_zero_gross_deducts_no_rule_breaks(self):
        rules = (BreakRule(BreakType.FIXED, duration=30),)
        deduction = calculate_break_deduction(gross_minutes=0, booked_minutes=0, rules=rules)
        assert deduction.total_minutes == 0

    def test_no_rules_returns_booked(self):
        deduction = calculate_break_deduction(gross_minutes=480, booked_minutes=25, rules=())
        assert deduction.total_minutes == 25
        assert deduction.rule_minutes == 0

    def test_combined_rules(self):
        rules = (BreakRule(BreakType.FIXED, duration=10),) + VARIABLE_TABLE
        deduction = calculate_break_deduction(gross_minutes=600, booked_minutes=5, rules=rules)

        assert deduction.fixed_minutes == 10
        assert deduction.variable_minutes == 45
        assert deduction.total_minutes == 60


class TestNetTime:

    def test_subtracts_breaks(self):
        assert calculate_net_time(510, 30) == 480

    def test_floors_at_zero(self):
        assert calculate_net_time(20, 30) == 0

"""
Tests for the vacation year service.

Policies come from the shipped catalog (STANDARD: 30 days, 40h week,
tenure >= 10 +1, age >= 50 +2, disability +5, carryover capped at 10).
"""

from datetime import date
from decimal import Decimal

import pytest

from worktime_config import load_catalog
from worktime_config.schema import VacationPolicy
from worktime_engines.vacation import VacationBasis, calculate_vacation
from worktime_services import (
    EmployeeVacationProfile,
    build_vacation_input,
    calculate_vacation_year,
)

YEAR_END = date(2026, 12, 31)


def _profile(**overrides) -> EmployeeVacationProfile:
    values = dict(birth_date=date(1970, 5, 1), entry_date=date(2010, 1, 1))
    values.update(overrides)
    return EmployeeVacationProfile(**values)


class TestBuildVacationInput:

    def setup_method(self):
        self.policy = load_catalog().vacation_policy("STANDARD")

    def test_policy_fields_copied(self):
        calc_input = build_vacation_input(
            self.policy, _profile(weekly_hours=Decimal("20")), YEAR_END,
        )
        assert calc_input.base_days == Decimal("30")
        assert calc_input.standard_weekly_hours == Decimal("40")
        assert calc_input.weekly_hours == Decimal("20")
        assert calc_input.basis == VacationBasis.CALENDAR_YEAR
        assert calc_input.bonus_rules == self.policy.bonus_rules
        assert calc_input.vacation_year == 2026

    def test_explicit_year(self):
        calc_input = build_vacation_input(self.policy, _profile(), YEAR_END, year=2025)
        assert calc_input.vacation_year == 2025

    def test_matches_direct_engine_call(self):
        calc_input = build_vacation_input(self.policy, _profile(has_disability=True), YEAR_END)
        year = calculate_vacation_year(self.policy, _profile(has_disability=True), YEAR_END)
        assert year.entitlement == calculate_vacation(calc_input=calc_input)


class TestCalculateVacationYear:

    def setup_method(self):
        self.policy = load_catalog().vacation_policy("STANDARD")

    def test_entitlement_with_bonuses(self):
        year = calculate_vacation_year(self.policy, _profile(), YEAR_END)
        # 30 base + 1 tenure + 2 age
        assert year.entitlement.total_entitlement == Decimal("33.0")
        assert year.policy_code == "STANDARD"

    def test_carryover_capped_by_policy(self):
        year = calculate_vacation_year(
            self.policy, _profile(), YEAR_END,
            carried_in=Decimal("5"), taken=Decimal("20"),
        )
        assert year.remaining == Decimal("18")
        assert year.carryover == Decimal("10")
        assert year.forfeited == Decimal("8")

    def test_carryover_below_cap(self):
        year = calculate_vacation_year(self.policy, _profile(), YEAR_END, taken=Decimal("30"))
        assert year.carryover == Decimal("3")
        assert year.forfeited == Decimal("0")

    def test_overdrawn_carries_nothing(self):
        year = calculate_vacation_year(self.policy, _profile(), YEAR_END, taken=Decimal("40"))
        assert year.remaining == Decimal("-7")
        assert year.carryover == Decimal("0")
        assert year.forfeited == Decimal("0")

    def test_part_time_and_mid_year_entry(self):
        profile = _profile(entry_date=date(2026, 7, 1), weekly_hours=Decimal("20"))
        year = calculate_vacation_year(self.policy, profile, YEAR_END)
        # 30 * 6/12 * 20/40 + 2 age
        assert year.entitlement.months_employed == 6
        assert year.entitlement.total_entitlement == Decimal("9.5")

    def test_unlimited_carryover(self):
        policy = VacationPolicy(code="OPEN", base_days=Decimal("25"))
        year = calculate_vacation_year(policy, _profile(), YEAR_END, carried_in=Decimal("12"))
        assert year.carryover == year.remaining == Decimal("37")
        assert year.forfeited == Decimal("0")

    def test_negative_taken_rejected(self):
        with pytest.raises(ValueError, match="cannot be negative"):
            calculate_vacation_year(self.policy, _profile(), YEAR_END, taken=Decimal("-1"))

    def test_year_closed_logged(self, captured_logs):
        calculate_vacation_year(self.policy, _profile(), YEAR_END, taken=Decimal("20"))

        record = next(r for r in captured_logs() if r["message"] == "vacation_year_closed")
        assert record["policy_code"] == "STANDARD"
        assert record["carryover"] == "10"
        assert record["forfeited"] == "3.0"

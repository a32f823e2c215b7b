"""
worktime_services.vacation_entitlement -- Vacation year from a tariff policy.

Responsibility:
    Turn a configured VacationPolicy plus an employee's profile into the
    engine's VacationCalcInput, run the entitlement calculation, and close
    the year: entitlement plus carried-in days minus days taken, capped by
    the policy's ``max_carryover_days`` for the next year.

Architecture position:
    Services -- orchestration over engines + kernel.  No I/O; the
    reference date is always supplied by the caller.

Invariants enforced:
    - ``carryover`` never exceeds ``max_carryover_days`` (unless that is 0,
      meaning unlimited) and is never negative.
    - ``carryover + forfeited == remaining`` whenever ``remaining`` > 0.

Usage:
    policy = catalog.vacation_policy("STANDARD")
    year = calculate_vacation_year(policy, profile, date(2026, 12, 31),
                                   carried_in=Decimal("3"), taken=Decimal("25"))
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from worktime_config.schema import VacationPolicy
from worktime_engines.capping import calculate_carryover
from worktime_engines.vacation import VacationCalcInput, VacationCalcOutput, calculate_vacation
from worktime_kernel.logging_config import get_logger

logger = get_logger("services.vacation_entitlement")

_ZERO = Decimal("0")


@dataclass(frozen=True)
class EmployeeVacationProfile:
    """The employee half of a vacation calculation."""

    birth_date: date
    entry_date: date
    exit_date: date | None = None
    weekly_hours: Decimal | None = None
    has_disability: bool = False


@dataclass(frozen=True)
class VacationYearResult:
    """Entitlement and year-end balance for one vacation year."""

    policy_code: str
    entitlement: VacationCalcOutput
    carried_in: Decimal
    taken: Decimal
    remaining: Decimal
    carryover: Decimal
    forfeited: Decimal


def build_vacation_input(
    policy: VacationPolicy,
    profile: EmployeeVacationProfile,
    reference_date: date,
    year: int | None = None,
) -> VacationCalcInput:
    """Combine tariff configuration and employee data into engine input."""
    return VacationCalcInput(
        birth_date=profile.birth_date,
        entry_date=profile.entry_date,
        exit_date=profile.exit_date,
        base_days=policy.base_days,
        reference_date=reference_date,
        weekly_hours=profile.weekly_hours,
        standard_weekly_hours=policy.standard_weekly_hours,
        has_disability=profile.has_disability,
        basis=policy.basis,
        bonus_rules=policy.bonus_rules,
        year=year,
    )


def calculate_vacation_year(
    policy: VacationPolicy,
    profile: EmployeeVacationProfile,
    reference_date: date,
    carried_in: Decimal = _ZERO,
    taken: Decimal = _ZERO,
    year: int | None = None,
) -> VacationYearResult:
    """Entitlement for the year and the days carried into the next one.

    Raises:
        ValueError: if ``carried_in`` or ``taken`` is negative.
    """
    if carried_in < _ZERO or taken < _ZERO:
        raise ValueError(f"carried_in and taken cannot be negative: {carried_in}/{taken}")

    entitlement = calculate_vacation(
        calc_input=build_vacation_input(policy, profile, reference_date, year),
    )
    remaining = entitlement.total_entitlement + carried_in - taken
    carryover = calculate_carryover(remaining, policy.max_carryover_days)
    forfeited = remaining - carryover if remaining > _ZERO else _ZERO

    logger.info("vacation_year_closed", extra={
        "policy_code": policy.code,
        "total_entitlement": entitlement.total_entitlement,
        "remaining": remaining,
        "carryover": carryover,
        "forfeited": forfeited,
    })

    return VacationYearResult(
        policy_code=policy.code,
        entitlement=entitlement,
        carried_in=carried_in,
        taken=taken,
        remaining=remaining,
        carryover=carryover,
        forfeited=forfeited,
    )

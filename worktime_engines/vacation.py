"""
worktime_engines.vacation -- Vacation entitlement, carryover and deduction.

Responsibility:
    Compute an employee's annual vacation entitlement from a demographic
    and configuration snapshot:

    1. Age and tenure at the reference date (calendar month/day comparison).
    2. Months employed in the vacation year (calendar or anniversary window
       intersected with the employment interval; partial months count).
    3. Pro-rating by months / 12.
    4. Part-time scaling by weekly hours / standard weekly hours.
    5. Age, tenure and disability bonuses, each rule evaluated on its own
       and stacked additively within a category.
    6. Rounding of the total to the nearest half day (half-up).

    Plus the independent ``calculate_carryover`` cap and
    ``calculate_vacation_deduction``.

Architecture position:
    Engines -- pure calculation layer, zero I/O, no clock reads.  The
    reference date is always an explicit input.

Invariants enforced:
    - Decimal-only arithmetic for day figures; floats are never used.
    - ``total_entitlement`` is a non-negative multiple of 0.5 and equals
      the rounded sum of the named components.
    - Age and tenure floor at zero; months employed is within 0..12.

Failure modes:
    - ValueError from the input dataclass for negative days or hours.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from worktime_kernel.logging_config import get_logger
from worktime_engines.capping import calculate_carryover
from worktime_engines.tracer import traced_engine

logger = get_logger("engines.vacation")

__all__ = [
    "BonusCategory",
    "VacationBasis",
    "VacationBonusRule",
    "VacationCalcInput",
    "VacationCalcOutput",
    "calculate_age",
    "calculate_carryover",
    "calculate_months_employed",
    "calculate_tenure",
    "calculate_vacation",
    "calculate_vacation_deduction",
    "round_to_half_day",
]

_ZERO = Decimal("0")
_TWO = Decimal("2")
_TWELVE = Decimal("12")


class VacationBasis(str, Enum):
    """How the vacation year is delimited."""

    CALENDAR_YEAR = "calendar_year"  # Jan 1 - Dec 31
    ENTRY_DATE = "entry_date"  # hire anniversary to the day before the next one


class BonusCategory(str, Enum):
    """Categories of additional vacation days."""

    AGE = "age"
    TENURE = "tenure"
    DISABILITY = "disability"


@dataclass(frozen=True)
class VacationBonusRule:
    """Bonus days granted once a threshold is reached.

    ``threshold`` is an age or tenure in full years; it is ignored for the
    disability category.
    """

    category: BonusCategory
    bonus_days: Decimal
    threshold: int = 0

    def __post_init__(self) -> None:
        if self.bonus_days < _ZERO:
            raise ValueError(f"bonus_days cannot be negative: {self.bonus_days}")
        if self.threshold < 0:
            raise ValueError(f"threshold cannot be negative: {self.threshold}")


@dataclass(frozen=True)
class VacationCalcInput:
    """Demographic and configuration snapshot for one calculation."""

    birth_date: date
    entry_date: date
    base_days: Decimal
    reference_date: date
    exit_date: date | None = None
    weekly_hours: Decimal | None = None
    standard_weekly_hours: Decimal | None = None
    has_disability: bool = False
    basis: VacationBasis = VacationBasis.CALENDAR_YEAR
    bonus_rules: tuple[VacationBonusRule, ...] = ()
    year: int | None = None  # defaults to reference_date.year

    def __post_init__(self) -> None:
        if self.base_days < _ZERO:
            raise ValueError(f"base_days cannot be negative: {self.base_days}")
        for name in ("weekly_hours", "standard_weekly_hours"):
            value = getattr(self, name)
            if value is not None and value < _ZERO:
                raise ValueError(f"{name} cannot be negative: {value}")
        if self.exit_date is not None and self.exit_date < self.entry_date:
            raise ValueError(
                f"exit_date ({self.exit_date}) cannot precede entry_date ({self.entry_date})"
            )

    @property
    def vacation_year(self) -> int:
        return self.year if self.year is not None else self.reference_date.year


@dataclass(frozen=True)
class VacationCalcOutput:
    """Itemized entitlement breakdown."""

    base_entitlement: Decimal
    pro_rated_entitlement: Decimal
    part_time_entitlement: Decimal
    age_bonus: Decimal
    tenure_bonus: Decimal
    disability_bonus: Decimal
    total_entitlement: Decimal
    months_employed: int
    age_at_reference: int
    tenure_years: int

    @property
    def total_bonus(self) -> Decimal:
        return self.age_bonus + self.tenure_bonus + self.disability_bonus


# ---------------------------------------------------------------------------
# Reference metrics
# ---------------------------------------------------------------------------


def _full_years(start: date, reference: date) -> int:
    years = reference.year - start.year
    if (reference.month, reference.day) < (start.month, start.day):
        years -= 1
    return max(0, years)


def calculate_age(birth_date: date, reference_date: date) -> int:
    """Age in full years at the reference date, floored at zero."""
    return _full_years(birth_date, reference_date)


def calculate_tenure(entry_date: date, reference_date: date) -> int:
    """Completed years of service at the reference date, floored at zero."""
    if reference_date < entry_date:
        return 0
    return _full_years(entry_date, reference_date)


def _add_months(start: date, months: int) -> date:
    """``start`` shifted by whole months, clamping to the month's last day."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _vacation_window(entry_date: date, year: int, basis: VacationBasis) -> tuple[date, date]:
    if basis == VacationBasis.CALENDAR_YEAR:
        return date(year, 1, 1), date(year, 12, 31)
    # Feb 29 anniversaries fall on Feb 28 in common years.
    day = min(entry_date.day, calendar.monthrange(year, entry_date.month)[1])
    start = date(year, entry_date.month, day)
    return start, _add_months(start, 12) - timedelta(days=1)


def calculate_months_employed(
    entry_date: date,
    exit_date: date | None,
    year: int,
    basis: VacationBasis = VacationBasis.CALENDAR_YEAR,
) -> int:
    """Months of the vacation window with at least one day of employment."""
    window_start, window_end = _vacation_window(entry_date, year, basis)
    employed_from = max(window_start, entry_date)
    employed_to = window_end if exit_date is None else min(window_end, exit_date)
    if employed_from > employed_to:
        return 0

    months = 0
    for k in range(12):
        month_start = _add_months(window_start, k)
        month_end = _add_months(window_start, k + 1) - timedelta(days=1)
        if month_start <= employed_to and employed_from <= month_end:
            months += 1
    return min(months, 12)


def round_to_half_day(value: Decimal) -> Decimal:
    """Round to the nearest 0.5 with halves rounding up."""
    doubled = (value * _TWO).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return (doubled / _TWO).quantize(Decimal("0.1"))


# ---------------------------------------------------------------------------
# Entitlement
# ---------------------------------------------------------------------------


@traced_engine("vacation", "1.0", fingerprint_fields=("calc_input",))
def calculate_vacation(calc_input: VacationCalcInput) -> VacationCalcOutput:
    """Compute the itemized vacation entitlement.

    Args:
        calc_input: Employee snapshot plus tariff configuration.

    Returns:
        VacationCalcOutput whose total is a non-negative multiple of 0.5.
    """

    age = calculate_age(calc_input.birth_date, calc_input.reference_date)
    tenure = calculate_tenure(calc_input.entry_date, calc_input.reference_date)
    months = calculate_months_employed(
        calc_input.entry_date,
        calc_input.exit_date,
        calc_input.vacation_year,
        calc_input.basis,
    )

    base = calc_input.base_days
    if months < 12:
        pro_rated = base * Decimal(months) / _TWELVE
    else:
        pro_rated = base

    standard = calc_input.standard_weekly_hours
    if standard is not None and standard > _ZERO and calc_input.weekly_hours is not None:
        part_time = pro_rated * calc_input.weekly_hours / standard
    else:
        part_time = pro_rated

    bonuses = {category: _ZERO for category in BonusCategory}
    for rule in calc_input.bonus_rules:
        if rule.category == BonusCategory.AGE:
            satisfied = age >= rule.threshold
        elif rule.category == BonusCategory.TENURE:
            satisfied = tenure >= rule.threshold
        else:
            satisfied = calc_input.has_disability
        if satisfied:
            bonuses[rule.category] += rule.bonus_days

    total = round_to_half_day(part_time + sum(bonuses.values(), _ZERO))
    if total < _ZERO:
        total = Decimal("0.0")

    output = VacationCalcOutput(
        base_entitlement=base,
        pro_rated_entitlement=pro_rated,
        part_time_entitlement=part_time,
        age_bonus=bonuses[BonusCategory.AGE],
        tenure_bonus=bonuses[BonusCategory.TENURE],
        disability_bonus=bonuses[BonusCategory.DISABILITY],
        total_entitlement=total,
        months_employed=months,
        age_at_reference=age,
        tenure_years=tenure,
    )

    logger.info("vacation_entitlement_calculated", extra={
        "vacation_year": calc_input.vacation_year,
        "basis": calc_input.basis.value,
        "months_employed": months,
        "age_at_reference": age,
        "tenure_years": tenure,
        "total_entitlement": str(total),
    })
    return output


def calculate_vacation_deduction(per_day_value: Decimal, duration_days: Decimal) -> Decimal:
    """Balance deduction for an absence.

    ``per_day_value`` is 1.0 for day-based tracking, 0.5 for half days, or
    the daily hours when the balance is kept in hours.
    """
    return per_day_value * duration_days

"""
Module: worktime_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for
    worktime_services and for direct callers.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import worktime_kernel (and sibling engine modules).
    MUST NOT import worktime_services or worktime_config.

Invariants enforced:
    - Purity: engines never read the clock.  Reference dates and work
      dates are explicit parameters supplied by the caller.
    - Integer minutes for time, ``Decimal`` for vacation days; no floats.
    - Determinism: identical inputs always produce identical outputs.

Failure modes:
    - ValueError propagated from individual engines on invalid input.
    - TimeFormatError subclasses from clock parsing/formatting.
    - MissingPlanError from the daily calculator.

Audit relevance:
    Every engine invocation is traced via the ``@traced_engine`` decorator
    (see ``worktime_engines.tracer``), emitting WORKTIME_ENGINE_TRACE log
    records that include engine name, version, input fingerprint, and
    duration.

Usage:
    from worktime_engines import calculate_day, aggregate_month
    from worktime_engines.vacation import VacationCalcInput, calculate_vacation
"""

from worktime_kernel.logging_config import get_logger

logger = get_logger("engines")

from worktime_engines.breaks import (
    BreakDeduction,
    calculate_break_deduction,
    calculate_net_time,
    fixed_break_minutes,
    required_minimum_break,
    variable_break_minutes,
)
from worktime_engines.capping import (
    apply_net_cap,
    calculate_carryover,
    calculate_overtime_undertime,
)
from worktime_engines.daily import DailyCalculator, calculate_day
from worktime_engines.monthly import aggregate_month
from worktime_engines.pairing import (
    PairingResult,
    booked_break_minutes,
    clear_pair,
    gross_minutes,
    pair_bookings,
)
from worktime_engines.surcharge import (
    calculate_overlap,
    calculate_surcharges,
    split_overnight_surcharge,
)
from worktime_engines.timeofday import (
    adjust_boundary,
    apply_rounding,
    apply_tolerance,
    clock_to_minutes,
    minutes_to_clock,
)
from worktime_engines.vacation import (
    BonusCategory,
    VacationBasis,
    VacationBonusRule,
    VacationCalcInput,
    VacationCalcOutput,
    calculate_vacation,
    calculate_vacation_deduction,
)

__all__ = [
    # Time of day
    "clock_to_minutes",
    "minutes_to_clock",
    "apply_rounding",
    "apply_tolerance",
    "adjust_boundary",
    # Pairing
    "PairingResult",
    "pair_bookings",
    "clear_pair",
    "gross_minutes",
    "booked_break_minutes",
    # Breaks
    "BreakDeduction",
    "calculate_break_deduction",
    "calculate_net_time",
    "fixed_break_minutes",
    "variable_break_minutes",
    "required_minimum_break",
    # Capping
    "apply_net_cap",
    "calculate_overtime_undertime",
    "calculate_carryover",
    # Surcharges
    "calculate_overlap",
    "calculate_surcharges",
    "split_overnight_surcharge",
    # Daily / monthly
    "DailyCalculator",
    "calculate_day",
    "aggregate_month",
    # Vacation
    "BonusCategory",
    "VacationBasis",
    "VacationBonusRule",
    "VacationCalcInput",
    "VacationCalcOutput",
    "calculate_vacation",
    "calculate_vacation_deduction",
]

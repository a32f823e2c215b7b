"""
Work-time plan value objects (``worktime_kernel.domain.plans``).

Responsibility
--------------
Frozen configuration for one resolved day: the expected come/go boundaries
with their tolerance windows and rounding, the break rules, the target
time and the optional caps.  Plans are resolved by the caller for the
employee and date and passed into every calculation; the engines never
look configuration up on their own.

Invariants enforced
-------------------
* All durations and tolerances are non-negative minute counts.
* Boundary expectations and windows are minutes-from-midnight (0..1439).
* Rounding intervals are non-negative; an interval of 0 disables rounding.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from worktime_kernel.domain.bookings import MINUTES_PER_DAY


class RoundingType(str, Enum):
    """How a boundary value is rounded to the configured interval."""

    NONE = "none"
    UP = "up"
    DOWN = "down"
    NEAREST = "nearest"  # ties round up


class BreakType(str, Enum):
    """Break deduction policies."""

    FIXED = "fixed"
    VARIABLE = "variable"
    MINIMUM = "minimum"


def _check_minute(name: str, value: int | None) -> None:
    if value is not None and not 0 <= value < MINUTES_PER_DAY:
        raise ValueError(f"{name} must be within 0..1439: {value}")


@dataclass(frozen=True)
class RoundingRule:
    """Rounding applied to a boundary after tolerance."""

    rounding_type: RoundingType = RoundingType.NONE
    interval: int = 0

    def __post_init__(self) -> None:
        if self.interval < 0:
            raise ValueError(f"Rounding interval cannot be negative: {self.interval}")

    @property
    def is_active(self) -> bool:
        return self.rounding_type != RoundingType.NONE and self.interval > 0


@dataclass(frozen=True)
class BoundaryRule:
    """Configuration of one day boundary (come or go).

    ``expected`` is the plan's target clock value; bookings inside
    ``[expected - tolerance_minus, expected + tolerance_plus]`` snap to it.
    ``earliest``/``latest`` optionally bound where a booking may fall at
    all.  They also form the evaluation window: time booked before the
    come boundary's ``earliest`` or after the go boundary's ``latest``
    (plus ``tolerance_plus``) is capped away.  ``next_day`` marks a
    boundary that lies after midnight (night shifts), mirroring the
    booking flag.
    """

    expected: int | None = None
    tolerance_minus: int = 0
    tolerance_plus: int = 0
    rounding: RoundingRule = field(default_factory=RoundingRule)
    earliest: int | None = None
    latest: int | None = None
    next_day: bool = False

    def __post_init__(self) -> None:
        _check_minute("expected", self.expected)
        _check_minute("earliest", self.earliest)
        _check_minute("latest", self.latest)
        if self.tolerance_minus < 0 or self.tolerance_plus < 0:
            raise ValueError(
                f"Tolerances cannot be negative: -{self.tolerance_minus}/+{self.tolerance_plus}"
            )

    @property
    def absolute_expected(self) -> int | None:
        if self.expected is None:
            return None
        return self.expected + (MINUTES_PER_DAY if self.next_day else 0)

    @property
    def has_tolerance(self) -> bool:
        return self.tolerance_minus > 0 or self.tolerance_plus > 0


@dataclass(frozen=True)
class BreakRule:
    """A single break policy.

    * fixed    -- deduct ``duration`` once gross time reaches ``threshold``
                  (threshold 0 means always).
    * variable -- one bracket of a bracket table: ``duration`` applies when
                  gross time reaches ``threshold``; only the highest bracket
                  met counts.
    * minimum  -- once gross time reaches ``threshold``, at least
                  ``duration`` minutes of break must be accounted for.
    """

    break_type: BreakType
    threshold: int = 0
    duration: int = 0

    def __post_init__(self) -> None:
        if self.threshold < 0:
            raise ValueError(f"Break threshold cannot be negative: {self.threshold}")
        if self.duration < 0:
            raise ValueError(f"Break duration cannot be negative: {self.duration}")


@dataclass(frozen=True)
class SurchargeRule:
    """A time window whose worked minutes feed a surcharge account.

    ``start`` > ``end`` describes an overnight window (e.g. 22:00-06:00)
    which is split at midnight before overlap is computed.
    """

    code: str
    start: int
    end: int
    applies_on_workday: bool = True
    applies_on_holiday: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.start < MINUTES_PER_DAY:
            raise ValueError(f"Surcharge start must be within 0..1439: {self.start}")
        if not 0 <= self.end <= MINUTES_PER_DAY:
            raise ValueError(f"Surcharge end must be within 0..1440: {self.end}")
        if self.start == self.end:
            raise ValueError(f"Surcharge window {self.code} is empty")


@dataclass(frozen=True)
class WorkTimePlan:
    """The resolved work-time plan for one employee and date."""

    plan_code: str
    target_minutes: int
    come: BoundaryRule = field(default_factory=BoundaryRule)
    go: BoundaryRule = field(default_factory=BoundaryRule)
    break_rules: tuple[BreakRule, ...] = ()
    max_net_minutes: int | None = None
    min_net_minutes: int | None = None
    max_gross_minutes: int | None = None
    surcharges: tuple[SurchargeRule, ...] = ()
    # Rounding applies to the first come and last go only unless set.
    round_all_bookings: bool = False
    # Come tolerance_minus widens the arrival evaluation window.
    variable_work_time: bool = False

    def __post_init__(self) -> None:
        if self.target_minutes < 0:
            raise ValueError(f"target_minutes cannot be negative: {self.target_minutes}")
        for name in ("max_net_minutes", "min_net_minutes", "max_gross_minutes"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} cannot be negative: {value}")

    def rules_of(self, break_type: BreakType) -> tuple[BreakRule, ...]:
        """Break rules of one type, in configured order."""
        return tuple(r for r in self.break_rules if r.break_type == break_type)

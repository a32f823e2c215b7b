"""
Calculation result value objects (``worktime_kernel.domain.results``).

Responsibility
--------------
Frozen outputs of the daily calculator and the monthly aggregator, plus the
absence indicator consumed by the daily calculator.  Every calculation
returns a fresh instance; the engines never hold on to one.

Invariants enforced
-------------------
* ``DailyResult.has_error`` is derived from the severity of its findings.
* ``DailyResult.capped_minutes`` is the sum of its ``capping`` items.
* ``MonthlyResult.flextime_end == flextime_start + flextime_change``.
* All minute figures are integers; overtime/undertime never negative.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from worktime_kernel.domain.bookings import BookingEvent, BookingPair
from worktime_kernel.domain.findings import FindingCode


class AbsenceKind(str, Enum):
    """Kinds of credited full-day absence."""

    VACATION = "vacation"
    SICK = "sick"
    HOLIDAY = "holiday"
    OTHER = "other"


@dataclass(frozen=True)
class DayAbsence:
    """Absence/holiday indicator for one day.

    Only ``credited`` absences short-circuit the day to ``net = target``;
    an uncredited absence (e.g. unpaid leave) leaves the day to bookings.
    """

    kind: AbsenceKind
    credited: bool = True


class CappingSource(str, Enum):
    """Why minutes were taken out of a day."""

    EARLY_ARRIVAL = "early_arrival"
    LATE_LEAVE = "late_leave"
    MAX_NET_TIME = "max_net_time"


@dataclass(frozen=True)
class CappedTime:
    """Minutes removed from a day by one capping rule."""

    source: CappingSource
    minutes: int


@dataclass(frozen=True)
class SurchargeResult:
    """Minutes worked inside one surcharge window."""

    code: str
    minutes: int


@dataclass(frozen=True)
class DailyResult:
    """Complete outcome of one day's calculation."""

    work_date: date | None
    plan_code: str | None
    gross_minutes: int
    net_minutes: int
    target_minutes: int
    overtime_minutes: int
    undertime_minutes: int
    break_minutes: int
    capped_minutes: int
    has_error: bool
    findings: tuple[FindingCode, ...] = ()
    resolved_findings: tuple[FindingCode, ...] = ()
    bookings: tuple[BookingEvent, ...] = ()
    pairs: tuple[BookingPair, ...] = ()
    absence: AbsenceKind | None = None
    first_come: int | None = None
    last_go: int | None = None
    surcharges: tuple[SurchargeResult, ...] = ()
    capping: tuple[CappedTime, ...] = ()

    @property
    def balance_minutes(self) -> int:
        """Net minus target; the day's contribution to flextime."""
        return self.net_minutes - self.target_minutes

    def calculated_minute(self, booking_id: str) -> int | None:
        """The calculated value of one booking, if present on this day."""
        for b in self.bookings:
            if b.booking_id == booking_id:
                return b.calculated_minute
        return None


@dataclass(frozen=True)
class MonthlyResult:
    """Aggregate of a period's daily results."""

    days: int
    total_gross_minutes: int
    total_net_minutes: int
    total_target_minutes: int
    total_overtime_minutes: int
    total_undertime_minutes: int
    total_break_minutes: int
    total_capped_minutes: int
    flextime_start: int
    flextime_change: int
    flextime_end: int
    flextime_carryover: int
    work_days: int = 0
    days_with_errors: int = 0
    absence_days: int = 0
    vacation_days: int = 0
    sick_days: int = 0
    holiday_days: int = 0

    def __post_init__(self) -> None:
        if self.flextime_end != self.flextime_start + self.flextime_change:
            raise ValueError(
                f"flextime_end ({self.flextime_end}) must equal flextime_start "
                f"({self.flextime_start}) + flextime_change ({self.flextime_change})"
            )

"""Immutable domain value objects shared by engines, config and services."""

from worktime_kernel.domain.bookings import (
    MINUTES_PER_DAY,
    BookingEvent,
    BookingFamily,
    BookingPair,
    BookingSource,
    Direction,
)
from worktime_kernel.domain.findings import (
    FINDING_SEVERITY,
    FindingCode,
    Severity,
    has_error,
    ordered_unique,
    severity_of,
)
from worktime_kernel.domain.plans import (
    BoundaryRule,
    BreakRule,
    BreakType,
    RoundingRule,
    RoundingType,
    SurchargeRule,
    WorkTimePlan,
)
from worktime_kernel.domain.results import (
    AbsenceKind,
    CappedTime,
    CappingSource,
    DailyResult,
    DayAbsence,
    MonthlyResult,
    SurchargeResult,
)

__all__ = [
    "MINUTES_PER_DAY",
    "AbsenceKind",
    "BookingEvent",
    "BookingFamily",
    "BookingPair",
    "BookingSource",
    "BoundaryRule",
    "BreakRule",
    "BreakType",
    "CappedTime",
    "CappingSource",
    "DailyResult",
    "DayAbsence",
    "Direction",
    "FINDING_SEVERITY",
    "FindingCode",
    "MonthlyResult",
    "RoundingRule",
    "RoundingType",
    "Severity",
    "SurchargeResult",
    "SurchargeRule",
    "WorkTimePlan",
    "has_error",
    "ordered_unique",
    "severity_of",
]

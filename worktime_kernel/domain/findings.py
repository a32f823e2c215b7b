"""
Finding codes (``worktime_kernel.domain.findings``).

Soft findings are the second error channel of the engines: computable but
notable conditions collected on a result.  Findings are exhaustive -- every
condition that holds is reported -- and kept in pipeline order without
duplicates so that a correction workflow can resolve a day in one pass.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum


class Severity(str, Enum):
    """Whether a finding marks the day as erroneous."""

    ERROR = "error"
    WARNING = "warning"


class FindingCode(str, Enum):
    """Machine-readable finding codes attached to daily results."""

    # Pairing
    MISSING_OUT = "missing_out_booking"
    MISSING_IN = "missing_in_booking"
    MISSING_BREAK_END = "missing_break_end"
    MISSING_BREAK_START = "missing_break_start"
    CROSS_MIDNIGHT = "cross_midnight"

    # Day level
    NO_BOOKINGS = "no_bookings"
    BOOKINGS_ON_ABSENCE_DAY = "bookings_on_absence_day"
    MISSING_PLAN_CONFIGURATION = "missing_plan_configuration"

    # Booking windows
    EARLY_COME = "early_come"
    LATE_COME = "late_come"
    EARLY_GO = "early_go"
    LATE_GO = "late_go"

    # Time accounting
    GROSS_EXCEEDS_LIMIT = "gross_exceeds_limit"
    BREAK_MINIMUM_VIOLATION = "break_minimum_violation"
    MAX_NET_CAPPED = "max_net_capped"
    BELOW_MIN_WORK_TIME = "below_min_work_time"


FINDING_SEVERITY: dict[FindingCode, Severity] = {
    FindingCode.MISSING_OUT: Severity.ERROR,
    FindingCode.MISSING_IN: Severity.ERROR,
    FindingCode.MISSING_BREAK_END: Severity.ERROR,
    FindingCode.MISSING_BREAK_START: Severity.ERROR,
    FindingCode.CROSS_MIDNIGHT: Severity.WARNING,
    FindingCode.NO_BOOKINGS: Severity.ERROR,
    FindingCode.BOOKINGS_ON_ABSENCE_DAY: Severity.WARNING,
    FindingCode.MISSING_PLAN_CONFIGURATION: Severity.WARNING,
    FindingCode.EARLY_COME: Severity.ERROR,
    FindingCode.LATE_COME: Severity.ERROR,
    FindingCode.EARLY_GO: Severity.ERROR,
    FindingCode.LATE_GO: Severity.ERROR,
    FindingCode.GROSS_EXCEEDS_LIMIT: Severity.ERROR,
    FindingCode.BREAK_MINIMUM_VIOLATION: Severity.WARNING,
    FindingCode.MAX_NET_CAPPED: Severity.WARNING,
    FindingCode.BELOW_MIN_WORK_TIME: Severity.ERROR,
}


def severity_of(code: FindingCode) -> Severity:
    return FINDING_SEVERITY[code]


def has_error(findings: Iterable[FindingCode]) -> bool:
    """True if any finding is of error severity."""
    return any(FINDING_SEVERITY[f] == Severity.ERROR for f in findings)


def ordered_unique(findings: Iterable[FindingCode]) -> tuple[FindingCode, ...]:
    """Drop repeated codes, keeping first-seen order."""
    seen: set[FindingCode] = set()
    out: list[FindingCode] = []
    for f in findings:
        if f not in seen:
            seen.add(f)
            out.append(f)
    return tuple(out)

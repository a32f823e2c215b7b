"""
worktime_engines.surcharge -- Surcharge window accounting.

Responsibility:
    Count the worked minutes that fall inside configured surcharge windows
    (night work, early shifts, holiday work) so that payroll can apply
    premiums.  Windows crossing midnight are split at midnight first.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Consumed by the daily calculator for workday surcharges; callable
    directly for holiday work.

Invariants enforced:
    - Overlap is computed on half-open intervals; adjacent intervals share
      no minutes.
    - Rules that produce zero minutes are omitted from the result.
    - Worked periods on the following day (offsets >= 1440) are matched
      against the same windows shifted by one day.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace

from worktime_kernel.domain.bookings import MINUTES_PER_DAY, BookingFamily, BookingPair
from worktime_kernel.domain.plans import SurchargeRule
from worktime_kernel.domain.results import SurchargeResult
from worktime_engines.tracer import traced_engine


def calculate_overlap(start1: int, end1: int, start2: int, end2: int) -> int:
    """Minutes shared by ``[start1, end1)`` and ``[start2, end2)``."""
    return max(0, min(end1, end2) - max(start1, start2))


def split_overnight_surcharge(rule: SurchargeRule) -> tuple[SurchargeRule, ...]:
    """Split a window crossing midnight into evening and morning parts.

    22:00-06:00 becomes ``[22:00-24:00, 00:00-06:00]``; a same-day
    window is returned unchanged.
    """
    if rule.start < rule.end:
        return (rule,)
    return (
        replace(rule, end=MINUTES_PER_DAY),
        replace(rule, start=0),
    )


def work_periods(pairs: Iterable[BookingPair]) -> tuple[tuple[int, int], ...]:
    """``(start, end)`` offsets of every work pair."""
    return tuple(
        (p.start, p.end) for p in pairs if p.family == BookingFamily.WORK and p.end > p.start
    )


def _applies(rule: SurchargeRule, is_holiday: bool) -> bool:
    if is_holiday:
        return rule.applies_on_holiday
    return rule.applies_on_workday


@traced_engine("surcharge", "1.0", fingerprint_fields=("periods", "rules", "is_holiday"))
def calculate_surcharges(
    periods: Sequence[tuple[int, int]],
    rules: Iterable[SurchargeRule],
    is_holiday: bool = False,
) -> tuple[SurchargeResult, ...]:
    """Minutes worked inside each applicable surcharge window."""
    results: list[SurchargeResult] = []
    for rule in rules:
        if not _applies(rule, is_holiday):
            continue
        minutes = 0
        for part in split_overnight_surcharge(rule):
            for day_offset in (0, MINUTES_PER_DAY):
                for start, end in periods:
                    minutes += calculate_overlap(
                        start, end, part.start + day_offset, part.end + day_offset,
                    )
        if minutes > 0:
            results.append(SurchargeResult(code=rule.code, minutes=minutes))
    return tuple(results)

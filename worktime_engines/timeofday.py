"""
worktime_engines.timeofday -- Minute-of-day primitives, tolerance and rounding.

Responsibility:
    Convert between ``"HH:MM"`` strings and minutes-from-midnight, snap
    boundary values into tolerance windows and round them to configured
    intervals.  These are the leaf primitives every other engine builds on.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Imports only worktime_kernel (exceptions, domain values).

Invariants enforced:
    - Round-trip: ``clock_to_minutes(minutes_to_clock(m)) == m`` for
      every m in 0..1439.
    - Tolerance snap: a value inside ``[target - minus, target + plus]``
      becomes exactly ``target`` and is not rounded afterwards.
    - Rounding ties (nearest) round up.

Failure modes:
    - InvalidTimeFormatError when a clock string is not exactly two
      colon-separated numeric fields.
    - InvalidTimeValueError when the hour is outside 0..23, the minute
      outside 0..59, or a minute count outside 0..1439.
"""

from __future__ import annotations

from worktime_kernel.domain.bookings import MINUTES_PER_DAY
from worktime_kernel.domain.plans import BoundaryRule, RoundingRule, RoundingType
from worktime_kernel.exceptions import InvalidTimeFormatError, InvalidTimeValueError


def minutes_to_clock(minutes: int) -> str:
    """Format minutes-from-midnight as ``"HH:MM"``."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise InvalidTimeValueError(minutes, "minutes must be within 0..1439")
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def clock_to_minutes(value: str) -> int:
    """Parse ``"HH:MM"`` into minutes-from-midnight.

    Validation is strict: both fields must be one or two ASCII digits,
    the hour 0..23 and the minute 0..59.
    """
    if not isinstance(value, str):
        raise InvalidTimeFormatError(str(value))
    parts = value.split(":")
    if len(parts) != 2:
        raise InvalidTimeFormatError(value)
    hour_s, minute_s = parts
    for part in (hour_s, minute_s):
        if not (1 <= len(part) <= 2 and part.isascii() and part.isdigit()):
            raise InvalidTimeFormatError(value)

    hour, minute = int(hour_s), int(minute_s)
    if hour > 23:
        raise InvalidTimeValueError(value, "hour must be within 0..23")
    if minute > 59:
        raise InvalidTimeValueError(value, "minute must be within 0..59")
    return hour * 60 + minute


def apply_rounding(minutes: int, rounding_type: RoundingType, interval: int) -> int:
    """Round a minute value to a multiple of ``interval``.

    An interval of zero (or ``RoundingType.NONE``) leaves the value alone.
    """
    if rounding_type == RoundingType.NONE or interval <= 0:
        return minutes
    remainder = minutes % interval
    if remainder == 0:
        return minutes
    if rounding_type == RoundingType.UP:
        return minutes + (interval - remainder)
    if rounding_type == RoundingType.DOWN:
        return minutes - remainder
    if rounding_type == RoundingType.NEAREST:
        if remainder * 2 >= interval:
            return minutes + (interval - remainder)
        return minutes - remainder
    raise ValueError(f"Unknown rounding type: {rounding_type!r}")


def within_tolerance(minutes: int, target: int, tolerance_minus: int, tolerance_plus: int) -> bool:
    """True if ``minutes`` lies inside the closed tolerance window."""
    return target - tolerance_minus <= minutes <= target + tolerance_plus


def apply_tolerance(
    minutes: int,
    target: int | None,
    tolerance_minus: int,
    tolerance_plus: int,
) -> int:
    """Snap a value inside the tolerance window to ``target``."""
    if target is None:
        return minutes
    if within_tolerance(minutes, target, tolerance_minus, tolerance_plus):
        return target
    return minutes


def adjust_boundary(minutes: int, rule: BoundaryRule) -> int:
    """Tolerance, then rounding, for one boundary value.

    Works on absolute offsets (values >= 1440 belong to the following
    day).  A snapped value is final; only values outside the window go
    through rounding.
    """
    target = rule.absolute_expected
    if target is not None and within_tolerance(
        minutes, target, rule.tolerance_minus, rule.tolerance_plus
    ):
        return target
    return round_with(minutes, rule.rounding)


def round_with(minutes: int, rule: RoundingRule) -> int:
    return apply_rounding(minutes, rule.rounding_type, rule.interval)

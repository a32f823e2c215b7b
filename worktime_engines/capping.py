"""
worktime_engines.capping -- Evaluation-window and net-time caps, balances, carryover.

Responsibility:
    Small pure helpers shared by the daily calculator, the monthly
    aggregator and the vacation calculator:

    * ``apply_window_capping`` clamps an arrival before the come boundary's
      ``earliest`` or a departure after the go boundary's ``latest`` (plus
      ``tolerance_plus``) and reports the clamped minutes.
    * ``apply_net_cap`` splits net time into the credited part and the
      capped-away part when a maximum net time is configured.
    * ``aggregate_capping`` collects the day's capping items.
    * ``calculate_overtime_undertime`` derives the two one-sided balances.
    * ``calculate_carryover`` caps a balance carried into the next period
      (used for vacation days and flextime minutes alike).

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - ``apply_net_cap``: credited + capped == input net.
    - A window-capped value never lies outside the evaluation window, and
      original - adjusted equals the reported minutes.
    - Overtime and undertime are never negative and never both positive.
    - ``calculate_carryover`` never returns a negative value; a max of zero
      or less means "no cap".
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from typing import TypeVar

from worktime_kernel.domain.bookings import MINUTES_PER_DAY
from worktime_kernel.domain.plans import BoundaryRule
from worktime_kernel.domain.results import CappedTime, CappingSource

Number = TypeVar("Number", int, Decimal)


def _absolute(minute: int | None, boundary: BoundaryRule) -> int | None:
    if minute is None:
        return None
    return minute + (MINUTES_PER_DAY if boundary.next_day else 0)


def arrival_window_start(come: BoundaryRule, variable_work_time: bool = False) -> int | None:
    """Absolute start of the arrival evaluation window, or None if open."""
    start = _absolute(come.earliest, come)
    if start is not None and variable_work_time:
        start -= come.tolerance_minus
    return start


def departure_window_end(go: BoundaryRule) -> int | None:
    """Absolute end of the departure evaluation window, or None if open."""
    end = _absolute(go.latest, go)
    if end is None:
        return None
    return end + go.tolerance_plus


def calculate_early_arrival_capping(
    arrival: int,
    come: BoundaryRule,
    variable_work_time: bool = False,
) -> CappedTime | None:
    start = arrival_window_start(come, variable_work_time)
    if start is None or arrival >= start:
        return None
    return CappedTime(CappingSource.EARLY_ARRIVAL, start - arrival)


def calculate_late_departure_capping(departure: int, go: BoundaryRule) -> CappedTime | None:
    end = departure_window_end(go)
    if end is None or departure <= end:
        return None
    return CappedTime(CappingSource.LATE_LEAVE, departure - end)


def calculate_max_net_capping(net_minutes: int, max_net_minutes: int | None) -> CappedTime | None:
    _, capped = apply_net_cap(net_minutes, max_net_minutes)
    if not capped:
        return None
    return CappedTime(CappingSource.MAX_NET_TIME, capped)


def apply_window_capping(
    minute: int,
    boundary: BoundaryRule,
    is_arrival: bool,
    variable_work_time: bool = False,
) -> tuple[int, CappedTime | None]:
    """Clamp one come/go value into the evaluation window.

    Returns:
        ``(adjusted, item)`` where ``item`` is None when nothing was capped.
    """
    if is_arrival:
        item = calculate_early_arrival_capping(minute, boundary, variable_work_time)
        return (minute + item.minutes, item) if item else (minute, None)
    item = calculate_late_departure_capping(minute, boundary)
    return (minute - item.minutes, item) if item else (minute, None)


def aggregate_capping(items: Iterable[CappedTime | None]) -> tuple[CappedTime, ...]:
    """Drop empty items, keep the rest in order."""
    return tuple(item for item in items if item is not None and item.minutes > 0)


def apply_net_cap(net_minutes: int, max_net_minutes: int | None) -> tuple[int, int]:
    """Return ``(credited, capped)`` for a configured maximum net time."""
    if max_net_minutes is None or net_minutes <= max_net_minutes:
        return net_minutes, 0
    return max_net_minutes, net_minutes - max_net_minutes


def calculate_overtime_undertime(net_minutes: int, target_minutes: int) -> tuple[int, int]:
    """Return ``(overtime, undertime)``."""
    return max(0, net_minutes - target_minutes), max(0, target_minutes - net_minutes)


def calculate_carryover(available: Number, maximum: Number) -> Number:
    """Cap what may be carried over into the next period.

    * ``available <= 0`` carries nothing.
    * ``maximum <= 0`` means no cap.
    * Otherwise ``min(available, maximum)``.

    Works on ``int`` minutes and ``Decimal`` days alike.
    """
    zero = Decimal("0") if isinstance(available, Decimal) else 0
    if available <= 0:
        return zero
    if maximum <= 0:
        return available
    return min(available, maximum)

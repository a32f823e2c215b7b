"""
worktime_engines.daily -- Daily time calculation.

Responsibility:
    Turn one day's resolved plan, raw bookings and absence indicator into a
    complete DailyResult.  Strict pipeline order:

    1. Credited absence/holiday short-circuit (net = target).
    2. Pair work and break events independently.
    3. Tolerance on every work boundary; rounding on the first come and
       the last go (every boundary with ``round_all_bookings``); then
       clamping into the evaluation window.
    4. Gross time from the calculated work pairs.
    5. Break deduction (booked pairs + fixed/variable/minimum rules).
    6. Maximum net-time cap; window and net caps are itemized.
    7. Overtime / undertime.
    8. Finding detection -- every condition that holds, in pipeline order.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Called by worktime_services for each date; callable directly.

Invariants enforced:
    - Idempotence: identical inputs give an identical DailyResult; the
      calculator holds no state between calls.
    - Inputs are never mutated; the returned bookings are new values with
      only ``calculated_minute`` and ``pair_id`` replaced.
    - Days with an odd number of work events are computed from their
      completed pairs; the trailing event is reported, not guessed.

Failure modes:
    - MissingPlanError when bookings exist but neither a plan nor a
      credited absence was supplied.  An uncredited absence (e.g. unpaid
      leave) does not stand in for a plan: with bookings and no plan it
      raises as well.  No partial result is produced.
    - ValueError when two bookings share a booking_id.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import date

from worktime_kernel.domain.bookings import (
    MINUTES_PER_DAY,
    BookingEvent,
    BookingPair,
    Direction,
)
from worktime_kernel.domain.findings import FindingCode, has_error, ordered_unique
from worktime_kernel.domain.plans import BoundaryRule, RoundingType, WorkTimePlan
from worktime_kernel.domain.results import CappedTime, DailyResult, DayAbsence
from worktime_kernel.exceptions import MissingPlanError
from worktime_kernel.logging_config import get_logger
from worktime_engines.breaks import calculate_break_deduction, calculate_net_time
from worktime_engines.capping import (
    aggregate_capping,
    apply_net_cap,
    apply_window_capping,
    calculate_max_net_capping,
    calculate_overtime_undertime,
)
from worktime_engines.pairing import booked_break_minutes, gross_minutes, pair_bookings
from worktime_engines.surcharge import calculate_surcharges, work_periods
from worktime_engines.timeofday import adjust_boundary, apply_tolerance
from worktime_engines.tracer import traced_engine

logger = get_logger("engines.daily")

# Gross time above this is implausible for a single day unless the plan
# says otherwise.
DEFAULT_MAX_GROSS_MINUTES = 16 * 60

_LAST_OFFSET = 2 * MINUTES_PER_DAY - 1


def _plan_gaps(plan: WorkTimePlan) -> list[FindingCode]:
    """Plan settings that cannot take effect as configured."""
    for boundary in (plan.come, plan.go):
        if boundary.has_tolerance and boundary.expected is None:
            return [FindingCode.MISSING_PLAN_CONFIGURATION]
        rounding = boundary.rounding
        if rounding.rounding_type != RoundingType.NONE and rounding.interval == 0:
            return [FindingCode.MISSING_PLAN_CONFIGURATION]
    return []


def _tolerated(value: int, boundary: BoundaryRule) -> int:
    return apply_tolerance(
        value, boundary.absolute_expected, boundary.tolerance_minus, boundary.tolerance_plus,
    )


def _window_findings(
    value: int | None,
    boundary: BoundaryRule,
    too_early: FindingCode,
    too_late: FindingCode,
) -> list[FindingCode]:
    if value is None:
        return []
    shift = MINUTES_PER_DAY if boundary.next_day else 0
    found: list[FindingCode] = []
    if boundary.earliest is not None and value < boundary.earliest + shift:
        found.append(too_early)
    if boundary.latest is not None and value > boundary.latest + shift:
        found.append(too_late)
    return found


def _rounding_scope(events: Sequence[BookingEvent], plan: WorkTimePlan) -> set[str] | None:
    """Ids of the events whose come/go value is rounded; None means all."""
    if plan.round_all_bookings:
        return None
    comes = [(e.absolute_minute, i, e.booking_id) for i, e in enumerate(events) if e.direction == Direction.IN]
    goes = [(e.absolute_minute, i, e.booking_id) for i, e in enumerate(events) if e.direction == Direction.OUT]
    scope: set[str] = set()
    if comes:
        scope.add(min(comes)[2])
    if goes:
        scope.add(max(goes)[2])
    return scope


def _calculate_boundaries(
    events: Sequence[BookingEvent],
    plan: WorkTimePlan,
) -> tuple[tuple[BookingEvent, ...], dict[str, int], list[CappedTime]]:
    """Assign the adjusted and window-capped value to every event.

    Returns the events, the adjusted values before window capping keyed by
    booking id, and the window capping items in event order.
    """
    scope = _rounding_scope(events, plan)
    adjusted: dict[str, int] = {}
    items: list[CappedTime] = []
    out: list[BookingEvent] = []
    for ev in events:
        value = ev.absolute_minute
        if ev.direction in (Direction.IN, Direction.OUT):
            is_arrival = ev.direction == Direction.IN
            boundary = plan.come if is_arrival else plan.go
            if scope is None or ev.booking_id in scope:
                value = adjust_boundary(value, boundary)
            else:
                value = _tolerated(value, boundary)
            value = min(max(value, 0), _LAST_OFFSET)
            adjusted[ev.booking_id] = value
            value, item = apply_window_capping(
                value, boundary, is_arrival, plan.variable_work_time,
            )
            if item is not None:
                items.append(item)
        out.append(ev if ev.calculated_minute == value else replace(ev, calculated_minute=value))
    return tuple(out), adjusted, items


def _recalculated_pairs(
    pairs: Iterable[BookingPair],
    events: Sequence[BookingEvent],
) -> tuple[BookingPair, ...]:
    calculated = {ev.booking_id: ev.calculated_minute for ev in events}
    return tuple(
        replace(p, start=calculated[p.opening_id], end=calculated[p.closing_id])
        for p in pairs
    )


class DailyCalculator:
    """
    Pure calculator for one employee-day.

    Contract:
        No I/O, no clock access, no retained state.  Every plan and rule is
        passed in by the caller.
    Guarantees:
        - ``net = target`` and zero booking figures on credited absences.
        - ``overtime = max(0, net - target)``, ``undertime = max(0, target - net)``.
        - ``has_error`` is true iff an error-severity finding is present.
        - ``resolved_findings`` lists prior findings that no longer hold.
        - ``capped_minutes`` equals the sum of the ``capping`` items.
    Non-goals:
        - Does not persist results or decide whether to overwrite a stored
          value; the caller owns persistence and write serialization.
    """

    @traced_engine("daily", "1.0", fingerprint_fields=("plan", "bookings", "absence"))
    def calculate(
        self,
        plan: WorkTimePlan | None,
        bookings: Sequence[BookingEvent] = (),
        absence: DayAbsence | None = None,
        prior_findings: Iterable[FindingCode] = (),
        work_date: date | None = None,
    ) -> DailyResult:
        """
        Calculate one day.

        Args:
            plan: The resolved plan for the date, or None for a day off.
            bookings: The day's raw events, in any order.
            absence: Absence/holiday indicator, if any.
            prior_findings: Unresolved findings from the previous run.
            work_date: The calendar date, carried onto the result.

        Returns:
            A fresh DailyResult.

        Raises:
            MissingPlanError: bookings exist without plan or credited absence.
        """
        bookings = tuple(bookings)
        prior = ordered_unique(prior_findings)

        ids = [b.booking_id for b in bookings]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate booking_id in day: {sorted(ids)}")

        logger.info("daily_calculation_started", extra={
            "work_date": work_date,
            "plan_code": plan.plan_code if plan else None,
            "booking_count": len(bookings),
            "absence": absence.kind.value if absence else None,
        })

        target = plan.target_minutes if plan else 0

        if absence is not None and absence.credited:
            findings = (FindingCode.BOOKINGS_ON_ABSENCE_DAY,) if bookings else ()
            result = DailyResult(
                work_date=work_date,
                plan_code=plan.plan_code if plan else None,
                gross_minutes=0,
                net_minutes=target,
                target_minutes=target,
                overtime_minutes=0,
                undertime_minutes=0,
                break_minutes=0,
                capped_minutes=0,
                has_error=has_error(findings),
                findings=findings,
                resolved_findings=tuple(f for f in prior if f not in findings),
                bookings=bookings,
                absence=absence.kind,
            )
            return self._done(result)

        if plan is None:
            if bookings:
                logger.error("daily_calculation_missing_plan", extra={
                    "work_date": work_date,
                    "booking_count": len(bookings),
                })
                raise MissingPlanError(
                    len(bookings), work_date.isoformat() if work_date else None,
                )
            result = DailyResult(
                work_date=work_date,
                plan_code=None,
                gross_minutes=0,
                net_minutes=0,
                target_minutes=0,
                overtime_minutes=0,
                undertime_minutes=0,
                break_minutes=0,
                capped_minutes=0,
                has_error=False,
                resolved_findings=prior,
                absence=absence.kind if absence else None,
            )
            return self._done(result)

        findings: list[FindingCode] = _plan_gaps(plan)

        if not bookings:
            if target > 0 and absence is None:
                findings.append(FindingCode.NO_BOOKINGS)
            found = ordered_unique(findings)
            result = DailyResult(
                work_date=work_date,
                plan_code=plan.plan_code,
                gross_minutes=0,
                net_minutes=0,
                target_minutes=target,
                overtime_minutes=0,
                undertime_minutes=target,
                break_minutes=0,
                capped_minutes=0,
                has_error=has_error(found),
                findings=found,
                resolved_findings=tuple(f for f in prior if f not in found),
                absence=absence.kind if absence else None,
            )
            return self._done(result)

        # Steps 2-3: pair on effective values, then adjust each boundary
        pairing = pair_bookings(events=bookings)
        findings.extend(pairing.findings)
        events, adjusted, capping_items = _calculate_boundaries(pairing.events, plan)
        pairs = _recalculated_pairs(pairing.pairs, events)

        # First come and last go as adjusted, before window capping
        come_values = [adjusted[e.booking_id] for e in events if e.direction == Direction.IN]
        go_values = [adjusted[e.booking_id] for e in events if e.direction == Direction.OUT]
        first_come = min(come_values) if come_values else None
        last_go = max(go_values) if go_values else None

        # Booking windows are checked after tolerance, before rounding.
        raw_come = [e.absolute_minute for e in events if e.direction == Direction.IN]
        raw_go = [e.absolute_minute for e in events if e.direction == Direction.OUT]
        findings.extend(_window_findings(
            _tolerated(min(raw_come), plan.come) if raw_come else None,
            plan.come, FindingCode.EARLY_COME, FindingCode.LATE_COME,
        ))
        findings.extend(_window_findings(
            _tolerated(max(raw_go), plan.go) if raw_go else None,
            plan.go, FindingCode.EARLY_GO, FindingCode.LATE_GO,
        ))

        # Step 4: gross
        gross = gross_minutes(pairs)
        limit = plan.max_gross_minutes if plan.max_gross_minutes is not None else DEFAULT_MAX_GROSS_MINUTES
        if gross > limit:
            findings.append(FindingCode.GROSS_EXCEEDS_LIMIT)

        # Step 5: breaks
        deduction = calculate_break_deduction(
            gross_minutes=gross,
            booked_minutes=booked_break_minutes(pairs),
            rules=plan.break_rules,
        )
        findings.extend(deduction.findings)
        uncapped_net = calculate_net_time(gross, deduction.total_minutes)

        # Step 6: cap
        net, net_capped = apply_net_cap(uncapped_net, plan.max_net_minutes)
        if net_capped:
            findings.append(FindingCode.MAX_NET_CAPPED)
        capping = aggregate_capping(
            [*capping_items, calculate_max_net_capping(uncapped_net, plan.max_net_minutes)]
        )

        # Step 7: balances
        overtime, undertime = calculate_overtime_undertime(net, target)

        if plan.min_net_minutes is not None and net < plan.min_net_minutes:
            findings.append(FindingCode.BELOW_MIN_WORK_TIME)

        surcharges = ()
        if plan.surcharges:
            surcharges = calculate_surcharges(
                periods=work_periods(pairs), rules=plan.surcharges,
            )

        found = ordered_unique(findings)
        result = DailyResult(
            work_date=work_date,
            plan_code=plan.plan_code,
            gross_minutes=gross,
            net_minutes=net,
            target_minutes=target,
            overtime_minutes=overtime,
            undertime_minutes=undertime,
            break_minutes=deduction.total_minutes,
            capped_minutes=sum(item.minutes for item in capping),
            has_error=has_error(found),
            findings=found,
            resolved_findings=tuple(f for f in prior if f not in found),
            bookings=events,
            pairs=pairs,
            absence=absence.kind if absence else None,
            first_come=first_come,
            last_go=last_go,
            surcharges=surcharges,
            capping=capping,
        )
        return self._done(result)

    @staticmethod
    def _done(result: DailyResult) -> DailyResult:
        logger.info("daily_calculation_completed", extra={
            "work_date": result.work_date,
            "gross_minutes": result.gross_minutes,
            "net_minutes": result.net_minutes,
            "target_minutes": result.target_minutes,
            "has_error": result.has_error,
            "capped_minutes": result.capped_minutes,
            "findings": [f.value for f in result.findings],
        })
        return result


def calculate_day(
    plan: WorkTimePlan | None,
    bookings: Sequence[BookingEvent] = (),
    absence: DayAbsence | None = None,
    prior_findings: Iterable[FindingCode] = (),
    work_date: date | None = None,
) -> DailyResult:
    """Functional shorthand for ``DailyCalculator().calculate(...)``."""
    return DailyCalculator().calculate(
        plan=plan,
        bookings=bookings,
        absence=absence,
        prior_findings=prior_findings,
        work_date=work_date,
    )

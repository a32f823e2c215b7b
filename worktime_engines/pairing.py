"""
worktime_engines.pairing -- Chronological booking pairing.

Responsibility:
    Match a day's opening events (``in``, ``break_start``) with closing
    events (``out``, ``break_end``) of the same family.  Existing pair links
    are honoured first; remaining events pair chronologically: the first
    unmatched opening takes the next unmatched closing that occurs at or
    after it.  Whatever is left is reported as unpaired.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Consumed by the daily calculator.

Invariants enforced:
    - Determinism: identical event tuples yield identical pairs and ids.
      Pair ids are derived from the two booking ids.
    - Input order preserved: the returned event tuple has the same order
      as the input; only ``pair_id`` differs.
    - A closing event never pairs with an opening that occurs after it.
    - ``clear_pair`` touches exactly the events sharing one pair id.

Failure modes:
    - None.  Unpaired events are reported through findings, never raised.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from worktime_kernel.domain.bookings import (
    BookingEvent,
    BookingFamily,
    BookingPair,
    Direction,
)
from worktime_kernel.domain.findings import FindingCode, ordered_unique
from worktime_kernel.logging_config import get_logger
from worktime_engines.tracer import traced_engine

logger = get_logger("engines.pairing")

_UNPAIRED_FINDING: dict[Direction, FindingCode] = {
    Direction.IN: FindingCode.MISSING_OUT,
    Direction.OUT: FindingCode.MISSING_IN,
    Direction.BREAK_START: FindingCode.MISSING_BREAK_END,
    Direction.BREAK_END: FindingCode.MISSING_BREAK_START,
}


@dataclass(frozen=True)
class PairingResult:
    """Outcome of pairing one day's events.

    ``events`` keeps the caller's order with ``pair_id`` assigned for every
    paired event and cleared for every unpaired one.
    """

    events: tuple[BookingEvent, ...]
    pairs: tuple[BookingPair, ...]
    unpaired_ids: tuple[str, ...]
    findings: tuple[FindingCode, ...]

    def pairs_of(self, family: BookingFamily) -> tuple[BookingPair, ...]:
        return tuple(p for p in self.pairs if p.family == family)

    @property
    def is_complete(self) -> bool:
        return not self.unpaired_ids


def make_pair_id(opening: BookingEvent, closing: BookingEvent) -> str:
    """Deterministic pair identifier for two events."""
    return f"{opening.booking_id}:{closing.booking_id}"


def _build_pair(pair_id: str, opening: BookingEvent, closing: BookingEvent) -> BookingPair:
    return BookingPair(
        pair_id=pair_id,
        family=opening.family,
        opening_id=opening.booking_id,
        closing_id=closing.booking_id,
        start=opening.absolute_minute,
        end=closing.absolute_minute,
        overnight=closing.next_day and not opening.next_day,
    )


def _chronological(events: Iterable[tuple[int, BookingEvent]]) -> list[tuple[int, BookingEvent]]:
    # Ties keep input order.
    return sorted(events, key=lambda item: (item[1].absolute_minute, item[0]))


def _linked_pairs(
    indexed: list[tuple[int, BookingEvent]],
) -> dict[int, str]:
    """Keep existing pair links that are still consistent.

    A link survives when exactly two events share the id, one opening and
    one closing of the same family, with the closing not before the opening.
    """
    by_pair: dict[str, list[tuple[int, BookingEvent]]] = defaultdict(list)
    for idx, ev in indexed:
        if ev.pair_id:
            by_pair[ev.pair_id].append((idx, ev))

    kept: dict[int, str] = {}
    for pair_id in sorted(by_pair):
        members = by_pair[pair_id]
        if len(members) != 2:
            continue
        (ia, a), (ib, b) = members
        if a.family != b.family or a.is_opening == b.is_opening:
            continue
        opening, closing = (a, b) if a.is_opening else (b, a)
        if closing.absolute_minute < opening.absolute_minute:
            continue
        kept[ia] = pair_id
        kept[ib] = pair_id
    return kept


@traced_engine("pairing", "1.0", fingerprint_fields=("events",))
def pair_bookings(events: Sequence[BookingEvent]) -> PairingResult:
    """Pair all work and break events of one day.

    The two families are paired independently.  Findings are reported in
    family order (work first), one code per kind of gap.
    """
    indexed = list(enumerate(events))
    assigned = _linked_pairs(indexed)

    pairs: list[BookingPair] = []
    by_id = {idx: ev for idx, ev in indexed}

    # Pairs that were already linked
    seen_links: set[str] = set()
    for idx, ev in _chronological((i, e) for i, e in indexed if i in assigned):
        pair_id = assigned[idx]
        if pair_id in seen_links:
            continue
        seen_links.add(pair_id)
        partner_idx = next(i for i, p in assigned.items() if p == pair_id and i != idx)
        partner = by_id[partner_idx]
        opening, closing = (ev, partner) if ev.is_opening else (partner, ev)
        pairs.append(_build_pair(pair_id, opening, closing))

    unpaired: list[tuple[int, BookingEvent]] = []
    for family in (BookingFamily.WORK, BookingFamily.BREAK):
        free = [(i, e) for i, e in indexed if e.family == family and i not in assigned]
        openings = _chronological((i, e) for i, e in free if e.is_opening)
        closings = _chronological((i, e) for i, e in free if not e.is_opening)

        pos = 0
        for o_idx, opening in openings:
            # Closings before this opening stay unpaired.
            while pos < len(closings) and closings[pos][1].absolute_minute < opening.absolute_minute:
                pos += 1
            if pos >= len(closings):
                break
            c_idx, closing = closings[pos]
            pair_id = make_pair_id(opening, closing)
            assigned[o_idx] = pair_id
            assigned[c_idx] = pair_id
            pairs.append(_build_pair(pair_id, opening, closing))
            pos += 1

        unpaired.extend((i, e) for i, e in free if i not in assigned)

    out_events = tuple(
        ev if ev.pair_id == assigned.get(idx) else replace(ev, pair_id=assigned.get(idx))
        for idx, ev in indexed
    )

    pairs.sort(key=lambda p: (p.family != BookingFamily.WORK, p.start, p.end, p.pair_id))

    findings: list[FindingCode] = []
    for family in (BookingFamily.WORK, BookingFamily.BREAK):
        for _, ev in _chronological(u for u in unpaired if u[1].family == family):
            findings.append(_UNPAIRED_FINDING[ev.direction])
    if any(p.overnight for p in pairs):
        findings.append(FindingCode.CROSS_MIDNIGHT)

    unpaired_ids = tuple(ev.booking_id for _, ev in sorted(unpaired, key=lambda u: u[0]))

    logger.info("pairing_completed", extra={
        "event_count": len(out_events),
        "pair_count": len(pairs),
        "unpaired_count": len(unpaired_ids),
    })

    return PairingResult(
        events=out_events,
        pairs=tuple(pairs),
        unpaired_ids=unpaired_ids,
        findings=ordered_unique(findings),
    )


def clear_pair(events: Sequence[BookingEvent], pair_id: str) -> tuple[BookingEvent, ...]:
    """Remove one pair link, leaving every other event untouched."""
    return tuple(
        replace(ev, pair_id=None) if ev.pair_id == pair_id else ev
        for ev in events
    )


def gross_minutes(pairs: Iterable[BookingPair]) -> int:
    """Sum of all work pair spans."""
    return sum(p.duration for p in pairs if p.family == BookingFamily.WORK)


def booked_break_minutes(pairs: Iterable[BookingPair]) -> int:
    """Sum of all explicit break pair spans."""
    return sum(p.duration for p in pairs if p.family == BookingFamily.BREAK)

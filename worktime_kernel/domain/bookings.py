"""
Booking value objects (``worktime_kernel.domain.bookings``).

Responsibility
--------------
Frozen representation of a recorded clock event.  A booking keeps three
minute variants side by side:

* ``original_minute`` -- what the terminal/API/import recorded; immutable.
* ``edited_minute``   -- optional supervisor correction.
* ``calculated_minute`` -- the tolerance/rounding-adjusted value produced by
  the daily calculator.  Recomputing a day only ever replaces this value and
  the ``pair_id`` link; callers get a new object back.

Overnight work is modelled with the explicit ``next_day`` flag, never with
implicit wraparound: a departure at 02:00 after a night shift that started
at 22:00 is ``BookingEvent(minute=120, next_day=True)``.

Pair relationships use a plain ``pair_id`` string shared by both events of
a pair, so a day is just an indexed tuple of events.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

MINUTES_PER_DAY = 1440


class Direction(str, Enum):
    """Direction of a clock event."""

    IN = "in"
    OUT = "out"
    BREAK_START = "break_start"
    BREAK_END = "break_end"


class BookingFamily(str, Enum):
    """Pairing family; events only pair within their own family."""

    WORK = "work"
    BREAK = "break"


class BookingSource(str, Enum):
    """Where a clock event came from."""

    TERMINAL = "terminal"
    API = "api"
    IMPORT = "import"
    MANUAL = "manual"


_OPENING = frozenset({Direction.IN, Direction.BREAK_START})


@dataclass(frozen=True)
class BookingEvent:
    """A single clock event for one employee on one date.

    ``calculated_minute`` is an absolute offset from the booking day's
    midnight (0..2879) so that adjusted next-day boundaries stay explicit.
    """

    booking_id: str
    direction: Direction
    original_minute: int
    edited_minute: int | None = None
    calculated_minute: int | None = None
    next_day: bool = False
    pair_id: str | None = None
    source: BookingSource = BookingSource.TERMINAL

    def __post_init__(self) -> None:
        if not self.booking_id:
            raise ValueError("booking_id cannot be empty")
        if not 0 <= self.original_minute < MINUTES_PER_DAY:
            raise ValueError(
                f"original_minute must be within 0..1439: {self.original_minute}"
            )
        if self.edited_minute is not None and not 0 <= self.edited_minute < MINUTES_PER_DAY:
            raise ValueError(
                f"edited_minute must be within 0..1439: {self.edited_minute}"
            )
        if self.calculated_minute is not None and not (
            0 <= self.calculated_minute < 2 * MINUTES_PER_DAY
        ):
            raise ValueError(
                f"calculated_minute must be within 0..2879: {self.calculated_minute}"
            )

    @property
    def effective_minute(self) -> int:
        """Edited value when a correction exists, else the original."""
        if self.edited_minute is not None:
            return self.edited_minute
        return self.original_minute

    @property
    def absolute_minute(self) -> int:
        """Effective minute as an offset from the booking day's midnight."""
        if self.next_day:
            return self.effective_minute + MINUTES_PER_DAY
        return self.effective_minute

    @property
    def family(self) -> BookingFamily:
        if self.direction in (Direction.IN, Direction.OUT):
            return BookingFamily.WORK
        return BookingFamily.BREAK

    @property
    def is_opening(self) -> bool:
        """True for ``in`` and ``break_start`` events."""
        return self.direction in _OPENING


@dataclass(frozen=True)
class BookingPair:
    """Two events of one family linked by ``pair_id``.

    ``start``/``end`` are absolute offsets from the booking day's midnight.
    A pair whose closing event lies on the following day is ``overnight``.
    """

    pair_id: str
    family: BookingFamily
    opening_id: str
    closing_id: str
    start: int
    end: int
    overnight: bool = False

    @property
    def duration(self) -> int:
        """Span in minutes; never negative."""
        return max(0, self.end - self.start)

"""
Pytest fixtures for the work-time kernel test suite.

Provides:
- Structured logging configured for every test session
- LogContext isolation between tests
- ``captured_logs`` for asserting on emitted JSON records
- Small plan and booking factories shared across test modules
"""

import json
import logging
from io import StringIO

import pytest

from worktime_kernel.domain.bookings import BookingEvent, Direction
from worktime_kernel.domain.plans import BoundaryRule, BreakRule, BreakType, WorkTimePlan
from worktime_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture worktime_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            calculate_day(plan, bookings)
            logs = captured_logs()
            assert any(r["message"] == "daily_calculation_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("worktime_kernel")
    root.addHandler(handler)
    previous_level = root.level
    root.setLevel(logging.DEBUG)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Domain factories
# =============================================================================


@pytest.fixture
def standard_plan() -> WorkTimePlan:
    """08:00-16:30 with +/-10 minute tolerance and a fixed 30 minute break."""
    return WorkTimePlan(
        plan_code="STD",
        target_minutes=480,
        come=BoundaryRule(expected=480, tolerance_minus=10, tolerance_plus=10),
        go=BoundaryRule(expected=990, tolerance_minus=10, tolerance_plus=10),
        break_rules=(BreakRule(BreakType.FIXED, threshold=0, duration=30),),
    )


@pytest.fixture
def make_booking():
    """Factory for BookingEvent values with sequential ids."""
    counter = iter(range(1, 10_000))

    def _make(direction: Direction, minute: int, **kwargs) -> BookingEvent:
        booking_id = kwargs.pop("booking_id", f"b{next(counter)}")
        return BookingEvent(
            booking_id=booking_id,
            direction=direction,
            original_minute=minute,
            **kwargs,
        )

    return _make

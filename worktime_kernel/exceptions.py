"""
Typed Exception Hierarchy for the Work-Time Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

The calculation core has exactly two failure channels:

  1. Hard failures -- the inputs make the computation undefined (bookings
     without any plan or absence, a malformed clock string handed to a
     parsing helper, an unusable configuration file).  These raise one of
     the exceptions below and NO partial result exists.
  2. Soft findings -- every business condition that is still computable
     (unpaired booking, cap exceeded, break minimum violated).  These are
     accumulated on the result and never raise.

Every exception class carries a ``code`` class attribute (machine-readable,
API-safe) and stores its context as instance attributes so that the API
layer can serialize it without parsing message strings.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    WorktimeKernelError (base)
    |
    +-- TimeFormatError
    |   +-- InvalidTimeFormatError
    |   +-- InvalidTimeValueError
    |
    +-- CalculationError
    |   +-- MissingPlanError
    |
    +-- ConfigurationError
        +-- InvalidConfigurationError
        +-- PlanNotFoundError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Time format     | INVALID_FORMAT              | Clock string is not "HH:MM"
                | INVALID_TIME_VALUE          | Hour/minute out of range
----------------|-----------------------------|-----------------------------------------
Calculation     | MISSING_PLAN_CONFIGURATION  | Bookings exist but no plan/absence
----------------|-----------------------------|-----------------------------------------
Configuration   | INVALID_CONFIGURATION       | Catalog failed validation
                | PLAN_NOT_FOUND              | Unknown plan code requested
"""


class WorktimeKernelError(Exception):
    """
    Base exception for all work-time kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "WORKTIME_KERNEL_ERROR"


# Time format exceptions


class TimeFormatError(WorktimeKernelError):
    """Base exception for clock-string parsing errors."""

    code: str = "TIME_FORMAT_ERROR"


class InvalidTimeFormatError(TimeFormatError):
    """Clock string is not exactly two colon-separated numeric fields."""

    code: str = "INVALID_FORMAT"

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid time format: {value!r} (expected HH:MM)")


class InvalidTimeValueError(TimeFormatError):
    """Hour or minute is outside its valid range."""

    code: str = "INVALID_TIME_VALUE"

    def __init__(self, value: str | int, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid time value {value!r}: {reason}")


# Calculation exceptions


class CalculationError(WorktimeKernelError):
    """Base exception for calculations whose inputs make the result undefined."""

    code: str = "CALCULATION_ERROR"


class MissingPlanError(CalculationError):
    """Bookings were supplied for a day with neither a plan nor an absence."""

    code: str = "MISSING_PLAN_CONFIGURATION"

    def __init__(self, booking_count: int, work_date: str | None = None):
        self.booking_count = booking_count
        self.work_date = work_date
        where = f" on {work_date}" if work_date else ""
        super().__init__(
            f"Cannot calculate day{where}: {booking_count} booking(s) present "
            f"but no work-time plan or absence supplied"
        )


# Configuration exceptions


class ConfigurationError(WorktimeKernelError):
    """Base exception for configuration loading errors."""

    code: str = "CONFIGURATION_ERROR"


class InvalidConfigurationError(ConfigurationError):
    """A configuration catalog failed validation."""

    code: str = "INVALID_CONFIGURATION"

    def __init__(self, source: str, errors: list[str]):
        self.source = source
        self.errors = list(errors)
        joined = "; ".join(self.errors)
        super().__init__(f"Invalid configuration in {source}: {joined}")


class PlanNotFoundError(ConfigurationError):
    """Requested plan code does not exist in the catalog."""

    code: str = "PLAN_NOT_FOUND"

    def __init__(self, plan_code: str):
        self.plan_code = plan_code
        super().__init__(f"Work-time plan not found: {plan_code}")

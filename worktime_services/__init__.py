"""
worktime_services -- Package init and public API.

Responsibility:
    Orchestration services that compose the pure calculation engines
    (worktime_engines/) with caller-supplied lookups for plans, bookings
    and absences.

Architecture position:
    Services -- orchestration over engines + kernel.

    Dependency direction:
        worktime_services/ -> worktime_engines/  (allowed)
        worktime_services/ -> worktime_kernel/   (allowed)
        worktime_engines/  -> worktime_services/ (FORBIDDEN)
        worktime_kernel/   -> worktime_services/ (FORBIDDEN)
"""

from worktime_kernel.logging_config import get_logger

logger = get_logger("services")

from worktime_services.period_calculation import (
    AbsenceResolver,
    BookingStore,
    PeriodCalculationService,
    PlanResolver,
    WeekdayPlanResolver,
    iter_dates,
)
from worktime_services.vacation_entitlement import (
    EmployeeVacationProfile,
    VacationYearResult,
    build_vacation_input,
    calculate_vacation_year,
)

__all__ = [
    "AbsenceResolver",
    "BookingStore",
    "EmployeeVacationProfile",
    "PeriodCalculationService",
    "PlanResolver",
    "VacationYearResult",
    "WeekdayPlanResolver",
    "build_vacation_input",
    "calculate_vacation_year",
    "iter_dates",
]

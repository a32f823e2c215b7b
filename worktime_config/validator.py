"""
Configuration Validator (``worktime_config.validator``).

Responsibility
--------------
Validates a parsed ``WorktimeCatalog`` before it is handed to callers,
catching combinations that every dataclass accepts on its own but that
make no sense together.

Invariants enforced
-------------------
* Plan codes and vacation policy codes are unique.
* ``min_net_minutes`` does not exceed ``max_net_minutes``.
* Variable break brackets have distinct thresholds.
* Booking windows are ordered (``earliest <= latest``).

Failure modes
-------------
* Errors -> ``load_catalog`` refuses the catalog.
* Warnings -> the catalog loads; the daily calculator will report
  ``missing_plan_configuration`` for the affected plans.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from worktime_config.schema import WorktimeCatalog
from worktime_kernel.domain.plans import BoundaryRule, BreakType, RoundingType, WorkTimePlan


@dataclass
class CatalogValidationResult:
    """
    Result of catalog validation.

    ``is_valid`` returns ``True`` only when ``errors`` is empty.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)


def validate_catalog(catalog: WorktimeCatalog) -> CatalogValidationResult:
    """Validate a catalog; never raises."""
    result = CatalogValidationResult()

    _validate_uniqueness(catalog, result)
    for plan in catalog.plans:
        _validate_plan(plan, result)
    _validate_monthly(catalog, result)

    return result


def _validate_uniqueness(catalog: WorktimeCatalog, result: CatalogValidationResult) -> None:
    seen: set[str] = set()
    for plan in catalog.plans:
        if plan.plan_code in seen:
            result.add_error(f"Duplicate plan: {plan.plan_code} appears more than once")
        seen.add(plan.plan_code)

    seen = set()
    for policy in catalog.vacation_policies:
        if policy.code in seen:
            result.add_error(f"Duplicate vacation policy: {policy.code} appears more than once")
        seen.add(policy.code)


def _validate_boundary(
    plan_code: str, label: str, boundary: BoundaryRule, result: CatalogValidationResult,
) -> None:
    if boundary.has_tolerance and boundary.expected is None:
        result.add_warning(f"Plan '{plan_code}' {label}: tolerance without expected time")
    rounding = boundary.rounding
    if rounding.rounding_type != RoundingType.NONE and rounding.interval == 0:
        result.add_warning(
            f"Plan '{plan_code}' {label}: rounding '{rounding.rounding_type.value}' without interval"
        )
    if (
        boundary.earliest is not None
        and boundary.latest is not None
        and boundary.earliest > boundary.latest
    ):
        result.add_error(f"Plan '{plan_code}' {label}: earliest is after latest")


def _validate_plan(plan: WorkTimePlan, result: CatalogValidationResult) -> None:
    _validate_boundary(plan.plan_code, "come", plan.come, result)
    _validate_boundary(plan.plan_code, "go", plan.go, result)

    if (
        plan.min_net_minutes is not None
        and plan.max_net_minutes is not None
        and plan.min_net_minutes > plan.max_net_minutes
    ):
        result.add_error(
            f"Plan '{plan.plan_code}': min_net_minutes {plan.min_net_minutes} "
            f"exceeds max_net_minutes {plan.max_net_minutes}"
        )

    thresholds = [r.threshold for r in plan.rules_of(BreakType.VARIABLE)]
    if len(set(thresholds)) != len(thresholds):
        result.add_error(f"Plan '{plan.plan_code}': duplicate variable break thresholds")

    if plan.max_net_minutes is not None and plan.target_minutes > plan.max_net_minutes:
        result.add_warning(
            f"Plan '{plan.plan_code}': target_minutes exceeds max_net_minutes"
        )


def _validate_monthly(catalog: WorktimeCatalog, result: CatalogValidationResult) -> None:
    if catalog.monthly.max_carryover_minutes < 0:
        result.add_warning(
            "monthly.max_carryover_minutes is negative and is treated as unlimited"
        )

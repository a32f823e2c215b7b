"""
WorktimeCatalog schema.

Defines the human-authored, reviewable source artifact for work-time
configuration.  YAML files are parsed into these types by the loader and
checked by the validator; the engines only ever see the kernel value
objects (``WorkTimePlan``) and ``VacationCalcInput`` built from them.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from worktime_kernel.domain.plans import WorkTimePlan
from worktime_kernel.exceptions import PlanNotFoundError
from worktime_engines.vacation import VacationBasis, VacationBonusRule

# ---------------------------------------------------------------------------
# Vacation and period settings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VacationPolicy:
    """Tariff-level vacation configuration."""

    code: str
    base_days: Decimal
    standard_weekly_hours: Decimal | None = None
    basis: VacationBasis = VacationBasis.CALENDAR_YEAR
    bonus_rules: tuple[VacationBonusRule, ...] = ()
    max_carryover_days: Decimal = Decimal("0")  # 0 = unlimited


@dataclass(frozen=True)
class MonthlySettings:
    """Flextime roll-forward settings, in minutes."""

    initial_flextime: int = 0
    max_carryover_minutes: int = 0  # 0 = unlimited


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WorktimeCatalog:
    """All plans and policies from one configuration file.

    Attributes:
        catalog_id: Identifier of the set (e.g. "DEFAULT-2026").
        version: Configuration version number.
        checksum: SHA-256 of the canonical source data.
        plans: Work-time plans keyed by ``plan_code``.
        vacation_policies: Vacation policies keyed by ``code``.
        monthly: Flextime settings.
    """

    catalog_id: str
    version: int
    checksum: str
    plans: tuple[WorkTimePlan, ...] = ()
    vacation_policies: tuple[VacationPolicy, ...] = ()
    monthly: MonthlySettings = MonthlySettings()

    def plan(self, plan_code: str) -> WorkTimePlan:
        for plan in self.plans:
            if plan.plan_code == plan_code:
                return plan
        raise PlanNotFoundError(plan_code)

    def vacation_policy(self, code: str) -> VacationPolicy | None:
        for policy in self.vacation_policies:
            if policy.code == code:
                return policy
        return None

    @property
    def plan_codes(self) -> tuple[str, ...]:
        return tuple(p.plan_code for p in self.plans)

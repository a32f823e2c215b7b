"""
worktime_engines.breaks -- Rule-based break deduction.

Responsibility:
    Given a day's gross time, the break time already booked through
    break_start/break_end pairs and the plan's break rules, compute the
    additional break time to deduct:

    * fixed    -- each fixed rule deducts its duration once gross time
                  reaches its threshold (0 = always).
    * variable -- brackets evaluated ascending by threshold; only the
                  highest bracket met deducts (non-cumulative).
    * minimum  -- the largest applicable minimum is compared against the
                  break time already accounted (booked + fixed + variable);
                  a shortfall is deducted and reported.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Consumed by the daily calculator.

Invariants enforced:
    - Rule-based deductions only apply when gross time is positive.
    - Monotonicity: more gross time never selects a smaller variable bracket.
    - Net time is floored at zero.

Failure modes:
    - None.  Configuration errors are rejected when the BreakRule value
      objects are constructed.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from worktime_kernel.domain.findings import FindingCode
from worktime_kernel.domain.plans import BreakRule, BreakType
from worktime_kernel.logging_config import get_logger
from worktime_engines.tracer import traced_engine

logger = get_logger("engines.breaks")


@dataclass(frozen=True)
class BreakDeduction:
    """Itemized break deduction for one day."""

    booked_minutes: int
    fixed_minutes: int = 0
    variable_minutes: int = 0
    minimum_topup_minutes: int = 0
    findings: tuple[FindingCode, ...] = ()

    @property
    def rule_minutes(self) -> int:
        """Deduction on top of the booked break pairs."""
        return self.fixed_minutes + self.variable_minutes + self.minimum_topup_minutes

    @property
    def total_minutes(self) -> int:
        return self.booked_minutes + self.rule_minutes


def fixed_break_minutes(gross_minutes: int, rules: Iterable[BreakRule]) -> int:
    """Sum of all fixed rules whose threshold is met."""
    return sum(
        r.duration
        for r in rules
        if r.break_type == BreakType.FIXED and gross_minutes >= r.threshold
    )


def variable_break_minutes(gross_minutes: int, rules: Iterable[BreakRule]) -> int:
    """Duration of the highest variable bracket met, or 0."""
    brackets = sorted(
        (r for r in rules if r.break_type == BreakType.VARIABLE),
        key=lambda r: (r.threshold, r.duration),
    )
    deducted = 0
    for bracket in brackets:
        if gross_minutes >= bracket.threshold:
            deducted = bracket.duration
        else:
            break
    return deducted


def required_minimum_break(gross_minutes: int, rules: Iterable[BreakRule]) -> int:
    """Largest minimum break that applies at this gross time."""
    applicable = [
        r.duration
        for r in rules
        if r.break_type == BreakType.MINIMUM and gross_minutes >= r.threshold
    ]
    return max(applicable, default=0)


@traced_engine("breaks", "1.0", fingerprint_fields=("gross_minutes", "booked_minutes", "rules"))
def calculate_break_deduction(
    gross_minutes: int,
    booked_minutes: int,
    rules: Iterable[BreakRule],
) -> BreakDeduction:
    """Itemize the break deduction for a day.

    Args:
        gross_minutes: Sum of the day's work pair spans.
        booked_minutes: Sum of the day's explicit break pair spans.
        rules: The plan's break rules.

    Returns:
        BreakDeduction whose ``total_minutes`` is subtracted from gross.
    """
    rules = tuple(rules)
    if gross_minutes <= 0 or not rules:
        return BreakDeduction(booked_minutes=booked_minutes)

    fixed = fixed_break_minutes(gross_minutes, rules)
    variable = variable_break_minutes(gross_minutes, rules)
    minimum = required_minimum_break(gross_minutes, rules)

    accounted = booked_minutes + fixed + variable
    topup = 0
    findings: tuple[FindingCode, ...] = ()
    if minimum > accounted:
        topup = minimum - accounted
        findings = (FindingCode.BREAK_MINIMUM_VIOLATION,)

    result = BreakDeduction(
        booked_minutes=booked_minutes,
        fixed_minutes=fixed,
        variable_minutes=variable,
        minimum_topup_minutes=topup,
        findings=findings,
    )

    logger.debug("break_deduction_calculated", extra={
        "gross_minutes": gross_minutes,
        "booked_minutes": booked_minutes,
        "rule_minutes": result.rule_minutes,
        "minimum_shortfall": topup,
    })
    return result


def calculate_net_time(gross_minutes: int, break_minutes: int) -> int:
    """Gross minus all break time, floored at zero."""
    return max(0, gross_minutes - break_minutes)

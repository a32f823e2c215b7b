"""
Configuration Loader (``worktime_config.loader``).

Responsibility
--------------
Loads a YAML catalog file and parses its sections into typed kernel and
``worktime_config.schema`` dataclass instances.  Callers normally go
through ``worktime_config.load_catalog()``, which adds validation and
the config trace.

Architecture position
---------------------
**Config layer** -- infrastructure tooling.  Depends on the kernel value
objects and on ``worktime_engines.timeofday`` for clock parsing; the
engines never import this module.

Invariants enforced
-------------------
* Clock values are ``"HH:MM"`` strings parsed with the strict
  ``clock_to_minutes``; durations and thresholds are integer minutes.
* Vacation figures are parsed into ``Decimal`` via ``str`` so YAML floats
  never leak binary rounding into day counts.
* Missing required keys raise ``KeyError``; no silent defaults for
  required fields.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError``.
* Bad clock strings  -> ``InvalidTimeFormatError`` / ``InvalidTimeValueError``.
* Out-of-range values  -> ``ValueError`` from the dataclass constructors.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from worktime_config.schema import MonthlySettings, VacationPolicy
from worktime_kernel.domain.bookings import MINUTES_PER_DAY
from worktime_kernel.domain.plans import (
    BoundaryRule,
    BreakRule,
    BreakType,
    RoundingRule,
    RoundingType,
    SurchargeRule,
    WorkTimePlan,
)
from worktime_engines.timeofday import clock_to_minutes
from worktime_engines.vacation import BonusCategory, VacationBasis, VacationBonusRule


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_clock(value: Any) -> int | None:
    """Parse an optional ``"HH:MM"`` value into minutes after midnight."""
    if value is None:
        return None
    if not isinstance(value, str):
        # YAML 1.1 reads unquoted 08:00 as a sexagesimal integer.
        raise ValueError(f"Clock values must be quoted strings, got {value!r}")
    return clock_to_minutes(value)


def parse_window_end(value: Any) -> int:
    """Like ``parse_clock`` but accepts ``"24:00"`` as end of day."""
    if value == "24:00":
        return MINUTES_PER_DAY
    return parse_clock(value)


def parse_decimal(value: Any) -> Decimal:
    """Parse a number from YAML into an exact Decimal."""
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Cannot parse decimal from {value!r}") from exc


def parse_rounding(data: dict[str, Any] | None) -> RoundingRule:
    """Parse a RoundingRule; an absent section means no rounding."""
    if not data:
        return RoundingRule()
    return RoundingRule(
        rounding_type=RoundingType(data.get("type", "none")),
        interval=int(data.get("interval", 0)),
    )


def parse_boundary(data: dict[str, Any] | None) -> BoundaryRule:
    """Parse a come/go BoundaryRule."""
    if not data:
        return BoundaryRule()
    return BoundaryRule(
        expected=parse_clock(data.get("expected")),
        tolerance_minus=int(data.get("tolerance_minus", 0)),
        tolerance_plus=int(data.get("tolerance_plus", 0)),
        rounding=parse_rounding(data.get("rounding")),
        earliest=parse_clock(data.get("earliest")),
        latest=parse_clock(data.get("latest")),
        next_day=bool(data.get("next_day", False)),
    )


def parse_break_rule(data: dict[str, Any]) -> BreakRule:
    """Parse a BreakRule."""
    return BreakRule(
        break_type=BreakType(data["type"]),
        threshold=int(data.get("threshold", 0)),
        duration=int(data["duration"]),
    )


def parse_surcharge(data: dict[str, Any]) -> SurchargeRule:
    """Parse a SurchargeRule."""
    return SurchargeRule(
        code=data["code"],
        start=parse_clock(data["start"]),
        end=parse_window_end(data["end"]),
        applies_on_workday=bool(data.get("applies_on_workday", True)),
        applies_on_holiday=bool(data.get("applies_on_holiday", False)),
    )


def _optional_int(value: Any) -> int | None:
    return None if value is None else int(value)


def parse_plan(data: dict[str, Any]) -> WorkTimePlan:
    """
    Parse a ``WorkTimePlan`` from a dict.

    Preconditions:
        - ``data`` must contain ``plan_code`` and ``target_minutes``.
    Raises:
        KeyError: if a required key is missing.
        ValueError: if a value is out of range.
        TimeFormatError: if a clock value is malformed.
    """
    return WorkTimePlan(
        plan_code=data["plan_code"],
        target_minutes=int(data["target_minutes"]),
        come=parse_boundary(data.get("come")),
        go=parse_boundary(data.get("go")),
        break_rules=tuple(parse_break_rule(b) for b in data.get("breaks", [])),
        max_net_minutes=_optional_int(data.get("max_net_minutes")),
        min_net_minutes=_optional_int(data.get("min_net_minutes")),
        max_gross_minutes=_optional_int(data.get("max_gross_minutes")),
        surcharges=tuple(parse_surcharge(s) for s in data.get("surcharges", [])),
        round_all_bookings=bool(data.get("round_all_bookings", False)),
        variable_work_time=bool(data.get("variable_work_time", False)),
    )


def parse_bonus_rule(data: dict[str, Any]) -> VacationBonusRule:
    """Parse a VacationBonusRule."""
    return VacationBonusRule(
        category=BonusCategory(data["category"]),
        bonus_days=parse_decimal(data["bonus_days"]),
        threshold=int(data.get("threshold", 0)),
    )


def parse_vacation_policy(data: dict[str, Any]) -> VacationPolicy:
    """Parse a VacationPolicy from a dict."""
    standard = data.get("standard_weekly_hours")
    return VacationPolicy(
        code=data["code"],
        base_days=parse_decimal(data["base_days"]),
        standard_weekly_hours=parse_decimal(standard) if standard is not None else None,
        basis=VacationBasis(data.get("basis", VacationBasis.CALENDAR_YEAR.value)),
        bonus_rules=tuple(parse_bonus_rule(b) for b in data.get("bonus_rules", [])),
        max_carryover_days=parse_decimal(data.get("max_carryover_days", 0)),
    )


def parse_monthly_settings(data: dict[str, Any] | None) -> MonthlySettings:
    """Parse MonthlySettings; an absent section means the defaults."""
    if not data:
        return MonthlySettings()
    return MonthlySettings(
        initial_flextime=int(data.get("initial_flextime", 0)),
        max_carryover_minutes=int(data.get("max_carryover_minutes", 0)),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Postconditions:
        - Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()

"""
worktime_config -- YAML-authored work-time plans and policies.

Responsibility:
    Provides ``load_catalog()``, the single way to turn a YAML catalog
    into validated ``WorkTimePlan`` values, vacation policies and
    flextime settings.  The engines never read configuration; callers
    load a catalog and pass plans in explicitly.

Architecture position:
    Configuration -- sits above ``worktime_kernel`` and
    ``worktime_engines`` and below ``worktime_services``.  The kernel and
    engines MUST NEVER import from ``worktime_config``.

Invariants enforced:
    - Every problem found while parsing or validating is reported at once
      in a single ``InvalidConfigurationError``.
    - Deterministic checksum: the same YAML always yields the same
      catalog checksum.

Failure modes:
    - ``FileNotFoundError`` -- the catalog file does not exist.
    - ``InvalidConfigurationError`` -- parse or validation errors.

Audit relevance:
    Every successful ``load_catalog()`` call emits a
    ``WORKTIME_CONFIG_TRACE`` log entry with the catalog id, version,
    checksum and plan count, tying each calculation run back to the exact
    configuration that governed it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from worktime_config.loader import (
    compute_checksum,
    load_yaml_file,
    parse_monthly_settings,
    parse_plan,
    parse_vacation_policy,
)
from worktime_config.schema import MonthlySettings, VacationPolicy, WorktimeCatalog
from worktime_config.validator import CatalogValidationResult, validate_catalog
from worktime_kernel.exceptions import InvalidConfigurationError, TimeFormatError

_logger = logging.getLogger("worktime_kernel.config")

# Default catalog shipped with the package
DEFAULT_CATALOG_PATH = Path(__file__).parent / "sets" / "default.yaml"

_PARSE_ERRORS = (KeyError, ValueError, TypeError, TimeFormatError)


def _parse_section(
    items: list[dict[str, Any]],
    parser: Any,
    label: str,
    errors: list[str],
) -> tuple:
    parsed = []
    for index, item in enumerate(items):
        try:
            parsed.append(parser(item))
        except _PARSE_ERRORS as exc:
            name = item.get("plan_code") or item.get("code") if isinstance(item, dict) else None
            errors.append(f"{label}[{index}]{f' ({name})' if name else ''}: {exc}")
    return tuple(parsed)


def load_catalog(path: Path | None = None) -> WorktimeCatalog:
    """Load, parse and validate a YAML catalog.

    Args:
        path: Catalog file.  Defaults to ``worktime_config/sets/default.yaml``.

    Returns:
        A validated WorktimeCatalog.

    Raises:
        FileNotFoundError: If the file does not exist.
        InvalidConfigurationError: Listing every parse and validation error.
    """
    path = Path(path) if path is not None else DEFAULT_CATALOG_PATH
    data = load_yaml_file(path)

    errors: list[str] = []
    plans = _parse_section(data.get("plans", []), parse_plan, "plans", errors)
    policies = _parse_section(
        data.get("vacation_policies", []), parse_vacation_policy, "vacation_policies", errors,
    )
    try:
        monthly = parse_monthly_settings(data.get("monthly"))
    except _PARSE_ERRORS as exc:
        errors.append(f"monthly: {exc}")
        monthly = MonthlySettings()

    catalog = WorktimeCatalog(
        catalog_id=str(data.get("catalog_id", path.stem)),
        version=int(data.get("version", 1)),
        checksum=compute_checksum(data),
        plans=plans,
        vacation_policies=policies,
        monthly=monthly,
    )

    validation = validate_catalog(catalog)
    errors.extend(validation.errors)
    if errors:
        raise InvalidConfigurationError(str(path), errors)

    for warning in validation.warnings:
        _logger.warning("config_validation_warning", extra={
            "catalog_id": catalog.catalog_id,
            "warning": warning,
        })

    _logger.info(
        "WORKTIME_CONFIG_TRACE",
        extra={
            "trace_type": "WORKTIME_CONFIG_TRACE",
            "catalog_id": catalog.catalog_id,
            "catalog_version": catalog.version,
            "checksum": catalog.checksum,
            "plan_count": len(catalog.plans),
            "vacation_policy_count": len(catalog.vacation_policies),
        },
    )
    return catalog


__all__ = [
    "DEFAULT_CATALOG_PATH",
    "CatalogValidationResult",
    "MonthlySettings",
    "VacationPolicy",
    "WorktimeCatalog",
    "compute_checksum",
    "load_catalog",
    "load_yaml_file",
    "parse_monthly_settings",
    "parse_plan",
    "parse_vacation_policy",
    "validate_catalog",
]

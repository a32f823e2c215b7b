"""
Structured logging (``worktime_kernel.logging_config``).

Every record under the ``worktime_kernel`` logger tree is written as one
JSON object per line.  A record carries:

* ``ts``, ``level``, ``logger``, ``message`` -- always present;
* the calculation context bound with ``LogContext.bind`` (``employee_id``,
  ``work_date``, ``correlation_id``) -- when bound;
* everything passed through ``extra=`` -- minute figures, plan codes,
  finding lists;
* for a kernel exception, ``exc_code`` plus one ``exc_<field>`` per
  structured attribute (``exc_booking_count``, ``exc_work_date``, ...).

Engines only ever call ``get_logger``; configuring handlers is left to the
application (or the test session).
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any

from worktime_kernel.exceptions import WorktimeKernelError

__all__ = [
    "LogContext",
    "StructuredFormatter",
    "configure_logging",
    "get_logger",
    "reset_logging",
]

ROOT_LOGGER = "worktime_kernel"

_EMPTY: Mapping[str, str] = MappingProxyType({})
_bound: ContextVar[Mapping[str, str]] = ContextVar("worktime_log_context", default=_EMPTY)


class LogContext:
    """Calculation context attached to every record emitted while bound."""

    FIELDS = ("correlation_id", "employee_id", "work_date")

    @classmethod
    @contextmanager
    def bind(cls, **fields: str | date | None) -> Iterator[None]:
        """Bind fields for the duration of a ``with`` block.

        ``None`` values are skipped; dates are stored as ISO strings.

        Raises:
            ValueError: for a field outside ``FIELDS``.
        """
        unknown = set(fields) - set(cls.FIELDS)
        if unknown:
            raise ValueError(f"Unknown log context field(s): {sorted(unknown)}")
        merged = dict(_bound.get())
        for name, value in fields.items():
            if value is not None:
                merged[name] = value.isoformat() if isinstance(value, date) else value
        token = _bound.set(MappingProxyType(merged))
        try:
            yield
        finally:
            _bound.reset(token)

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return dict(_bound.get())

    @classmethod
    def clear(cls) -> None:
        _bound.set(_EMPTY)


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return str(value)


# Attributes every LogRecord has; anything else on a record came from extra=
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_bound.get(),
        }
        payload.update(
            (key, value) for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and key not in payload
        )
        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=_json_default)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    if isinstance(exc, WorktimeKernelError):
        fields["exc_code"] = exc.code
        for name, value in vars(exc).items():
            if not name.startswith("_"):
                fields[f"exc_{name}"] = value
    return fields


def get_logger(name: str) -> logging.Logger:
    """Logger ``worktime_kernel.<name>``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def _structured_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if isinstance(h.formatter, StructuredFormatter)]


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """Attach a JSON handler to the ``worktime_kernel`` tree.

    A second call while a structured handler is attached does nothing.
    """
    root = logging.getLogger(ROOT_LOGGER)
    if _structured_handlers(root):
        return
    target = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
    target.setFormatter(StructuredFormatter())
    root.addHandler(target)
    root.setLevel(level)
    root.propagate = False


def reset_logging() -> None:
    """Detach all handlers from the ``worktime_kernel`` tree (tests only)."""
    root = logging.getLogger(ROOT_LOGGER)
    for h in list(root.handlers):
        root.removeHandler(h)
    root.setLevel(logging.NOTSET)
    root.propagate = True

"""Structured JSON logging for the API process.

Standard library records and Structlog events end up as one JSON object per
line on stdout. Both carry the correlation id of the request being served
and redact configured sensitive keys (secret keys, tokens ...).

Thread Safety:
    - The correlation id lives in a ``ContextVar`` and follows each request.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterable, Mapping
from contextvars import ContextVar, Token
from typing import Any

import structlog

from Multitenant_API.config.settings import LoggingSettings

REDACTED = "***"

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)

# Attributes every LogRecord carries; anything else was passed through ``extra``.
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
}


def _redact(value: Any, sensitive: frozenset[str]) -> Any:
    if isinstance(value, Mapping):
        return {
            key: REDACTED if str(key).lower() in sensitive else _redact(item, sensitive)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_redact(item, sensitive) for item in value]
    return value


class JsonFormatter(logging.Formatter):
    """Render a record, its ``extra`` fields and the correlation id as JSON."""

    def __init__(self, *, scrub_fields: Iterable[str] | None = None) -> None:
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%S%z")
        self._sensitive = frozenset(name.lower() for name in scrub_fields or ())

    def format(self, record: logging.LogRecord) -> str:
        extras = {
            key: value for key, value in vars(record).items() if key not in _STANDARD_ATTRS
        }
        payload: dict[str, Any] = {
            **_redact(extras, self._sensitive),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "time": self.formatTime(record, self.datefmt),
        }
        correlation_id = _correlation_id.get()
        if correlation_id:
            payload.setdefault("correlation_id", correlation_id)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, sort_keys=True, default=str)


def _add_correlation_and_redact(sensitive: frozenset[str]):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        correlation_id = _correlation_id.get()
        if correlation_id:
            event_dict.setdefault("correlation_id", correlation_id)
        return _redact(event_dict, sensitive)

    return processor


def _level_value(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    settings: LoggingSettings | None = None,
) -> None:
    """Install JSON output for ``logging`` and ``structlog``.

    ``settings`` wins over ``level`` when both are given. Handlers installed
    by pytest are kept so that log capture keeps working under test.
    """
    sensitive: frozenset[str] = frozenset()
    if settings is not None:
        level = settings.level
        sensitive = frozenset(name.lower() for name in settings.scrub_fields)
    level_value = _level_value(level)
    formatter = JsonFormatter(scrub_fields=sensitive)

    stdout = logging.StreamHandler(sys.stdout)
    stdout.setFormatter(formatter)
    handlers: list[logging.Handler] = [stdout]
    for existing in logging.getLogger().handlers:
        if type(existing).__module__.startswith("_pytest."):
            existing.setFormatter(formatter)
            handlers.append(existing)
    logging.basicConfig(level=level_value, handlers=handlers, force=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _add_correlation_and_redact(sensitive),
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


def bind_correlation_id(value: str) -> Token[str | None]:
    """Bind ``value`` for the current request; returns the reset token."""
    structlog.contextvars.bind_contextvars(correlation_id=value)
    return _correlation_id.set(value)


def reset_correlation_id(token: Token[str | None] | None) -> None:
    structlog.contextvars.unbind_contextvars("correlation_id")
    if token is not None:
        _correlation_id.reset(token)


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = [
    "JsonFormatter",
    "bind_correlation_id",
    "configure_logging",
    "get_correlation_id",
    "get_logger",
    "reset_correlation_id",
]

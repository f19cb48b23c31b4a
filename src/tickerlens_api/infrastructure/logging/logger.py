# src/tickerlens_api/infrastructure/logging/logger.py
# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""JSON-lines logging for TickerLens.

Every record is one JSON object with ``ts``, ``level``, ``logger`` and
``message``, plus the request correlation ids bound by the request-id
middleware and whatever the call site passed via ``extra=``.

Provider access keys travel as query parameters (``apikey`` for FMP,
``apiKey`` for Polygon), so the formatter scrubs them from extras and
message text, and the httpx/httpcore loggers (which log full request URLs)
are held at WARNING.

Typical usage:
    configure_root_logging()
    logger = get_json_logger(__name__)
    logger.info("snapshot.assembled", extra={"symbol": "AAPL"})
"""

from __future__ import annotations

import json
import logging
import os
import re
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any, Final

__all__ = [
    "configure_root_logging",
    "get_json_logger",
    "set_request_context",
    "clear_request_context",
    "get_request_id",
    "get_trace_id",
]

_REQUEST_ID: ContextVar[str | None] = ContextVar("tickerlens_request_id", default=None)
_TRACE_ID: ContextVar[str | None] = ContextVar("tickerlens_trace_id", default=None)

_STANDARD_ATTRS: Final[frozenset[str]] = frozenset(
    vars(logging.makeLogRecord({}))
) | {"message", "asctime"}

_SECRET_KEYS: Final[frozenset[str]] = frozenset(
    {"apikey", "api_key", "access_key", "authorization", "token", "password"}
)
_SECRET_IN_TEXT: Final[re.Pattern[str]] = re.compile(
    r"(?i)\b(apikey|api_key|access_key)=[^&\s\"']+"
)
REDACTED: Final[str] = "***"

_NOISY_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore")


def set_request_context(*, request_id: str | None = None, trace_id: str | None = None) -> None:
    """Bind correlation ids to the current context; ``None`` leaves a value as is."""
    if request_id is not None:
        _REQUEST_ID.set(request_id)
    if trace_id is not None:
        _TRACE_ID.set(trace_id)


def clear_request_context() -> None:
    _REQUEST_ID.set(None)
    _TRACE_ID.set(None)


def get_request_id() -> str | None:
    return _REQUEST_ID.get()


def get_trace_id() -> str | None:
    return _TRACE_ID.get()


def _scrub(value: Any) -> Any:
    if isinstance(value, str):
        return _SECRET_IN_TEXT.sub(lambda m: f"{m.group(1)}={REDACTED}", value)
    if isinstance(value, dict):
        return {
            k: REDACTED if str(k).lower() in _SECRET_KEYS else _scrub(v) for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_scrub(v) for v in value]
    return value


class _JsonFormatter(logging.Formatter):
    """Render a record as one JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": _scrub(record.getMessage()),
        }

        request_id = getattr(record, "request_id", None) or _REQUEST_ID.get()
        trace_id = getattr(record, "trace_id", None) or _TRACE_ID.get()
        if request_id:
            payload["request_id"] = request_id
        if trace_id:
            payload["trace_id"] = trace_id

        if record.exc_info and record.exc_info[0] is not None:
            payload["exc_type"] = record.exc_info[0].__name__
            payload["exc_message"] = _scrub(str(record.exc_info[1]))

        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and key not in payload and not key.startswith("_")
        }
        payload.update(_scrub(extras))
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str)


def configure_root_logging(level: str | int | None = None) -> None:
    """Install the JSON handler on the root logger once.

    Args:
        level: Level or level name; defaults to ``LOG_LEVEL`` or ``INFO``.
    """
    root = logging.getLogger()
    resolved = level if level is not None else (os.getenv("LOG_LEVEL") or "INFO")
    root.setLevel(resolved.upper() if isinstance(resolved, str) else resolved)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if root.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(_JsonFormatter())
    root.addHandler(handler)


def get_json_logger(name: str) -> logging.Logger:
    """Return the named logger; output goes through the root JSON handler."""
    return logging.getLogger(name)

# src/fact_cache/infrastructure/logging/logger.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Structured JSON logging utilities.

This module exposes an idempotent root configurator and a per-module logger
factory that produce one JSON object per line.

Features:
    * Stable keys: ``ts``, ``level``, ``logger``, ``message``.
    * Fields passed through ``extra={...}`` are merged into the payload.
    * Exception type and message added when ``exc_info`` is present.

Typical usage:
    configure_root_logging()
    log = get_json_logger(__name__)
    log.debug("fact_cache.hit", extra={"fact": "os_release"})
"""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from typing import Any

__all__ = ["configure_root_logging", "get_json_logger"]

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime", "taskName"}


class _JsonFormatter(logging.Formatter):
    """JSON log formatter emitting stable keys and caller extras."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a JSON object.

        Args:
            record: Logging record.

        Returns:
            str: JSON-encoded log line.
        """
        payload: dict[str, Any] = {
            "ts": datetime.now(tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in payload:
                payload[key] = value

        # Exceptions: guard against None in exc_info tuple.
        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            if exc_type is not None:
                payload["exc_type"] = exc_type.__name__
            if exc_value is not None:
                payload["exc_message"] = str(exc_value)

        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str)


def configure_root_logging(level: str | int | None = None) -> None:
    """Initialize the root logger with a JSON stream handler (idempotent).

    Args:
        level: Logging level or level name. If ``None``, use env ``LOG_LEVEL`` or ``INFO``.
    """
    root = logging.getLogger()

    env_level = os.getenv("LOG_LEVEL")
    resolved: int | str = (
        level if level is not None else (env_level.upper() if env_level else "INFO")
    )
    root.setLevel(resolved)

    if root.handlers:
        # Already configured; keep existing handlers.
        return

    handler = logging.StreamHandler()
    handler.setFormatter(_JsonFormatter())
    root.addHandler(handler)


def get_json_logger(name: str) -> logging.Logger:
    """Return a module-specific logger backed by the JSON root handler.

    This does *not* implicitly configure the root logger. Call
    :func:`configure_root_logging` once at startup.

    Args:
        name: Logger name, typically ``__name__`` of the caller.

    Returns:
        logging.Logger: Configured logger.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.propagate = True
    return logger

# src/fact_cache/domain/exceptions/base.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Base Domain Exceptions.

Summary:
    Canonical base class for fact cache exceptions so callers can map failures
    to log events, metrics and CLI exit codes from a stable ``code``.

Layer:
    domain/exceptions
"""

from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base class for all fact cache exceptions.

    Attributes:
        code:
            Stable error code suitable for logs, metrics and exit codes.
        details:
            Optional machine-readable diagnostic payload (paths, fact names).
    """

    code: str = "DOMAIN_ERROR"

    def __init__(self, message: str = "", *, details: dict[str, Any] | None = None) -> None:
        """Initialize a DomainError instance.

        Args:
            message:
                Human-readable error message.
            details:
                Optional structured diagnostic payload for logs.

        """
        super().__init__(message)
        self.details: dict[str, Any] = details or {}

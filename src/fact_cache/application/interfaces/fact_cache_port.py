# src/fact_cache/application/interfaces/fact_cache_port.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Application Interface: Fact Cache Port.

Synopsis:
    Minimal TTL-bounded fact cache behavior used by fact computations.
    Enables swapping the YAML file implementation for in-memory stubs in
    tests.

Layer:
    application/interfaces
"""

from __future__ import annotations

from typing import Any, Protocol

from fact_cache.domain.entities.cache_entry import FactMapping


class FactCachePort(Protocol):
    """Fact cache with per-entry TTL semantics.

    Implementations return ``None`` for missing, stale and corrupt entries
    alike and never raise from ``cached``.
    """

    def cached(self, fact_name: str | None, ttl: int | None = None) -> FactMapping | None:
        """Return the stored mapping for a fact if it is still fresh.

        Args:
            fact_name: Fact identifier.
            ttl: Optional freshness window override in seconds.

        Returns:
            The deserialized mapping, or ``None`` when absent.
        """

    def cache(self, fact_name: str | None, value: Any) -> None:
        """Persist ``{fact_name: value}``.

        Args:
            fact_name: Fact identifier. ``None`` makes the call a no-op.
            value: Structured value. ``None`` makes the call a no-op.
        """

# src/fact_cache/application/use_cases/cached_or_compute.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Use Case: Cached-or-Compute.

Purpose:
    Read-through helper for fact code: reuse a hot cache entry, otherwise
    compute the value and store it.

Layer:
    application/use_cases
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fact_cache.application.interfaces.fact_cache_port import FactCachePort


def cached_or_compute(
    cache: FactCachePort,
    fact_name: str,
    compute: Callable[[], Any],
    *,
    ttl: int | None = None,
) -> Any:
    """Return a fact value from cache or from ``compute``.

    A hot entry is used only when its mapping is keyed by ``fact_name``;
    any other shape counts as a miss. A ``None`` result from ``compute`` is
    returned but not stored.

    Args:
        cache: FactCachePort implementation.
        fact_name: Fact identifier.
        compute: Callable producing the fresh value on a miss.
        ttl: Optional freshness window override in seconds.

    Returns:
        The cached or freshly computed value.
    """
    entry = cache.cached(fact_name, ttl=ttl)
    if entry is not None and fact_name in entry:
        return entry[fact_name]

    value = compute()
    if value is not None:
        cache.cache(fact_name, value)
    return value

# src/fact_cache/infrastructure/observability/metrics.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Prometheus metrics for the fact cache (registry-aware, test safe).

Accessor functions return collectors bound to the **current**
``prometheus_client.REGISTRY``. Collectors are created on first use and
reused afterwards; tests that swap the default registry get fresh
collectors without duplicate-registration errors.

Example:
    get_fact_cache_operations_total().labels(operation="cached", outcome="hit").inc()
    get_fact_cache_operation_duration_seconds().labels(operation="cache").observe(0.002)
"""

from __future__ import annotations

import logging
import threading
from contextlib import suppress
from typing import Final

import prometheus_client as prom
from prometheus_client import Counter, Histogram

_log = logging.getLogger(__name__)

# Filesystem-scale buckets (seconds).
_BUCKETS: Final[tuple[float, ...]] = (
    0.0005,
    0.001,
    0.0025,
    0.005,
    0.010,
    0.025,
    0.050,
    0.100,
    0.250,
    1.000,
)

_registry_id: int | None = None
_collector_cache: dict[str, Counter | Histogram] = {}
_lock = threading.RLock()


def _ensure_registry() -> None:
    """Reset the collector cache if the active registry changed."""
    global _registry_id
    with _lock:
        rid = id(prom.REGISTRY)
        if _registry_id != rid:
            _collector_cache.clear()
            _registry_id = rid


def _lookup_existing(name: str, kind: type) -> Counter | Histogram | None:
    """Return a collector already registered under ``name`` on the active registry.

    Args:
        name: Collector name.
        kind: Expected collector class.

    Returns:
        Existing collector of the expected type, or ``None``.
    """
    with _lock, suppress(Exception):
        mapping = getattr(prom.REGISTRY, "_names_to_collectors", None)
        if isinstance(mapping, dict):
            col = mapping.get(name)
            if isinstance(col, kind):
                return col
    return None


def _get_or_create(
    kind: type,
    name: str,
    help_text: str,
    labelnames: tuple[str, ...],
    **kwargs: object,
) -> Counter | Histogram:
    """Get or create a registry-bound collector with stable identity.

    Strategy:
        1. Return from module cache if present for the active registry.
        2. If the registry already has a collector by this name, reuse it.
        3. Otherwise register a new collector on the active registry.

    Args:
        kind: ``Counter`` or ``Histogram``.
        name: Metric name (snake_case).
        help_text: Human-readable description.
        labelnames: Label names.
        **kwargs: Extra collector arguments (e.g. ``buckets``).

    Returns:
        The collector bound to ``prom.REGISTRY``.
    """
    _ensure_registry()
    with _lock:
        cached = _collector_cache.get(name)
        if isinstance(cached, kind):
            return cached

        existing = _lookup_existing(name, kind)
        if existing is not None:
            _collector_cache[name] = existing
            return existing

        try:
            col = kind(name, help_text, labelnames, registry=prom.REGISTRY, **kwargs)
        except ValueError as exc:
            if "Duplicated timeseries" in str(exc):
                again = _lookup_existing(name, kind)
                if again is not None:
                    _collector_cache[name] = again
                    return again
            _log.exception("Failed to register Prometheus collector %s", name)
            raise
        _collector_cache[name] = col
        return col


def get_fact_cache_operations_total() -> Counter:
    """Return the counter of fact cache operations.

    Labels:
        operation: ``cached`` or ``cache``.
        outcome: ``hit``, ``missing``, ``stale``, ``corrupt``, ``disabled``,
            ``invalid``, ``written`` or ``error``.

    Returns:
        Counter: Labelled collector.
    """
    col = _get_or_create(
        Counter,
        "fact_cache_operations_total",
        "Fact cache operations by outcome",
        ("operation", "outcome"),
    )
    assert isinstance(col, Counter)
    return col


def get_fact_cache_operation_duration_seconds() -> Histogram:
    """Return the histogram of fact cache operation latency.

    Labels:
        operation: ``cached`` or ``cache``.

    Returns:
        Histogram: Labelled collector.
    """
    col = _get_or_create(
        Histogram,
        "fact_cache_operation_duration_seconds",
        "Latency (seconds) of fact cache operations",
        ("operation",),
        buckets=_BUCKETS,
    )
    assert isinstance(col, Histogram)
    return col


def record_operation(operation: str, outcome: str, duration: float) -> None:
    """Record one cache operation; metric failures are never propagated.

    Args:
        operation: ``cached`` or ``cache``.
        outcome: Outcome label.
        duration: Elapsed time in seconds.
    """
    with suppress(Exception):
        get_fact_cache_operations_total().labels(operation=operation, outcome=outcome).inc()
        get_fact_cache_operation_duration_seconds().labels(operation=operation).observe(duration)

"""File-backed, TTL-bounded cache for named facts."""

from __future__ import annotations

from fact_cache.application.use_cases.cached_or_compute import cached_or_compute
from fact_cache.domain.entities.cache_entry import CacheEntryState
from fact_cache.infrastructure.caching.yaml_fact_cache import YamlFactCache

__all__ = ["CacheEntryState", "YamlFactCache", "cached_or_compute"]

# src/fact_cache/infrastructure/host/settings_capabilities.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Settings-backed host capabilities.

Synopsis:
    Implementations of ``ExternalFactsGate`` and ``SearchPathProvider`` that
    answer from :class:`fact_cache.config.settings.Settings`, plus a factory
    that wires a ready-to-use :class:`YamlFactCache`.

Layer:
    infrastructure/host
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from fact_cache.config.settings import Settings, get_settings
from fact_cache.infrastructure.caching.yaml_fact_cache import YamlFactCache


@dataclass(frozen=True)
class SettingsExternalFactsGate:
    """Feature gate reading ``FACT_CACHE_EXTERNAL_FACTS_ENABLED``."""

    settings: Settings

    def external_facts_enabled(self) -> bool:
        return self.settings.external_facts_enabled


@dataclass(frozen=True)
class SettingsSearchPath:
    """Search path reading ``FACT_CACHE_SEARCH_PATH``."""

    settings: Settings

    def search_external_path(self) -> Sequence[str]:
        return self.settings.search_path


def build_fact_cache(settings: Settings | None = None) -> YamlFactCache:
    """Build a YAML fact cache wired to settings-backed capabilities.

    Args:
        settings: Settings to use; defaults to :func:`get_settings`.

    Returns:
        A configured :class:`YamlFactCache`.
    """
    resolved = settings or get_settings()
    return YamlFactCache(
        gate=SettingsExternalFactsGate(resolved),
        search_path=SettingsSearchPath(resolved),
        ttl=resolved.ttl_seconds,
    )

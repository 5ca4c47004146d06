# src/fact_cache/config/settings.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Fact Cache Configuration (Pydantic Settings, v2)

Summary:
    Typed, validated configuration for the fact cache. Only the CLI and the
    settings-backed host adapters read it; the cache itself receives its TTL
    and host capabilities through its constructor.

Design:
    - Pydantic v2 BaseSettings with `extra='forbid'` to catch unknown keys.
    - Explicit field declarations with constrained ranges.
    - Search path kept as the raw `os.pathsep`-separated string and parsed on
      access.
    - Singleton accessor `get_settings()` with LRU cache.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fact_cache.domain.entities.cache_entry import DEFAULT_TTL_S

logger = logging.getLogger(__name__)

#: Conventional external facts directory of the host.
DEFAULT_SEARCH_PATH = "/etc/facter/facts.d"


class Settings(BaseSettings):
    """Typed configuration for the fact cache."""

    external_facts_enabled: bool = Field(
        default=True,
        description="Gate for file-backed external fact caching. When false, reads and writes are no-ops.",
        validation_alias="FACT_CACHE_EXTERNAL_FACTS_ENABLED",
    )

    search_path_raw: str = Field(
        default=DEFAULT_SEARCH_PATH,
        description=(
            "Candidate cache directories separated by os.pathsep. Only the first "
            "directory is used for reads and writes."
        ),
        validation_alias="FACT_CACHE_SEARCH_PATH",
    )

    ttl_seconds: int = Field(
        default=DEFAULT_TTL_S,
        ge=1,
        le=31 * 24 * 60 * 60,
        description="Freshness window for cache entries in seconds.",
        validation_alias="FACT_CACHE_TTL_SECONDS",
    )

    log_level: str | None = Field(
        default=None,
        description="Override log level (e.g., 'DEBUG', 'INFO'). If not set, defaults are used.",
        validation_alias="LOG_LEVEL",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="forbid",
        case_sensitive=False,
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str | None) -> str | None:
        """Upper-case the log level name.

        Args:
            value: Raw level name.

        Returns:
            Normalized level name, or ``None`` when unset/blank.
        """
        if value is None or not value.strip():
            return None
        return value.strip().upper()

    @property
    def search_path(self) -> list[str]:
        """Return the parsed candidate directory list.

        Returns:
            Non-blank directory entries in their configured order.
        """
        return [p.strip() for p in self.search_path_raw.split(os.pathsep) if p.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton `Settings` instance.

    Returns:
        Settings: Validated settings.

    Raises:
        RuntimeError: If configuration is invalid.
    """
    try:
        settings = Settings()
    except ValidationError as exc:
        logger.error("Invalid fact cache configuration", extra={"errors": exc.errors()})
        raise RuntimeError(f"Invalid fact cache configuration: {exc}") from exc

    logger.info(
        "Settings initialized",
        extra={
            "external_facts_enabled": settings.external_facts_enabled,
            "search_path": settings.search_path,
            "ttl_seconds": settings.ttl_seconds,
        },
    )
    return settings

# src/fact_cache/infrastructure/caching/yaml_fact_cache.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""YAML Fact Cache (file-backed).

Synopsis:
    Implements the application FactCachePort on top of one YAML file per
    fact. Reads reuse an entry while it is younger than the TTL; writes
    create or overwrite the entry.

Design:
    * Host state is injected: an ``ExternalFactsGate`` and a
      ``SearchPathProvider``. Only the first search directory is used.
    * Entry path: ``<first directory>/<fact name>.yaml``; content is the single
      document ``{fact name: value}``.
    * Read path never raises: missing, stale, corrupt and unreadable entries
      all yield ``None``.
    * Write path short-circuits on a ``None``/empty name or ``None`` value
      before consulting any collaborator; filesystem failures are raised as
      domain errors.
    * The value is serialized before the entry is opened, so an
      unrepresentable value leaves an existing entry untouched.
    * No locking; last writer wins.

Layer:
    infrastructure/caching

See Also:
    - fact_cache.application.interfaces.fact_cache_port.FactCachePort
    - fact_cache.infrastructure.caching.yaml_codec
"""

from __future__ import annotations

import os
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml

from fact_cache.application.interfaces.fact_cache_port import FactCachePort
from fact_cache.application.interfaces.host_capabilities import (
    ExternalFactsGate,
    SearchPathProvider,
)
from fact_cache.domain.entities.cache_entry import (
    DEFAULT_TTL_S,
    ENTRY_EXTENSION,
    CacheEntryState,
    FactMapping,
)
from fact_cache.domain.exceptions.fact_cache import (
    CacheDirectoryMissing,
    CacheEntryParseError,
    CacheWriteError,
    InvalidFactName,
)
from fact_cache.infrastructure.caching import yaml_codec
from fact_cache.infrastructure.logging.logger import get_json_logger
from fact_cache.infrastructure.observability.metrics import record_operation

__all__ = ["YamlFactCache"]

logger = get_json_logger(__name__)

_OUTCOME_BY_STATE = {
    CacheEntryState.FRESH: "hit",
    CacheEntryState.MISSING: "missing",
    CacheEntryState.STALE: "stale",
    CacheEntryState.CORRUPT: "corrupt",
    CacheEntryState.DISABLED: "disabled",
}


def _is_unsafe_name(name: str) -> bool:
    """Return True when ``name`` would resolve outside the cache directory."""
    if name in (".", ".."):
        return True
    separators = {os.sep, "/"}
    if os.altsep:
        separators.add(os.altsep)
    return any(sep in name for sep in separators)


class YamlFactCache(FactCachePort):
    """File-backed fact cache with a per-entry freshness window.

    Args:
        gate: Feature gate queried before any filesystem access.
        search_path: Provider of candidate cache directories.
        ttl: Default freshness window in seconds.
        clock: Wall-clock source returning epoch seconds, compared against
            file modification times.
    """

    def __init__(
        self,
        *,
        gate: ExternalFactsGate,
        search_path: SearchPathProvider,
        ttl: int = DEFAULT_TTL_S,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._gate = gate
        self._search_path = search_path
        self._ttl = ttl
        self._clock = clock

    @property
    def ttl(self) -> int:
        """Default freshness window in seconds."""
        return self._ttl

    # ------------------------------------------------------------------ #
    # Path resolution
    # ------------------------------------------------------------------ #
    def _cache_directory(self) -> Path | None:
        """Return the first candidate directory, or ``None`` if there is none."""
        directories = list(self._search_path.search_external_path())
        if not directories:
            return None
        return Path(directories[0])

    def entry_path(self, fact_name: str, source: str | os.PathLike[str] | None = None) -> Path | None:
        """Resolve the entry file for a fact.

        Args:
            fact_name: Fact identifier.
            source: Explicit entry file; bypasses the search path when given.

        Returns:
            ``<first directory>/<fact_name>.yaml``, ``source`` as a ``Path``,
            or ``None`` when the search path is empty.

        Raises:
            InvalidFactName: If ``fact_name`` contains a path separator or is
                ``.``/``..``.
        """
        if source is not None:
            return Path(source)
        if _is_unsafe_name(fact_name):
            raise InvalidFactName(
                f"Fact name {fact_name!r} cannot be used as a cache file name",
                details={"fact": fact_name},
            )
        directory = self._cache_directory()
        if directory is None:
            return None
        return directory / f"{fact_name}.{ENTRY_EXTENSION}"

    # ------------------------------------------------------------------ #
    # Read path
    # ------------------------------------------------------------------ #
    def _probe(
        self,
        fact_name: str | None,
        ttl: int | None,
        source: str | os.PathLike[str] | None,
    ) -> tuple[CacheEntryState, FactMapping | None]:
        """Classify an entry and load it when fresh. Never raises."""
        if fact_name is None or str(fact_name) == "":
            return CacheEntryState.MISSING, None
        name = str(fact_name)

        if not self._gate.external_facts_enabled():
            return CacheEntryState.DISABLED, None

        try:
            path = self.entry_path(name, source)
        except InvalidFactName:
            logger.warning("fact_cache.invalid_name", extra={"fact": name})
            return CacheEntryState.MISSING, None
        if path is None:
            return CacheEntryState.MISSING, None

        window = self._ttl if ttl is None else ttl
        try:
            if not path.exists():
                return CacheEntryState.MISSING, None
            age = self._clock() - path.stat().st_mtime
        except OSError as exc:
            # Name too long, permission denied, or removed before stat.
            logger.warning("fact_cache.stat_failed", extra={"fact": name, "path": str(path), "error": str(exc)})
            return CacheEntryState.MISSING, None
        if age >= window:
            return CacheEntryState.STALE, None

        try:
            mapping = yaml_codec.load_file(path)
        except CacheEntryParseError as exc:
            logger.warning(
                "fact_cache.corrupt",
                extra={"fact": name, "path": str(path), "error": str(exc), **exc.details},
            )
            return CacheEntryState.CORRUPT, None
        except OSError as exc:
            logger.warning("fact_cache.read_failed", extra={"fact": name, "path": str(path), "error": str(exc)})
            return CacheEntryState.CORRUPT, None

        return CacheEntryState.FRESH, mapping

    def cached(
        self,
        fact_name: str | None,
        ttl: int | None = None,
        source: str | os.PathLike[str] | None = None,
    ) -> FactMapping | None:
        """Return the stored mapping for a fact if its entry is still fresh.

        The mapping is returned exactly as deserialized, not re-keyed by
        ``fact_name``.

        Args:
            fact_name: Fact identifier.
            ttl: Freshness window override in seconds; ``None`` uses the
                instance default. Entries aged ``>= ttl`` are cold.
            source: Explicit entry file instead of the search path.

        Returns:
            The mapping, or ``None`` when the entry is missing, stale, corrupt,
            unreadable, or caching is disabled.
        """
        start = time.perf_counter()
        state, mapping = self._probe(fact_name, ttl, source)
        record_operation("cached", _OUTCOME_BY_STATE[state], time.perf_counter() - start)
        logger.debug("fact_cache.lookup", extra={"fact": fact_name, "state": state.value})
        return mapping

    def inspect(
        self,
        fact_name: str | None,
        ttl: int | None = None,
        source: str | os.PathLike[str] | None = None,
    ) -> CacheEntryState:
        """Classify the entry for a fact without returning its content.

        Args:
            fact_name: Fact identifier.
            ttl: Freshness window override in seconds.
            source: Explicit entry file instead of the search path.

        Returns:
            The observed :class:`CacheEntryState`.
        """
        state, _ = self._probe(fact_name, ttl, source)
        return state

    # ------------------------------------------------------------------ #
    # Write path
    # ------------------------------------------------------------------ #
    def cache(
        self,
        fact_name: str | None,
        value: Any,
        source: str | os.PathLike[str] | None = None,
    ) -> None:
        """Persist ``{fact_name: value}`` to the fact's entry file.

        A ``None`` or empty ``fact_name``, or a ``None`` value, returns
        immediately without querying the gate, the search path or the
        filesystem.

        Args:
            fact_name: Fact identifier.
            value: Scalar, sequence or string-keyed mapping.
            source: Explicit entry file instead of the search path.

        Raises:
            InvalidFactName: If the name would escape the cache directory.
            CacheDirectoryMissing: If the target directory does not exist or
                the search path is empty.
            CacheWriteError: If the value cannot be serialized or the entry
                cannot be written.
        """
        if fact_name is None or str(fact_name) == "" or value is None:
            return
        name = str(fact_name)

        start = time.perf_counter()
        outcome = "error"
        try:
            if not self._gate.external_facts_enabled():
                outcome = "disabled"
                return

            try:
                path = self.entry_path(name, source)
            except InvalidFactName:
                outcome = "invalid"
                raise

            directory = path.parent if path is not None else None
            if directory is None or not directory.exists():
                raise CacheDirectoryMissing(
                    "Cache directory does not exist",
                    details={"fact": name, "directory": str(directory) if directory else None},
                )

            try:
                text = yaml_codec.dumps({name: value})
            except yaml.YAMLError as exc:
                raise CacheWriteError(
                    f"Value for fact {name!r} cannot be serialized",
                    details={"fact": name, "path": str(path), "error": str(exc)},
                ) from exc

            try:
                with path.open("w", encoding="utf-8") as fh:
                    fh.write(text)
            except OSError as exc:
                raise CacheWriteError(
                    f"Cannot write cache entry for fact {name!r}",
                    details={"fact": name, "path": str(path), "error": str(exc)},
                ) from exc

            outcome = "written"
            logger.debug("fact_cache.written", extra={"fact": name, "path": str(path)})
        finally:
            record_operation("cache", outcome, time.perf_counter() - start)

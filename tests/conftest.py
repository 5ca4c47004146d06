# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable, Generator, Sequence
from pathlib import Path

import pytest

from fact_cache.config.settings import get_settings
from fact_cache.infrastructure.caching.yaml_fact_cache import YamlFactCache


class StaticGate:
    """Feature gate stub that records how often it was queried."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self.calls = 0

    def external_facts_enabled(self) -> bool:
        self.calls += 1
        return self.enabled


class RecordingSearchPath:
    """Search path stub returning a fixed directory list."""

    def __init__(self, directories: Sequence[str]) -> None:
        self.directories = list(directories)
        self.calls = 0

    def search_external_path(self) -> Sequence[str]:
        self.calls += 1
        return self.directories


class ExplodingCollaborator:
    """Collaborator stub that fails the test when queried at all."""

    def external_facts_enabled(self) -> bool:
        raise AssertionError("feature gate must not be queried")

    def search_external_path(self) -> Sequence[str]:
        raise AssertionError("search path must not be queried")


@pytest.fixture
def gate() -> StaticGate:
    return StaticGate(enabled=True)


@pytest.fixture
def search_path(tmp_path: Path) -> RecordingSearchPath:
    return RecordingSearchPath([str(tmp_path), str(tmp_path / "fallback")])


@pytest.fixture
def disabled_gate() -> StaticGate:
    return StaticGate(enabled=False)


@pytest.fixture
def exploding() -> ExplodingCollaborator:
    """Gate and search path in one that fails on any query."""
    return ExplodingCollaborator()


@pytest.fixture
def make_search_path() -> Callable[[Sequence[str]], RecordingSearchPath]:
    """Factory for search path stubs over arbitrary directories."""

    def _make(directories: Sequence[str]) -> RecordingSearchPath:
        return RecordingSearchPath(directories)

    return _make


@pytest.fixture
def make_cache(
    gate: StaticGate, search_path: RecordingSearchPath
) -> Callable[..., YamlFactCache]:
    """Factory building a cache over ``tmp_path`` with overridable parts."""

    def _make(**overrides) -> YamlFactCache:
        kwargs = {"gate": gate, "search_path": search_path, "ttl": 3600}
        kwargs.update(overrides)
        return YamlFactCache(**kwargs)

    return _make


@pytest.fixture
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Drop fact cache env vars and reset the settings singleton around a test."""
    for key in (
        "FACT_CACHE_EXTERNAL_FACTS_ENABLED",
        "FACT_CACHE_SEARCH_PATH",
        "FACT_CACHE_TTL_SECONDS",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

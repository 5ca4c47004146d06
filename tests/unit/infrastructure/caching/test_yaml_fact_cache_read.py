# tests/unit/infrastructure/caching/test_yaml_fact_cache_read.py
from __future__ import annotations

import os
import time
from pathlib import Path

import pytest

from fact_cache.domain.entities.cache_entry import CacheEntryState
from fact_cache.infrastructure.caching import yaml_codec
from fact_cache.infrastructure.caching import yaml_fact_cache as cache_module

RAW = {
    "single": "--- \n  string_value: tested",
    "list_like": "--- \n  list_value: \n    - thing1\n    - thing2",
    "hash_like": "--- \n  hash_value: \n    alpha: one\n    beta: two\n    tres: three",
}

# Keys come back as strings, keyed by the document's own field name.
EXPECTED = {
    "single": {"string_value": "tested"},
    "list_like": {"list_value": ["thing1", "thing2"]},
    "hash_like": {"hash_value": {"alpha": "one", "beta": "two", "tres": "three"}},
}


def _write_entry(directory: Path, name: str, content: str, *, mtime: float | None = None) -> Path:
    path = directory / f"{name}.yaml"
    path.write_text(content, encoding="utf-8")
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.mark.parametrize("testcase", sorted(RAW))
def test_hot_entry_returns_cached_mapping(tmp_path, make_cache, gate, search_path, testcase):
    """A fresh entry is returned exactly as deserialized."""
    _write_entry(tmp_path, testcase, RAW[testcase])
    cache = make_cache()

    assert cache.cached(testcase) == EXPECTED[testcase]
    assert gate.calls == 1
    assert search_path.calls == 1


@pytest.mark.parametrize("testcase", sorted(RAW))
def test_cold_entry_returns_none(tmp_path, make_cache, testcase):
    """An entry last modified at the epoch is stale whatever its content."""
    _write_entry(tmp_path, testcase, RAW[testcase], mtime=0)
    cache = make_cache()

    assert cache.cached(testcase) is None
    assert cache.inspect(testcase) is CacheEntryState.STALE


@pytest.mark.parametrize("testcase", sorted(RAW))
def test_missing_entry_returns_none_without_loading(monkeypatch, make_cache, testcase):
    """No file means no clock read and no deserialization."""

    def _no_load(path):
        raise AssertionError(f"load_file must not be called for {path}")

    def _no_clock() -> float:
        raise AssertionError("clock must not be read for a missing entry")

    monkeypatch.setattr(yaml_codec, "load_file", _no_load)
    cache = make_cache(clock=_no_clock)

    assert cache.cached(testcase) is None
    assert cache.inspect(testcase) is CacheEntryState.MISSING


def test_garbage_entry_returns_none(tmp_path, make_cache):
    """Content that is not a YAML mapping is treated as a miss."""
    _write_entry(tmp_path, "garbage", "random non-yaml garbage")
    cache = make_cache()

    assert cache.cached("garbage") is None
    assert cache.inspect("garbage") is CacheEntryState.CORRUPT


def test_malformed_yaml_returns_none(tmp_path, make_cache):
    _write_entry(tmp_path, "broken", "key: [unclosed\n  - : :")
    assert make_cache().cached("broken") is None


def test_truncated_entry_returns_none(tmp_path, make_cache):
    """A partially written entry from a racing writer reads as corrupt."""
    _write_entry(tmp_path, "partial", '---\npartial: "unterminated')
    assert make_cache().cached("partial") is None


def test_non_utf8_entry_returns_none(tmp_path, make_cache):
    (tmp_path / "binary.yaml").write_bytes(b"\xff\xfe\x00garbage")
    assert make_cache().cached("binary") is None


def test_entry_age_equal_to_ttl_is_stale(tmp_path, make_cache):
    """Freshness requires age strictly below the TTL."""
    _write_entry(tmp_path, "edge", "---\nedge: value\n", mtime=1_000)
    cache = make_cache(ttl=60, clock=lambda: 1_060.0)
    assert cache.cached("edge") is None

    cache = make_cache(ttl=60, clock=lambda: 1_059.5)
    assert cache.cached("edge") == {"edge": "value"}


def test_per_call_ttl_overrides_default(tmp_path, make_cache):
    _write_entry(tmp_path, "uptime", "---\nuptime: 42\n", mtime=time.time() - 120)
    cache = make_cache(ttl=3600)

    assert cache.cached("uptime") == {"uptime": 42}
    assert cache.cached("uptime", ttl=60) is None
    assert cache.cached("uptime", ttl=0) is None


def test_multi_document_stream_uses_first_mapping(tmp_path, make_cache):
    _write_entry(tmp_path, "multi", "--- just a scalar\n---\nmulti: second\n---\nmulti: third\n")
    assert make_cache().cached("multi") == {"multi": "second"}


def test_only_first_search_directory_is_used(tmp_path, make_cache, search_path):
    """An entry present only in a later directory is not found."""
    fallback = tmp_path / "fallback"
    fallback.mkdir()
    _write_entry(fallback, "kernel", "---\nkernel: Linux\n")

    assert make_cache().cached("kernel") is None


def test_empty_search_path_returns_none(make_cache, make_search_path):
    cache = make_cache(search_path=make_search_path([]))
    assert cache.cached("anything") is None


def test_disabled_gate_skips_filesystem(tmp_path, make_cache, search_path, disabled_gate):
    """With caching disabled the search path is never consulted."""
    _write_entry(tmp_path, "single", RAW["single"])
    cache = make_cache(gate=disabled_gate)

    assert cache.cached("single") is None
    assert cache.inspect("single") is CacheEntryState.DISABLED
    assert search_path.calls == 0


def test_none_fact_name_returns_none_without_queries(make_cache, exploding):
    cache = make_cache(gate=exploding, search_path=exploding)
    assert cache.cached(None) is None
    assert cache.cached("") is None


@pytest.mark.parametrize("name", ["../escape", "nested/name", ".."])
def test_unsafe_fact_name_reads_as_missing(make_cache, name):
    assert make_cache().cached(name) is None


def test_explicit_source_bypasses_search_path(tmp_path, make_cache, search_path):
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    source = _write_entry(elsewhere, "custom", "---\nos_family: Debian\n")

    assert make_cache().cached("os_family", source=source) == {"os_family": "Debian"}
    assert search_path.calls == 0


def test_stat_failure_after_existence_check_reads_as_missing(tmp_path, make_cache, monkeypatch):
    """An entry removed between the existence check and stat is a miss."""
    path = _write_entry(tmp_path, "vanishing", "---\nvanishing: soon\n")

    def _clock() -> float:
        path.unlink()
        return time.time()

    cache = make_cache(clock=_clock)
    assert cache.cached("vanishing") is None


def test_read_path_logs_corrupt_entries(tmp_path, make_cache, caplog):
    _write_entry(tmp_path, "garbage", "random non-yaml garbage")

    with caplog.at_level("WARNING", logger=cache_module.__name__):
        make_cache().cached("garbage")

    assert any(r.getMessage() == "fact_cache.corrupt" for r in caplog.records)


def test_impossible_timestamp_reads_as_corrupt(tmp_path, make_cache):
    """The safe constructor rejects ``2001-13-45`` with a ValueError."""
    _write_entry(tmp_path, "when", "---\nwhen: 2001-13-45\n")
    cache = make_cache()

    assert cache.cached("when") is None
    assert cache.inspect("when") is CacheEntryState.CORRUPT


def test_deeply_nested_entry_reads_as_corrupt(tmp_path, make_cache):
    _write_entry(tmp_path, "deep", "deep: " + "[" * 5000 + "]" * 5000)
    cache = make_cache()

    assert cache.cached("deep") is None
    assert cache.inspect("deep") is CacheEntryState.CORRUPT


def test_overlong_fact_name_reads_as_missing(make_cache):
    """ENAMETOOLONG from the existence check is a miss, not an error."""
    cache = make_cache()

    assert cache.cached("x" * 300) is None
    assert cache.inspect("x" * 300) is CacheEntryState.MISSING

# src/fact_cache/infrastructure/caching/yaml_codec.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""YAML codec for cache entries.

Synopsis:
    ``parse`` turns entry text into the first mapping document of a YAML
    stream or raises :class:`CacheEntryParseError`; ``dumps`` renders the
    canonical single-document form written by the cache.

Design:
    * ``yaml.safe_load_all`` / ``yaml.safe_dump`` only; no arbitrary object
      construction.
    * Canonical form: explicit ``---`` start, block style, insertion order.

Layer:
    infrastructure/caching
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from fact_cache.domain.exceptions.fact_cache import CacheEntryParseError

__all__ = ["parse", "load_file", "dumps"]


def parse(text: str) -> dict[str, Any]:
    """Parse a (possibly multi-document) YAML stream into its first mapping.

    Args:
        text: Raw entry content.

    Returns:
        The first document that is a mapping.

    Raises:
        CacheEntryParseError: If the stream is not valid YAML or holds no
            mapping document.
    """
    try:
        documents = list(yaml.safe_load_all(text))
    except (yaml.YAMLError, ValueError, RecursionError) as exc:
        # The safe constructor raises ValueError for impossible timestamps and
        # the composer recurses once per nesting level.
        raise CacheEntryParseError("Cache entry is not valid YAML", details={"error": str(exc)}) from exc

    for doc in documents:
        if isinstance(doc, dict):
            return doc

    raise CacheEntryParseError(
        "Cache entry holds no mapping document",
        details={"documents": len(documents)},
    )


def load_file(path: Path) -> dict[str, Any]:
    """Read and parse a cache entry file.

    Args:
        path: Entry file path.

    Returns:
        The first mapping document of the file.

    Raises:
        CacheEntryParseError: If the content cannot be decoded or parsed.
        OSError: If the file cannot be read.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise CacheEntryParseError("Cache entry is not UTF-8 text", details={"path": str(path)}) from exc
    return parse(text)


def dumps(mapping: dict[str, Any]) -> str:
    """Render a mapping in the canonical cache entry form.

    Args:
        mapping: Top-level document, normally ``{fact_name: value}``.

    Returns:
        YAML text, e.g. ``"---\\nstring_value: tested\\n"``.

    Raises:
        yaml.YAMLError: If a value cannot be represented by the safe dumper.
    """
    return yaml.safe_dump(
        mapping,
        explicit_start=True,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )

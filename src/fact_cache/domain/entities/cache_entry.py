# src/fact_cache/domain/entities/cache_entry.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Cache entry value types.

Layer:
    domain/entities
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Union

#: Structured fact value: scalar, sequence, or string-keyed mapping (recursive).
FactScalar = Union[str, int, float, bool, None]
FactValue = Union[FactScalar, Sequence["FactValue"], Mapping[str, "FactValue"]]

#: Top-level document stored in a cache entry file.
FactMapping = Mapping[str, FactValue]

#: Conventional extension of cache entry files.
ENTRY_EXTENSION = "yaml"

#: Default freshness window in seconds.
DEFAULT_TTL_S = 3600


class CacheEntryState(str, Enum):
    """Freshness state of a cache entry as observed by a reader.

    ``cached`` callers only ever see a mapping (FRESH) or ``None`` (all other
    states); the distinction is exposed for diagnostics.
    """

    DISABLED = "disabled"
    MISSING = "missing"
    FRESH = "fresh"
    STALE = "stale"
    CORRUPT = "corrupt"

# src/fact_cache/domain/exceptions/fact_cache.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Fact Cache Domain Exceptions.

Synopsis:
    Error conditions raised by the fact cache. Only the write path raises to
    callers; read-path conditions (missing, stale, corrupt) are absorbed into
    a ``None`` result by the cache itself.

Design:
    * Inherit from :class:`DomainError` for a consistent ``.code``.
    * ``CacheEntryParseError`` is raised by the YAML codec and caught by the
      read path; it never escapes ``cached``.

Layer:
    domain/exceptions
"""

from __future__ import annotations

from fact_cache.domain.exceptions.base import DomainError


class InvalidFactName(DomainError):
    """Fact name cannot be mapped to a file inside the cache directory.

    Raised for names containing a path separator or equal to ``.``/``..``.
    A ``None`` or empty name is not an error; ``cache`` ignores it.

    Attributes:
        code: Stable, machine-readable error code.
    """

    code = "INVALID_FACT_NAME"


class CacheDirectoryMissing(DomainError):
    """The resolved cache directory does not exist on the write path.

    Attributes:
        code: Stable, machine-readable error code.
    """

    code = "CACHE_DIRECTORY_MISSING"


class CacheWriteError(DomainError):
    """Opening or serializing a cache entry failed.

    Typical causes:
        * Permission denied
        * Disk full
        * Value not representable as YAML

    Attributes:
        code: Stable, machine-readable error code.
    """

    code = "CACHE_WRITE_FAILED"


class CacheEntryParseError(DomainError):
    """Cache entry content did not yield a usable mapping.

    Attributes:
        code: Stable, machine-readable error code.
    """

    code = "CACHE_ENTRY_CORRUPT"

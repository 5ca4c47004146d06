# src/fact_cache/application/interfaces/host_capabilities.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Application Interface: Host Capabilities.

Synopsis:
    The two host queries the fact cache depends on. Concrete providers are
    injected into the cache at construction so the cache never reads ambient
    global state.

Layer:
    application/interfaces
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol


class ExternalFactsGate(Protocol):
    """Feature gate for file-backed external fact caching."""

    def external_facts_enabled(self) -> bool:
        """Return whether external fact caching is active.

        Returns:
            ``True`` when the cache may touch the filesystem.
        """


class SearchPathProvider(Protocol):
    """Supplier of candidate cache directories.

    Only the first directory is used by the cache. Providers that want a
    fallback search must order the list accordingly.
    """

    def search_external_path(self) -> Sequence[str]:
        """Return candidate cache directories in priority order.

        Returns:
            Ordered directory paths; may be empty.
        """

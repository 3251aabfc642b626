"""View Cache — read-through cache of rendered listing views, keyed by path.

Invariants:
    - Entries are grouped by path; one path may hold several variants
      (e.g. different query/page combinations of the invoices listing)
    - Each path holds at most max_variants entries; the least recently used
      variant is evicted first
    - invalidate(path) drops every variant of that path synchronously and bumps
      the path's generation: the next read after it recomputes from the store
    - put() with a generation captured before an invalidate is discarded, so a
      read that started before a mutation can never repopulate the cache
    - Values are stored as-is; callers store immutable/serialized payloads

Design Decisions:
    - Owned by the app (app.state) and handed to handlers via a dependency,
      not a module global: tests get a fresh cache per app/client
    - No TTL: freshness is driven by explicit invalidation after mutations
    - Generation counter over locking: reads never wait on mutations
"""

import logging
from collections import OrderedDict
from collections.abc import Hashable
from typing import Any

from fastapi import Request

logger = logging.getLogger(__name__)

DEFAULT_MAX_VARIANTS = 128


class ViewCache:
    """Path-keyed, size-bounded cache of computed views."""

    def __init__(self, max_variants: int = DEFAULT_MAX_VARIANTS):
        if max_variants < 1:
            raise ValueError("max_variants must be at least 1")
        self.max_variants = max_variants
        self._entries: dict[str, OrderedDict[Hashable, Any]] = {}
        self._generations: dict[str, int] = {}

    def generation(self, path: str) -> int:
        """Current generation of path; capture it before computing a view."""
        return self._generations.get(path, 0)

    def get(self, path: str, variant: Hashable = None) -> Any | None:
        variants = self._entries.get(path)
        if not variants or variant not in variants:
            return None
        variants.move_to_end(variant)
        return variants[variant]

    def put(
        self, path: str, variant: Hashable, value: Any,
        generation: int | None = None,
    ) -> bool:
        """Store a view. Returns False when it was computed before an invalidate."""
        if generation is not None and generation != self.generation(path):
            logger.info(
                "Discarded view computed before invalidation",
                extra={"path": path},
            )
            return False
        variants = self._entries.setdefault(path, OrderedDict())
        variants[variant] = value
        variants.move_to_end(variant)
        while len(variants) > self.max_variants:
            variants.popitem(last=False)
        return True

    def invalidate(self, path: str) -> int:
        """Mark every cached variant of path stale. Returns how many were dropped."""
        self._generations[path] = self.generation(path) + 1
        dropped = len(self._entries.pop(path, {}))
        logger.info(
            f"Invalidated {dropped} cached view(s)", extra={"path": path},
        )
        return dropped


def get_view_cache(request: Request) -> ViewCache:
    """FastAPI dependency — the app-wide view cache."""
    return request.app.state.view_cache

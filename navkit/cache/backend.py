"""Async cache backend over the in-memory TTL cache."""

import fnmatch
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Literal, Optional

from navkit.cache.memory import MemoryCache
from navkit.core.cache import CacheBackend
from navkit.core.models import CacheSnapshot

logger = logging.getLogger(__name__)

SEARCH_CACHE_TTL = 300  # 5 minutes


def search_cache_key(query: str, page: int, page_size: int) -> str:
    """Build the cache key for a paginated search."""
    return f"search:{query}:{page}:{page_size}"


class MemoryCacheBackend(CacheBackend):
    """Redis-style async facade backed by a :class:`MemoryCache`.

    Callers written against a key/value store (``get``/``set ex``/``del``/
    ``keys pattern``) can use the process-local cache unchanged. One backend
    wraps one cache; share the backend rather than creating caches ad hoc.
    """

    def __init__(self, cache: MemoryCache | None = None) -> None:
        """Initialize backend.

        Args:
            cache: Cache to wrap (a fresh one by default)
        """
        self.cache = cache if cache is not None else MemoryCache()
        self._startup_cleared = False

    async def get(self, key: str) -> Optional[Any]:
        return self.cache.get(key)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        self.cache.set(key, value, ttl)

    async def delete(self, key: str) -> None:
        self.cache.delete(key)

    async def set_ex(self, key: str, value: Any, ex: int | None = None) -> Literal["OK"]:
        """Store with an expiry in seconds (cache default when omitted)."""
        self.cache.set(key, value, ex)
        return "OK"

    async def delete_many(self, *keys: str) -> int:
        """Delete several keys.

        Returns:
            Number of keys that were present
        """
        return sum(1 for key in keys if self.cache.delete(key))

    async def keys(self, pattern: str = "*") -> list[str]:
        """List live keys matching a glob pattern."""
        live = self.cache.keys()
        if pattern == "*":
            return live
        return [key for key in live if fnmatch.fnmatchcase(key, pattern)]

    def has(self, key: str) -> bool:
        return self.cache.has(key)

    def size(self) -> int:
        return self.cache.size()

    def clear(self) -> None:
        self.cache.clear()

    async def info(self, limit: int = 20) -> CacheSnapshot:
        """Summarize cache contents.

        Args:
            limit: Maximum number of keys included in the snapshot

        Returns:
            Snapshot with entry count, sample keys and key total
        """
        size = self.cache.size()
        keys = await self.keys("*")
        return CacheSnapshot(size=size, keys=keys[:limit], total_keys=len(keys))

    def clear_on_startup(self) -> bool:
        """Clear the cache the first time this is called.

        Returns:
            True if the cache was cleared by this call
        """
        if self._startup_cleared:
            return False
        logger.info("Clearing in-memory cache on startup")
        self.cache.clear()
        self._startup_cleared = True
        return True

    async def get_or_load(
        self,
        key: str,
        loader: Callable[[], Awaitable[Any]],
        ttl: int = SEARCH_CACHE_TTL,
    ) -> Any:
        """Return the cached value for ``key`` or load, store and return it.

        ``None`` results are returned but not cached. Entries live for
        ``ttl`` seconds, five minutes unless told otherwise.
        """
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        value = await loader()
        if value is not None:
            self.cache.set(key, value, ttl)
        return value

"""Process-local TTL cache with lazy and periodic expiry."""

import asyncio
import contextlib
import logging
import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from cachetools import TLRUCache

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600
DEFAULT_SWEEP_INTERVAL = 300.0


@dataclass
class _CacheItem:
    value: Any
    ttl: float


def _expires_at(_key: str, item: _CacheItem, now: float) -> float:
    # TLRUCache drops an item once now >= expiry; entries stay visible at
    # exactly now + ttl, so expire one float step later.
    return math.nextafter(now + item.ttl, math.inf)


class MemoryCache:
    """In-memory key/value store with per-entry expiration.

    Entries are visible while ``now <= expiry``. Expired entries are removed
    lazily when touched by ``get``/``has``/``keys``/``size`` and periodically
    by the optional background sweeper.

    Example:
        >>> cache = MemoryCache()
        >>> cache.set("search:rust:1:12", {"total": 3}, ttl_seconds=300)
        >>> cache.get("search:rust:1:12")
        {'total': 3}
    """

    def __init__(
        self,
        default_ttl: int = DEFAULT_TTL_SECONDS,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            default_ttl: TTL in seconds applied when ``set`` gets none
            sweep_interval: Seconds between background sweeps
            clock: Monotonic time source, injectable for tests
        """
        self.default_ttl = max(1, default_ttl)
        self.sweep_interval = sweep_interval
        self._data: TLRUCache = TLRUCache(maxsize=math.inf, ttu=_expires_at, timer=clock)
        self._lock = threading.Lock()
        self._sweeper: asyncio.Task | None = None

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        """Store ``value`` under ``key``, replacing any existing entry."""
        if ttl_seconds is None:
            ttl = self.default_ttl
        elif ttl_seconds < 1:
            logger.debug(f"Clamping TTL {ttl_seconds} for {key!r} to 1s")
            ttl = 1
        else:
            ttl = ttl_seconds

        with self._lock:
            self._data[key] = _CacheItem(value=value, ttl=ttl)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the live value for ``key`` or ``default``."""
        with self._lock:
            self._data.expire()
            item = self._data.get(key)
        return default if item is None else item.value

    def has(self, key: str) -> bool:
        with self._lock:
            self._data.expire()
            return key in self._data

    def delete(self, key: str) -> bool:
        """Remove ``key``; returns whether a live entry was removed."""
        with self._lock:
            self._data.expire()
            return self._data.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def keys(self) -> list[str]:
        """Return live keys, evicting expired entries found along the way."""
        with self._lock:
            self._data.expire()
            return list(self._data)

    def size(self) -> int:
        with self._lock:
            self._data.expire()
            return len(self._data)

    def purge_expired(self) -> int:
        """Evict every expired entry.

        Returns:
            Number of entries removed
        """
        with self._lock:
            return len(self._data.expire())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __len__(self) -> int:
        return self.size()

    # Background sweep

    @property
    def sweeping(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()

    def start_sweeper(self) -> None:
        """Start periodic expiry on the running event loop.

        Raises:
            RuntimeError: If called outside a running event loop
        """
        if self.sweeping:
            return
        loop = asyncio.get_running_loop()
        self._sweeper = loop.create_task(self._sweep_forever())
        logger.debug(f"Cache sweeper started (every {self.sweep_interval}s)")

    async def stop_sweeper(self) -> None:
        """Cancel the background sweep and wait for it to finish."""
        task, self._sweeper = self._sweeper, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.debug("Cache sweeper stopped")

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval)
            removed = self.purge_expired()
            if removed:
                logger.debug(f"Cache sweep evicted {removed} expired entries")

    async def __aenter__(self) -> "MemoryCache":
        self.start_sweeper()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop_sweeper()

"""In-process caching."""

from navkit.cache.backend import SEARCH_CACHE_TTL, MemoryCacheBackend, search_cache_key
from navkit.cache.memory import MemoryCache

__all__ = ["MemoryCache", "MemoryCacheBackend", "SEARCH_CACHE_TTL", "search_cache_key"]

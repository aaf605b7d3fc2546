"""Basic usage examples for navkit."""

import asyncio
import sys

from navkit import (
    FileStore,
    MemoryCache,
    MemoryCacheBackend,
    SiteInfoClient,
    load_settings,
)
from navkit.cache import SEARCH_CACHE_TTL, search_cache_key


async def example_fetch_site_info(url: str) -> None:
    """Example: Scraping a site's title, description and icon."""
    print("\n=== Site Info Example ===\n")

    settings = load_settings()

    async with MemoryCache(default_ttl=settings.cache_default_ttl) as cache:
        client = SiteInfoClient(
            config=settings.site_info,
            store=FileStore(settings.storage),
            cache_backend=MemoryCacheBackend(cache),
        )

        info = await client.fetch_site_info(url)
        if info is None:
            print("Could not retrieve site info; enter the details manually.")
        else:
            print(f"Title: {info.title}")
            print(f"Description: {info.description}")
            print(f"Icon: {info.icon or '(none)'}")

        # Second lookup is served from the cache
        await client.fetch_site_info(url)
        print(f"Cache stats: {client.get_cache_stats()}")

        await client.close()


async def example_search_cache() -> None:
    """Example: Memoizing a search page with the async backend."""
    print("\n=== Search Cache Example ===\n")

    backend = MemoryCacheBackend()

    async def load_page() -> dict:
        print("Loading page 1 from the database...")
        return {"data": [], "pagination": {"current": 1, "pageSize": 12, "total": 0}}

    key = search_cache_key("notes", 1, 12)
    for _ in range(2):
        result = await backend.get_or_load(key, load_page, SEARCH_CACHE_TTL)
        print(f"{key} -> {result['pagination']}")

    print(await backend.info())


async def main() -> None:
    """Run all examples."""
    url = sys.argv[1] if len(sys.argv) > 1 else "https://example.com/"
    await example_fetch_site_info(url)
    await example_search_cache()


if __name__ == "__main__":
    asyncio.run(main())

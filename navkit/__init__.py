"""navkit - Shared core for the navigation directory site."""

from navkit.cache import MemoryCache, MemoryCacheBackend
from navkit.core import (
    CacheBackend,
    CacheSnapshot,
    FetchFailedError,
    IconDownloadError,
    IconError,
    IconInvalidError,
    InvalidURLError,
    NavError,
    NoIconFoundError,
    PersistenceError,
    RequestTimeoutError,
    SiteInfo,
    SiteInfoConfig,
    StorageConfig,
    StoredFile,
    TransientNetworkError,
    UploadError,
)
from navkit.environment import NavSettings, load_settings
from navkit.site_info import SiteInfoClient
from navkit.storage import FileStore

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core
    "SiteInfo",
    "SiteInfoConfig",
    "StorageConfig",
    "StoredFile",
    "CacheSnapshot",
    "CacheBackend",
    # Exceptions
    "NavError",
    "InvalidURLError",
    "TransientNetworkError",
    "RequestTimeoutError",
    "FetchFailedError",
    "IconError",
    "NoIconFoundError",
    "IconDownloadError",
    "IconInvalidError",
    "PersistenceError",
    "UploadError",
    # Cache
    "MemoryCache",
    "MemoryCacheBackend",
    # Site info
    "SiteInfoClient",
    # Storage
    "FileStore",
    # Settings
    "NavSettings",
    "load_settings",
]

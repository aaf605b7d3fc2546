"""Core abstractions and models."""

from navkit.core.cache import CacheBackend
from navkit.core.exceptions import (
    EmptyResponseError,
    FetchFailedError,
    IconDownloadError,
    IconError,
    IconInvalidError,
    InvalidURLError,
    NavError,
    NoIconFoundError,
    PersistenceError,
    RequestTimeoutError,
    TransientNetworkError,
    UnexpectedStatusError,
    UploadError,
)
from navkit.core.models import (
    CacheSnapshot,
    SiteInfo,
    SiteInfoConfig,
    StorageConfig,
    StoredFile,
)

__all__ = [
    # Cache
    "CacheBackend",
    # Exceptions
    "NavError",
    "InvalidURLError",
    "TransientNetworkError",
    "RequestTimeoutError",
    "UnexpectedStatusError",
    "FetchFailedError",
    "IconError",
    "NoIconFoundError",
    "IconDownloadError",
    "EmptyResponseError",
    "IconInvalidError",
    "PersistenceError",
    "UploadError",
    # Models
    "SiteInfo",
    "StoredFile",
    "CacheSnapshot",
    "SiteInfoConfig",
    "StorageConfig",
]

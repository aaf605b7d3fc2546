"""Core data models for the navigation toolkit."""

from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

MAX_IMAGE_BYTES = 2 * 1024 * 1024


class SiteInfo(BaseModel):
    """Metadata scraped from a site's landing page."""

    title: str = ""
    description: str = ""
    icon: str | None = None


class StoredFile(BaseModel):
    """A file written to the uploads directory."""

    filename: str
    path: Path
    url: str
    content_type: str
    size: int


class CacheSnapshot(BaseModel):
    """Summary of cache contents for admin views."""

    size: int
    keys: list[str]
    total_keys: int


class SiteInfoConfig(BaseModel):
    """Configuration for site metadata acquisition."""

    user_agent: str = DEFAULT_USER_AGENT
    accept_language: str = "zh-CN,zh;q=0.9,en;q=0.8"

    # Per-attempt timeouts (seconds)
    page_timeout: float = Field(default=15.0, gt=0)
    head_timeout: float = Field(default=8.0, gt=0)
    download_timeout: float = Field(default=15.0, gt=0)

    # Attempt ceilings per step
    page_attempts: int = Field(default=3, gt=0)
    head_attempts: int = Field(default=2, gt=0)
    download_attempts: int = Field(default=3, gt=0)

    # Delay before retry n is backoff_seconds * n
    backoff_seconds: float = Field(default=1.0, ge=0)

    max_icon_bytes: int = Field(default=MAX_IMAGE_BYTES, gt=0)

    # TTL for memoized results when a cache backend is supplied
    cache_ttl: int = Field(default=3600, gt=0)


class StorageConfig(BaseModel):
    """Configuration for the local uploads directory."""

    upload_root: Path = Path("public") / "uploads"
    url_prefix: str = "/uploads"
    max_upload_bytes: int = Field(default=MAX_IMAGE_BYTES, gt=0)

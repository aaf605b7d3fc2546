import enum
import logging
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field

from navkit.cache.memory import DEFAULT_SWEEP_INTERVAL, DEFAULT_TTL_SECONDS
from navkit.core.models import SiteInfoConfig, StorageConfig

logger = logging.getLogger(__name__)


class RuntimeEnvironment(enum.Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"


_DEFAULT_LOG_LEVELS = {
    RuntimeEnvironment.DEVELOPMENT: "DEBUG",
    RuntimeEnvironment.PRODUCTION: "WARNING",
    RuntimeEnvironment.TEST: "INFO",
}


class NavSettings(BaseModel):
    """Process-wide settings assembled from the environment."""

    environment: RuntimeEnvironment = RuntimeEnvironment.DEVELOPMENT
    log_level: str = "DEBUG"
    cache_default_ttl: int = Field(default=DEFAULT_TTL_SECONDS, gt=0)
    cache_sweep_interval: float = Field(default=DEFAULT_SWEEP_INTERVAL, gt=0)
    site_info: SiteInfoConfig = Field(default_factory=SiteInfoConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)


def _detect_environment(environ: Mapping[str, str]) -> RuntimeEnvironment:
    raw = environ.get("NAV_ENV", "").strip().lower()
    if raw:
        try:
            return RuntimeEnvironment(raw)
        except ValueError:
            logger.warning(f"Unknown NAV_ENV {raw!r}, assuming development")
    return RuntimeEnvironment.DEVELOPMENT


def _number(environ: Mapping[str, str], name: str, default: float, cast=int):
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning(f"Ignoring malformed {name}={raw!r}, using {default}")
        return default
    if value <= 0:
        logger.warning(f"Ignoring non-positive {name}={raw!r}, using {default}")
        return default
    return value


def load_settings(environ: Mapping[str, str] | None = None) -> NavSettings:
    """Build settings from ``NAV_*`` environment variables.

    Args:
        environ: Mapping to read instead of ``os.environ``

    Returns:
        Settings with defaults filled in for anything unset
    """
    environ = os.environ if environ is None else environ
    environment = _detect_environment(environ)

    storage = StorageConfig()
    if environ.get("NAV_UPLOAD_ROOT"):
        storage.upload_root = Path(environ["NAV_UPLOAD_ROOT"])
    if environ.get("NAV_UPLOAD_URL_PREFIX"):
        storage.url_prefix = "/" + environ["NAV_UPLOAD_URL_PREFIX"].strip("/")

    site_info = SiteInfoConfig()
    if environ.get("NAV_USER_AGENT"):
        site_info.user_agent = environ["NAV_USER_AGENT"]

    return NavSettings(
        environment=environment,
        log_level=environ.get("NAV_LOG_LEVEL", "").upper() or _DEFAULT_LOG_LEVELS[environment],
        cache_default_ttl=_number(environ, "NAV_CACHE_DEFAULT_TTL", DEFAULT_TTL_SECONDS),
        cache_sweep_interval=_number(
            environ, "NAV_CACHE_SWEEP_INTERVAL", DEFAULT_SWEEP_INTERVAL, cast=float
        ),
        site_info=site_info,
        storage=storage,
    )

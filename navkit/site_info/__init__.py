"""Site metadata and icon acquisition."""

from navkit.site_info.client import SiteInfoClient
from navkit.site_info.extract import resolve_url, validate_url

__all__ = ["SiteInfoClient", "resolve_url", "validate_url"]

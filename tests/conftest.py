"""Pytest configuration and fixtures."""

import httpx
import pytest

from navkit.core.models import SiteInfoConfig, StorageConfig
from navkit.site_info import SiteInfoClient
from navkit.storage import FileStore


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def png_bytes():
    return b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + b"\x00" * 17


@pytest.fixture
def ico_bytes():
    return b"\x00\x00\x01\x00\x01\x00\x10\x10" + b"\x00" * 14


@pytest.fixture
def page_html():
    return (
        "<html><head>"
        "<title>Example</title>"
        '<meta name="description" content="Desc">'
        '<link rel="icon" href="/favicon.png">'
        "</head><body><h1>Example</h1></body></html>"
    )


@pytest.fixture
def fast_config():
    """Site info config without retry delays."""
    return SiteInfoConfig(backoff_seconds=0)


@pytest.fixture
def store(tmp_path):
    return FileStore(StorageConfig(upload_root=tmp_path / "uploads"))


@pytest.fixture
def make_client(fast_config, store):
    """Build a SiteInfoClient whose HTTP traffic goes to ``handler``."""

    def _make(handler, config=None, **kwargs):
        return SiteInfoClient(
            config=config or fast_config,
            store=store,
            transport=httpx.MockTransport(handler),
            **kwargs,
        )

    return _make

"""
Pytest configuration and shared fixtures for CSS First tests.
"""

from datetime import datetime, timedelta

import httpx
import pytest

from src.css_first.cache import SupportCache
from src.css_first.mdn import MDNClient
from src.css_first.registry import get_registry
from src.css_first.settings import Settings, reset_settings
from src.css_first.suggestions import SuggestionEngine
from src.css_first.support import (
    FallbackSupportTable,
    SupportResolver,
    reset_support_resolver,
)


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = datetime(2025, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


GRID_PAGE = """<html><body>
<nav>Skip to main content</nav>
<p>The grid CSS property is a shorthand property. It sets all of the explicit grid properties.</p>
<pre>.wrapper { grid: auto-flow / 1fr 1fr; }</pre>
<section>Baseline 2020 Widely available</section>
<section>Browser compatibility: Chrome 57, Firefox 52, Safari 10.1, Edge 16</section>
<section>See also: grid-template, grid-area, display</section>
</body></html>
"""


@pytest.fixture(autouse=True)
def offline_environment(monkeypatch, tmp_path):
    """Never touch the network or the user's config from a test."""
    monkeypatch.setenv("CSS_FIRST_LIVE_FETCH", "0")
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("APPDATA", str(tmp_path))
    reset_settings()
    reset_support_resolver()
    yield
    reset_settings()
    reset_support_resolver()


@pytest.fixture
def grid_page():
    return GRID_PAGE


@pytest.fixture
def frozen_clock():
    return FrozenClock()


@pytest.fixture
def offline_settings():
    return Settings(live_fetch=False)


@pytest.fixture
def fallback_table():
    return FallbackSupportTable.from_yaml()


@pytest.fixture
def registry():
    return get_registry()


@pytest.fixture
def offline_resolver(offline_settings, frozen_clock, fallback_table):
    """Resolver that always answers from the static table."""
    return SupportResolver(
        cache=SupportCache(ttl=offline_settings.cache_ttl, clock=frozen_clock),
        fallback=fallback_table,
        settings=offline_settings,
    )


@pytest.fixture
def make_live_resolver(frozen_clock, fallback_table):
    """Factory: resolver whose MDN fetches are answered by ``handler``."""

    def _make(handler):
        settings = Settings(live_fetch=True)
        client = MDNClient(
            client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            base_url=settings.mdn_base_url,
        )
        return SupportResolver(
            client=client,
            cache=SupportCache(ttl=settings.cache_ttl, clock=frozen_clock),
            fallback=fallback_table,
            settings=settings,
        )

    return _make


@pytest.fixture
def engine(registry, offline_resolver, offline_settings):
    return SuggestionEngine(
        registry=registry, resolver=offline_resolver, settings=offline_settings
    )


# Pytest configuration
def pytest_configure(config):
    """Configure pytest settings."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (may be slow)"
    )
    config.addinivalue_line(
        "markers", "slow: marks end-to-end engine tests (deselect with '-m \"not slow\"')"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers."""
    for item in items:
        if "integration" in item.nodeid.lower():
            item.add_marker(pytest.mark.integration)

        if any(
            keyword in item.nodeid.lower()
            for keyword in ["integration", "scenario", "end_to_end"]
        ):
            item.add_marker(pytest.mark.slow)

"""Tests for the support cache, MDN parsing and the support resolver."""

from datetime import timedelta

import httpx
import pytest

from src.css_first.cache import SupportCache
from src.css_first.errors import DocumentationParseError
from src.css_first.mdn import (
    MDN_URL_OVERRIDES,
    mdn_url_for,
    normalize_property_id,
    parse_documentation,
)
from src.css_first.models import Baseline, BrowserSupportRecord, SupportLevel
from src.css_first.settings import DEFAULT_MDN_BASE_URL
from src.css_first.support import baseline_from_support_level, derive_support_level


class TestSupportCache:
    """TTL expiry with a controlled clock."""

    def test_hit_within_ttl(self, frozen_clock):
        cache = SupportCache(ttl=timedelta(hours=1), clock=frozen_clock)
        cache.put("gap", 1)
        frozen_clock.advance(minutes=59)
        assert cache.get("gap") == 1
        assert not cache.is_expired("gap")

    def test_entry_at_ttl_is_expired(self, frozen_clock):
        cache = SupportCache(ttl=timedelta(hours=1), clock=frozen_clock)
        cache.put("gap", 1)
        frozen_clock.advance(hours=1)
        assert cache.get("gap") is None
        assert cache.is_expired("gap")

    def test_missing_key(self, frozen_clock):
        cache = SupportCache(clock=frozen_clock)
        assert cache.get("nope") is None
        assert cache.is_expired("nope")

    def test_put_overwrites_and_refreshes(self, frozen_clock):
        cache = SupportCache(ttl=timedelta(hours=1), clock=frozen_clock)
        cache.put("gap", 1)
        frozen_clock.advance(minutes=50)
        cache.put("gap", 2)
        frozen_clock.advance(minutes=50)
        assert cache.get("gap") == 2
        assert len(cache) == 1

    def test_clear(self, frozen_clock):
        cache = SupportCache(clock=frozen_clock)
        cache.put("gap", 1)
        cache.clear()
        assert "gap" not in cache


class TestNormalization:
    """Property ids map onto cache and URL keys."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("display: grid-lanes", "display"),
            (":has()", ":has"),
            ('commandfor="dialog"', "commandfor"),
            ("  gap  ", "gap"),
            ("::scroll-button()", "::scroll-button"),
            ("@container", "@container"),
            ("light-dark()", "light-dark"),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_property_id(raw) == expected

    def test_url_for_css_property(self):
        assert mdn_url_for("gap") == f"{DEFAULT_MDN_BASE_URL}/gap"

    def test_url_override_for_html_attribute(self):
        assert mdn_url_for('commandfor="x"') == MDN_URL_OVERRIDES["commandfor"]


class TestSupportLevels:
    """Threshold mapping and derived Baseline."""

    @pytest.mark.parametrize(
        "support,level",
        [
            (100, SupportLevel.EXCELLENT),
            (96, SupportLevel.EXCELLENT),
            (95, SupportLevel.EXCELLENT),
            (94, SupportLevel.GOOD),
            (85, SupportLevel.GOOD),
            (84, SupportLevel.MODERATE),
            (70, SupportLevel.MODERATE),
            (69, SupportLevel.LIMITED),
            (50, SupportLevel.LIMITED),
            (49, SupportLevel.EXPERIMENTAL),
            (0, SupportLevel.EXPERIMENTAL),
        ],
    )
    def test_thresholds(self, support, level):
        assert derive_support_level(support) == level

    def test_baseline_from_level(self):
        assert baseline_from_support_level(SupportLevel.EXCELLENT) == Baseline.WIDELY_AVAILABLE
        assert baseline_from_support_level(SupportLevel.GOOD) == Baseline.WIDELY_AVAILABLE
        assert baseline_from_support_level(SupportLevel.MODERATE) == Baseline.NEWLY_AVAILABLE
        assert baseline_from_support_level(SupportLevel.LIMITED) == Baseline.LIMITED_AVAILABILITY
        assert baseline_from_support_level(SupportLevel.EXPERIMENTAL) == Baseline.EXPERIMENTAL

    def test_support_is_clamped(self):
        assert BrowserSupportRecord(overall_support=150).overall_support == 100
        assert BrowserSupportRecord(overall_support=-5).overall_support == 0


class TestFallbackTable:
    """Static table lookups."""

    def test_unknown_property_defaults(self, fallback_table):
        assert fallback_table.support_for("unknown-property-xyz") == 80

    def test_raw_key_wins(self, fallback_table):
        assert fallback_table.support_for("display: grid-lanes") == 10
        assert fallback_table.support_for("::scroll-button()") == 15

    def test_base_before_colon(self, fallback_table):
        assert fallback_table.support_for("display: flex") == 98

    def test_documentation_is_marked_default(self, fallback_table):
        doc = fallback_table.documentation_for("scroll-snap-type")
        assert doc.support.is_default
        assert doc.support.overall_support == 85
        assert "x mandatory" in doc.values
        assert doc.baseline is None


class TestParseDocumentation:
    """MDN page parsing."""

    def test_parses_live_page(self, grid_page):
        doc = parse_documentation(grid_page, "grid")
        assert doc.description == "The grid CSS property is a shorthand property."
        assert doc.support.is_default is False
        assert doc.support.overall_support == 95
        assert doc.support.browsers["chrome"].version == "57+"
        assert doc.baseline == Baseline.WIDELY_AVAILABLE
        assert doc.examples == [".wrapper { grid: auto-flow / 1fr 1fr; }"]
        assert "grid-template" in doc.related_properties

    def test_page_without_versions_is_a_parse_failure(self):
        with pytest.raises(DocumentationParseError):
            parse_documentation("<p>Nothing useful here.</p>", "gap")

    def test_check_mdn_placeholder_is_a_parse_failure(self):
        page = "Browser compatibility: check MDN for details\n\n"
        with pytest.raises(DocumentationParseError):
            parse_documentation(page, "gap")

    def test_newer_versions_score_lower(self):
        page = "Browser compatibility: Chrome 120, Firefox 121, Safari 17\n\n"
        doc = parse_documentation(page, "text-wrap")
        assert doc.support.overall_support == 80


class TestSupportResolver:
    """Cached resolution with fallback."""

    @pytest.mark.asyncio
    async def test_unknown_property_falls_back(self, offline_resolver):
        record = await offline_resolver.resolve_support("unknown-property-xyz")
        assert record.is_default is True
        assert record.overall_support == 80

    @pytest.mark.asyncio
    async def test_idempotent_within_ttl(self, offline_resolver):
        first = await offline_resolver.resolve_support("gap")
        second = await offline_resolver.resolve_support("gap")
        assert first == second
        assert len(offline_resolver.cache) == 1

    @pytest.mark.asyncio
    async def test_cache_keyed_by_normalized_id(self, offline_resolver):
        await offline_resolver.resolve("light-dark()")
        assert "light-dark" in offline_resolver.cache

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "order",
        [
            ["display: grid-lanes", "display: flex"],
            ["display: flex", "display: grid-lanes"],
        ],
    )
    async def test_fallback_ids_sharing_a_key_stay_distinct(self, offline_resolver, order):
        expected = {"display: grid-lanes": 10, "display: flex": 98}
        for property_id in order + order:
            record = await offline_resolver.resolve_support(property_id)
            assert record.overall_support == expected[property_id]

    @pytest.mark.asyncio
    async def test_failed_fetch_is_remembered_per_key(self, make_live_resolver):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(404)

        resolver = make_live_resolver(handler)
        assert (await resolver.resolve_support("display: flex")).overall_support == 98
        assert (await resolver.resolve_support("display: grid-lanes")).overall_support == 10
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_include_experimental(self, offline_resolver):
        record = await offline_resolver.resolve_support("scroll-snap-type", True)
        assert record.experimental_features == ["scroll-snap-stop"]
        plain = await offline_resolver.resolve_support("scroll-snap-type")
        assert plain.experimental_features == []

    @pytest.mark.asyncio
    async def test_derived_baseline_without_live_badge(self, offline_resolver):
        baseline = await offline_resolver.resolve_baseline("gap", SupportLevel.MODERATE)
        assert baseline == Baseline.NEWLY_AVAILABLE

    @pytest.mark.asyncio
    async def test_live_fetch(self, make_live_resolver, grid_page):
        requests = []

        def handler(request):
            requests.append(str(request.url))
            return httpx.Response(200, text=grid_page)

        resolver = make_live_resolver(handler)
        record = await resolver.resolve_support("grid")
        assert record.is_default is False
        assert record.overall_support == 95
        assert requests == [f"{DEFAULT_MDN_BASE_URL}/grid"]

        # live badge wins over the derived one
        baseline = await resolver.resolve_baseline("grid", SupportLevel.EXPERIMENTAL)
        assert baseline == Baseline.WIDELY_AVAILABLE

    @pytest.mark.asyncio
    async def test_cache_avoids_refetch_until_expired(
        self, make_live_resolver, grid_page, frozen_clock
    ):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, text=grid_page)

        resolver = make_live_resolver(handler)
        await resolver.resolve("grid")
        await resolver.resolve("grid")
        assert len(calls) == 1

        frozen_clock.advance(hours=2)
        await resolver.resolve("grid")
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_http_error_falls_back(self, make_live_resolver):
        resolver = make_live_resolver(lambda request: httpx.Response(404))
        record = await resolver.resolve_support("grid")
        assert record.is_default is True
        assert record.overall_support == 92

    @pytest.mark.asyncio
    async def test_transport_error_falls_back(self, make_live_resolver):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        resolver = make_live_resolver(handler)
        record = await resolver.resolve_support("unknown-property-xyz")
        assert record.is_default is True
        assert record.overall_support == 80

    @pytest.mark.asyncio
    async def test_timeout_falls_back(self, make_live_resolver):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        resolver = make_live_resolver(handler)
        record = await resolver.resolve_support("gap")
        assert record.is_default is True

    @pytest.mark.asyncio
    async def test_unparseable_page_falls_back(self, make_live_resolver):
        resolver = make_live_resolver(
            lambda request: httpx.Response(200, text="<p>Under construction.</p>")
        )
        doc = await resolver.resolve("transition")
        assert doc.support.is_default is True
        assert doc.support.overall_support == 96

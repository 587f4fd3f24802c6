"""
JSON contracts of the MCP tools, exercised offline.
"""

import json

import pytest

from src.css_first.settings import DEFAULT_MDN_BASE_URL
from src.css_first.tools import (
    CheckCssBrowserSupportTool,
    ConfirmCssPropertyUsageTool,
    GetCssPropertyDetailsTool,
    SuggestCssSolutionTool,
    run_async_safely,
)


@pytest.fixture
def suggest_tool(engine):
    return SuggestCssSolutionTool(engine)


@pytest.fixture
def support_tool(offline_resolver):
    return CheckCssBrowserSupportTool(offline_resolver)


@pytest.fixture
def details_tool(offline_resolver):
    return GetCssPropertyDetailsTool(offline_resolver)


@pytest.fixture
def confirm_tool(offline_resolver):
    return ConfirmCssPropertyUsageTool(offline_resolver)


class TestSuggestCssSolution:
    """suggest_css_solution responses."""

    def test_compact_response(self, suggest_tool):
        result = json.loads(suggest_tool.apply("carousel", max_suggestions=3))
        assert result["success"] is True
        assert result["message"] == "Found 3 CSS-only suggestion(s)."
        assert "baseline" not in result
        assert "analysis" not in result

        first = result["suggestions"][0]
        assert first["property"] == "::scroll-marker-group"
        assert first["needs_consent"] is True
        assert first["consent_message"] == "Use ::scroll-marker-group? 15% support."
        assert set(first) == {
            "property",
            "description",
            "support_level",
            "baseline",
            "browser_support",
            "mdn_url",
            "needs_consent",
            "consent_message",
        }

    def test_full_response(self, suggest_tool):
        result = json.loads(
            suggest_tool.apply("carousel", max_suggestions=1, response_detail="full")
        )
        first = result["suggestions"][0]
        assert first["use_cases"] == ["General styling", "UI enhancement"]
        assert first["category"] == "interaction"
        assert first["browser_support"]["modern_browsers"] is False
        assert "relevance_score" not in first

    @pytest.mark.parametrize("requested,expected", [(0, 1), (-4, 1), (50, 5)])
    def test_max_suggestions_is_clamped(self, suggest_tool, requested, expected):
        result = json.loads(suggest_tool.apply("carousel", max_suggestions=requested))
        assert len(result["suggestions"]) == expected

    def test_baseline_filter_message(self, suggest_tool):
        result = json.loads(suggest_tool.apply("carousel", baseline="experimental"))
        assert result["message"] == "Found 1 CSS-only suggestion(s). Baseline Experimental."
        assert result["baseline"] == "experimental"
        assert [s["baseline"] for s in result["suggestions"]] == ["experimental"]

    def test_no_results_for_baseline(self, suggest_tool):
        result = json.loads(suggest_tool.apply("carousel", baseline="limited"))
        assert result["success"] is False
        assert result["message"] == "No CSS-only suggestions for Limited Availability."
        assert result["suggestions"] == []

    def test_analysis_included_on_request(self, suggest_tool):
        result = json.loads(
            suggest_tool.apply(
                "I need to center a div horizontally and vertically",
                include_analysis=True,
            )
        )
        analysis = result["analysis"]
        assert "layout" in analysis["intents"]
        assert analysis["explanation"].startswith("Intent layout")

    def test_bad_approach_becomes_error_envelope(self, suggest_tool):
        result = json.loads(
            suggest_tool.apply_ex(task_description="center", preferred_approach="fancy")
        )
        assert result["error"].startswith("Error executing tool suggest_css_solution:")
        assert "approach" in result["error"]

    def test_exceptions_propagate_when_not_caught(self, suggest_tool):
        with pytest.raises(ValueError):
            suggest_tool.apply_ex(
                catch_exceptions=False,
                task_description="center",
                preferred_approach="fancy",
            )


class TestCheckCssBrowserSupport:
    """check_css_browser_support responses."""

    def test_well_supported_property(self, support_tool):
        result = json.loads(support_tool.apply("scroll-snap-type", include_experimental=True))
        assert result["property"] == "scroll-snap-type"
        assert result["browser_support"]["overall_support"] == 85
        assert result["browser_support"]["is_default"] is True
        assert result["browser_support"]["experimental_features"] == ["scroll-snap-stop"]
        assert result["support_level"] == "good"
        assert result["baseline"] == "widely-available"
        assert result["recommendation"].startswith("Good browser support")
        assert result["safe_to_use"] is True

    def test_experimental_property(self, support_tool):
        result = json.loads(support_tool.apply("::scroll-marker-group"))
        assert result["support_level"] == "experimental"
        assert result["baseline"] == "experimental"
        assert result["safe_to_use"] is False

    def test_unknown_property_uses_default(self, support_tool):
        result = json.loads(support_tool.apply("unknown-property-xyz"))
        assert result["browser_support"]["overall_support"] == 80
        assert result["safe_to_use"] is True


class TestGetCssPropertyDetails:
    """get_css_property_details responses."""

    def test_details(self, details_tool):
        result = json.loads(details_tool.apply("scroll-snap-align"))
        details = result["details"]
        assert details["syntax"] == "none | start | end | center"
        assert details["values"] == ["none", "start", "end", "center"]
        assert len(details["examples"]) == 2
        assert "scroll-snap-type" in details["related_properties"]
        assert result["mdn_url"] == f"{DEFAULT_MDN_BASE_URL}/scroll-snap-align"

    def test_examples_can_be_omitted(self, details_tool):
        result = json.loads(details_tool.apply("scroll-snap-align", include_examples=False))
        assert result["details"]["examples"] == []


class TestConfirmCssPropertyUsage:
    """confirm_css_property_usage responses."""

    def test_declined(self, confirm_tool):
        result = json.loads(confirm_tool.apply("scroll-snap-type", user_consent=False))
        assert result["message"] == "Declined scroll-snap-type."
        assert result["alternative_suggestions"][0] == "overflow-x with JavaScript"
        assert "implementation_guidance" not in result

    def test_approved_with_fallbacks(self, confirm_tool):
        result = json.loads(
            confirm_tool.apply("padding-inline", user_consent=True, fallback_needed=True)
        )
        assert result["approved"] is True
        assert result["css_property"] == "padding-inline"
        assert len(result["implementation_guidance"]["fallbacks"]) == 3
        assert result["support_level"] == "moderate"
        assert result["baseline"] == "newly-available"
        assert result["browser_support"]["overall_support"] == 80


class TestRunAsyncSafely:
    """Coroutines run with or without a running loop."""

    def test_without_loop(self):
        async def answer():
            return 42

        assert run_async_safely(answer()) == 42

    @pytest.mark.asyncio
    async def test_inside_running_loop(self):
        async def answer():
            return 42

        assert run_async_safely(answer()) == 42

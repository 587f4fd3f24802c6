"""
FastMCP tools for CSS-first suggestions and property lookups.

Every tool returns a JSON document.  Failures are turned into an
``{"error": ...}`` envelope by ``Tool.apply_ex``.
"""

import asyncio
import concurrent.futures
import json
from typing import Any, Dict, Optional

from .guidance import alternative_properties, implementation_guidance, support_recommendation
from .models import Suggestion
from .suggestions import SuggestionEngine, baseline_label, normalize_baseline_preference
from .support import SupportResolver, derive_support_level, get_support_resolver
from .tools_base import Tool

MIN_SUGGESTIONS = 1
MAX_SUGGESTIONS = 10
SAFE_SUPPORT_THRESHOLD = 80


def run_async_safely(coro):
    """
    Run an async coroutine safely, handling existing event loop conflicts.

    Args:
        coro: The coroutine to run

    Returns:
        The result of the coroutine
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        # No event loop running, we can run directly
        return asyncio.run(coro)
    # Already inside an event loop: run on a fresh loop in a worker thread
    with concurrent.futures.ThreadPoolExecutor() as executor:
        future = executor.submit(asyncio.run, coro)
        return future.result()


def _to_json(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, indent=2)


def _consent_message(suggestion: Suggestion) -> str:
    return (
        f"Use {suggestion.property}? "
        f"{suggestion.browser_support.overall_support}% support."
    )


def _compact_suggestion(suggestion: Suggestion) -> Dict[str, Any]:
    return {
        "property": suggestion.property,
        "description": suggestion.description,
        "support_level": suggestion.support_level.value,
        "baseline": suggestion.baseline.value,
        "browser_support": {
            "overall_support": suggestion.browser_support.overall_support
        },
        "mdn_url": suggestion.mdn_url,
        "needs_consent": True,
        "consent_message": _consent_message(suggestion),
    }


def _full_suggestion(suggestion: Suggestion) -> Dict[str, Any]:
    data = suggestion.model_dump(mode="json")
    data["needs_consent"] = True
    data["consent_message"] = _consent_message(suggestion)
    return data


class SuggestCssSolutionTool(Tool):
    """Suggest CSS-first solutions for a UI task, ranked by relevance and support."""

    def __init__(self, engine: Optional[SuggestionEngine] = None):
        self.engine = engine or SuggestionEngine()

    def apply(
        self,
        task_description: str,
        preferred_approach: str = "modern",
        project_context: Optional[str] = None,
        baseline: Optional[str] = None,
        max_suggestions: int = 3,
        response_detail: str = "compact",
        include_analysis: bool = False,
    ) -> str:
        """
        Suggest modern CSS/HTML features that solve a UI task without JavaScript.

        Args:
            task_description: What the UI should do, in plain words
            preferred_approach: modern, compatible (excellent support only) or progressive
            project_context: Framework, browsers or constraints of the project (optional)
            baseline: Only return features with this Baseline status,
                e.g. "widely available" or "newly available" (optional)
            max_suggestions: Number of suggestions to return (1-10)
            response_detail: "compact" or "full"
            include_analysis: Include the intent analysis in the response

        Returns:
            JSON with a message, the suggestions and optionally the analysis.
            Each suggestion needs the user's consent before it is applied.
        """
        limit = max(MIN_SUGGESTIONS, min(MAX_SUGGESTIONS, int(max_suggestions)))
        preference = normalize_baseline_preference(baseline)
        label = baseline_label(preference) if preference else None

        report = run_async_safely(
            self.engine.suggest_with_analysis(
                task_description,
                approach=preferred_approach,
                project_context=project_context,
                baseline_preference=baseline,
                max_suggestions=limit,
            )
        )

        result: Dict[str, Any] = {}
        if report.suggestions:
            message = f"Found {len(report.suggestions)} CSS-only suggestion(s)."
            if label:
                message += f" Baseline {label}."
            result["success"] = True
        else:
            message = (
                f"No CSS-only suggestions for {label}."
                if label
                else "No CSS-only suggestions found."
            )
            result["success"] = False
        result["message"] = message
        if preference:
            result["baseline"] = preference.value

        render = _full_suggestion if response_detail == "full" else _compact_suggestion
        result["suggestions"] = [render(s) for s in report.suggestions]

        if include_analysis and report.analysis is not None:
            analysis = report.analysis.model_dump(mode="json")
            analysis["explanation"] = report.explanation
            result["analysis"] = analysis

        return _to_json(result)


class CheckCssBrowserSupportTool(Tool):
    """Check browser support and Baseline status for a CSS property."""

    def __init__(self, resolver: Optional[SupportResolver] = None):
        self.resolver = resolver or get_support_resolver()

    def apply(self, css_property: str, include_experimental: bool = False) -> str:
        """
        Check browser support for a CSS property.

        Args:
            css_property: Property to check, e.g. "container-type" or "display: grid"
            include_experimental: Also list experimental sub-features

        Returns:
            JSON with the support record, support level, Baseline status,
            a recommendation and whether the property is safe to use.
        """
        record = run_async_safely(
            self.resolver.resolve_support(css_property, include_experimental)
        )
        level = derive_support_level(record.overall_support)
        baseline = run_async_safely(self.resolver.resolve_baseline(css_property, level))

        return _to_json(
            {
                "property": css_property,
                "browser_support": record.model_dump(mode="json"),
                "support_level": level.value,
                "baseline": baseline.value,
                "recommendation": support_recommendation(record.overall_support),
                "safe_to_use": record.overall_support >= SAFE_SUPPORT_THRESHOLD,
            }
        )


class GetCssPropertyDetailsTool(Tool):
    """Get documentation details for a CSS property."""

    def __init__(self, resolver: Optional[SupportResolver] = None):
        self.resolver = resolver or get_support_resolver()

    def apply(self, css_property: str, include_examples: bool = True) -> str:
        """
        Get description, syntax, values and examples for a CSS property.

        Args:
            css_property: Property to describe
            include_examples: Include code examples

        Returns:
            JSON with the property details and its MDN URL.
        """
        documentation = run_async_safely(self.resolver.resolve(css_property))
        return _to_json(
            {
                "property": css_property,
                "details": {
                    "description": documentation.description,
                    "syntax": documentation.syntax,
                    "values": documentation.values,
                    "examples": documentation.examples if include_examples else [],
                    "related_properties": documentation.related_properties,
                },
                "mdn_url": self.resolver.client.url_for(css_property),
            }
        )


class ConfirmCssPropertyUsageTool(Tool):
    """Record the user's decision on a suggested property."""

    def __init__(self, resolver: Optional[SupportResolver] = None):
        self.resolver = resolver or get_support_resolver()

    def apply(
        self, css_property: str, user_consent: bool, fallback_needed: bool = False
    ) -> str:
        """
        Confirm or decline a suggested CSS property.

        Args:
            css_property: The suggested property
            user_consent: True if the user approved it
            fallback_needed: Include fallbacks for older browsers in the guidance

        Returns:
            JSON with implementation guidance when approved, or alternative
            approaches when declined.
        """
        if not user_consent:
            return _to_json(
                {
                    "message": f"Declined {css_property}.",
                    "alternative_suggestions": alternative_properties(css_property),
                }
            )

        async def _approve():
            guidance = await implementation_guidance(
                css_property, fallback_needed, resolver=self.resolver
            )
            record = await self.resolver.resolve_support(css_property)
            level = derive_support_level(record.overall_support)
            baseline = await self.resolver.resolve_baseline(css_property, level)
            return guidance, record, level, baseline

        guidance, record, level, baseline = run_async_safely(_approve())
        return _to_json(
            {
                "message": f"Approved {css_property}.",
                "implementation_guidance": guidance.model_dump(mode="json"),
                "support_level": level.value,
                "baseline": baseline.value,
                "browser_support": record.model_dump(mode="json"),
                "css_property": css_property,
                "approved": True,
            }
        )

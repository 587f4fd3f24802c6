"""
Adoption advice for individual properties: a support recommendation,
alternatives when a suggestion is declined, and implementation guidance
when it is approved.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .models import ImplementationGuidance
from .registry import DATA_DIR, FeatureRegistry
from .scoring import search_features
from .support import SupportResolver, get_support_resolver

logger = logging.getLogger(__name__)

GUIDANCE_FILE = DATA_DIR / "guidance.yaml"

ALTERNATIVES: Dict[str, List[str]] = {
    "scroll-snap-type": [
        "overflow-x with JavaScript",
        "transform with JavaScript",
        "intersection observer",
    ],
    "display: grid": ["display: flex", "float-based layout", "inline-block layout"],
    "container-type": ["media queries", "viewport units", "JavaScript resize observer"],
    "css-scroll-snap": [
        "JavaScript carousel library",
        "touch event handling",
        "transform animations",
    ],
}

DEFAULT_ALTERNATIVES = ["JavaScript-based solution", "Traditional CSS approach"]

GENERIC_FALLBACKS = [
    "Provide a fallback value or alternative property",
    "Use @supports for progressive enhancement",
]


def support_recommendation(overall_support: int) -> str:
    """One-line advice for a support percentage."""
    if overall_support >= 95:
        return "Excellent browser support. Safe to use in production without fallbacks."
    if overall_support >= 85:
        return "Good browser support. Consider fallbacks for legacy browsers if needed."
    if overall_support >= 70:
        return "Moderate browser support. Provide fallbacks for older browsers."
    return "Limited browser support. Consider alternative approaches or polyfills."


def alternative_properties(declined_property: str) -> List[str]:
    return list(ALTERNATIVES.get(declined_property, DEFAULT_ALTERNATIVES))


_curated: Optional[Dict[str, Mapping[str, Any]]] = None


def load_curated_guidance(path: Optional[Path] = None) -> Dict[str, Mapping[str, Any]]:
    """Hand-written guidance entries keyed by property; cached after first load."""
    global _curated
    if path is not None:
        with open(path, "r", encoding="utf-8") as fh:
            return yaml.safe_load(fh) or {}
    if _curated is None:
        with open(GUIDANCE_FILE, "r", encoding="utf-8") as fh:
            _curated = yaml.safe_load(fh) or {}
    return _curated


async def implementation_guidance(
    css_property: str,
    needs_fallback: bool = False,
    resolver: Optional[SupportResolver] = None,
    registry: Optional[FeatureRegistry] = None,
) -> ImplementationGuidance:
    """Guidance for adopting ``css_property``.

    Curated entries win; anything else is assembled from the property's
    documentation and the registry feature that lists it.
    """
    curated = load_curated_guidance().get(css_property)
    if curated is not None:
        return ImplementationGuidance(
            basic_usage=curated["basic_usage"],
            best_practices=list(curated.get("best_practices", [])),
            fallbacks=list(curated.get("fallbacks", [])) if needs_fallback else [],
            example_code=curated.get("example_code", "").strip(),
        )

    resolver = resolver or get_support_resolver()
    documentation = await resolver.resolve(css_property)
    feature = next(
        (
            f
            for f in search_features([css_property], registry)
            if css_property in f.properties
        ),
        None,
    )
    logger.debug(
        "generic guidance for %s (feature=%s)", css_property, feature.id if feature else None
    )

    values = [v for v in documentation.values if v][:3]
    related = [r for r in documentation.related_properties if r][:3]
    first_value = documentation.values[0] if documentation.values else "value"
    example = next((e for e in documentation.examples if e.strip()), "")

    if feature is not None:
        purpose = feature.description
    elif documentation.description:
        purpose = f"MDN: {documentation.description}"
    else:
        purpose = "Review MDN for intended usage"

    return ImplementationGuidance(
        basic_usage=f".element {{ {css_property}: {first_value}; }}",
        best_practices=[
            purpose,
            f"Common values: {', '.join(values)}" if values else "Check supported values on MDN",
            f"Related properties: {', '.join(related)}"
            if related
            else "Consider related properties for fallbacks",
            f"MDN reference: {feature.mdn_url}"
            if feature is not None
            else "Use MDN for compatibility details",
        ],
        fallbacks=list(GENERIC_FALLBACKS) if needs_fallback else [],
        example_code=example or f".element {{\n  {css_property}: {first_value};\n}}",
    )

"""
Project context detection from free text.

Looks for framework, CSS framework, build tool, target browsers and
constraint phrases in a caller-supplied context string.
"""

import re
from typing import Dict, List, Optional, Tuple

from .models import ProjectContext

# (detected name, trigger substrings); first match wins within each table
_FRAMEWORKS: List[Tuple[str, Tuple[str, ...]]] = [
    ("react", ("react", "jsx")),
    ("vue", ("vue",)),
    ("angular", ("angular",)),
    ("svelte", ("svelte",)),
]

_CSS_FRAMEWORKS: List[Tuple[str, Tuple[str, ...]]] = [
    ("tailwind", ("tailwind",)),
    ("bootstrap", ("bootstrap",)),
    ("material-ui", ("material", "mui")),
    ("chakra-ui", ("chakra",)),
]

_BUILD_TOOLS = ("webpack", "vite", "parcel", "rollup")

_CONSTRAINTS: List[Tuple[str, Tuple[str, ...]]] = [
    ("css-only", ("no javascript", "css only")),
    ("performance-critical", ("performance", "lightweight")),
    ("accessibility-focused", ("accessible", "a11y")),
    ("responsive-required", ("responsive", "mobile-first")),
]

_BROWSER_RE = re.compile(r"(?:chrome|firefox|safari|edge)\s*\d+\+?", re.I)

FRAMEWORK_RECOMMENDATIONS: Dict[str, List[str]] = {
    "react": [
        "Consider CSS-in-JS solutions like styled-components",
        "Use className for CSS classes",
        "Flexbox works well with React component layouts",
        "CSS Modules can help with scoping",
    ],
    "vue": [
        "Use scoped styles in single-file components",
        "CSS Grid works well with Vue's template system",
        "Consider Vue-specific CSS frameworks",
        "Transition components work well with CSS animations",
    ],
    "angular": [
        "Use ViewEncapsulation for component styling",
        "CSS Grid and Flexbox work well with Angular Material",
        "Consider Angular CDK for advanced layouts",
        "Use CSS custom properties for theming",
    ],
    "svelte": [
        "Leverage Svelte's built-in scoped styling",
        "CSS animations work seamlessly with Svelte transitions",
        "Use CSS custom properties for reactive styling",
        "Consider SvelteKit for full-stack CSS organization",
    ],
}

CSS_FRAMEWORK_RECOMMENDATIONS: Dict[str, List[str]] = {
    "tailwind": [
        "Use utility-first approach",
        "Consider @apply directive for custom components",
        "Leverage Tailwind's responsive prefixes",
        "Use arbitrary value syntax for custom values",
    ],
    "bootstrap": [
        "Use Bootstrap's grid system",
        "Leverage utility classes",
        "Consider custom SCSS variables for theming",
        "Use Bootstrap components as base for custom designs",
    ],
    "material-ui": [
        "Use Material Design principles",
        "Leverage theme customization",
        "Consider sx prop for inline styling",
        "Use Material-UI's responsive breakpoints",
    ],
}


def _first_match(text: str, table: List[Tuple[str, Tuple[str, ...]]]) -> Optional[str]:
    for name, triggers in table:
        if any(t in text for t in triggers):
            return name
    return None


def analyze_project_context(context: Optional[str]) -> ProjectContext:
    """Extract what can be learned about the caller's project from ``context``."""
    if not context:
        return ProjectContext()

    lowered = context.lower()
    return ProjectContext(
        framework=_first_match(lowered, _FRAMEWORKS),
        css_framework=_first_match(lowered, _CSS_FRAMEWORKS),
        build_tool=next((tool for tool in _BUILD_TOOLS if tool in lowered), None),
        target_browsers=_BROWSER_RE.findall(context),
        constraints=[
            name for name, triggers in _CONSTRAINTS if any(t in lowered for t in triggers)
        ],
    )


def framework_recommendations(framework: Optional[str]) -> List[str]:
    return list(FRAMEWORK_RECOMMENDATIONS.get(framework or "", []))


def css_framework_recommendations(css_framework: Optional[str]) -> List[str]:
    return list(CSS_FRAMEWORK_RECOMMENDATIONS.get(css_framework or "", []))

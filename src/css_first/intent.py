"""
Intent analysis for UI task descriptions.

Maps free text to intent labels, feature categories, framework hints and a
keyword set used by the feature scorer.  Matching is regex and substring
based.

Key public interface
--------------------
    IntentAnalyzer.analyze(description, project_context)
    extract_keywords(description)
    explain_intent(profile)
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .context import (
    analyze_project_context,
    css_framework_recommendations,
    framework_recommendations,
)
from .logical import writing_mode_recommendations
from .models import FeatureCategory, IntentLabel, IntentProfile

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pattern tables
# ---------------------------------------------------------------------------

@dataclass
class IntentPattern:
    """Regexes that signal one intent, and the categories it points at."""

    label: IntentLabel
    patterns: List["re.Pattern[str]"]
    categories: List[FeatureCategory]


def _compile(*patterns: str) -> List["re.Pattern[str]"]:
    return [re.compile(p, re.IGNORECASE) for p in patterns]


INTENT_PATTERNS: List[IntentPattern] = [
    IntentPattern(
        IntentLabel.LAYOUT,
        _compile(
            r"(?:arrange|organize|position|place|layout)",
            r"(?:center|align|justify|distribute)",
            r"(?:column|row|grid|flex)",
            r"(?:beside|above|below|next to|in a row)",
        ),
        [FeatureCategory.LAYOUT],
    ),
    IntentPattern(
        IntentLabel.ANIMATION,
        _compile(
            r"(?:animate|transition|move|slide|fade|hover)",
            r"(?:smooth|ease|duration|timing)",
            r"(?:transform|translate|rotate|scale)",
        ),
        [FeatureCategory.ANIMATION],
    ),
    IntentPattern(
        IntentLabel.SPACING,
        _compile(
            r"(?:space|spacing|gap|margin|padding)",
            r"(?:between|around|inside|outside)",
            r"(?:tight|loose|compressed|expanded)",
        ),
        [FeatureCategory.LOGICAL],
    ),
    IntentPattern(
        IntentLabel.RESPONSIVE,
        _compile(
            r"(?:responsive|mobile|tablet|desktop|breakpoint)",
            r"(?:small screen|large screen|different sizes)",
            r"(?:adapt|resize|scale|fit)",
        ),
        [FeatureCategory.RESPONSIVE],
    ),
    IntentPattern(
        IntentLabel.VISUAL,
        _compile(
            r"(?:color|background|border|shadow|gradient)",
            r"(?:appearance|style|design|look)",
            r"(?:opacity|transparency|blur)",
        ),
        [FeatureCategory.VISUAL],
    ),
    IntentPattern(
        IntentLabel.INTERACTION,
        _compile(
            r"(?:click|hover|focus|active|disabled)",
            r"(?:interactive|button|link|form)",
            r"(?:state|feedback|response)",
        ),
        [FeatureCategory.INTERACTION],
    ),
    IntentPattern(
        IntentLabel.SELECTORS,
        _compile(
            r"(?:selector|pseudo-class|pseudo-element|specificity)",
            r"(?:attribute selector|structural selector|nth-child)",
            r"(?::is\(|:where\(|:not\(|:has\(|:focus-visible|:focus-within)",
        ),
        [FeatureCategory.SELECTORS],
    ),
    IntentPattern(
        IntentLabel.HTML_SEMANTICS,
        _compile(
            r"(?:commandfor|command|invoker)",
            r"(?:dialog|modal|popover)",
            r"(?:popovertarget|popovertargetaction)",
        ),
        [FeatureCategory.HTML],
    ),
]

FRAMEWORK_INDICATORS: Dict[str, List[str]] = {
    "react": ["component", "jsx", "react", "usestate", "useeffect"],
    "vue": ["template", "v-if", "v-for", "vue", "composition"],
    "angular": ["angular", "component", "directive", "ngif", "ngfor"],
    "tailwind": ["tailwind", "tw-", "class=", "classname="],
    "bootstrap": ["bootstrap", "btn-", "col-", "row", "container"],
}

CSS_PROPERTY_WORDS: Tuple[str, ...] = (
    "height", "width", "position", "display", "flex", "grid", "margin",
    "padding", "border", "background", "color", "font", "text", "transform",
    "transition", "animation",
)


@dataclass
class KeywordRule:
    """Adds ``keywords`` when any trigger (and every requirement) is present.

    ``extras`` are nested (triggers, keywords) pairs checked only when the
    rule itself fired.
    """

    triggers: Tuple[str, ...]
    keywords: Tuple[str, ...]
    requires: Tuple[str, ...] = ()
    extras: List[Tuple[Tuple[str, ...], Tuple[str, ...]]] = field(default_factory=list)

    def apply(self, text: str) -> List[str]:
        if not any(t in text for t in self.triggers):
            return []
        if not all(r in text for r in self.requires):
            return []
        found = list(self.keywords)
        for triggers, keywords in self.extras:
            if any(t in text for t in triggers):
                found.extend(keywords)
        return found


KEYWORD_RULES: List[KeywordRule] = [
    KeywordRule(
        ("full",),
        ("height", "100vh", "100dvh", "dvh", "svh", "lvh", "block-size", "min-height"),
        requires=("height",),
    ),
    KeywordRule(
        ("mobile", "phone"),
        ("dvh", "svh", "lvh", "mobile-viewport", "browser-ui", "@media"),
        extras=[
            (("height", "screen", "full"), ("100dvh", "height", "block-size", "viewport-height")),
        ],
    ),
    KeywordRule(
        ("header",),
        ("header",),
        extras=[
            (("stick", "fix"), ("sticky", "fixed", "position")),
            (("full", "height"), ("height", "min-height", "dvh", "100dvh")),
        ],
    ),
    KeywordRule(
        ("center", "align"),
        ("center", "align", "justify-content", "align-items", "flex", "grid"),
    ),
    KeywordRule(
        ("carousel", "slider", "gallery"),
        (
            "carousel", "scroll-snap-type", "overflow-inline", "scroll-behavior",
            "::scroll-marker", "::scroll-button", "flex",
        ),
    ),
    KeywordRule(
        ("theme", "dark", "light"),
        ("light-dark", "color-scheme", "prefers-color-scheme", "@media"),
    ),
    KeywordRule(
        ("form",),
        ("form",),
        extras=[(("valid", "error"), (":user-valid", ":user-invalid", ":invalid", ":valid"))],
    ),
    KeywordRule(
        ("modal", "dialog", "popup"),
        ("dialog", ":target", "position", "fixed", "backdrop-filter"),
    ),
    KeywordRule(
        ("nav", "menu"),
        ("nav", "menu"),
        extras=[(("hamburger", "mobile"), (":checked", "position", "transform"))],
    ),
    KeywordRule(
        ("animate", "transition"),
        ("animation", "transition", "@keyframes"),
        extras=[(("scroll",), ("scroll-timeline", "animation-timeline"))],
    ),
    KeywordRule(
        ("responsive", "breakpoint"),
        ("@media", "container", "clamp", "min", "max"),
    ),
    KeywordRule(("always",), ("min-height", "100%", "vh", "dvh")),
    KeywordRule(("section",), ("section", "height", "min-height")),
    KeywordRule(("device",), ("dvh", "svh", "@media", "viewport")),
]

TOTAL_PATTERNS = sum(len(p.patterns) for p in INTENT_PATTERNS)


def _unique(items: Sequence) -> List:
    """De-duplicate preserving first occurrence."""
    return list(dict.fromkeys(items))


def extract_keywords(description: str) -> List[str]:
    """Topical keyword bundles triggered by words in ``description``."""
    text = description.lower()
    keywords = [word for word in CSS_PROPERTY_WORDS if word in text]
    for rule in KEYWORD_RULES:
        keywords.extend(rule.apply(text))
    return _unique(keywords)


def explain_intent(profile: IntentProfile) -> str:
    """``"Intent layout, spacing (8%)."``; percentage rounds half up."""
    labels = ", ".join(label.value for label in profile.intents) or "none"
    percent = int(profile.confidence * 100 + 0.5)
    return f"Intent {labels} ({percent}%)."


# ---------------------------------------------------------------------------
# IntentAnalyzer
# ---------------------------------------------------------------------------

class IntentAnalyzer:
    """Turns a task description (plus optional project context) into an
    IntentProfile."""

    def __init__(self, patterns: Optional[List[IntentPattern]] = None) -> None:
        self.patterns = patterns if patterns is not None else INTENT_PATTERNS
        self.total_patterns = sum(len(p.patterns) for p in self.patterns)

    def analyze(self, description: str, project_context: Optional[str] = None) -> IntentProfile:
        """Analyse *description* and return its IntentProfile.

        Parameters
        ----------
        description:
            Free-form text describing the UI task.
        project_context:
            Optional free text about the project (framework, browsers,
            constraints, writing direction).

        Returns
        -------
        IntentProfile
            Keywords, active intents, categories, framework hints, the global
            pattern-match ratio as confidence, and recommendations.
        """
        context = analyze_project_context(project_context)

        intents: List[IntentLabel] = []
        categories: List[FeatureCategory] = []
        matched = 0
        for pattern_def in self.patterns:
            hits = sum(1 for p in pattern_def.patterns if p.search(description))
            if hits:
                matched += hits
                intents.append(pattern_def.label)
                categories.extend(pattern_def.categories)

        hints: List[str] = []
        if context.framework:
            hints.append(context.framework)
        if context.css_framework:
            hints.append(context.css_framework)
        lowered = description.lower()
        for framework, indicators in FRAMEWORK_INDICATORS.items():
            if any(indicator in lowered for indicator in indicators):
                hints.append(framework)

        confidence = matched / self.total_patterns if self.total_patterns else 0.0

        recommendations = (
            framework_recommendations(context.framework)
            + css_framework_recommendations(context.css_framework)
            + writing_mode_recommendations(project_context)
        )

        profile = IntentProfile(
            keywords=extract_keywords(description),
            intents=_unique(intents),
            suggested_categories=_unique(categories),
            framework_hints=_unique(hints),
            confidence=confidence,
            context_analysis=context,
            recommendations=recommendations or None,
        )
        logger.debug(
            "intent %s categories=%s confidence=%.3f keywords=%s",
            [i.value for i in profile.intents],
            [c.value for c in profile.suggested_categories],
            profile.confidence,
            profile.keywords,
        )
        return profile


def analyze_task_intent(description: str, project_context: Optional[str] = None) -> IntentProfile:
    """Convenience wrapper around a default IntentAnalyzer."""
    return IntentAnalyzer().analyze(description, project_context)

"""
Suggestion pipeline.

Turns a task description into a ranked, de-duplicated list of Suggestion
objects:

    1. intent analysis (text input) or direct keywords (legacy list input)
    2. candidate search over the feature registry
    3. support + Baseline resolution for each candidate's primary property,
       filtered by approach and (optionally) an exact Baseline preference
    4. relevance scoring, with a zero-relevance fallback search when nothing
       survives
    5. logical-preference pre-sort, then a stable sort by relevance
    6. de-duplication by property and truncation
"""

import asyncio
import logging
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple, Union

from .errors import InvalidArgumentError
from .intent import IntentAnalyzer, explain_intent
from .logical import rank_by_logical_preference
from .models import (
    Approach,
    Baseline,
    BrowserSupportSummary,
    FeatureCategory,
    FeatureDescriptor,
    IntentLabel,
    IntentProfile,
    Suggestion,
    SuggestionReport,
    SupportLevel,
)
from .registry import FeatureRegistry, get_registry
from .scoring import carousel_features, search_features
from .settings import Settings, get_settings
from .support import SupportResolver, derive_support_level, get_support_resolver

logger = logging.getLogger(__name__)

Description = Union[str, Sequence[str]]

FALLBACK_LIMIT = 5
DEFAULT_USE_CASES = ("General styling", "UI enhancement")

APPROACH_LEVELS: Dict[Approach, FrozenSet[SupportLevel]] = {
    Approach.MODERN: frozenset(
        {SupportLevel.EXCELLENT, SupportLevel.GOOD, SupportLevel.EXPERIMENTAL}
    ),
    Approach.COMPATIBLE: frozenset({SupportLevel.EXCELLENT}),
    Approach.PROGRESSIVE: frozenset(SupportLevel),
}

# Category that earns the +10 intent bonus; None means the intent has no rule.
INTENT_CATEGORY_BONUS: Dict[IntentLabel, Optional[FeatureCategory]] = {
    IntentLabel.LAYOUT: FeatureCategory.LAYOUT,
    IntentLabel.ANIMATION: FeatureCategory.ANIMATION,
    IntentLabel.SPACING: FeatureCategory.LOGICAL,
    IntentLabel.RESPONSIVE: None,
    IntentLabel.VISUAL: None,
    IntentLabel.INTERACTION: None,
    IntentLabel.SELECTORS: FeatureCategory.SELECTORS,
    IntentLabel.HTML_SEMANTICS: FeatureCategory.HTML,
}

_uncovered = set(IntentLabel) - set(INTENT_CATEGORY_BONUS)
if _uncovered:
    raise RuntimeError(
        f"INTENT_CATEGORY_BONUS is missing intents: {sorted(i.value for i in _uncovered)}"
    )

_BASELINE_VOCABULARY: Dict[str, Baseline] = {
    "widely available": Baseline.WIDELY_AVAILABLE,
    "widely-available": Baseline.WIDELY_AVAILABLE,
    "wide": Baseline.WIDELY_AVAILABLE,
    "newly available": Baseline.NEWLY_AVAILABLE,
    "newly-available": Baseline.NEWLY_AVAILABLE,
    "new": Baseline.NEWLY_AVAILABLE,
    "limited availability": Baseline.LIMITED_AVAILABILITY,
    "limited-availability": Baseline.LIMITED_AVAILABILITY,
    "limited": Baseline.LIMITED_AVAILABILITY,
    "experimental": Baseline.EXPERIMENTAL,
    "experiental": Baseline.EXPERIMENTAL,
    "exp": Baseline.EXPERIMENTAL,
}

_BASELINE_LABELS: Dict[Baseline, str] = {
    Baseline.WIDELY_AVAILABLE: "Widely Available",
    Baseline.NEWLY_AVAILABLE: "Newly Available",
    Baseline.LIMITED_AVAILABILITY: "Limited Availability",
    Baseline.EXPERIMENTAL: "Experimental",
}


def normalize_baseline_preference(value: Optional[str]) -> Optional[Baseline]:
    """Map a free-form preference onto a Baseline; unknown values mean no filter."""
    if not value:
        return None
    return _BASELINE_VOCABULARY.get(value.strip().lower())


def baseline_label(baseline: Union[Baseline, str]) -> str:
    return _BASELINE_LABELS[Baseline(baseline)]


def passes_approach(level: SupportLevel, approach: Approach) -> bool:
    return level in APPROACH_LEVELS[approach]


def relevance_score(
    feature: FeatureDescriptor, level: SupportLevel, profile: IntentProfile
) -> float:
    score = 0.0
    for intent in profile.intents:
        if INTENT_CATEGORY_BONUS[intent] == feature.category:
            score += 10
    if level == SupportLevel.EXCELLENT:
        score += 5
    elif level == SupportLevel.GOOD:
        score += 3
    if "react" in profile.framework_hints and "flex" in feature.properties:
        score += 3
    if "tailwind" in profile.framework_hints and "grid" in feature.properties:
        score += 3
    return score * (1 + profile.confidence)


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------

def _validate_description(description: object) -> Union[str, List[str]]:
    if isinstance(description, str):
        return description
    if isinstance(description, (list, tuple)):
        bad = [item for item in description if not isinstance(item, str)]
        if bad:
            raise InvalidArgumentError(
                "description", f"keyword list must contain only strings, got {bad[0]!r}"
            )
        return list(description)
    raise InvalidArgumentError(
        "description",
        f"expected a string or a list of strings, got {type(description).__name__}",
    )


def _validate_approach(approach: object) -> Approach:
    try:
        return Approach(approach)
    except ValueError:
        choices = ", ".join(a.value for a in Approach)
        raise InvalidArgumentError(
            "approach", f"expected one of {choices}, got {approach!r}"
        ) from None


def _validate_max(max_suggestions: object) -> int:
    if isinstance(max_suggestions, bool) or not isinstance(max_suggestions, int):
        raise InvalidArgumentError(
            "max_suggestions", f"expected an integer, got {max_suggestions!r}"
        )
    if max_suggestions < 0:
        raise InvalidArgumentError(
            "max_suggestions", f"must not be negative, got {max_suggestions}"
        )
    return max_suggestions


def _dedupe(suggestions: Sequence[Suggestion], limit: int) -> List[Suggestion]:
    seen = set()
    unique: List[Suggestion] = []
    for suggestion in suggestions:
        if suggestion.property in seen:
            continue
        seen.add(suggestion.property)
        unique.append(suggestion)
    return unique[:limit]


# ---------------------------------------------------------------------------
# SuggestionEngine
# ---------------------------------------------------------------------------

Candidate = Tuple[FeatureDescriptor, Suggestion]


class SuggestionEngine:
    """Suggestion pipeline with injectable registry, resolver and analyzer."""

    def __init__(
        self,
        registry: Optional[FeatureRegistry] = None,
        resolver: Optional[SupportResolver] = None,
        analyzer: Optional[IntentAnalyzer] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.registry = registry if registry is not None else get_registry()
        self.resolver = resolver or get_support_resolver()
        self.analyzer = analyzer or IntentAnalyzer()

    # -- public API ----------------------------------------------------------

    async def suggest(
        self,
        description: Description,
        approach: Union[Approach, str] = Approach.MODERN,
        project_context: Optional[str] = None,
        baseline_preference: Optional[str] = None,
        max_suggestions: Optional[int] = None,
    ) -> List[Suggestion]:
        """Ranked suggestions for a task description or a legacy keyword list.

        Raises
        ------
        InvalidArgumentError
            If ``description``, ``approach`` or ``max_suggestions`` break the
            input contract.
        """
        report = await self._run(
            description, approach, project_context, baseline_preference, max_suggestions
        )
        return report.suggestions

    async def suggest_with_analysis(
        self,
        description: str,
        approach: Union[Approach, str] = Approach.MODERN,
        project_context: Optional[str] = None,
        baseline_preference: Optional[str] = None,
        max_suggestions: Optional[int] = None,
    ) -> SuggestionReport:
        """Like :meth:`suggest`, plus the IntentProfile and its explanation."""
        if not isinstance(description, str):
            raise InvalidArgumentError(
                "description", "analysis requires a text description, not a keyword list"
            )
        return await self._run(
            description, approach, project_context, baseline_preference, max_suggestions
        )

    # -- internals -------------------------------------------------------------

    async def _run(
        self,
        description: object,
        approach: object,
        project_context: Optional[str],
        baseline_preference: Optional[str],
        max_suggestions: Optional[int],
    ) -> SuggestionReport:
        text_or_keywords = _validate_description(description)
        approach = _validate_approach(approach)
        limit = _validate_max(
            self.settings.max_suggestions if max_suggestions is None else max_suggestions
        )
        baseline = normalize_baseline_preference(baseline_preference)

        if isinstance(text_or_keywords, list):
            suggestions = await self._suggest_from_keywords(
                text_or_keywords, approach, baseline, limit
            )
            return SuggestionReport(suggestions=suggestions)

        profile = self.analyzer.analyze(text_or_keywords, project_context)
        suggestions = await self._suggest_from_profile(profile, approach, baseline, limit)
        logger.info(
            "%d suggestion(s) for %r (approach=%s, baseline=%s)",
            len(suggestions),
            text_or_keywords,
            approach.value,
            baseline.value if baseline else None,
        )
        return SuggestionReport(
            suggestions=suggestions,
            analysis=profile,
            explanation=explain_intent(profile),
        )

    async def _suggest_from_profile(
        self,
        profile: IntentProfile,
        approach: Approach,
        baseline: Optional[Baseline],
        limit: int,
    ) -> List[Suggestion]:
        # One search pass stands in for a pass per active category; repeats
        # would only add identical candidates that de-duplication drops.
        candidates: List[FeatureDescriptor] = []
        if profile.suggested_categories:
            candidates = search_features(profile.keywords, self.registry)

        resolved = await self._resolve_all(candidates, approach, baseline, use_live_syntax=True)
        for feature, suggestion in resolved:
            suggestion.relevance_score = relevance_score(
                feature, suggestion.support_level, profile
            )

        if not resolved:
            logger.debug("no intent-ranked candidates, falling back to direct search")
            fallback = search_features(profile.keywords, self.registry)[:FALLBACK_LIMIT]
            resolved = await self._resolve_all(fallback, approach, baseline)

        ordered = rank_by_logical_preference(resolved, lambda item: item[0].properties)
        ordered = sorted(ordered, key=lambda item: item[1].relevance_score, reverse=True)
        return _dedupe([suggestion for _, suggestion in ordered], limit)

    async def _suggest_from_keywords(
        self,
        keywords: List[str],
        approach: Approach,
        baseline: Optional[Baseline],
        limit: int,
    ) -> List[Suggestion]:
        candidates: List[FeatureDescriptor] = []
        if "carousel" in keywords or "slider" in keywords:
            candidates.extend(carousel_features(self.registry))

        seen = {f.primary_property for f in candidates}
        for feature in search_features(keywords, self.registry):
            if feature.primary_property not in seen:
                seen.add(feature.primary_property)
                candidates.append(feature)

        resolved = await self._resolve_all(candidates, approach, baseline)
        return _dedupe([suggestion for _, suggestion in resolved], limit)

    async def _resolve_all(
        self,
        features: Sequence[FeatureDescriptor],
        approach: Approach,
        baseline: Optional[Baseline],
        use_live_syntax: bool = False,
    ) -> List[Candidate]:
        """Resolve candidates concurrently, keeping their order, dropping filtered ones."""
        semaphore = asyncio.Semaphore(self.settings.max_concurrency)

        async def bounded(feature: FeatureDescriptor) -> Optional[Candidate]:
            async with semaphore:
                return await self._resolve_candidate(
                    feature, approach, baseline, use_live_syntax
                )

        results = await asyncio.gather(*(bounded(f) for f in features))
        return [r for r in results if r is not None]

    async def _resolve_candidate(
        self,
        feature: FeatureDescriptor,
        approach: Approach,
        baseline: Optional[Baseline],
        use_live_syntax: bool,
    ) -> Optional[Candidate]:
        prop = feature.primary_property
        documentation = await self.resolver.resolve(prop)
        record = documentation.support

        if record.is_default:
            level = feature.support_level
        else:
            level = derive_support_level(record.overall_support)
        if not passes_approach(level, approach):
            logger.debug("%s dropped: %s not allowed for %s", prop, level.value, approach.value)
            return None

        resolved_baseline = await self.resolver.resolve_baseline(prop, level)
        if baseline is not None and resolved_baseline != baseline:
            logger.debug("%s dropped: baseline %s", prop, resolved_baseline.value)
            return None

        syntax = f"{feature.name}: value;"
        if use_live_syntax and documentation.syntax:
            syntax = documentation.syntax

        suggestion = Suggestion(
            property=prop,
            description=feature.description,
            syntax=syntax,
            browser_support=BrowserSupportSummary.from_record(record),
            use_cases=list(DEFAULT_USE_CASES),
            mdn_url=feature.mdn_url,
            category=feature.category,
            support_level=level,
            baseline=resolved_baseline,
        )
        return feature, suggestion


async def suggest(
    description: Description,
    approach: Union[Approach, str] = Approach.MODERN,
    project_context: Optional[str] = None,
    baseline_preference: Optional[str] = None,
    max_suggestions: Optional[int] = None,
) -> List[Suggestion]:
    """Suggest web-platform features for ``description`` with the default engine."""
    engine = SuggestionEngine()
    return await engine.suggest(
        description, approach, project_context, baseline_preference, max_suggestions
    )

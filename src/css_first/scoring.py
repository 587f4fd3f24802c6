"""
Keyword scoring of registry features.

Each (feature, keyword) pair earns exactly one tier, checked in order:
exact property id, substring of a property id, substring of the name,
substring of the description, substring of the combined text.  A table of
semantic co-occurrence bonuses is added on top.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from .models import FeatureDescriptor
from .registry import FeatureRegistry, get_registry

logger = logging.getLogger(__name__)

EXACT_PROPERTY_SCORE = 100
PARTIAL_PROPERTY_SCORE = 50
NAME_SCORE = 30
DESCRIPTION_SCORE = 20
TEXT_SCORE = 10

MAX_RESULTS = 10

CAROUSEL_FEATURE_IDS: Tuple[str, ...] = (
    "css-carousel",
    "scroll-snap",
    "flexbox",
    "transitions",
)

_VIEW_TRANSITION_TERMS = (
    "view transition",
    "view-transition",
    "page transition",
    "state change",
    "morph",
    "crossfade",
    "scoped transition",
)


def keyword_score(feature: FeatureDescriptor, keyword: str) -> int:
    """Score a single keyword against a feature (first matching tier wins)."""
    needle = keyword.lower()
    properties = [p.lower() for p in feature.properties]

    if needle in properties:
        return EXACT_PROPERTY_SCORE
    if any(needle in p for p in properties):
        return PARTIAL_PROPERTY_SCORE
    if needle in feature.name.lower():
        return NAME_SCORE
    if needle in feature.description.lower():
        return DESCRIPTION_SCORE

    text = f"{feature.name} {feature.description} {' '.join(feature.properties)}".lower()
    if needle in text:
        return TEXT_SCORE
    return 0


def semantic_bonus(keywords: Sequence[str], feature: FeatureDescriptor) -> int:
    """Extra points for feature families that match common task phrasings."""
    text = " ".join(keywords).lower()
    props = feature.properties
    name = feature.name
    bonus = 0

    if "mobile" in text and "height" in text:
        if "Mobile Viewport Heights" in name or "dvh" in props or "svh" in props:
            bonus += 200

    if "header" in text and ("sticky" in text or "fixed" in text):
        if "Positioning" in name or "sticky" in props or "fixed" in props:
            bonus += 150

    if "full" in text and "height" in text:
        if any(p in props for p in ("height", "100vh", "dvh", "block-size")):
            bonus += 100

    if "carousel" in text or "slider" in text:
        if (
            "Modern CSS Carousel" in name
            or "::scroll-marker" in props
            or "::scroll-button()" in props
            or ":target-current" in props
        ):
            bonus += 200
        elif "Carousel" in name or "scroll-snap-type" in props:
            bonus += 150

    if "theme" in text or "dark" in text or "light" in text:
        if "Light-Dark" in name or "light-dark" in props or "color-scheme" in props:
            bonus += 150

    if any(term in text for term in _VIEW_TRANSITION_TERMS):
        if (
            "View Transitions" in name
            or "view-transition-name" in props
            or "::view-transition" in props
        ):
            bonus += 200

    if "form" in text and "valid" in text:
        if "Form Validation" in name or ":user-valid" in props or ":invalid" in props:
            bonus += 150

    return bonus


def score_feature(feature: FeatureDescriptor, keywords: Sequence[str]) -> int:
    return sum(keyword_score(feature, k) for k in keywords) + semantic_bonus(
        keywords, feature
    )


def search_features(
    keywords: Iterable[str],
    registry: Optional[FeatureRegistry] = None,
    limit: int = MAX_RESULTS,
) -> List[FeatureDescriptor]:
    """Return the best-scoring features for ``keywords``, highest first.

    Zero scores are dropped; equal scores keep registry order.
    """
    if registry is None:
        registry = get_registry()
    keywords = list(keywords)

    scored: List[Tuple[FeatureDescriptor, int]] = []
    for feature in registry:
        score = score_feature(feature, keywords)
        if score > 0:
            scored.append((feature, score))

    scored.sort(key=lambda item: item[1], reverse=True)
    logger.debug(
        "search %s -> %s",
        keywords,
        [(f.id, s) for f, s in scored[:limit]],
    )
    return [feature for feature, _ in scored[:limit]]


def carousel_features(registry: Optional[FeatureRegistry] = None) -> List[FeatureDescriptor]:
    """Fixed carousel candidates: modern carousel, scroll snap, flexbox, transitions."""
    if registry is None:
        registry = get_registry()
    features = [registry.get(feature_id) for feature_id in CAROUSEL_FEATURE_IDS]
    return [f for f in features if f is not None]

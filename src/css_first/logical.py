"""
Logical-first preferences.

Ranks candidates so writing-mode aware properties and units come first,
converts physical CSS to logical equivalents, and produces writing-mode
advice for a project context.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, TypeVar

from .models import LogicalAnalysis, LogicalFinding

T = TypeVar("T")


@dataclass(frozen=True)
class UnitMapping:
    physical: str
    logical: str
    description: str
    category: str  # viewport | container | property


LOGICAL_UNIT_MAPPINGS: List[UnitMapping] = [
    # Viewport units
    UnitMapping("vw", "vi", "Viewport width → inline", "viewport"),
    UnitMapping("vh", "vb", "Viewport height → block", "viewport"),
    UnitMapping("dvw", "dvi", "Dynamic viewport width → inline", "viewport"),
    UnitMapping("dvh", "dvb", "Dynamic viewport height → block", "viewport"),
    UnitMapping("svw", "svi", "Small viewport width → inline", "viewport"),
    UnitMapping("svh", "svb", "Small viewport height → block", "viewport"),
    UnitMapping("lvw", "lvi", "Large viewport width → inline", "viewport"),
    UnitMapping("lvh", "lvb", "Large viewport height → block", "viewport"),
    # Container query units
    UnitMapping("cqw", "cqi", "Container query width → inline", "container"),
    UnitMapping("cqh", "cqb", "Container query height → block", "container"),
    # Properties
    UnitMapping("width", "inline-size", "Width → inline size", "property"),
    UnitMapping("height", "block-size", "Height → block size", "property"),
    UnitMapping("min-width", "min-inline-size", "Min width → min inline size", "property"),
    UnitMapping("min-height", "min-block-size", "Min height → min block size", "property"),
    UnitMapping("max-width", "max-inline-size", "Max width → max inline size", "property"),
    UnitMapping("max-height", "max-block-size", "Max height → max block size", "property"),
    UnitMapping("margin-left", "margin-inline-start", "Left margin → inline start margin", "property"),
    UnitMapping("margin-right", "margin-inline-end", "Right margin → inline end margin", "property"),
    UnitMapping("margin-top", "margin-block-start", "Top margin → block start margin", "property"),
    UnitMapping("margin-bottom", "margin-block-end", "Bottom margin → block end margin", "property"),
    UnitMapping("padding-left", "padding-inline-start", "Left padding → inline start padding", "property"),
    UnitMapping("padding-right", "padding-inline-end", "Right padding → inline end padding", "property"),
    UnitMapping("padding-top", "padding-block-start", "Top padding → block start padding", "property"),
    UnitMapping("padding-bottom", "padding-block-end", "Bottom padding → block end padding", "property"),
    UnitMapping("border-left", "border-inline-start", "Left border → inline start border", "property"),
    UnitMapping("border-right", "border-inline-end", "Right border → inline end border", "property"),
    UnitMapping("border-top", "border-block-start", "Top border → block start border", "property"),
    UnitMapping("border-bottom", "border-block-end", "Bottom border → block end border", "property"),
    UnitMapping("left", "inset-inline-start", "Left position → inline start inset", "property"),
    UnitMapping("right", "inset-inline-end", "Right position → inline end inset", "property"),
    UnitMapping("top", "inset-block-start", "Top position → block start inset", "property"),
    UnitMapping("bottom", "inset-block-end", "Bottom position → block end inset", "property"),
]

_LOGICAL_VIEWPORT_UNITS = {"dvi", "dvb", "svi", "svb", "lvi", "lvb"}
_LOGICAL_CONTAINER_UNITS = {"cqi", "cqb"}
_PHYSICAL_VIEWPORT_UNITS = {"dvw", "dvh", "svw", "svh", "lvw", "lvh"}
_PHYSICAL_CONTAINER_UNITS = {"cqw", "cqh"}
_PHYSICAL_BOX_PROPERTIES = {"width", "height", "left", "right", "top", "bottom"}


def _pattern(mapping: UnitMapping) -> "re.Pattern[str]":
    # Units follow a number ("100vh"); properties stand alone, not inside
    # a longer hyphenated name.
    if mapping.category == "property":
        return re.compile(rf"(?<![\w-]){re.escape(mapping.physical)}(?![\w-])")
    return re.compile(rf"(?<=\d){re.escape(mapping.physical)}\b")


_PATTERNS = [(mapping, _pattern(mapping)) for mapping in LOGICAL_UNIT_MAPPINGS]


def token_score(token: str) -> int:
    if token in _LOGICAL_VIEWPORT_UNITS:
        return 10
    if token in _LOGICAL_CONTAINER_UNITS:
        return 8
    if "inline" in token or "block" in token:
        return 6
    if token in _PHYSICAL_VIEWPORT_UNITS:
        return 3
    if token in _PHYSICAL_CONTAINER_UNITS:
        return 2
    if token in _PHYSICAL_BOX_PROPERTIES:
        return 1
    return 0


def logical_score(properties: Sequence[str]) -> int:
    return sum(token_score(p) for p in properties)


def rank_by_logical_preference(
    items: Sequence[T], properties: Callable[[T], Sequence[str]]
) -> List[T]:
    """Stable sort, highest logical score first."""
    return sorted(items, key=lambda item: -logical_score(properties(item)))


def convert_to_logical_units(css: str) -> str:
    converted = css
    for mapping, pattern in _PATTERNS:
        converted = pattern.sub(mapping.logical, converted)
    return converted


def logical_alternative(physical: str) -> Optional[UnitMapping]:
    for mapping in LOGICAL_UNIT_MAPPINGS:
        if mapping.physical == physical:
            return mapping
    return None


def logical_units_by_category(category: str) -> List[UnitMapping]:
    return [m for m in LOGICAL_UNIT_MAPPINGS if m.category == category]


def analyze_and_suggest_logical(css: str) -> LogicalAnalysis:
    """Report every physical unit/property per line and the converted code."""
    findings: List[LogicalFinding] = []
    for index, line in enumerate(css.split("\n"), start=1):
        for mapping, pattern in _PATTERNS:
            if pattern.search(line):
                findings.append(
                    LogicalFinding(
                        physical=mapping.physical,
                        logical=mapping.logical,
                        line=index,
                        description=mapping.description,
                    )
                )
    return LogicalAnalysis(
        has_physical_units=bool(findings),
        suggestions=findings,
        logicalized_code=convert_to_logical_units(css),
    )


def writing_mode_recommendations(context: Optional[str] = None) -> List[str]:
    recommendations = [
        "Use logical properties (inline-size, block-size) for writing-mode compatibility",
        "Prefer logical viewport units (dvi, dvb) over physical units (dvw, dvh)",
        "Use container query logical units (cqi, cqb) for component-based responsive design",
        "Test layouts in both LTR and RTL languages",
        "Consider vertical writing modes (writing-mode: vertical-rl)",
    ]
    lowered = (context or "").lower()
    if "rtl" in lowered:
        recommendations.insert(0, "Essential for RTL languages: Use logical properties exclusively")
    if "international" in lowered:
        recommendations.insert(
            0, "For international sites: Logical properties are critical for proper localization"
        )
    return recommendations

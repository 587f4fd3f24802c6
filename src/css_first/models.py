"""
Data models for CSS First.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FeatureCategory(str, Enum):
    """Categories for CSS/HTML features."""

    LAYOUT = "layout"
    ANIMATION = "animation"
    VISUAL = "visual"
    TYPOGRAPHY = "typography"
    RESPONSIVE = "responsive"
    INTERACTION = "interaction"
    ACCESSIBILITY = "accessibility"
    LOGICAL = "logical"
    POSITIONING = "positioning"
    DISPLAY = "display"
    SELECTORS = "selectors"
    HTML = "html"


class IntentLabel(str, Enum):
    """Semantic task categories inferred from free text."""

    LAYOUT = "layout"
    ANIMATION = "animation"
    SPACING = "spacing"
    RESPONSIVE = "responsive"
    VISUAL = "visual"
    INTERACTION = "interaction"
    SELECTORS = "selectors"
    HTML_SEMANTICS = "html-semantics"


class SupportLevel(str, Enum):
    """Five-point ordinal derived from a browser support percentage."""

    EXCELLENT = "excellent"
    GOOD = "good"
    MODERATE = "moderate"
    LIMITED = "limited"
    EXPERIMENTAL = "experimental"


class Baseline(str, Enum):
    """Baseline availability of a web-platform feature."""

    WIDELY_AVAILABLE = "widely-available"
    NEWLY_AVAILABLE = "newly-available"
    LIMITED_AVAILABILITY = "limited-availability"
    EXPERIMENTAL = "experimental"


class Approach(str, Enum):
    """How adventurous the caller wants the suggestions to be."""

    MODERN = "modern"  # latest features, experimental allowed
    COMPATIBLE = "compatible"  # excellent support only
    PROGRESSIVE = "progressive"  # anything, caller supplies fallbacks


class FeatureDescriptor(BaseModel):
    """Static registry record describing one CSS/HTML capability."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Registry key")
    name: str = Field(description="Human-readable feature name")
    category: FeatureCategory = Field(description="Feature category")
    properties: List[str] = Field(
        default_factory=list, description="Property identifiers, primary first"
    )
    description: str = Field(description="Feature description")
    support_level: SupportLevel = Field(description="Static support level")
    mdn_url: str = Field(description="MDN documentation URL")

    @property
    def primary_property(self) -> str:
        return self.properties[0] if self.properties else self.id


class BrowserVersion(BaseModel):
    """Minimum version and support state for one browser."""

    version: str
    support: str = "full"


def default_browser_table() -> Dict[str, BrowserVersion]:
    return {
        "chrome": BrowserVersion(version="90+"),
        "firefox": BrowserVersion(version="88+"),
        "safari": BrowserVersion(version="14+"),
        "edge": BrowserVersion(version="90+"),
    }


class BrowserSupportRecord(BaseModel):
    """Browser support for a single property."""

    overall_support: int = Field(80, description="Overall support percentage")
    is_default: bool = Field(
        True, description="Whether the data comes from the static fallback"
    )
    browsers: Dict[str, BrowserVersion] = Field(
        default_factory=default_browser_table, description="Per-browser support"
    )
    experimental_features: List[str] = Field(
        default_factory=list, description="Experimental sub-features"
    )

    @field_validator("overall_support", mode="before")
    @classmethod
    def _clamp_support(cls, value):
        return max(0, min(100, int(value)))


class PropertyDocumentation(BaseModel):
    """Parsed documentation for a property, as stored in the support cache."""

    property: str
    description: str = ""
    syntax: str = ""
    values: List[str] = Field(default_factory=list)
    examples: List[str] = Field(default_factory=list)
    related_properties: List[str] = Field(default_factory=list)
    support: BrowserSupportRecord = Field(default_factory=BrowserSupportRecord)
    baseline: Optional[Baseline] = Field(
        None, description="Baseline badge found on the live page, if any"
    )


class ProjectContext(BaseModel):
    """What could be learned about the caller's project from free text."""

    framework: Optional[str] = None
    css_framework: Optional[str] = None
    build_tool: Optional[str] = None
    target_browsers: List[str] = Field(default_factory=list)
    constraints: List[str] = Field(default_factory=list)


class IntentProfile(BaseModel):
    """Result of analysing a task description."""

    keywords: List[str] = Field(default_factory=list)
    intents: List[IntentLabel] = Field(default_factory=list)
    suggested_categories: List[FeatureCategory] = Field(default_factory=list)
    framework_hints: List[str] = Field(default_factory=list)
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    context_analysis: ProjectContext = Field(default_factory=ProjectContext)
    recommendations: Optional[List[str]] = None


class BrowserSupportSummary(BaseModel):
    """Condensed support figures attached to a suggestion."""

    overall_support: int
    modern_browsers: bool
    legacy_support: str

    @classmethod
    def from_record(cls, record: BrowserSupportRecord) -> "BrowserSupportSummary":
        return cls(
            overall_support=record.overall_support,
            modern_browsers=record.overall_support >= 85,
            legacy_support="good" if record.overall_support >= 70 else "limited",
        )


class Suggestion(BaseModel):
    """A recommended property with support metadata."""

    property: str = Field(description="Property identifier")
    description: str = Field(description="What the feature does")
    syntax: str = Field(description="Syntax example")
    browser_support: BrowserSupportSummary
    use_cases: List[str] = Field(default_factory=list)
    mdn_url: str = Field(description="MDN documentation URL")
    category: FeatureCategory
    support_level: SupportLevel
    baseline: Baseline
    relevance_score: float = Field(0.0, exclude=True)


class SuggestionReport(BaseModel):
    """Suggestions plus the analysis that produced them."""

    suggestions: List[Suggestion] = Field(default_factory=list)
    analysis: Optional[IntentProfile] = None
    explanation: Optional[str] = None


class ImplementationGuidance(BaseModel):
    """How to adopt a property that the user approved."""

    basic_usage: str
    best_practices: List[str] = Field(default_factory=list)
    fallbacks: List[str] = Field(default_factory=list)
    example_code: str = ""


class LogicalFinding(BaseModel):
    """A physical unit or property found in CSS, with its logical replacement."""

    physical: str
    logical: str
    line: int
    description: str


class LogicalAnalysis(BaseModel):
    """Result of scanning CSS for physical units and properties."""

    has_physical_units: bool = False
    suggestions: List[LogicalFinding] = Field(default_factory=list)
    logicalized_code: str = ""

"""
Support resolution: property id -> browser support record and Baseline.

Lookups go through a TTL cache keyed by the normalized property id.  On a
miss the MDN page is fetched and parsed; any failure there falls back to the
static support table and is never raised to the caller.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import httpx
import yaml

from .cache import SupportCache
from .errors import DocumentationParseError
from .mdn import MDNClient, normalize_property_id
from .models import (
    Baseline,
    BrowserSupportRecord,
    PropertyDocumentation,
    SupportLevel,
)
from .registry import DATA_DIR
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

SUPPORT_FILE = DATA_DIR / "support.yaml"
DEFAULT_SUPPORT = 80


def derive_support_level(overall_support: int) -> SupportLevel:
    """Map a support percentage onto the five-point scale."""
    if overall_support >= 95:
        return SupportLevel.EXCELLENT
    if overall_support >= 85:
        return SupportLevel.GOOD
    if overall_support >= 70:
        return SupportLevel.MODERATE
    if overall_support >= 50:
        return SupportLevel.LIMITED
    return SupportLevel.EXPERIMENTAL


_BASELINE_BY_LEVEL: Dict[SupportLevel, Baseline] = {
    SupportLevel.EXCELLENT: Baseline.WIDELY_AVAILABLE,
    SupportLevel.GOOD: Baseline.WIDELY_AVAILABLE,
    SupportLevel.MODERATE: Baseline.NEWLY_AVAILABLE,
    SupportLevel.LIMITED: Baseline.LIMITED_AVAILABILITY,
    SupportLevel.EXPERIMENTAL: Baseline.EXPERIMENTAL,
}


def baseline_from_support_level(level: SupportLevel) -> Baseline:
    return _BASELINE_BY_LEVEL[SupportLevel(level)]


class FallbackSupportTable:
    """Static support percentages, experimental sub-features and offline details."""

    def __init__(
        self,
        support: Optional[Mapping[str, int]] = None,
        experimental: Optional[Mapping[str, List[str]]] = None,
        details: Optional[Mapping[str, Mapping[str, Any]]] = None,
        default_support: int = DEFAULT_SUPPORT,
    ):
        self._support = dict(support or {})
        self._experimental = {k: list(v) for k, v in (experimental or {}).items()}
        self._details = dict(details or {})
        self.default_support = default_support

    @classmethod
    def from_yaml(cls, path: Optional[Path] = None) -> "FallbackSupportTable":
        path = path or SUPPORT_FILE
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        return cls(
            support=data.get("support", {}),
            experimental=data.get("experimental", {}),
            details=data.get("details", {}),
            default_support=data.get("default_support", DEFAULT_SUPPORT),
        )

    def _candidate_keys(self, property_id: str) -> List[str]:
        trimmed = property_id.strip()
        keys = [property_id, trimmed]
        if ":" in trimmed:
            base = trimmed.split(":")[0].strip()
            if base:
                keys.append(base)
        if trimmed.endswith("()"):
            keys.append(trimmed[:-2])
        keys.append(normalize_property_id(trimmed))
        return keys

    def support_for(self, property_id: str) -> int:
        """Raw id, then the part before ``:``, then without ``()``, then normalized."""
        for key in self._candidate_keys(property_id):
            if key in self._support:
                return int(self._support[key])
        return self.default_support

    def experimental_features(self, property_id: str) -> List[str]:
        for key in self._candidate_keys(property_id):
            if key in self._experimental:
                return list(self._experimental[key])
        return []

    def details_for(self, property_id: str) -> Mapping[str, Any]:
        for key in self._candidate_keys(property_id):
            if key in self._details:
                return self._details[key]
        return {}

    def documentation_for(self, property_id: str) -> PropertyDocumentation:
        """Offline documentation record, marked as default data."""
        key = normalize_property_id(property_id)
        details = self.details_for(property_id)
        return PropertyDocumentation(
            property=key,
            description=details.get("description", f"CSS property: {key}"),
            syntax=details.get("syntax", f"{key}: <value>"),
            values=list(details.get("values", [])),
            examples=list(details.get("examples", [])),
            related_properties=list(details.get("related_properties", [])),
            support=BrowserSupportRecord(
                overall_support=self.support_for(property_id),
                is_default=True,
            ),
        )


class SupportResolver:
    """Cached support and Baseline lookups backed by MDN with a static fallback."""

    def __init__(
        self,
        client: Optional[MDNClient] = None,
        cache: Optional[SupportCache[PropertyDocumentation]] = None,
        fallback: Optional[FallbackSupportTable] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        self.client = client or MDNClient(
            base_url=settings.mdn_base_url, timeout=settings.request_timeout
        )
        self.cache: SupportCache[PropertyDocumentation] = (
            cache if cache is not None else SupportCache(ttl=settings.cache_ttl)
        )
        self.fallback = fallback or FallbackSupportTable.from_yaml()
        self.live_fetch = settings.live_fetch

    async def resolve(self, property_id: str) -> PropertyDocumentation:
        """Cached documentation for ``property_id``; never raises on fetch failure.

        Live pages are shared by every id that normalizes to the same key.
        Fallback records are rebuilt from the raw id on each call.
        """
        key = normalize_property_id(property_id)
        cached = self.cache.get(key)
        if cached is not None:
            # A cached fallback only records that the page is unavailable;
            # the table is keyed by the raw id ("display: grid" vs "display: grid-lanes").
            if cached.support.is_default:
                return self.fallback.documentation_for(property_id)
            return cached

        documentation = await self._load(property_id, key)
        self.cache.put(key, documentation)
        return documentation

    async def _load(self, property_id: str, key: str) -> PropertyDocumentation:
        if not self.live_fetch:
            return self.fallback.documentation_for(property_id)

        try:
            return await self.client.fetch_documentation(key)
        except httpx.TimeoutException:
            logger.warning("MDN fetch timed out for %s, using fallback data", key)
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "MDN returned HTTP %s for %s, using fallback data",
                exc.response.status_code,
                key,
            )
        except httpx.HTTPError as exc:
            logger.warning("MDN fetch failed for %s (%s), using fallback data", key, exc)
        except DocumentationParseError as exc:
            logger.warning("%s, using fallback data", exc)
        except Exception:
            logger.exception("Unexpected error fetching MDN data for %s", key)
        return self.fallback.documentation_for(property_id)

    async def resolve_support(
        self, property_id: str, include_experimental: bool = False
    ) -> BrowserSupportRecord:
        documentation = await self.resolve(property_id)
        record = documentation.support
        if include_experimental:
            record = record.model_copy(
                update={
                    "experimental_features": self.fallback.experimental_features(
                        property_id
                    )
                }
            )
        return record

    async def resolve_baseline(self, property_id: str, support_level: SupportLevel) -> Baseline:
        """Live Baseline badge when the page had one, else derived from the level."""
        documentation = await self.resolve(property_id)
        if documentation.baseline is not None:
            return documentation.baseline
        return baseline_from_support_level(support_level)


# Module-level singleton
_resolver: Optional[SupportResolver] = None


def get_support_resolver() -> SupportResolver:
    """Process-wide resolver; its cache is the only shared mutable state."""
    global _resolver
    if _resolver is None:
        _resolver = SupportResolver()
    return _resolver


def reset_support_resolver() -> None:
    global _resolver
    _resolver = None

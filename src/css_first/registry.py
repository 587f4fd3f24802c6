"""
Feature registry for CSS First.

The registry is loaded once from ``data/features.yaml`` and is read-only
afterwards.  YAML order is preserved and is the tie-breaker everywhere a
stable sort is applied to features.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional

import yaml

from .models import FeatureDescriptor

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
FEATURES_FILE = DATA_DIR / "features.yaml"


class FeatureRegistry:
    """Immutable id -> FeatureDescriptor mapping."""

    def __init__(self, features: Mapping[str, FeatureDescriptor]):
        self._features: Dict[str, FeatureDescriptor] = dict(features)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Mapping[str, Any]]) -> "FeatureRegistry":
        features: Dict[str, FeatureDescriptor] = {}
        for feature_id, raw in data.items():
            features[feature_id] = FeatureDescriptor(id=feature_id, **raw)
        return cls(features)

    @classmethod
    def from_yaml(cls, path: Optional[Path] = None) -> "FeatureRegistry":
        path = path or FEATURES_FILE
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        registry = cls.from_mapping(data)
        logger.debug("Loaded %d features from %s", len(registry), path)
        return registry

    def get(self, feature_id: str) -> Optional[FeatureDescriptor]:
        return self._features.get(feature_id)

    def __contains__(self, feature_id: object) -> bool:
        return feature_id in self._features

    def __iter__(self) -> Iterator[FeatureDescriptor]:
        return iter(self._features.values())

    def __len__(self) -> int:
        return len(self._features)


# Module-level singleton
_registry: Optional[FeatureRegistry] = None


def get_registry() -> FeatureRegistry:
    """Return the bundled registry, loading it on first call."""
    global _registry
    if _registry is None:
        _registry = FeatureRegistry.from_yaml()
    return _registry

"""No-op collaborators used before the dataset is loaded.

They satisfy the collaborator protocols but never produce a match, so a
service that is still loading (or failed to load) degrades to "no
suggestion" instead of raising.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from tagup.matching.protocol import Location, LocationService
from tagup.types import Category, FeatureTags, Hit, Preset

logger = logging.getLogger(__name__)


class NullMatcher:
    """Matcher that knows no items."""

    def build_match_index(self, data: Mapping[str, Category]) -> None:
        logger.debug(f"[NullMatcher] Ignoring {len(data)} categories")

    def build_location_index(
        self, data: Mapping[str, Category], location: LocationService
    ) -> None:
        return None

    def match(
        self, key: str, value: str, name: str, loc: Location | None = None
    ) -> list[Hit]:
        """Always returns an empty hit list."""
        return []


class NullPresetClassifier:
    """Preset classifier that only reports the geometry kind."""

    def match_tags(self, tags: FeatureTags, geometry: str) -> Preset:
        return Preset(id=geometry)

    def merge(
        self, presets: Mapping[str, Any], feature_collection: Mapping[str, Any] | None = None
    ) -> None:
        logger.debug(f"[NullPresetClassifier] Discarding {len(presets)} presets")


class NullLocationService:
    """Location service with nothing pending."""

    async def resolve_pending(self) -> None:
        return None

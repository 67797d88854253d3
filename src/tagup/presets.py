"""Minimal preset classifier.

Classifies a feature by its first notable key/value pair, falling back to
`building/<value>` when a building tag is all there is. The engine only
uses this to decide whether an otherwise unremarkable building may be
tested against generic building matches: `building=yes` + `name=Westfield`
may be a Westfield store, but the same building with
`public_transport=station` is a station in a town called Westfield.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from tagup.types import FeatureTags, Preset

logger = logging.getLogger(__name__)

# Keys that make a feature more than "just a building", in priority order.
NOTABLE_KEYS = (
    "amenity",
    "shop",
    "office",
    "public_transport",
    "railway",
    "aeroway",
    "healthcare",
    "emergency",
    "tourism",
    "leisure",
    "craft",
    "man_made",
    "highway",
)


class BuildingPresetClassifier:
    """Preset classifier keyed on notable tags.

    Presets merged from the dataset bundle are kept by id; a merged preset
    whose `tags` are all present on the feature wins over the built-in
    notable-key rule.
    """

    def __init__(self) -> None:
        self._presets: dict[str, dict[str, Any]] = {}

    @property
    def presets(self) -> Mapping[str, Mapping[str, Any]]:
        return self._presets

    def merge(
        self, presets: Mapping[str, Any], feature_collection: Mapping[str, Any] | None = None
    ) -> None:
        for preset_id, preset in presets.items():
            self._presets[preset_id] = dict(preset)
        logger.info(f"[Presets] Merged {len(presets)} presets")

    def match_tags(self, tags: FeatureTags, geometry: str) -> Preset:
        for preset_id, preset in self._presets.items():
            preset_tags = preset.get("tags") or {}
            if preset_tags and geometry in preset.get("geometry", [geometry]) and all(
                tags.get(k) == v or (v == "*" and tags.get(k)) for k, v in preset_tags.items()
            ):
                return Preset(id=preset_id)

        for key in NOTABLE_KEYS:
            value = tags.get(key)
            if value:
                return Preset(id=f"{key}/{value}")

        building = tags.get("building")
        if building:
            return Preset(id=f"building/{building}")
        return Preset(id=geometry)

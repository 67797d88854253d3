"""Collaborator protocols consumed by the engine.

The engine never implements fuzzy matching, geofencing or preset
classification itself. It talks to these capabilities through the
protocols below, so any concrete implementation can be substituted.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

from tagup.types import Category, FeatureTags, Hit, Preset

# (longitude, latitude)
Location = Sequence[float]


@runtime_checkable
class LocationService(Protocol):
    """Protocol for the geofence/location-set collaborator."""

    async def resolve_pending(self) -> None:
        """Wait until all queued location sets have been resolved."""
        ...


@runtime_checkable
class Matcher(Protocol):
    """Protocol for ranked name matchers.

    Both index builders are called exactly once, after the dataset is
    loaded and before any call to `match`.
    """

    def build_match_index(self, data: Mapping[str, Category]) -> None:
        """Index the names of every item in the dataset.

        Args:
            data: tkv → Category, as produced by `build_indices()`.
        """
        ...

    def build_location_index(
        self, data: Mapping[str, Category], location: LocationService
    ) -> None:
        """Index the locations where each item is valid."""
        ...

    def match(
        self, key: str, value: str, name: str, loc: Location | None = None
    ) -> list[Hit]:
        """Match a (key, value, name) combination against the dataset.

        Args:
            key: Feature key, e.g. 'amenity'.
            value: Feature value, e.g. 'cafe'.
            name: Name-like value or canonical wikidata value.
            loc: Optional (lon, lat) used to rank location-specific items.

        Returns:
            Hits ordered most-likely-correct first. Empty when nothing matched.
            Item ids are not guaranteed to be unique across hits.
        """
        ...


@runtime_checkable
class PresetClassifier(Protocol):
    """Protocol for the preset (feature category) classifier."""

    def match_tags(self, tags: FeatureTags, geometry: str) -> Preset:
        """Return the best preset for these tags and geometry kind."""
        ...

    def merge(
        self, presets: Mapping[str, Any], feature_collection: Mapping[str, Any] | None = None
    ) -> None:
        """Merge additional presets (and the features they reference)."""
        ...

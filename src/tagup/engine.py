"""The immutable matching context.

An Engine bundles the dataset indices with the collaborators that were
indexed against them. The service builds one when loading finishes and
never changes it afterwards; all matching operations read from it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from tagup.matching.null_matcher import NullMatcher, NullPresetClassifier
from tagup.matching.protocol import Location, Matcher, PresetClassifier
from tagup.types import FeatureTags, Indices
from tagup.upgrade import is_generic_name, upgrade_tags


@dataclass(frozen=True)
class Engine:
    indices: Indices = field(default_factory=Indices.empty)
    matcher: Matcher = field(default_factory=NullMatcher)
    presets: PresetClassifier = field(default_factory=NullPresetClassifier)

    @classmethod
    def empty(cls) -> "Engine":
        """Engine over empty indices; every lookup comes back empty."""
        return cls()

    def upgrade(self, tags: FeatureTags, loc: Location | None = None) -> dict[str, str] | None:
        return upgrade_tags(self, tags, loc)

    def is_generic(self, tags: FeatureTags) -> bool:
        return is_generic_name(self, tags)

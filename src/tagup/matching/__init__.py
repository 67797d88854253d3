"""Matcher, preset and location collaborators.

Usage:
    from tagup.matching import LexicalMatcher, Matcher

    matcher = LexicalMatcher()
    matcher.build_match_index(indices.data)
    hits = matcher.match("amenity", "cafe", "Beanery")
"""

from tagup.matching.lexical import LexicalMatcher, normalize_name
from tagup.matching.null_matcher import NullLocationService, NullMatcher, NullPresetClassifier
from tagup.matching.protocol import Location, LocationService, Matcher, PresetClassifier

__all__ = [
    # Protocols
    "Location",
    "LocationService",
    "Matcher",
    "PresetClassifier",
    # Implementations
    "LexicalMatcher",
    "NullLocationService",
    "NullMatcher",
    "NullPresetClassifier",
    # Helpers
    "normalize_name",
]

"""Reference matcher over normalized item names.

Matches a name exactly (after normalization) against the names each item
declares for its (key, value) category:

- primary names: the item's `name`, `brand`, `operator`, `network` and
  `flag:name` tags, plus the value of its main tag (so a wikidata id
  matches too)
- alternate names: the item's `matchNames`

Category exclusion patterns are checked first and produce
`excludeGeneric` / `excludeNamed` hits.

Locations are accepted but not used for ranking; there is no geofence
index behind this matcher.
"""

from __future__ import annotations

import logging
import re
from typing import Mapping

from tagup.matching.protocol import Location, LocationService
from tagup.types import Category, Hit, MatchKind

logger = logging.getLogger(__name__)

NAME_TAGS = ("name", "brand", "operator", "network", "flag:name")

_STRIP_RE = re.compile(r"[\W_]+")


def normalize_name(name: str) -> str:
    """Lowercase, spell out '&' and drop punctuation and whitespace.

    Example:
        >>> normalize_name("Dunkin' Donuts & Co.")
        'dunkindonutsandco'
    """
    return _STRIP_RE.sub("", name.casefold().replace("&", " and "))


class LexicalMatcher:
    """Exact normalized-name matcher.

    Attributes:
        _names: (key, value) → normalized name → ordered hits.
        _generic: (key, value) → compiled excludeGeneric patterns.
        _named: (key, value) → compiled excludeNamed patterns.
    """

    def __init__(self) -> None:
        self._names: dict[tuple[str, str], dict[str, list[Hit]]] = {}
        self._generic: dict[tuple[str, str], list[re.Pattern[str]]] = {}
        self._named: dict[tuple[str, str], list[re.Pattern[str]]] = {}

    def build_match_index(self, data: Mapping[str, Category]) -> None:
        alternates: dict[tuple[str, str], dict[str, list[Hit]]] = {}

        for category in data.values():
            kv = (category.key, category.value)
            names = self._names.setdefault(kv, {})
            alt_names = alternates.setdefault(kv, {})

            if category.exclude_generic:
                self._generic.setdefault(kv, []).extend(
                    re.compile(p, re.IGNORECASE) for p in category.exclude_generic
                )
            if category.exclude_named:
                self._named.setdefault(kv, []).extend(
                    re.compile(p, re.IGNORECASE) for p in category.exclude_named
                )

            for item in category.items:
                primary = [item.tags.get(tag) for tag in NAME_TAGS]
                primary.append(item.tags.get(item.main_tag))
                seen: set[str] = set()
                for raw in primary:
                    norm = normalize_name(raw) if raw else ""
                    if norm and norm not in seen:
                        seen.add(norm)
                        names.setdefault(norm, []).append(
                            Hit(item_id=item.id, match=MatchKind.PRIMARY)
                        )
                for raw in item.match_names:
                    norm = normalize_name(raw)
                    if norm and norm not in seen:
                        seen.add(norm)
                        alt_names.setdefault(norm, []).append(
                            Hit(item_id=item.id, match=MatchKind.ALTERNATE)
                        )

        # Alternate-name hits rank after primary-name hits for the same name.
        for kv, alt_names in alternates.items():
            names = self._names[kv]
            for norm, hits in alt_names.items():
                names.setdefault(norm, []).extend(hits)

        logger.info(
            f"[LexicalMatcher] Indexed {sum(len(n) for n in self._names.values())} "
            f"names across {len(self._names)} categories"
        )

    def build_location_index(
        self, data: Mapping[str, Category], location: LocationService
    ) -> None:
        logger.debug("[LexicalMatcher] Location ranking not supported, skipping location index")

    def match(
        self, key: str, value: str, name: str, loc: Location | None = None
    ) -> list[Hit]:
        kv = (key, value)
        text = name.strip()

        for pattern in self._generic.get(kv, ()):
            if pattern.search(text):
                return [Hit(item_id=None, match=MatchKind.EXCLUDE_GENERIC)]
        for pattern in self._named.get(kv, ()):
            if pattern.search(text):
                return [Hit(item_id=None, match=MatchKind.EXCLUDE_NAMED)]

        norm = normalize_name(text)
        if not norm:
            return []
        return list(self._names.get(kv, {}).get(norm, ()))

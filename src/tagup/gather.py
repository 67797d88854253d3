"""Candidate gathering: which (key, value, name) tuples to send to the matcher.

An OSM-style tag mapping can contain anything, but only a few tags are
interesting:

- key/value pairs the dataset knows about, e.g. "amenity/restaurant",
  with "amenity/yes"-style pairs kept as lower-priority fallbacks
- name-like values, e.g. `name`, `name:ru`, `flag:name`, with `brand`,
  `operator`, `alt_name` and friends as fallbacks

`gather_tuples()` combines both into the ordered list the upgrader scans.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from tagup.matching.protocol import PresetClassifier
from tagup.types import Candidate, CandidateSet, FeatureTags, Indices

logger = logging.getLogger(__name__)

# Presets whose features may be tried against the generic "building/yes" matches.
BUILDING_PRESETS = frozenset({
    "building/commercial",
    "building/government",
    "building/hotel",
    "building/retail",
    "building/office",
    "building/supermarket",
    "building/yes",
})

BUILDING_FALLBACK = "building/yes"

# Suffixes that look like language codes but are not names,
# e.g. `operator:type`, `name:etymology`, `brand:wikipedia`.
NOT_NAMES = re.compile(
    r":(colou?r|type|forward|backward|left|right|etymology|pronunciation|wikipedia)$",
    re.IGNORECASE,
)

# Multiple values packed into one tag.
LIST_SEPARATOR = ";"


class NameContext(Enum):
    """Which name rules apply to a feature."""

    ROUTE = "route"
    FLAGPOLE = "flagpole"
    DEFAULT = "default"


@dataclass(frozen=True)
class NamePatterns:
    primary: re.Pattern[str]
    alternate: re.Pattern[str]


NAME_PATTERNS: dict[NameContext, NamePatterns] = {
    NameContext.ROUTE: NamePatterns(
        primary=re.compile(r"^network$", re.IGNORECASE),
        alternate=re.compile(
            r"^(operator|operator:\w+|network:\w+|\w+_name|\w+_name:\w+)$", re.IGNORECASE
        ),
    ),
    # `country` is only used as a fallback, see gather_names().
    NameContext.FLAGPOLE: NamePatterns(
        primary=re.compile(r"^(flag:name|flag:name:\w+)$", re.IGNORECASE),
        alternate=re.compile(r"^(flag|flag:\w+|subject|subject:\w+)$", re.IGNORECASE),
    ),
    NameContext.DEFAULT: NamePatterns(
        primary=re.compile(r"^(name|name:\w+)$", re.IGNORECASE),
        alternate=re.compile(
            r"^(brand|brand:\w+|operator|operator:\w+|\w+_name|\w+_name:\w+)", re.IGNORECASE
        ),
    ),
}


def resolve_context(tags: FeatureTags) -> NameContext:
    if tags.get("route"):
        return NameContext.ROUTE
    if tags.get("man_made") == "flagpole":
        return NameContext.FLAGPOLE
    return NameContext.DEFAULT


def _is_namelike(key: str, pattern: re.Pattern[str]) -> bool:
    return bool(pattern.search(key)) and not NOT_NAMES.search(key)


def gather_key_values(
    tags: FeatureTags, indices: Indices, presets: PresetClassifier
) -> CandidateSet:
    """Gather the "key/value" pairs worth running through the matcher.

    Args:
        tags: The feature's tags.
        indices: Dataset indices; only `key_value_tree` is consulted.
        presets: Classifier used for the generic building fallback.

    Returns:
        CandidateSet of "key/value" strings. Pairs with value "yes" are
        alternates; everything else is primary.
    """
    candidates = CandidateSet()

    for key, value in tags.items():
        if not value:
            continue
        vmap = indices.key_value_tree.get(key)
        if not vmap or value not in vmap:
            continue
        if value != "yes":
            candidates.add_primary(f"{key}/{value}")
        else:
            candidates.add_alternate(f"{key}/{value}")

    preset = presets.match_tags(tags, "area")
    if preset.id in BUILDING_PRESETS:
        candidates.add_alternate(BUILDING_FALLBACK)

    return candidates


def gather_names(tags: FeatureTags) -> CandidateSet:
    """Gather the name-like values worth running through the matcher.

    Returns an empty CandidateSet when any name-like value holds a
    ';'-separated list: there is no telling which of the values is meant.
    """
    context = resolve_context(tags)
    patterns = NAME_PATTERNS[context]
    candidates = CandidateSet()
    found_list = False

    for key, value in tags.items():
        if not value:
            continue
        if _is_namelike(key, patterns.primary):
            if LIST_SEPARATOR in value:
                found_list = True
            else:
                candidates.add_primary(value)
        elif value not in candidates.primary and _is_namelike(key, patterns.alternate):
            if LIST_SEPARATOR in value:
                found_list = True
            else:
                candidates.add_alternate(value)

    if context is NameContext.FLAGPOLE and not candidates and tags.get("country"):
        country = tags["country"]
        if LIST_SEPARATOR in country:
            found_list = True
        else:
            candidates.add_alternate(country)

    if found_list:
        logger.debug("[Gather] Multi-valued name found, refusing to guess")
        return CandidateSet()
    return candidates


def gather_tuples(kvs: CandidateSet, names: CandidateSet) -> list[Candidate]:
    """Combine key/value pairs and names, highest priority first.

    Names are the outer loop and key/value pairs the inner one, so a
    primary name with a primary pair always comes before any alternate.
    """
    tuples: list[Candidate] = []
    for name_group in (names.primary, names.alternate):
        for name in name_group:
            for kv_group in (kvs.primary, kvs.alternate):
                for kv in kv_group:
                    key, _, value = kv.partition("/")
                    tuples.append(Candidate(key=key, value=value, name=name))
    return tuples

"""Immutable type system for the canonical tag dataset.

This module defines the frozen dataclasses that the index builder produces
and the matching operations consume. Raw JSON resources are converted into
these types exactly once, when the dataset is loaded; afterwards nothing in
the engine writes to them.

Data flow:
    raw JSON → Tree / Category / Item / Replacement → Indices
    FeatureTags → CandidateSet → Candidate → Hit → upgraded FeatureTags
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

# A feature's raw attributes. Never mutated by the engine.
FeatureTags = Mapping[str, str]

# Marker stored in a Replacement field meaning "delete this tag".
DELETE = ""


def _empty_mapping() -> Mapping[str, Any]:
    return MappingProxyType({})


class MatchKind(str, Enum):
    """Classification attached to each matcher hit."""

    PRIMARY = "primary"
    ALTERNATE = "alternate"
    EXCLUDE_GENERIC = "excludeGeneric"
    EXCLUDE_NAMED = "excludeNamed"


# Hit kinds that may lead to a tag upgrade; anything else is informational.
ACTIONABLE = frozenset({MatchKind.PRIMARY.value, MatchKind.ALTERNATE.value})


@dataclass(frozen=True)
class Tree:
    """A grouping of items sharing a main tag convention (e.g. "brands")."""

    id: str
    main_tag: str  # e.g. "brand:wikidata"


@dataclass(frozen=True)
class Item:
    """One canonical entry of the dataset.

    `tkv` and `main_tag` are filled in from the owning category and tree
    when the indices are built.
    """

    id: str
    tags: Mapping[str, str]
    tkv: str
    main_tag: str
    preserve_tags: tuple[str, ...] | None = None
    match_names: tuple[str, ...] = ()

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], tkv: str, main_tag: str) -> "Item":
        preserve = raw.get("preserveTags")
        return cls(
            id=raw["id"],
            tags=MappingProxyType(dict(raw.get("tags") or {})),
            tkv=tkv,
            main_tag=main_tag,
            preserve_tags=tuple(preserve) if preserve is not None else None,
            match_names=tuple(raw.get("matchNames") or ()),
        )


@dataclass(frozen=True)
class Category:
    """All items listed under one tkv, plus the category-level properties."""

    tkv: str
    items: tuple[Item, ...] = ()
    preserve_tags: tuple[str, ...] | None = None
    exclude_generic: tuple[str, ...] = ()
    exclude_named: tuple[str, ...] = ()

    @property
    def key(self) -> str:
        return self.tkv.split("/")[1]

    @property
    def value(self) -> str:
        return self.tkv.split("/")[2]


@dataclass(frozen=True)
class Replacement:
    """Cross-reference replacement for an outdated wikidata value.

    Each field is None when the tag should be left alone, DELETE when it
    should be removed, and the new value otherwise.
    """

    wikidata: str | None = None
    wikipedia: str | None = None

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "Replacement":
        def _field(name: str) -> str | None:
            if name not in raw:
                return None
            return raw[name] or DELETE

        return cls(wikidata=_field("wikidata"), wikipedia=_field("wikipedia"))


@dataclass(frozen=True)
class Hit:
    """One ranked result returned by a Matcher.

    `item_id` is None for exclusion hits, which refer to a pattern rather
    than to an item.
    """

    item_id: str | None
    match: str

    def __post_init__(self) -> None:
        if isinstance(self.match, MatchKind):
            object.__setattr__(self, "match", self.match.value)


@dataclass(frozen=True)
class Candidate:
    """One (key, value, name) combination to send to the matcher."""

    key: str
    value: str
    name: str


@dataclass
class CandidateSet:
    """Primary and alternate candidates, each an insertion-ordered set.

    Dicts are used as ordered sets so that the tuple order, and therefore
    the selected item, is deterministic.
    """

    primary: dict[str, None] = field(default_factory=dict)
    alternate: dict[str, None] = field(default_factory=dict)

    def add_primary(self, value: str) -> None:
        self.primary[value] = None

    def add_alternate(self, value: str) -> None:
        self.alternate[value] = None

    def values(self) -> list[str]:
        """All candidates, primary first, without duplicates."""
        return list(dict.fromkeys([*self.primary, *self.alternate]))

    def __bool__(self) -> bool:
        return bool(self.primary) or bool(self.alternate)


@dataclass(frozen=True)
class Preset:
    """Result of classifying a feature with the preset collaborator."""

    id: str


@dataclass(frozen=True)
class Indices:
    """Lookup structures built once from the canonical dataset.

    - key_value_tree: key → (value → tree id)
    - cross_ref_to_canonical: wikidata/wikipedia value → canonical wikidata value
    - item_by_id: item id → Item
    """

    data: Mapping[str, Category] = field(default_factory=_empty_mapping)
    dissolved: frozenset[str] = frozenset()
    replacements: Mapping[str, Replacement] = field(default_factory=_empty_mapping)
    trees: Mapping[str, Tree] = field(default_factory=_empty_mapping)
    key_value_tree: Mapping[str, Mapping[str, str]] = field(default_factory=_empty_mapping)
    cross_ref_to_canonical: Mapping[str, str] = field(default_factory=_empty_mapping)
    item_by_id: Mapping[str, Item] = field(default_factory=_empty_mapping)

    @classmethod
    def empty(cls) -> "Indices":
        """Well-typed empty indices used before the dataset is loaded."""
        return cls()

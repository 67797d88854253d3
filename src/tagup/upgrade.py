"""Tag upgrades and generic-name detection.

`upgrade_tags()` tries to match a feature to a canonical item and returns
the tags the feature should have:

    {"amenity": "fast_food", "name": "Burger Barn Main St"}
      → {"amenity": "fast_food", "brand": "Burger Barn",
         "brand:wikidata": "Q3001", "name": "Burger Barn",
         "branch": "Main St", ...}

The input mapping is never modified; all work happens on a copy.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from tagup.gather import gather_key_values, gather_names, gather_tuples
from tagup.matching.protocol import Location
from tagup.types import (
    ACTIONABLE,
    DELETE,
    CandidateSet,
    FeatureTags,
    Hit,
    Indices,
    Item,
    MatchKind,
)

if TYPE_CHECKING:
    from tagup.engine import Engine

logger = logging.getLogger(__name__)

WIKIDATA_KEY = re.compile(r"^(\w+:)?wikidata$")

# Tags a canonical item must never overwrite.
ALWAYS_PRESERVE = (
    re.compile(r"^building$", re.IGNORECASE),
    re.compile(r"^takeaway$", re.IGNORECASE),
)


def _apply_replacements(tags: dict[str, str], indices: Indices) -> bool:
    """Swap outdated `*:wikidata` / `*:wikipedia` values in place.

    Returns:
        True if any tag was replaced or deleted.
    """
    changed = False
    for key in list(tags):
        matched = WIKIDATA_KEY.match(key)
        if not matched or key not in tags:
            continue
        replacement = indices.replacements.get(tags[key])
        if replacement is None:
            continue

        prefix = matched.group(1) or ""
        if replacement.wikidata is not None:
            changed = True
            if replacement.wikidata != DELETE:
                tags[key] = replacement.wikidata
            else:
                del tags[key]
        if replacement.wikipedia is not None:
            changed = True
            wp_key = f"{prefix}wikipedia"
            if replacement.wikipedia != DELETE:
                tags[wp_key] = replacement.wikipedia
            else:
                tags.pop(wp_key, None)
    return changed


def _select_item(hits: list[Hit], tags: FeatureTags, indices: Indices) -> Item | None:
    """Pick the first usable item among ranked hits, or None."""
    for hit in hits:
        if hit.item_id is None or hit.item_id in indices.dissolved:
            continue
        item = indices.item_by_id.get(hit.item_id)
        if item is None:
            continue

        item_qid = item.tags.get(item.main_tag)
        not_qid = tags.get(f"not:{item.main_tag}")
        if (
            (not item_qid or item_qid == not_qid)
            # an office of a brand is not the brand itself
            or (tags.get("office") and not item.tags.get("office"))
        ):
            continue
        return item
    return None


def _preserve_patterns(item: Item, indices: Indices) -> list[re.Pattern[str]]:
    preserve = item.preserve_tags
    if preserve is None:
        category = indices.data.get(item.tkv)
        preserve = category.preserve_tags if category is not None else None
    patterns = [re.compile(p, re.IGNORECASE) for p in preserve or ()]
    patterns.extend(ALWAYS_PRESERVE)
    return patterns


def _split_branch(orig_name: str, new_tags: dict[str, str]) -> str | None:
    """Find the local qualifier in "<canonical name> <branch>", if any.

    Skipped when the original name survives as one of the new name-like
    values (e.g. moved to `alt_name`).
    """
    new_names = gather_names(new_tags).values()
    if orig_name in new_names:
        return None

    for name in sorted(new_names, key=len, reverse=True):
        captured = re.match(rf"^{re.escape(name)}\s(.+)$", orig_name, re.IGNORECASE)
        if captured and captured.group(1).strip():
            return captured.group(1)
    return None


def upgrade_tags(
    engine: "Engine", tags: FeatureTags, loc: Location | None = None
) -> dict[str, str] | None:
    """Suggest canonical tags for a feature.

    Args:
        engine: Loaded matching context.
        tags: The feature's current tags (not modified).
        loc: Optional (lon, lat) where the feature is.

    Returns:
        The tags the feature should have, or None when nothing changes.
    """
    indices = engine.indices
    new_tags = dict(tags)
    changed = _apply_replacements(new_tags, indices)

    def unchanged() -> dict[str, str] | None:
        return new_tags if changed else None

    kvs = gather_key_values(tags, indices, engine.presets)
    if not kvs:
        return unchanged()

    names = gather_names(tags)

    # A bare `wikidata`/`wikipedia` tag may already identify a known chain;
    # the matcher recognizes the canonical wikidata value as a name too.
    found_qid = indices.cross_ref_to_canonical.get(
        tags.get("wikidata", "")
    ) or indices.cross_ref_to_canonical.get(tags.get("wikipedia", ""))
    if found_qid:
        names.add_primary(found_qid)

    if not names:
        return unchanged()

    for candidate in gather_tuples(kvs, names):
        hits = engine.matcher.match(candidate.key, candidate.value, candidate.name, loc)
        if not hits or hits[0].match not in ACTIONABLE:
            continue

        item = _select_item(hits, new_tags, indices)
        if item is None:
            continue

        logger.debug(
            f"[Upgrade] {candidate.key}={candidate.value} '{candidate.name}' → {item.id}"
        )

        patterns = _preserve_patterns(item, indices)
        keep = {k: v for k, v in new_tags.items() if any(p.search(k) for p in patterns)}

        for key in indices.key_value_tree:
            new_tags.pop(key, None)
        if found_qid:
            new_tags.pop("wikipedia", None)
            new_tags.pop("wikidata", None)

        new_tags.update(item.tags)
        new_tags.update(keep)

        orig_name = tags.get("name")
        new_name = new_tags.get("name")
        if new_name and orig_name and new_name != orig_name and not new_tags.get("branch"):
            branch = _split_branch(orig_name, new_tags)
            if branch:
                new_tags["branch"] = branch

        return new_tags

    return unchanged()


def is_generic_name(engine: "Engine", tags: FeatureTags) -> bool:
    """Is the feature's `name` too generic to identify a brand?

    Only the literal `name` value is tested, with no location.
    """
    name = tags.get("name")
    if not name:
        return False

    names = CandidateSet()
    names.add_primary(name)

    kvs = gather_key_values(tags, engine.indices, engine.presets)
    if not kvs:
        return False

    for candidate in gather_tuples(kvs, names):
        hits = engine.matcher.match(candidate.key, candidate.value, candidate.name)
        if hits and hits[0].match == MatchKind.EXCLUDE_GENERIC.value:
            return True
    return False

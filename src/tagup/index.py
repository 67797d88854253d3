"""Reverse indices over the canonical dataset.

`build_indices()` converts the raw JSON resources into an immutable
`Indices` value:

    key_value_tree          "amenity" → {"restaurant": "brands", ...}
    cross_ref_to_canonical  "Q38076" → "Q38076", "en:McDonald's" → "Q38076"
    item_by_id              "mcdonalds-658eea" → Item

The cross-reference index lets a feature tagged with a bare `wikidata` or
`wikipedia` value be recognized as a known chain.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from tagup.errors import DataShapeError
from tagup.types import Category, Indices, Item, Replacement, Tree

logger = logging.getLogger(__name__)


def split_tkv(tkv: str) -> tuple[str, str, str]:
    """Split a "tree/key/value" string into its three parts.

    Raises:
        DataShapeError: If the string does not have exactly three non-empty parts.
    """
    parts = tkv.split("/")
    if len(parts) != 3 or not all(parts):
        raise DataShapeError(f"Malformed tkv '{tkv}': expected 'tree/key/value'")
    return parts[0], parts[1], parts[2]


def parse_trees(raw: Mapping[str, Any]) -> dict[str, Tree]:
    trees: dict[str, Tree] = {}
    for tree_id, props in raw.items():
        main_tag = (props or {}).get("mainTag")
        if not main_tag:
            raise DataShapeError(f"Tree '{tree_id}' has no mainTag")
        trees[tree_id] = Tree(id=tree_id, main_tag=main_tag)
    return trees


def build_indices(
    data: Mapping[str, Any],
    dissolved: Mapping[str, Any] | Iterable[str],
    replacements: Mapping[str, Any],
    trees: Mapping[str, Any],
) -> Indices:
    """Build the lookup indices from the raw dataset resources.

    Args:
        data: tkv → raw category (`{"items": [...], "properties": {...}}`).
        dissolved: Dissolved item ids (a mapping keyed by id, or any iterable of ids).
        replacements: Old wikidata value → `{"wikidata": ..., "wikipedia": ...}`.
        trees: Tree id → `{"mainTag": ...}`.

    Returns:
        Indices with every item registered.

    Raises:
        DataShapeError: If a tkv is malformed or references an undefined tree.
    """
    tree_map = parse_trees(trees)
    categories: dict[str, Category] = {}
    kvt: dict[str, dict[str, str]] = {}
    cross_refs: dict[str, str] = {}
    items_by_id: dict[str, Item] = {}

    for tkv, raw_category in data.items():
        t, k, v = split_tkv(tkv)
        tree = tree_map.get(t)
        if tree is None:
            raise DataShapeError(f"tkv '{tkv}' references undefined tree '{t}'")

        kvt.setdefault(k, {})[v] = t

        raw_category = raw_category or {}
        properties = raw_category.get("properties") or {}
        main_tag = tree.main_tag
        wp_tag = main_tag.replace("wikidata", "wikipedia")

        items = []
        for raw_item in raw_category.get("items") or []:
            item = Item.from_raw(raw_item, tkv=tkv, main_tag=main_tag)
            items.append(item)
            items_by_id[item.id] = item

            wd = item.tags.get(main_tag)
            wp = item.tags.get(wp_tag)
            if wd:
                cross_refs[wd] = wd
            if wp and wd:
                cross_refs[wp] = wd

        preserve = properties.get("preserveTags")
        exclude = properties.get("exclude") or {}
        categories[tkv] = Category(
            tkv=tkv,
            items=tuple(items),
            preserve_tags=tuple(preserve) if preserve is not None else None,
            exclude_generic=tuple(exclude.get("generic") or ()),
            exclude_named=tuple(exclude.get("named") or ()),
        )

    indices = Indices(
        data=MappingProxyType(categories),
        dissolved=frozenset(dissolved),
        replacements=MappingProxyType(
            {qid: Replacement.from_raw(raw) for qid, raw in replacements.items()}
        ),
        trees=MappingProxyType(tree_map),
        key_value_tree=MappingProxyType(
            {k: MappingProxyType(vmap) for k, vmap in kvt.items()}
        ),
        cross_ref_to_canonical=MappingProxyType(cross_refs),
        item_by_id=MappingProxyType(items_by_id),
    )
    logger.info(
        f"[Index] Built indices: {len(categories)} categories, "
        f"{len(items_by_id)} items, {len(kvt)} keys, {len(cross_refs)} cross-references"
    )
    return indices

"""Flatten the remote category forest into folder groupings."""

from __future__ import annotations

import logging

from ..core import GlobalCategory, NameMap, RootMap
from .foursquare import FoursquareApi

logger = logging.getLogger(__name__)


class CategoryResolver:
    """Build the category-id -> root-id and root-id -> name mappings."""

    def __init__(self, api: FoursquareApi):
        self.api = api

    def resolve(self, token: str) -> tuple[RootMap, NameMap]:
        forest = [GlobalCategory.from_payload(node) for node in self.api.categories(token)]
        root_map, name_map = resolve_forest(forest)
        logger.info(
            "Resolved %s categories under %s top-level groups", len(root_map), len(name_map)
        )
        return root_map, name_map


def resolve_forest(forest: list[GlobalCategory]) -> tuple[RootMap, NameMap]:
    """Map every category to the node it is filed under.

    Top-level nodes map to themselves and are the only ones with a name.
    Every deeper node maps to its immediate parent, so below the second
    level the mapped id is not a top-level id and will not resolve a name.
    """

    root_map: RootMap = {}
    name_map: NameMap = {}

    def walk(node: GlobalCategory) -> None:
        for child in node.children:
            root_map[child.id] = node.id
            walk(child)

    for top in forest:
        name_map[top.id] = top.name
        root_map[top.id] = top.id
        walk(top)

    return root_map, name_map

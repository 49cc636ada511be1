"""
Category forest builders.

Categories are stored flat with a ``parent_id`` back-reference; these
functions rebuild the forest in two passes over an id keyed lookup. No I/O
happens here.

Callers pass the categories of ONE venue sorted by ``display_order``
ascending, each carrying its items already sorted the same way. Sibling
order in the output is the order in which the rows arrive. A ``parent_id``
that is not part of the input makes the node a root.
"""
from dataclasses import asdict
from typing import Any, Callable, Iterable

from venue_menu.models.category import Category
from venue_menu.models.item import Item

PUBLIC_ITEM_FIELDS = ("id", "name", "description", "price", "image_url", "is_available")

Node = dict[str, Any]


def _link(categories: Iterable[Category], make_node: Callable[[Category], Node]) -> list[Node]:
    categories = list(categories)
    nodes: dict[Any, Node] = {}
    for category in categories:
        nodes[category.id] = make_node(category)

    roots: list[Node] = []
    for category in categories:
        node = nodes[category.id]
        if category.parent_id is not None and category.parent_id in nodes:
            nodes[category.parent_id]["children"].append(node)
        else:
            roots.append(node)
    return roots


def _management_node(category: Category) -> Node:
    node = asdict(category)
    node["children"] = []
    return node


def _public_item(item: Item) -> Node:
    return {field: getattr(item, field) for field in PUBLIC_ITEM_FIELDS}


def _public_node(category: Category) -> Node:
    return {
        "id": category.id,
        "name": category.name,
        "description": category.description,
        "children": [],
        "items": [_public_item(item) for item in category.items],
    }


def build_category_tree(categories: Iterable[Category]) -> list[Node]:
    """Management forest: every category and item field plus ``children``."""
    return _link(categories, _management_node)


def build_public_category_tree(categories: Iterable[Category]) -> list[Node]:
    """Guest forest: same shape as build_category_tree, public fields only."""
    return _link(categories, _public_node)

"""
Menu read service: the management tree and the public guest menu.

Both views load the venue's categories and items with two queries,
attach the items to their categories and hand the flat rows to the
builders in ``menu_tree``.
"""
import sqlite3
import logging
from collections import defaultdict

from venue_menu.core.exceptions import NotFoundError
from venue_menu.models.category import Category
from venue_menu.repositories.category_repository import CategoryRepository
from venue_menu.repositories.item_repository import ItemRepository
from venue_menu.repositories.venue_repository import VenueRepository
from venue_menu.services.menu_tree import build_category_tree, build_public_category_tree

logger = logging.getLogger(__name__)


class MenuService:
    """Business logic for menu tree reads."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing MenuService")
        self._category_repo = CategoryRepository(conn)
        self._item_repo = ItemRepository(conn)
        self._venue_repo = VenueRepository(conn)

    def get_categories_tree(self, venue_id: int) -> list[dict]:
        """Management forest of the venue (all fields)."""
        logger.info("Building category tree venue_id=%s", venue_id)
        return build_category_tree(self._load_categories_with_items(venue_id))

    def get_public_menu(self, venue_id: int) -> dict:
        """Guest menu of an active venue; inactive venues look missing."""
        logger.info("Building public menu venue_id=%s", venue_id)
        venue = self._venue_repo.get_by_id(venue_id)
        if not venue or not venue.is_active:
            logger.warning("Public menu requested for unavailable venue id=%s", venue_id)
            raise NotFoundError(f"Venue with id={venue_id} not found")
        categories = build_public_category_tree(self._load_categories_with_items(venue_id))
        return {"categories": categories}

    def _load_categories_with_items(self, venue_id: int) -> list[Category]:
        categories = self._category_repo.list_by_venue(venue_id)
        items_by_category = defaultdict(list)
        for item in self._item_repo.list_by_venue(venue_id):
            items_by_category[item.category_id].append(item)
        for category in categories:
            category.items = items_by_category[category.id]
        return categories

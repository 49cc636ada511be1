"""
Item management service: the item half of the menu ordering engine.

Items of one category are numbered 0..n-1 by display_order. Creating an
item appends it; moving it to another category appends it there and closes
the gap it leaves behind; deleting it closes the gap.
"""
import sqlite3
from typing import Optional
import logging

from venue_menu.core.config import settings
from venue_menu.core.exceptions import InvalidOrderError, NotFoundError
from venue_menu.models.item import Item
from venue_menu.repositories.item_repository import ItemRepository
from venue_menu.repositories.category_repository import CategoryRepository
from venue_menu.schemas.item import ItemCreate, ItemUpdate
from venue_menu.services.ordering import append_with_retry

logger = logging.getLogger(__name__)


class ItemService:
    """Business logic for item operations."""

    def __init__(
        self, conn: sqlite3.Connection, strict_reorder: Optional[bool] = None
    ) -> None:
        logger.trace("Initializing ItemService")
        self._repo = ItemRepository(conn)
        self._category_repo = CategoryRepository(conn)
        self._strict_reorder = (
            settings.STRICT_REORDER if strict_reorder is None else strict_reorder
        )

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_item(self, item_id: int) -> Item:
        """Fetch an item by id or raise NotFoundError."""
        item = self._repo.get_by_id(item_id)
        if not item:
            logger.warning("Item id=%s not found", item_id)
            raise NotFoundError(f"Item with id={item_id} not found")
        return item

    def list_items(self, venue_id: int, category_id: Optional[int] = None) -> list[Item]:
        """Return the venue's items, optionally limited to one category."""
        logger.info("Listing items venue_id=%s category_id=%s", venue_id, category_id)
        return self._repo.list_by_venue(venue_id, category_id=category_id)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_item(self, category_id: int, data: ItemCreate) -> Item:
        logger.info("Creating item %s category_id=%s", data.name, category_id)
        if not self._category_repo.get_by_id(category_id):
            logger.warning("Category id=%s not found for item", category_id)
            raise NotFoundError(f"Category with id={category_id} not found")

        image_url = str(data.image_url) if data.image_url is not None else None
        item = append_with_retry(
            lambda: self._repo.get_max_display_order(category_id),
            lambda display_order: self._repo.create(
                category_id=category_id,
                name=data.name,
                description=data.description,
                price=data.price,
                image_url=image_url,
                is_available=data.is_available,
                display_order=display_order,
            ),
            what=f"item in category {category_id}",
        )
        logger.info("Item created id=%s display_order=%s", item.id, item.display_order)
        return item

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_item(self, item_id: int, data: ItemUpdate) -> Item:
        logger.info("Updating item id=%s", item_id)
        item = self.get_item(item_id)

        fields = data.model_dump(exclude_unset=True)
        if fields.get("image_url") is not None:
            fields["image_url"] = str(fields["image_url"])
        new_category_id = fields.pop("category_id", None)

        if new_category_id is None or new_category_id == item.category_id:
            return self._repo.update(item_id, **fields)  # type: ignore[return-value]

        current = self._category_repo.get_by_id(item.category_id)
        target = self._category_repo.get_by_id(new_category_id)
        if not target or current is None or target.venue_id != current.venue_id:
            logger.warning("Category id=%s not found for item update", new_category_id)
            raise NotFoundError(f"Category with id={new_category_id} not found")

        # Move first: the old slot must be free before later siblings shift into it.
        updated = append_with_retry(
            lambda: self._repo.get_max_display_order(new_category_id),
            lambda display_order: self._repo.update(
                item_id,
                category_id=new_category_id,
                display_order=display_order,
                **fields,
            ),
            what=f"item {item_id}",
        )
        self._repo.close_gap(item.category_id, item.display_order)
        logger.info(
            "Item id=%s moved from category=%s to category=%s",
            item_id, item.category_id, new_category_id,
        )
        return updated  # type: ignore[return-value]

    def toggle_item_availability(self, item_id: int) -> Item:
        logger.info("Toggling availability item id=%s", item_id)
        item = self.get_item(item_id)
        return self._repo.update(item_id, is_available=not item.is_available)  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_item(self, item_id: int) -> None:
        """Delete an item and close the gap in its category."""
        logger.info("Deleting item id=%s", item_id)
        item = self.get_item(item_id)
        self._repo.delete(item_id)
        self._repo.close_gap(item.category_id, item.display_order)
        logger.info("Item deleted id=%s", item_id)

    # ------------------------------------------------------------------
    # Reorder
    # ------------------------------------------------------------------

    def reorder_items(self, category_id: int, ordered_ids: list[int]) -> None:
        """
        Assign display_order = index for every id. ``ordered_ids`` must be
        exactly the items of the category, each id once.
        """
        logger.info("Reordering %s items category_id=%s", len(ordered_ids), category_id)
        existing = self._repo.find_existing_ids(category_id, ordered_ids)
        missing = [iid for iid in ordered_ids if iid not in existing]
        if missing:
            logger.warning("Unknown item ids for category id=%s: %s", category_id, missing)
            raise NotFoundError(f"Items not found in category {category_id}: {missing}")

        if len(set(ordered_ids)) != len(ordered_ids):
            logger.warning("Duplicate item ids in reorder category_id=%s", category_id)
            raise InvalidOrderError("ordered_ids contains duplicates")

        if self._strict_reorder:
            if set(ordered_ids) != set(self._repo.list_ids_by_category(category_id)):
                raise InvalidOrderError(
                    "ordered_ids must be exactly the ids of the category's items"
                )

        try:
            self._repo.apply_order(ordered_ids)
        except sqlite3.IntegrityError as exc:
            logger.warning("Item reorder rejected category_id=%s: %s", category_id, exc)
            raise InvalidOrderError(
                "ordered_ids must list every item of the category exactly once"
            ) from exc

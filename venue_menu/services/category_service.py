"""
Category management service: the category half of the menu ordering engine.

Business rules:
- Categories of one (venue_id, parent_id) sibling group are numbered
  0..n-1 by display_order, with no gaps and no duplicates.
- New categories are appended at the end of their sibling group.
- The parent relation is acyclic and never crosses venues.
- A venue always keeps at least one category.
- When a category changes parent (update or move-delete) it is appended at
  the end of its new sibling group and the gap it leaves is closed.

Authorization is decided by the caller before any method here runs.
"""
import sqlite3
from typing import Optional
import logging

from venue_menu.core.config import settings
from venue_menu.core.exceptions import (
    CircularReferenceError,
    InvalidOrderError,
    LastCategoryError,
    NotFoundError,
    TargetRequiredError,
)
from venue_menu.models.category import Category
from venue_menu.repositories.category_repository import CategoryRepository
from venue_menu.repositories.item_repository import ItemRepository
from venue_menu.repositories.venue_repository import VenueRepository
from venue_menu.schemas.category import CategoryCreate, CategoryUpdate, DeleteStrategy
from venue_menu.services.ordering import append_with_retry, next_display_order

logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(
        self, conn: sqlite3.Connection, strict_reorder: Optional[bool] = None
    ) -> None:
        logger.trace("Initializing CategoryService")
        self._repo = CategoryRepository(conn)
        self._item_repo = ItemRepository(conn)
        self._venue_repo = VenueRepository(conn)
        self._strict_reorder = (
            settings.STRICT_REORDER if strict_reorder is None else strict_reorder
        )

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_category(self, category_id: int) -> Category:
        category = self._repo.get_by_id(category_id)
        if not category:
            logger.warning("Category id=%s not found", category_id)
            raise NotFoundError(f"Category with id={category_id} not found")
        return category

    def get_category_by_id(self, category_id: int) -> Category:
        """Return the category with its items sorted by display_order."""
        logger.info("Fetching category id=%s with items", category_id)
        category = self.get_category(category_id)
        category.items = self._item_repo.list_by_category(category_id)
        return category

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_category(self, venue_id: int, data: CategoryCreate) -> Category:
        logger.info("Creating category %s venue_id=%s", data.name, venue_id)
        if not self._venue_repo.get_by_id(venue_id):
            logger.warning("Venue id=%s not found for category", venue_id)
            raise NotFoundError(f"Venue with id={venue_id} not found")
        if data.parent_id is not None:
            self._get_in_venue(data.parent_id, venue_id, "Parent category")

        category = append_with_retry(
            lambda: self._repo.get_max_display_order(venue_id, data.parent_id),
            lambda display_order: self._repo.create(
                venue_id=venue_id,
                name=data.name,
                description=data.description,
                parent_id=data.parent_id,
                display_order=display_order,
            ),
            what=f"category in venue {venue_id}",
        )
        logger.info(
            "Category created id=%s display_order=%s", category.id, category.display_order
        )
        return category

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_category(self, category_id: int, data: CategoryUpdate) -> Category:
        logger.info("Updating category id=%s", category_id)
        category = self.get_category(category_id)

        fields = data.model_dump(include={"name", "description"}, exclude_unset=True)

        if "parent_id" not in data.model_fields_set or data.parent_id == category.parent_id:
            return self._repo.update(category_id, **fields)  # type: ignore[return-value]

        new_parent_id = data.parent_id
        self._check_parent(category, new_parent_id)

        updated = append_with_retry(
            lambda: self._repo.get_max_display_order(category.venue_id, new_parent_id),
            lambda display_order: self._repo.update(
                category_id,
                parent_id=new_parent_id,
                display_order=display_order,
                **fields,
            ),
            what=f"category {category_id}",
        )
        self._repo.close_gap(category.venue_id, category.parent_id, category.display_order)
        logger.info(
            "Category id=%s moved from parent=%s to parent=%s",
            category_id, category.parent_id, new_parent_id,
        )
        return updated  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_category(
        self,
        category_id: int,
        strategy: DeleteStrategy = DeleteStrategy.CASCADE,
        target_category_id: Optional[int] = None,
    ) -> None:
        logger.info("Deleting category id=%s strategy=%s", category_id, strategy.value)
        category = self.get_category(category_id)

        if self._repo.count_by_venue(category.venue_id) == 1:
            logger.warning("Refusing to delete last category id=%s", category_id)
            raise LastCategoryError("Cannot delete the last category")

        if strategy == DeleteStrategy.MOVE and self._has_contents(category_id):
            if target_category_id is None:
                logger.warning("Move delete of category id=%s without target", category_id)
                raise TargetRequiredError("Target category required for move strategy")
            self._move_contents(category, target_category_id)

        self._repo.delete(category_id)
        self._repo.close_gap(category.venue_id, category.parent_id, category.display_order)
        logger.info("Category deleted id=%s", category_id)

    # ------------------------------------------------------------------
    # Reorder
    # ------------------------------------------------------------------

    def reorder_categories(self, venue_id: int, ordered_ids: list[int]) -> None:
        """
        Assign display_order = index for every id of one sibling group.

        ``ordered_ids`` must be exactly the sibling set, each id once. Ids
        unknown to the venue raise NotFoundError and repeated ids raise
        InvalidOrderError. With strict reorder on, a list that is not the
        persisted sibling set raises InvalidOrderError too.
        """
        logger.info("Reordering %s categories venue_id=%s", len(ordered_ids), venue_id)
        existing = self._repo.find_existing_ids(venue_id, ordered_ids)
        missing = [cid for cid in ordered_ids if cid not in existing]
        if missing:
            logger.warning("Unknown category ids for venue id=%s: %s", venue_id, missing)
            raise NotFoundError(f"Categories not found in venue {venue_id}: {missing}")

        if len(set(ordered_ids)) != len(ordered_ids):
            logger.warning("Duplicate category ids in reorder venue_id=%s", venue_id)
            raise InvalidOrderError("ordered_ids contains duplicates")

        if self._strict_reorder:
            first = self.get_category(ordered_ids[0])
            siblings = self._repo.list_sibling_ids(venue_id, first.parent_id)
            _check_full_sibling_set(ordered_ids, siblings)

        try:
            self._repo.apply_order(ordered_ids)
        except sqlite3.IntegrityError as exc:
            logger.warning("Category reorder rejected venue_id=%s: %s", venue_id, exc)
            raise InvalidOrderError(
                "ordered_ids must list every category of the sibling group exactly once"
            ) from exc

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _get_in_venue(self, category_id: int, venue_id: int, label: str) -> Category:
        category = self._repo.get_by_id(category_id)
        if not category or category.venue_id != venue_id:
            logger.warning("%s id=%s not found in venue id=%s", label, category_id, venue_id)
            raise NotFoundError(f"{label} with id={category_id} not found")
        return category

    def _descendant_ids(self, category_id: int) -> set[int]:
        """All transitive children of *category_id*, collected level by level."""
        found: set[int] = set()
        frontier = [category_id]
        while frontier:
            frontier = [
                cid for cid in self._repo.list_child_ids(frontier) if cid not in found
            ]
            found.update(frontier)
        return found

    def _check_parent(self, category: Category, new_parent_id: Optional[int]) -> None:
        if new_parent_id is None:
            return
        if new_parent_id == category.id:
            logger.warning("Category id=%s cannot be its own parent", category.id)
            raise CircularReferenceError("Cannot create circular category reference")
        self._get_in_venue(new_parent_id, category.venue_id, "Parent category")
        if new_parent_id in self._descendant_ids(category.id):
            logger.warning(
                "Category id=%s cannot move under its descendant id=%s",
                category.id, new_parent_id,
            )
            raise CircularReferenceError("Cannot create circular category reference")

    def _has_contents(self, category_id: int) -> bool:
        return bool(
            self._item_repo.count_by_category(category_id)
            or self._repo.list_child_ids([category_id])
        )

    def _move_contents(self, category: Category, target_category_id: int) -> None:
        target = self._get_in_venue(target_category_id, category.venue_id, "Target category")
        if target.id == category.id or target.id in self._descendant_ids(category.id):
            logger.warning(
                "Target id=%s lies inside deleted category id=%s", target.id, category.id
            )
            raise CircularReferenceError(
                "Target category cannot be the deleted category or one of its descendants"
            )

        moved_items = self._item_repo.move_all(
            category.id,
            target.id,
            next_display_order(self._item_repo.get_max_display_order(target.id)),
        )
        moved_children = self._repo.reparent_children(
            category.id,
            target.id,
            next_display_order(self._repo.get_max_display_order(target.venue_id, target.id)),
        )
        logger.info(
            "Moved %s items and %s sub-categories from id=%s to id=%s",
            moved_items, moved_children, category.id, target.id,
        )


def _check_full_sibling_set(ordered_ids: list[int], sibling_ids: list[int]) -> None:
    if set(ordered_ids) != set(sibling_ids):
        raise InvalidOrderError(
            "ordered_ids must be exactly the ids of one sibling group"
        )

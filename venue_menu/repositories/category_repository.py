"""
Repository layer for Category persistence.
All SQL for the `categories` table lives here, including the sibling
ordering primitives used by the category service.
"""
import sqlite3
from typing import Iterable, Optional
from datetime import datetime, timezone
import logging

from venue_menu.core.logging_config import log_db_timing
from venue_menu.db.database import savepoint
from venue_menu.models.category import Category

logger = logging.getLogger(__name__)


class CategoryRepository:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing CategoryRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, category_id: int) -> Optional[Category]:
        logger.trace("Fetching category id=%s", category_id)
        row = self._conn.execute(
            "SELECT * FROM categories WHERE id = ?", (category_id,)
        ).fetchone()
        return Category.from_row(row) if row else None

    def list_by_venue(self, venue_id: int) -> list[Category]:
        """Return every category of a venue sorted by display_order."""
        logger.trace("Listing categories venue_id=%s", venue_id)
        rows = self._conn.execute(
            "SELECT * FROM categories WHERE venue_id = ? ORDER BY display_order, id",
            (venue_id,),
        ).fetchall()
        return [Category.from_row(r) for r in rows]

    def list_children(self, parent_id: int) -> list[Category]:
        logger.trace("Listing child categories parent_id=%s", parent_id)
        rows = self._conn.execute(
            "SELECT * FROM categories WHERE parent_id = ? ORDER BY display_order, id",
            (parent_id,),
        ).fetchall()
        return [Category.from_row(r) for r in rows]

    def list_child_ids(self, parent_ids: Iterable[int]) -> list[int]:
        """Return the ids of the direct children of any of *parent_ids*."""
        parent_ids = list(parent_ids)
        if not parent_ids:
            return []
        placeholders = ", ".join("?" for _ in parent_ids)
        rows = self._conn.execute(
            f"SELECT id FROM categories WHERE parent_id IN ({placeholders})",
            parent_ids,
        ).fetchall()
        return [r["id"] for r in rows]

    def list_sibling_ids(self, venue_id: int, parent_id: Optional[int]) -> list[int]:
        rows = self._conn.execute(
            """
            SELECT id FROM categories
            WHERE venue_id = ? AND parent_id IS ?
            ORDER BY display_order, id
            """,
            (venue_id, parent_id),
        ).fetchall()
        return [r["id"] for r in rows]

    def find_existing_ids(self, venue_id: int, category_ids: Iterable[int]) -> set[int]:
        """Return the subset of *category_ids* that belong to the venue."""
        category_ids = list(set(category_ids))
        if not category_ids:
            return set()
        placeholders = ", ".join("?" for _ in category_ids)
        rows = self._conn.execute(
            f"SELECT id FROM categories WHERE venue_id = ? AND id IN ({placeholders})",
            [venue_id, *category_ids],
        ).fetchall()
        return {r["id"] for r in rows}

    def count_by_venue(self, venue_id: int) -> int:
        row = self._conn.execute(
            "SELECT COUNT(*) AS total FROM categories WHERE venue_id = ?", (venue_id,)
        ).fetchone()
        return row["total"]

    @log_db_timing
    def get_max_display_order(
        self, venue_id: int, parent_id: Optional[int]
    ) -> Optional[int]:
        """Highest display_order in the (venue_id, parent_id) sibling group, None when empty."""
        row = self._conn.execute(
            """
            SELECT MAX(display_order) AS max_order FROM categories
            WHERE venue_id = ? AND parent_id IS ?
            """,
            (venue_id, parent_id),
        ).fetchone()
        return row["max_order"]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def create(
        self,
        venue_id: int,
        name: str,
        description: Optional[str],
        parent_id: Optional[int],
        display_order: int,
    ) -> Category:
        logger.info("Creating category record name=%s venue_id=%s", name, venue_id)
        now = datetime.now(tz=timezone.utc).isoformat()
        cursor = self._conn.execute(
            """
            INSERT INTO categories (
                venue_id, parent_id, name, description, display_order,
                created_at, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (venue_id, parent_id, name, description, display_order, now, now),
        )
        return self.get_by_id(cursor.lastrowid)  # type: ignore[return-value]

    @log_db_timing
    def update(self, category_id: int, **fields) -> Optional[Category]:
        """Update arbitrary columns on a category."""
        if not fields:
            logger.trace("No category fields to update id=%s", category_id)
            return self.get_by_id(category_id)

        logger.info("Updating category record id=%s", category_id)
        fields["updated_at"] = datetime.now(tz=timezone.utc).isoformat()
        set_clause = ", ".join(f"{col} = ?" for col in fields)
        values = list(fields.values()) + [category_id]
        self._conn.execute(
            f"UPDATE categories SET {set_clause} WHERE id = ?", values
        )
        return self.get_by_id(category_id)

    @log_db_timing
    def delete(self, category_id: int) -> bool:
        """Delete a category; sub-categories and items go with it (ON DELETE CASCADE)."""
        logger.info("Deleting category record id=%s", category_id)
        cursor = self._conn.execute(
            "DELETE FROM categories WHERE id = ?", (category_id,)
        )
        logger.info("Category delete affected %s rows", cursor.rowcount)
        return cursor.rowcount > 0

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------
    # Renumbering runs in two phases: rows are parked on negative values
    # first, so the sibling-order unique index never sees a transient
    # duplicate while SQLite updates row by row. Both phases share one
    # savepoint so a failed batch leaves no row parked.

    @log_db_timing
    def close_gap(
        self, venue_id: int, parent_id: Optional[int], removed_order: int
    ) -> int:
        """Shift every sibling after *removed_order* down by one. Returns the rows moved."""
        with savepoint(self._conn, "close_category_gap"):
            cursor = self._conn.execute(
                """
                UPDATE categories SET display_order = -display_order
                WHERE venue_id = ? AND parent_id IS ? AND display_order > ?
                """,
                (venue_id, parent_id, removed_order),
            )
            self._conn.execute(
                """
                UPDATE categories SET display_order = -display_order - 1
                WHERE venue_id = ? AND parent_id IS ? AND display_order < 0
                """,
                (venue_id, parent_id),
            )
        logger.info(
            "Closed category order gap venue_id=%s parent_id=%s after=%s moved=%s",
            venue_id, parent_id, removed_order, cursor.rowcount,
        )
        return cursor.rowcount

    @log_db_timing
    def apply_order(self, ordered_ids: list[int]) -> None:
        """Set display_order to the list index of each id, all or nothing."""
        now = datetime.now(tz=timezone.utc).isoformat()
        with savepoint(self._conn, "reorder_categories"):
            self._conn.executemany(
                "UPDATE categories SET display_order = ? WHERE id = ?",
                [(-(index + 1), category_id) for index, category_id in enumerate(ordered_ids)],
            )
            self._conn.executemany(
                "UPDATE categories SET display_order = ?, updated_at = ? WHERE id = ?",
                [(index, now, category_id) for index, category_id in enumerate(ordered_ids)],
            )

    @log_db_timing
    def reparent_children(
        self, from_parent_id: int, to_parent_id: int, start_order: int
    ) -> int:
        """Move all direct children of *from_parent_id* under *to_parent_id*,
        appended from *start_order* in their current relative order."""
        children = self.list_children(from_parent_id)
        now = datetime.now(tz=timezone.utc).isoformat()
        self._conn.executemany(
            """
            UPDATE categories SET parent_id = ?, display_order = ?, updated_at = ?
            WHERE id = ?
            """,
            [
                (to_parent_id, start_order + offset, now, child.id)
                for offset, child in enumerate(children)
            ],
        )
        return len(children)

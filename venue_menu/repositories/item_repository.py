"""
Repository layer for Item persistence.
All SQL for the `items` table lives here.
"""
import sqlite3
from typing import Iterable, Optional
from datetime import datetime, timezone
import logging

from venue_menu.core.logging_config import log_db_timing
from venue_menu.db.database import savepoint
from venue_menu.models.item import Item

logger = logging.getLogger(__name__)


class ItemRepository:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing ItemRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, item_id: int) -> Optional[Item]:
        logger.trace("Fetching item id=%s", item_id)
        row = self._conn.execute(
            "SELECT * FROM items WHERE id = ?", (item_id,)
        ).fetchone()
        return Item.from_row(row) if row else None

    def list_by_category(self, category_id: int) -> list[Item]:
        logger.trace("Listing items category_id=%s", category_id)
        rows = self._conn.execute(
            "SELECT * FROM items WHERE category_id = ? ORDER BY display_order, id",
            (category_id,),
        ).fetchall()
        return [Item.from_row(r) for r in rows]

    def list_by_venue(
        self, venue_id: int, category_id: Optional[int] = None
    ) -> list[Item]:
        """Items of a venue grouped by category, each group sorted by display_order."""
        logger.trace("Listing items venue_id=%s category_id=%s", venue_id, category_id)
        query = """
            SELECT i.* FROM items i
            JOIN categories c ON c.id = i.category_id
            WHERE c.venue_id = ?
        """
        params: list = [venue_id]
        if category_id is not None:
            query += " AND i.category_id = ?"
            params.append(category_id)
        query += " ORDER BY i.category_id, i.display_order, i.id"
        rows = self._conn.execute(query, params).fetchall()
        return [Item.from_row(r) for r in rows]

    def list_ids_by_category(self, category_id: int) -> list[int]:
        rows = self._conn.execute(
            "SELECT id FROM items WHERE category_id = ? ORDER BY display_order, id",
            (category_id,),
        ).fetchall()
        return [r["id"] for r in rows]

    def find_existing_ids(self, category_id: int, item_ids: Iterable[int]) -> set[int]:
        """Return the subset of *item_ids* that belong to the category."""
        item_ids = list(set(item_ids))
        if not item_ids:
            return set()
        placeholders = ", ".join("?" for _ in item_ids)
        rows = self._conn.execute(
            f"SELECT id FROM items WHERE category_id = ? AND id IN ({placeholders})",
            [category_id, *item_ids],
        ).fetchall()
        return {r["id"] for r in rows}

    def count_by_category(self, category_id: int) -> int:
        row = self._conn.execute(
            "SELECT COUNT(*) AS total FROM items WHERE category_id = ?", (category_id,)
        ).fetchone()
        return row["total"]

    @log_db_timing
    def get_max_display_order(self, category_id: int) -> Optional[int]:
        """Highest display_order among the category's items, None when empty."""
        row = self._conn.execute(
            "SELECT MAX(display_order) AS max_order FROM items WHERE category_id = ?",
            (category_id,),
        ).fetchone()
        return row["max_order"]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def create(
        self,
        category_id: int,
        name: str,
        description: Optional[str],
        price: Optional[int],
        image_url: Optional[str],
        is_available: bool,
        display_order: int,
    ) -> Item:
        logger.info("Creating item record name=%s category_id=%s", name, category_id)
        now = datetime.now(tz=timezone.utc).isoformat()
        cursor = self._conn.execute(
            """
            INSERT INTO items (
                category_id, name, description, price, image_url,
                is_available, display_order, created_at, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                category_id, name, description, price, image_url,
                int(is_available), display_order, now, now,
            ),
        )
        return self.get_by_id(cursor.lastrowid)  # type: ignore[return-value]

    @log_db_timing
    def update(self, item_id: int, **fields) -> Optional[Item]:
        """Update arbitrary fields on an item."""
        if not fields:
            logger.trace("No item fields to update id=%s", item_id)
            return self.get_by_id(item_id)

        if "is_available" in fields:
            fields["is_available"] = int(fields["is_available"])

        logger.info("Updating item record id=%s", item_id)
        fields["updated_at"] = datetime.now(tz=timezone.utc).isoformat()
        set_clause = ", ".join(f"{col} = ?" for col in fields)
        values = list(fields.values()) + [item_id]
        self._conn.execute(
            f"UPDATE items SET {set_clause} WHERE id = ?", values
        )
        return self.get_by_id(item_id)

    @log_db_timing
    def delete(self, item_id: int) -> bool:
        logger.info("Deleting item record id=%s", item_id)
        cursor = self._conn.execute(
            "DELETE FROM items WHERE id = ?", (item_id,)
        )
        logger.info("Item delete affected %s rows", cursor.rowcount)
        return cursor.rowcount > 0

    # ------------------------------------------------------------------
    # Ordering (two-phase, see CategoryRepository)
    # ------------------------------------------------------------------

    @log_db_timing
    def close_gap(self, category_id: int, removed_order: int) -> int:
        """Shift every item after *removed_order* down by one. Returns the rows moved."""
        with savepoint(self._conn, "close_item_gap"):
            cursor = self._conn.execute(
                """
                UPDATE items SET display_order = -display_order
                WHERE category_id = ? AND display_order > ?
                """,
                (category_id, removed_order),
            )
            self._conn.execute(
                """
                UPDATE items SET display_order = -display_order - 1
                WHERE category_id = ? AND display_order < 0
                """,
                (category_id,),
            )
        logger.info(
            "Closed item order gap category_id=%s after=%s moved=%s",
            category_id, removed_order, cursor.rowcount,
        )
        return cursor.rowcount

    @log_db_timing
    def apply_order(self, ordered_ids: list[int]) -> None:
        """Set display_order to the list index of each id, all or nothing."""
        now = datetime.now(tz=timezone.utc).isoformat()
        with savepoint(self._conn, "reorder_items"):
            self._conn.executemany(
                "UPDATE items SET display_order = ? WHERE id = ?",
                [(-(index + 1), item_id) for index, item_id in enumerate(ordered_ids)],
            )
            self._conn.executemany(
                "UPDATE items SET display_order = ?, updated_at = ? WHERE id = ?",
                [(index, now, item_id) for index, item_id in enumerate(ordered_ids)],
            )

    @log_db_timing
    def move_all(
        self, from_category_id: int, to_category_id: int, start_order: int
    ) -> int:
        """Re-home every item of *from_category_id*, appended from *start_order*."""
        items = self.list_by_category(from_category_id)
        now = datetime.now(tz=timezone.utc).isoformat()
        self._conn.executemany(
            """
            UPDATE items SET category_id = ?, display_order = ?, updated_at = ?
            WHERE id = ?
            """,
            [
                (to_category_id, start_order + offset, now, item.id)
                for offset, item in enumerate(items)
            ],
        )
        return len(items)

"""
Repository layer for Venue persistence.
All SQL for the `venues` table lives here.
"""
import sqlite3
from typing import Optional
from datetime import datetime, timezone
import logging

from venue_menu.core.logging_config import log_db_timing
from venue_menu.models.venue import Venue, VenueStatus

logger = logging.getLogger(__name__)


class VenueRepository:
    """Data access layer for venue records."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing VenueRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_db_timing
    def get_by_id(self, venue_id: int) -> Optional[Venue]:
        """Return a venue by id or None if missing."""
        row = self._conn.execute(
            "SELECT * FROM venues WHERE id = ?", (venue_id,)
        ).fetchone()
        return Venue.from_row(row) if row else None

    @log_db_timing
    def list_all(self, manager_id: Optional[int] = None) -> list[Venue]:
        """Return all venues, or only those managed by *manager_id*."""
        if manager_id is None:
            rows = self._conn.execute("SELECT * FROM venues ORDER BY name").fetchall()
        else:
            rows = self._conn.execute(
                "SELECT * FROM venues WHERE manager_id = ? ORDER BY name",
                (manager_id,),
            ).fetchall()
        return [Venue.from_row(r) for r in rows]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def create(
        self,
        name: str,
        manager_id: Optional[int],
        status: VenueStatus = VenueStatus.ACTIVE,
    ) -> Venue:
        """Insert a venue row and return it."""
        logger.info("Creating venue record name=%s", name)
        now = datetime.now(tz=timezone.utc).isoformat()
        cursor = self._conn.execute(
            """
            INSERT INTO venues (name, status, manager_id, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (name, status.value, manager_id, now, now),
        )
        return self.get_by_id(cursor.lastrowid)  # type: ignore[return-value]

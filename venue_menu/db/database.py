"""Database connection helpers and initialization."""

import logging
import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator, Optional

from venue_menu.core.config import settings

logger = logging.getLogger(__name__)

DB_PATH = settings.database_path


def _ensure_db_dir(db_path: str) -> None:
    if db_path == ":memory:":
        return
    db_dir = os.path.dirname(db_path)
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)


def get_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Create and return a new SQLite connection with row factory and FK enforcement."""
    path = db_path or DB_PATH
    _ensure_db_dir(path)
    logger.trace("Opening database connection to %s", path)
    conn = sqlite3.connect(
        path,
        check_same_thread=False,
        timeout=settings.DB_BUSY_TIMEOUT_SECONDS,
    )
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_db(db_path: Optional[str] = None) -> Iterator[sqlite3.Connection]:
    """Context manager that yields a database connection and auto-commits/rolls back."""
    conn = get_connection(db_path)
    try:
        yield conn
        conn.commit()
        logger.trace("Database transaction committed")
    except Exception:
        logger.error("Database transaction rolled back", exc_info=True)
        conn.rollback()
        raise
    finally:
        conn.close()
        logger.trace("Database connection closed")


@contextmanager
def savepoint(conn: sqlite3.Connection, name: str) -> Iterator[None]:
    """
    Make a block of writes all-or-nothing within the surrounding transaction.
    On error the block's writes are undone and the exception propagates.
    """
    conn.execute(f"SAVEPOINT {name}")
    try:
        yield
    except Exception:
        logger.warning("Rolling back to savepoint %s", name)
        conn.execute(f"ROLLBACK TO {name}")
        conn.execute(f"RELEASE {name}")
        raise
    conn.execute(f"RELEASE {name}")


def init_db(db_path: Optional[str] = None) -> None:
    """Initialize the database by creating all tables."""
    logger.info("Initializing database schema")
    from venue_menu.db import schema

    conn = get_connection(db_path)
    try:
        schema.create_tables(conn)
    finally:
        conn.close()

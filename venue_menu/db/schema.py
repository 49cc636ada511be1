"""
SQL DDL statements for all application tables.
Tables are created in dependency order so foreign keys resolve correctly.

Sibling ordering is protected by unique indexes. Categories group siblings
by (venue_id, parent_id); SQLite treats NULLs as distinct inside a UNIQUE
index, so root categories are keyed on IFNULL(parent_id, 0).
"""
import sqlite3

# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------

CREATE_USERS_TABLE = """
CREATE TABLE IF NOT EXISTS users (
    id                INTEGER PRIMARY KEY AUTOINCREMENT,
    email             TEXT    NOT NULL UNIQUE,
    username          TEXT    NOT NULL UNIQUE,
    full_name         TEXT,
    hashed_password   TEXT    NOT NULL,
    role              TEXT    NOT NULL DEFAULT 'manager'
                              CHECK(role IN ('admin', 'manager')),
    is_active         INTEGER NOT NULL DEFAULT 1,
    created_at        TEXT    NOT NULL DEFAULT (datetime('now')),
    updated_at        TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_REFRESH_TOKENS_TABLE = """
CREATE TABLE IF NOT EXISTS refresh_tokens (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id     INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    token       TEXT    NOT NULL UNIQUE,
    expires_at  TEXT    NOT NULL,
    revoked     INTEGER NOT NULL DEFAULT 0,
    created_at  TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_VENUES_TABLE = """
CREATE TABLE IF NOT EXISTS venues (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    name        TEXT    NOT NULL,
    status      TEXT    NOT NULL DEFAULT 'active'
                        CHECK(status IN ('active', 'inactive')),
    manager_id  INTEGER REFERENCES users(id) ON DELETE SET NULL,
    created_at  TEXT    NOT NULL DEFAULT (datetime('now')),
    updated_at  TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_CATEGORIES_TABLE = """
CREATE TABLE IF NOT EXISTS categories (
    id             INTEGER PRIMARY KEY AUTOINCREMENT,
    venue_id       INTEGER NOT NULL REFERENCES venues(id) ON DELETE CASCADE,
    parent_id      INTEGER REFERENCES categories(id) ON DELETE CASCADE,
    name           TEXT    NOT NULL,
    description    TEXT,
    display_order  INTEGER NOT NULL DEFAULT 0,
    created_at     TEXT    NOT NULL DEFAULT (datetime('now')),
    updated_at     TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_ITEMS_TABLE = """
CREATE TABLE IF NOT EXISTS items (
    id             INTEGER PRIMARY KEY AUTOINCREMENT,
    category_id    INTEGER NOT NULL REFERENCES categories(id) ON DELETE CASCADE,
    name           TEXT    NOT NULL,
    description    TEXT,
    price          INTEGER CHECK(price IS NULL OR price >= 0),
    image_url      TEXT,
    is_available   INTEGER NOT NULL DEFAULT 1,
    display_order  INTEGER NOT NULL DEFAULT 0,
    created_at     TEXT    NOT NULL DEFAULT (datetime('now')),
    updated_at     TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_INDEXES = [
    """
    CREATE UNIQUE INDEX IF NOT EXISTS ux_categories_sibling_order
        ON categories (venue_id, IFNULL(parent_id, 0), display_order);
    """,
    """
    CREATE UNIQUE INDEX IF NOT EXISTS ux_items_sibling_order
        ON items (category_id, display_order);
    """,
    "CREATE INDEX IF NOT EXISTS ix_categories_parent ON categories (parent_id);",
    "CREATE INDEX IF NOT EXISTS ix_venues_manager ON venues (manager_id);",
]

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

ALL_TABLES = [
    CREATE_USERS_TABLE,
    CREATE_REFRESH_TOKENS_TABLE,
    CREATE_VENUES_TABLE,
    CREATE_CATEGORIES_TABLE,
    CREATE_ITEMS_TABLE,
]


def create_tables(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes on *conn* (IF NOT EXISTS, safe on every restart)."""
    cursor = conn.cursor()
    for ddl in ALL_TABLES:
        cursor.execute(ddl)
    for ddl in CREATE_INDEXES:
        cursor.execute(ddl)
    conn.commit()

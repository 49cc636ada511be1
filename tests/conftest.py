"""Shared pytest fixtures and configuration for all tests."""

import os
import sqlite3
import tempfile

# Settings are read once at import time; point them at throwaway locations
# before anything from venue_menu is imported.
_TEST_DIR = tempfile.mkdtemp(prefix="venue_menu_tests_")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(_TEST_DIR, 'app.db')}")
os.environ.setdefault("LOG_FILE_PATH", "")
os.environ.setdefault("SEED_DEMO_DATA", "false")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest  # noqa: E402

import venue_menu.core.logging_config  # noqa: E402,F401  (installs Logger.trace)
from venue_menu.db.database import get_connection  # noqa: E402
from venue_menu.db.schema import create_tables  # noqa: E402
from venue_menu.models.user import User, UserRole  # noqa: E402
from venue_menu.models.venue import Venue  # noqa: E402
from venue_menu.repositories.account_repository import AccountRepository  # noqa: E402
from venue_menu.repositories.venue_repository import VenueRepository  # noqa: E402


@pytest.fixture
def conn() -> sqlite3.Connection:
    """Fixture providing an in-memory database with the full schema."""
    connection = get_connection(":memory:")
    create_tables(connection)
    yield connection
    connection.close()


@pytest.fixture
def make_user(conn: sqlite3.Connection):
    """Fixture returning a factory that inserts users."""
    counter = {"n": 0}

    def _make(role: UserRole = UserRole.MANAGER) -> User:
        counter["n"] += 1
        n = counter["n"]
        return AccountRepository(conn).create_user(
            email=f"user{n}@example.com",
            username=f"user{n}",
            hashed_password="not-a-real-hash",
            role=role,
        )

    return _make


@pytest.fixture
def manager(make_user) -> User:
    """Fixture providing a venue manager account."""
    return make_user(UserRole.MANAGER)


@pytest.fixture
def make_venue(conn: sqlite3.Connection, manager: User):
    """Fixture returning a factory that inserts venues managed by ``manager``."""

    def _make(name: str = "Test Venue", manager_id=None) -> Venue:
        return VenueRepository(conn).create(
            name=name, manager_id=manager.id if manager_id is None else manager_id
        )

    return _make


@pytest.fixture
def venue(make_venue) -> Venue:
    """Fixture providing one active venue."""
    return make_venue()

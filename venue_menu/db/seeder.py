"""
Development seeder – creates demo accounts and a demo venue menu.

⚠️  FOR DEVELOPMENT ONLY. Controlled by the SEED_DEMO_DATA setting.

Default credentials:
    admin   / Admin1234!    (role admin)
    manager / Manager1234!  (role manager, owns the demo venue)

The menu is created through the services so every seeded sibling group
is densely ordered like any other.
"""
import logging
from typing import Optional

from venue_menu.core.security import hash_password
from venue_menu.db.database import get_db
from venue_menu.models.user import UserRole
from venue_menu.repositories.account_repository import AccountRepository
from venue_menu.repositories.venue_repository import VenueRepository
from venue_menu.schemas.category import CategoryCreate
from venue_menu.schemas.item import ItemCreate
from venue_menu.services.category_service import CategoryService
from venue_menu.services.item_service import ItemService

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Seed data – change these values freely during development
# ---------------------------------------------------------------------------
DEMO_USERS = [
    ("admin", "admin@venue-menu.local", "Admin1234!", UserRole.ADMIN, "Default Admin"),
    ("manager", "manager@venue-menu.local", "Manager1234!", UserRole.MANAGER, "Demo Manager"),
]

DEMO_VENUE_NAME = "Demo Bistro"

# (category, parent, [(item name, price in minor units or None)])
DEMO_MENU = [
    ("Drinks", None, []),
    ("Coffee", "Drinks", [("Espresso", 250), ("Cappuccino", 350), ("Flat White", 380)]),
    ("Soft Drinks", "Drinks", [("Lemonade", 300), ("Sparkling Water", 200)]),
    ("Food", None, [("Soup of the Day", None)]),
    ("Desserts", "Food", [("Cheesecake", 550), ("Tiramisu", 600)]),
]


def seed_demo_data(db_path: Optional[str] = None) -> None:
    """
    Insert the demo users and venue if they do not already exist.
    Safe to call on every startup.
    """
    with get_db(db_path) as conn:
        accounts = AccountRepository(conn)
        user_ids = {}
        for username, email, password, role, full_name in DEMO_USERS:
            user = accounts.find_by_login(username)
            if user:
                logger.info("Seeder: user '%s' already exists – skipping.", username)
            else:
                user = accounts.create_user(
                    email=email,
                    username=username,
                    hashed_password=hash_password(password),
                    role=role,
                    full_name=full_name,
                )
                logger.info("Seeder: created user '%s' (%s).", username, role.value)
            user_ids[username] = user.id

        venues = VenueRepository(conn)
        if any(v.name == DEMO_VENUE_NAME for v in venues.list_all()):
            logger.info("Seeder: venue '%s' already exists – skipping.", DEMO_VENUE_NAME)
            return

        venue = venues.create(name=DEMO_VENUE_NAME, manager_id=user_ids["manager"])
        categories = CategoryService(conn)
        items = ItemService(conn)
        category_ids: dict[str, int] = {}
        for name, parent, menu_items in DEMO_MENU:
            category = categories.create_category(
                venue.id,
                CategoryCreate(name=name, parent_id=category_ids.get(parent)),
            )
            category_ids[name] = category.id
            for item_name, price in menu_items:
                items.create_item(category.id, ItemCreate(name=item_name, price=price))
        logger.info(
            "Seeder: created venue '%s' with %s categories.", DEMO_VENUE_NAME, len(DEMO_MENU)
        )

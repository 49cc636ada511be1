"""
Venue service: lookup, listing and creation of venues.
"""
import sqlite3
import logging

from venue_menu.core.exceptions import NotFoundError
from venue_menu.models.user import User
from venue_menu.models.venue import Venue
from venue_menu.repositories.account_repository import AccountRepository
from venue_menu.repositories.venue_repository import VenueRepository
from venue_menu.schemas.venue import VenueCreate

logger = logging.getLogger(__name__)


class VenueService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing VenueService")
        self._repo = VenueRepository(conn)
        self._accounts = AccountRepository(conn)

    def get_venue(self, venue_id: int) -> Venue:
        venue = self._repo.get_by_id(venue_id)
        if not venue:
            logger.warning("Venue id=%s not found", venue_id)
            raise NotFoundError(f"Venue with id={venue_id} not found")
        return venue

    def list_venues_for(self, user: User) -> list[Venue]:
        """Admins see every venue, managers the venues they manage."""
        logger.info("Listing venues for user id=%s", user.id)
        return self._repo.list_all(manager_id=None if user.is_admin else user.id)

    def create_venue(self, data: VenueCreate) -> Venue:
        logger.info("Creating venue %s", data.name)
        if data.manager_id is not None and not self._accounts.get_user(data.manager_id):
            logger.warning("Manager id=%s not found for venue", data.manager_id)
            raise NotFoundError(f"User with id={data.manager_id} not found")
        venue = self._repo.create(
            name=data.name, manager_id=data.manager_id, status=data.status
        )
        logger.info("Venue created id=%s", venue.id)
        return venue

"""
Capability checks evaluated by the HTTP layer before the menu services run.
"""
from venue_menu.models.user import User
from venue_menu.models.venue import Venue


def can_manage_venue(user: User, venue: Venue) -> bool:
    """Admins manage every venue; managers only the venues assigned to them."""
    return user.is_admin or venue.manager_id == user.id

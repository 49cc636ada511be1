"""
FastAPI dependency injection helpers for authentication and authorisation.
"""
from typing import Generator

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
import logging

from venue_menu.core.exceptions import NotFoundError
from venue_menu.core.permissions import can_manage_venue
from venue_menu.core.security import TokenKind, read_token
from venue_menu.db.database import get_db
from venue_menu.models.user import User, UserRole
from venue_menu.models.venue import Venue
from venue_menu.repositories.account_repository import AccountRepository
from venue_menu.services.venue_service import VenueService

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


# ---------------------------------------------------------------------------
# DB dependency
# ---------------------------------------------------------------------------

def db_dependency() -> Generator:
    """Yield a database connection for the duration of a request."""
    with get_db() as conn:
        yield conn


# ---------------------------------------------------------------------------
# Auth dependencies
# ---------------------------------------------------------------------------

def get_current_user(
    token: str = Depends(oauth2_scheme),
    conn=Depends(db_dependency),
) -> User:
    """
    Decode the Bearer access token and return the corresponding User.
    Raises HTTP 401 if the token is invalid, expired, or the user is not found.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        user_id = read_token(token, TokenKind.ACCESS)
    except JWTError as exc:
        logger.warning("Rejected access token: %s", exc)
        raise credentials_exception

    user = AccountRepository(conn).get_user(user_id)
    if user is None:
        logger.warning("User not found for token subject")
        raise credentials_exception
    return user


def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """Raise HTTP 400 if the account is inactive."""
    if not current_user.is_active:
        logger.warning("Inactive user account id=%s", current_user.id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user account",
        )
    return current_user


# ---------------------------------------------------------------------------
# Role-based and venue ownership access control
# ---------------------------------------------------------------------------

def require_roles(*roles: UserRole):
    """
    Factory that returns a dependency which enforces that the current user
    has one of the specified roles.
    """
    def _check(current_user: User = Depends(get_current_active_user)) -> User:
        if current_user.role not in roles:
            logger.warning(
                "User id=%s lacks required roles: %s",
                current_user.id,
                ", ".join(role.value for role in roles),
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action",
            )
        return current_user
    return _check


require_admin = require_roles(UserRole.ADMIN)


def ensure_can_manage(conn, user: User, venue_id: int) -> Venue:
    """
    Load the venue and check the caller may manage it.
    Raises NotFoundError for unknown venues and HTTP 403 otherwise.
    """
    venue = VenueService(conn).get_venue(venue_id)
    if not can_manage_venue(user, venue):
        logger.warning("User id=%s denied access to venue id=%s", user.id, venue_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )
    logger.trace("User id=%s may manage venue id=%s", user.id, venue_id)
    return venue


def ensure_can_manage_record(
    conn, user: User, venue_id: int, label: str, record_id: int
) -> None:
    """
    Venue check for records addressed by id. A caller who may not manage
    the owning venue gets the same NotFoundError as for an unknown id.
    """
    venue = VenueService(conn).get_venue(venue_id)
    if not can_manage_venue(user, venue):
        logger.warning(
            "User id=%s denied access to %s id=%s", user.id, label.lower(), record_id
        )
        raise NotFoundError(f"{label} with id={record_id} not found")

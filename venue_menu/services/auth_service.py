"""
Authentication service: password login, refresh-token rotation, logout
and the account profile.

Refresh tokens are single use. Every successful refresh revokes the
presented token and issues a new pair, so a replayed token is rejected.
"""
import sqlite3
from datetime import datetime, timezone
import logging

from fastapi import HTTPException, status
from jose import JWTError

from venue_menu.core.security import (
    TokenKind,
    issue_token,
    read_token,
    token_lifetime,
    verify_password,
)
from venue_menu.models.user import User
from venue_menu.repositories.account_repository import AccountRepository
from venue_menu.repositories.venue_repository import VenueRepository
from venue_menu.schemas.auth import TokenPair

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing AuthService")
        self._accounts = AccountRepository(conn)
        self._venues = VenueRepository(conn)

    def login(self, login: str, password: str) -> TokenPair:
        """*login* is a username or an email address."""
        logger.info("Login attempt for '%s'", login)
        user = self._accounts.find_by_login(login)
        if user is None or not verify_password(password, user.hashed_password):
            logger.warning("Rejected credentials for '%s'", login)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect username or password",
                headers={"WWW-Authenticate": "Bearer"},
            )
        if not user.is_active:
            logger.warning("Inactive account id=%s tried to log in", user.id)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Inactive user account",
            )
        return self._issue_pair(user)

    def refresh(self, refresh_token: str) -> TokenPair:
        rejected = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
        )
        try:
            user_id = read_token(refresh_token, TokenKind.REFRESH)
        except JWTError as exc:
            logger.warning("Unreadable refresh token: %s", exc)
            raise rejected

        stored = self._accounts.find_refresh_token(refresh_token)
        if stored is None or stored.user_id != user_id or not stored.is_usable:
            logger.warning("Refresh token for user id=%s is revoked or unknown", user_id)
            raise rejected
        user = self._accounts.get_user(user_id)
        if user is None or not user.is_active:
            logger.warning("Refresh for missing or inactive user id=%s", user_id)
            raise rejected

        self._accounts.revoke_refresh_token(refresh_token)
        logger.info("Rotated refresh token for user id=%s", user_id)
        return self._issue_pair(user)

    def logout(self, refresh_token: str) -> None:
        revoked = self._accounts.revoke_refresh_token(refresh_token)
        logger.info("Logout revoked=%s", revoked)

    def profile(self, user: User) -> dict:
        venues = self._venues.list_all(manager_id=None if user.is_admin else user.id)
        return {
            "id": user.id,
            "email": user.email,
            "username": user.username,
            "full_name": user.full_name,
            "role": user.role,
            "created_at": user.created_at,
            "venues": venues,
        }

    def _issue_pair(self, user: User) -> TokenPair:
        refresh_token = issue_token(user.id, user.role.value, TokenKind.REFRESH)
        expires_at = datetime.now(tz=timezone.utc) + token_lifetime(TokenKind.REFRESH)
        self._accounts.store_refresh_token(user.id, refresh_token, expires_at)
        logger.info("Issued token pair for user id=%s", user.id)
        return TokenPair(
            access_token=issue_token(user.id, user.role.value, TokenKind.ACCESS),
            refresh_token=refresh_token,
        )

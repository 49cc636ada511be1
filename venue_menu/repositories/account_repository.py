"""
Repository layer for accounts: the `users` table and the refresh tokens
issued to each user.
"""
import sqlite3
from datetime import datetime
from typing import Optional
import logging

from venue_menu.core.logging_config import log_db_timing
from venue_menu.models.user import RefreshToken, User, UserRole

logger = logging.getLogger(__name__)


class AccountRepository:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing AccountRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def get_user(self, user_id: int) -> Optional[User]:
        row = self._conn.execute(
            "SELECT * FROM users WHERE id = ?", (user_id,)
        ).fetchone()
        return User.from_row(row) if row else None

    @log_db_timing
    def find_by_login(self, login: str) -> Optional[User]:
        """Match *login* against the username first, then the email address."""
        row = self._conn.execute(
            """
            SELECT * FROM users
            WHERE username = :login OR lower(email) = lower(:login)
            ORDER BY username = :login DESC
            LIMIT 1
            """,
            {"login": login},
        ).fetchone()
        return User.from_row(row) if row else None

    @log_db_timing
    def create_user(
        self,
        email: str,
        username: str,
        hashed_password: str,
        role: UserRole,
        full_name: Optional[str] = None,
    ) -> User:
        logger.info("Creating account username=%s role=%s", username, role.value)
        cursor = self._conn.execute(
            """
            INSERT INTO users (email, username, full_name, hashed_password, role)
            VALUES (?, ?, ?, ?, ?)
            """,
            (email, username, full_name, hashed_password, role.value),
        )
        return self.get_user(cursor.lastrowid)  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Refresh tokens
    # ------------------------------------------------------------------

    def find_refresh_token(self, token: str) -> Optional[RefreshToken]:
        row = self._conn.execute(
            "SELECT * FROM refresh_tokens WHERE token = ?", (token,)
        ).fetchone()
        return RefreshToken.from_row(row) if row else None

    @log_db_timing
    def store_refresh_token(self, user_id: int, token: str, expires_at: datetime) -> None:
        self._conn.execute(
            "INSERT INTO refresh_tokens (user_id, token, expires_at) VALUES (?, ?, ?)",
            (user_id, token, expires_at.isoformat()),
        )

    @log_db_timing
    def revoke_refresh_token(self, token: str) -> bool:
        """Revoke one token; False when it was unknown or already revoked."""
        cursor = self._conn.execute(
            "UPDATE refresh_tokens SET revoked = 1 WHERE token = ? AND revoked = 0",
            (token,),
        )
        return cursor.rowcount > 0

"""
Account models: a dashboard user and the refresh tokens issued to them.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class UserRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"


@dataclass
class User:
    id: int
    email: str
    username: str
    hashed_password: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime
    full_name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @classmethod
    def from_row(cls, row) -> "User":
        return cls(
            id=row["id"],
            email=row["email"],
            username=row["username"],
            full_name=row["full_name"],
            hashed_password=row["hashed_password"],
            role=UserRole(row["role"]),
            is_active=bool(row["is_active"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


@dataclass
class RefreshToken:
    id: int
    user_id: int
    token: str
    expires_at: datetime
    revoked: bool
    created_at: datetime

    @property
    def is_usable(self) -> bool:
        """Not revoked and not past its expiry (naive values are UTC)."""
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return not self.revoked and expires_at > datetime.now(tz=timezone.utc)

    @classmethod
    def from_row(cls, row) -> "RefreshToken":
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            token=row["token"],
            expires_at=datetime.fromisoformat(row["expires_at"]),
            revoked=bool(row["revoked"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )

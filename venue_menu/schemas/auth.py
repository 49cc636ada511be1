"""
Pydantic schemas for login, token rotation and the account profile.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from venue_menu.models.user import UserRole
from venue_menu.schemas.venue import VenueSummary


class TokenPair(BaseModel):
    """Returned by login and by refresh; the refresh token is single use."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class ProfileResponse(BaseModel):
    """The signed-in account and the venues whose menus it may edit."""

    id: int
    email: str
    username: str
    full_name: Optional[str]
    role: UserRole
    created_at: datetime
    venues: list[VenueSummary]

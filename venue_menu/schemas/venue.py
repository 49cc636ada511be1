"""
Pydantic schemas for Venue request/response validation.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from venue_menu.models.venue import VenueStatus


class VenueCreate(BaseModel):
    """Payload for creating venues (admin only)."""

    name: str = Field(..., min_length=1, max_length=100)
    manager_id: Optional[int] = Field(None, gt=0)
    status: VenueStatus = VenueStatus.ACTIVE


class VenueResponse(BaseModel):
    id: int
    name: str
    status: VenueStatus
    manager_id: Optional[int]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class VenueSummary(BaseModel):
    """Short venue reference used in the account profile."""

    id: int
    name: str
    status: VenueStatus

    model_config = {"from_attributes": True}

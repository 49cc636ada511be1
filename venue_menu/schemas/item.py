"""
Pydantic schemas for Item request/response validation.
"""
from pydantic import BaseModel, Field, HttpUrl, field_validator
from datetime import datetime
from typing import Optional


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class ItemCreate(BaseModel):
    """Payload for creating items inside a known category."""

    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    price: Optional[int] = Field(None, ge=0, description="Minor currency units; null = price on request")
    image_url: Optional[HttpUrl] = None
    is_available: bool = True


class ItemCreateRequest(ItemCreate):
    """HTTP body for POST /menu/items."""

    category_id: int = Field(..., gt=0)


class ItemUpdate(BaseModel):
    """
    Payload for updating items. ``description``, ``price`` and ``image_url``
    may be cleared with an explicit null.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    price: Optional[int] = Field(None, ge=0)
    image_url: Optional[HttpUrl] = None
    is_available: Optional[bool] = None
    category_id: Optional[int] = Field(None, gt=0)

    @field_validator("name", "is_available", "category_id")
    @classmethod
    def not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class ReorderItemsRequest(BaseModel):
    category_id: int = Field(..., gt=0)
    ordered_ids: list[int] = Field(..., min_length=1)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class ItemResponse(BaseModel):
    """Response model for item data."""

    id: int
    category_id: int
    name: str
    description: Optional[str]
    price: Optional[int]
    image_url: Optional[str]
    is_available: bool
    display_order: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

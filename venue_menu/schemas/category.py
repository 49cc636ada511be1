"""
Pydantic schemas for Category request/response validation.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from venue_menu.schemas.item import ItemResponse


class DeleteStrategy(str, Enum):
    CASCADE = "cascade"
    MOVE = "move"


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class CategoryCreate(BaseModel):
    """Payload for creating categories inside a known venue."""

    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    parent_id: Optional[int] = Field(None, gt=0)


class CategoryCreateRequest(CategoryCreate):
    """HTTP body for POST /menu/categories."""

    venue_id: int = Field(..., gt=0)


class CategoryUpdate(BaseModel):
    """
    Payload for updating categories.

    ``parent_id`` is only acted on when present in the payload; an explicit
    null moves the category to the root of its venue.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    parent_id: Optional[int] = Field(None, gt=0)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("name cannot be null")
        return v


class ReorderCategoriesRequest(BaseModel):
    """Complete ordered id list of one category sibling group."""

    venue_id: int = Field(..., gt=0)
    ordered_ids: list[int] = Field(..., min_length=1)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class CategoryResponse(BaseModel):
    """Response model for category data."""

    id: int
    venue_id: int
    parent_id: Optional[int]
    name: str
    description: Optional[str]
    display_order: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CategoryWithItemsResponse(CategoryResponse):
    items: list[ItemResponse]


class CategoryTreeResponse(CategoryWithItemsResponse):
    """Management view of one category node and its subtree."""

    children: list[CategoryTreeResponse]


CategoryTreeResponse.model_rebuild()


class CategoryTreeListResponse(BaseModel):
    categories: list[CategoryTreeResponse]

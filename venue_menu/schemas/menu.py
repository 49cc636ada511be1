"""
Pydantic schemas for the public (guest) menu.

These deliberately carry no management metadata: no display_order,
venue_id, parent_id, category_id or timestamps.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class PublicMenuItem(BaseModel):
    id: int
    name: str
    description: Optional[str]
    price: Optional[int]
    image_url: Optional[str]
    is_available: bool


class PublicCategory(BaseModel):
    id: int
    name: str
    description: Optional[str]
    children: list[PublicCategory]
    items: list[PublicMenuItem]


PublicCategory.model_rebuild()


class PublicMenu(BaseModel):
    categories: list[PublicCategory]


class PublicMenuResponse(BaseModel):
    menu: PublicMenu

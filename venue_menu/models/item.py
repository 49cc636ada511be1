"""
Domain model representing an Item row from the DB.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Item:
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

    @classmethod
    def from_row(cls, row) -> "Item":
        """Build an Item from a sqlite3.Row object."""
        return cls(
            id=row["id"],
            category_id=row["category_id"],
            name=row["name"],
            description=row["description"],
            price=row["price"],
            image_url=row["image_url"],
            is_available=bool(row["is_available"]),
            display_order=row["display_order"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

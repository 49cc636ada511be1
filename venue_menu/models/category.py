"""
Domain model representing a Category row from the DB.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from venue_menu.models.item import Item


@dataclass
class Category:
    id: int
    venue_id: int
    parent_id: Optional[int]
    name: str
    description: Optional[str]
    display_order: int
    created_at: datetime
    updated_at: datetime
    # Attached by the repository when loaded together with the items,
    # always sorted by display_order.
    items: list[Item] = field(default_factory=list)

    @classmethod
    def from_row(cls, row) -> "Category":
        """Build a Category from a sqlite3.Row object."""
        return cls(
            id=row["id"],
            venue_id=row["venue_id"],
            parent_id=row["parent_id"],
            name=row["name"],
            description=row["description"],
            display_order=row["display_order"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

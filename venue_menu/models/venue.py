"""
Domain model representing a Venue row from the DB.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class VenueStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass
class Venue:
    id: int
    name: str
    status: VenueStatus
    manager_id: Optional[int]
    created_at: datetime
    updated_at: datetime

    @property
    def is_active(self) -> bool:
        return self.status == VenueStatus.ACTIVE

    @classmethod
    def from_row(cls, row) -> "Venue":
        """Build a Venue from a sqlite3.Row object."""
        return cls(
            id=row["id"],
            name=row["name"],
            status=VenueStatus(row["status"]),
            manager_id=row["manager_id"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

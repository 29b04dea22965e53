"""
Event model and the partial-update patch applied by PATCH /events/<id>.
"""

from dataclasses import dataclass, fields, replace
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

STATUS_DRAFT = "draft"
STATUS_PUBLISHED = "published"
VALID_STATUSES = [STATUS_DRAFT, STATUS_PUBLISHED]

# Stored lowercase so title/organizer/location searches are case-insensitive
NORMALIZED_FIELDS = ("title", "organizer", "location")


@dataclass
class Event:
    title: str
    long_description: str
    short_description: str
    date_and_time: Optional[datetime]
    organizer: str
    location: str
    status: str
    id: Optional[int] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Event":
        return cls(
            id=row["id"],
            title=row["title"],
            long_description=row["long_description"],
            short_description=row["short_description"],
            date_and_time=row["date_and_time"],
            organizer=row["organizer"],
            location=row["location"],
            status=row["status"],
        )

    def normalized(self) -> "Event":
        """Return a copy with the searchable text fields lowercased."""
        return replace(self, **{
            name: getattr(self, name).lower()
            for name in NORMALIZED_FIELDS
            if isinstance(getattr(self, name), str)
        })

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "long_description": self.long_description,
            "short_description": self.short_description,
            "date_and_time": self.date_and_time.isoformat() if self.date_and_time else None,
            "organizer": self.organizer,
            "location": self.location,
            "status": self.status,
        }


@dataclass
class EventPatch:
    """Every field is optional; None means "leave the stored value alone"."""
    title: Optional[str] = None
    long_description: Optional[str] = None
    short_description: Optional[str] = None
    date_and_time: Optional[datetime] = None
    organizer: Optional[str] = None
    location: Optional[str] = None
    status: Optional[str] = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


def apply_patch(event: Event, patch: EventPatch) -> Event:
    """Merge the set fields of a patch onto an event, returning a new Event."""
    changes = {
        f.name: getattr(patch, f.name)
        for f in fields(patch)
        if getattr(patch, f.name) is not None
    }
    return replace(event, **changes)

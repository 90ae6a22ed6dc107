"""Plain, immutable advocate records shared by both backing stores."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from advocate_directory.models import Advocate


@dataclass(frozen=True)
class AdvocateRecord:
    """Read-only view of one advocate as returned by the query layer."""

    first_name: str
    last_name: str
    city: str
    degree: str
    years_of_experience: int
    phone_number: int
    specialties: tuple[str, ...] = field(default_factory=tuple)
    id: int | None = None
    profile_image_url: str | None = None
    bio: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_model(cls, row: Advocate) -> AdvocateRecord:
        """Detach an ORM row into a record."""
        return cls(
            id=row.id,
            first_name=row.first_name,
            last_name=row.last_name,
            city=row.city,
            degree=row.degree,
            specialties=tuple(row.specialties or ()),
            years_of_experience=row.years_of_experience,
            phone_number=row.phone_number,
            profile_image_url=row.profile_image_url,
            bio=row.bio,
            created_at=row.created_at,
        )

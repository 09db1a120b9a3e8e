"""
Domain Read Models

Pydantic snapshots of the backend entities the reminder functions read.
Field aliases follow the backend's camelCase schema. Derived state such as
fill status is recomputed from the membership list on every access.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SpotStatus(str, Enum):
    """Attendance status of a user on a spot."""

    CONFIRMED = "Confirmed"
    ABSENT = "Absent"
    CANCELED = "Canceled"

    @property
    def counts_toward_fill(self) -> bool:
        """Whether this membership occupies one of the spot's places."""
        if self is SpotStatus.CONFIRMED:
            return True
        if self in (SpotStatus.ABSENT, SpotStatus.CANCELED):
            return False
        raise ValueError(f"Unhandled spot status: {self!r}")


class Role(str, Enum):
    """Membership role on an activity or organization."""

    ADMIN = "Admin"
    MEMBER = "Member"


class FillStatus(str, Enum):
    """Admin-summary label for a spot."""

    FILLED = "FILLED"
    UNFILLED = "UNFILLED"


class _ReadModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Person(_ReadModel):
    """Name and email of a user as embedded in relations."""

    name: str | None = None
    email: str

    def as_recipient(self) -> dict[str, str]:
        return {"email": self.email, "name": self.name or self.email}


class Organization(_ReadModel):
    """Owning organization; supplies the display timezone."""

    name: str | None = None
    timezone: str


class SpotMembership(_ReadModel):
    status: SpotStatus
    user: Person


class Spot(_ReadModel):
    """A schedulable slot within an activity."""

    starts_at: datetime
    ends_at: datetime
    number_needed: int = Field(default=0, ge=0)
    members: tuple[SpotMembership, ...] = ()

    @property
    def is_understaffed(self) -> bool:
        """Raw membership rule: fewer memberships than places, any status."""
        return self.number_needed > len(self.members)

    @property
    def confirmed_count(self) -> int:
        return sum(1 for m in self.members if m.status.counts_toward_fill)

    @property
    def fill_status(self) -> FillStatus:
        """Confirmed-only rule used by the admin summary."""
        if self.number_needed - self.confirmed_count > 0:
            return FillStatus.UNFILLED
        return FillStatus.FILLED

    def is_absent(self, email: str) -> bool:
        return any(
            m.user.email == email and m.status is SpotStatus.ABSENT
            for m in self.members
        )


class ActivityMembership(_ReadModel):
    user: Person


class Activity(_ReadModel):
    """An activity with its members and the spots fetched for the window."""

    name: str
    organization: Organization
    members: tuple[ActivityMembership, ...] = ()
    spots: tuple[Spot, ...] = ()


class SpotActivity(_ReadModel):
    name: str
    organization: Organization


class LinkedSpot(_ReadModel):
    """Spot as reached from a user's spot membership."""

    starts_at: datetime
    ends_at: datetime
    activity: SpotActivity


class UserSpotLink(_ReadModel):
    spot: LinkedSpot


class AdminActivityLink(_ReadModel):
    role: Role = Role.ADMIN
    activity: Activity


class User(_ReadModel):
    """User with the relations requested by the personal or admin lanes."""

    name: str | None = None
    email: str
    spots: tuple[UserSpotLink, ...] = ()
    activities: tuple[AdminActivityLink, ...] = ()

    def as_recipient(self) -> dict[str, str]:
        return {"email": self.email, "name": self.name or self.email}

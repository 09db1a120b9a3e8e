# Shared Models
"""
Pydantic models for backend entities and function payloads.
"""

from helpout.shared.models.domain import (
    Activity,
    ActivityMembership,
    AdminActivityLink,
    FillStatus,
    LinkedSpot,
    Organization,
    Person,
    Role,
    Spot,
    SpotActivity,
    SpotMembership,
    SpotStatus,
    User,
    UserSpotLink,
)
from helpout.shared.models.events import ReminderRequest, error_envelope, success_envelope

__all__ = [
    # Enumerations
    "SpotStatus",
    "Role",
    "FillStatus",
    # Read models
    "Person",
    "Organization",
    "SpotMembership",
    "Spot",
    "ActivityMembership",
    "Activity",
    "SpotActivity",
    "LinkedSpot",
    "UserSpotLink",
    "AdminActivityLink",
    "User",
    # Events
    "ReminderRequest",
    "success_envelope",
    "error_envelope",
]

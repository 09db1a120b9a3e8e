"""
Function Event Models

Pydantic models for function invocation payloads and the result/error
envelopes returned to the backend.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ReminderRequest(BaseModel):
    """`data` block of a send-upcoming-reminders invocation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    days_out: int = Field(..., alias="daysOut", ge=0, description="Days from today of the target day")
    filled: bool = Field(default=False, description="Send personal reminders for confirmed spots")
    unfilled: bool = Field(default=False, description="Alert activity members about understaffed spots")
    admin_summary: bool = Field(
        default=False,
        alias="adminSummary",
        description="Send each activity admin a summary of the day's spots",
    )

    @property
    def any_lane_enabled(self) -> bool:
        return self.filled or self.unfilled or self.admin_summary


def success_envelope(data: Any) -> dict[str, Any]:
    """Wrap a function result."""
    return {"data": data}


def error_envelope(message: str, details: str | None = None) -> dict[str, Any]:
    """Wrap a caller-visible error, with optional details."""
    envelope: dict[str, Any] = {"error": message}
    if details is not None:
        envelope["details"] = details
    return envelope

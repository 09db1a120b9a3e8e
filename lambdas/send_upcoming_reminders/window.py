"""
Reminder Window Resolution

Turns a caller-supplied day offset into the half-open instant range
covering that calendar day.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any

import structlog

log = structlog.get_logger()


@dataclass(frozen=True)
class TimeWindow:
    """Half-open interval [start, end) covering one calendar day."""

    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        """Elapsed time, which is 23 or 25 hours across a DST change."""
        return self.end.astimezone(timezone.utc) - self.start.astimezone(timezone.utc)

    def contains(self, instant: datetime) -> bool:
        # Compare in UTC; same-zone aware datetimes otherwise compare wall clocks
        return (
            self.start.astimezone(timezone.utc)
            <= instant.astimezone(timezone.utc)
            < self.end.astimezone(timezone.utc)
        )

    def to_variables(self) -> dict[str, Any]:
        """Query variables shared by every lane."""
        return {
            "startRange": self.start.isoformat(),
            "endRange": self.end.isoformat(),
        }


def _midnight(day: date, tz: tzinfo | None) -> datetime:
    if tz is None:
        # Naive local midnight resolved with the process zone's rules for that date
        return datetime.combine(day, time()).astimezone()
    return datetime.combine(day, time(), tzinfo=tz)


def resolve_window(
    days_out: int,
    *,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> TimeWindow:
    """
    Resolve the target day `days_out` days from now.

    Args:
        days_out: Day offset from today
        now: Invocation instant (defaults to the current time)
        tz: Zone defining calendar days (defaults to the process zone)

    Returns:
        TimeWindow from that day's midnight to the next day's midnight
    """
    if now is None:
        current = datetime.now(tz) if tz is not None else datetime.now()
    elif tz is not None:
        current = now.astimezone(tz)
    elif now.tzinfo is not None:
        current = now.astimezone()
    else:
        current = now

    target_day = current.date() + timedelta(days=days_out)
    window = TimeWindow(
        start=_midnight(target_day, tz),
        end=_midnight(target_day + timedelta(days=1), tz),
    )

    log.debug(
        "reminder_window_resolved",
        days_out=days_out,
        start=window.start.isoformat(),
        end=window.end.isoformat(),
        hours=window.duration / timedelta(hours=1),
    )

    return window

"""
Spot Time Formatting

Renders a spot's start and end in its organization's timezone, e.g.
"Friday, March 1, 9:00 AM" to "11:00 AM" on the same day, or the long form
for both ends when the spot crosses midnight.
"""

from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from helpout.shared.exceptions import InvalidTimezoneError


@dataclass(frozen=True)
class SpotTimes:
    starts: str
    ends: str

    def as_dict(self) -> dict[str, str]:
        return {"starts": self.starts, "ends": self.ends}


@lru_cache(maxsize=64)
def get_zone(tz_name: str) -> ZoneInfo:
    """Look up an IANA zone, raising InvalidTimezoneError if unknown."""
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidTimezoneError(tz_name) from e


def format_time(value: datetime) -> str:
    """Short clock time, e.g. `9:05 AM`."""
    return value.strftime("%I:%M %p").lstrip("0")


def format_long(value: datetime) -> str:
    """Weekday, month, day and clock time, e.g. `Friday, March 1, 9:05 AM`."""
    return f"{value:%A, %B} {value.day}, {format_time(value)}"


def format_spot_times(starts_at: datetime, ends_at: datetime, tz_name: str) -> SpotTimes:
    """
    Format a start/end pair in the given zone.

    The end uses the short time-only form when both instants fall on the
    same local calendar day; otherwise both use the long form.
    """
    zone = get_zone(tz_name)
    local_start = starts_at.astimezone(zone)
    local_end = ends_at.astimezone(zone)

    if local_start.date() == local_end.date():
        ends = format_time(local_end)
    else:
        ends = format_long(local_end)

    return SpotTimes(starts=format_long(local_start), ends=ends)

"""
Reminder Lanes

Each lane fetches one read model from the backend for the target window
and turns it into template messages:

- unfilled: activity members alerted about understaffed spots
- personal: one digest per user of their confirmed spots
- admin summary: one digest per activity admin of every spot they oversee

Fetch functions raise GraphQLRequestError. Build functions are pure and
report a recipient they cannot render in `LaneBatch.errors` instead of raising.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import structlog

from helpout.shared.exceptions import InvalidTimezoneError
from helpout.shared.models.domain import Activity, LinkedSpot, Spot, SpotMembership, User
from helpout.shared.tools.email import EmailAddress, TemplateMessage
from helpout.shared.tools.graphql import GraphQLClient
from lambdas.send_upcoming_reminders.formatting import format_spot_times
from lambdas.send_upcoming_reminders.window import TimeWindow

log = structlog.get_logger()


class Lane(str, Enum):
    """Independent notification computations, in execution order."""

    UNFILLED = "unfilled"
    PERSONAL = "personal"
    ADMIN_SUMMARY = "admin_summary"


@dataclass
class LaneBatch:
    """Messages built for one lane, plus one error per skipped notification."""

    messages: list[TemplateMessage] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def skip(self, error: InvalidTimezoneError, **context: Any) -> None:
        log.warning("notification_build_failed", error=error.message, **context)
        self.errors.append(error.message)


UNFILLED_SPOTS_QUERY = """
query getUpcomingSpots($startRange: DateTime!, $endRange: DateTime!) {
  allActivities(filter: {
    spots_some: { startsAt_gte: $startRange, startsAt_lt: $endRange }
  }) {
    name
    organization { name timezone }
    members { user { name email } }
    spots(filter: { startsAt_gte: $startRange, startsAt_lt: $endRange }) {
      startsAt
      endsAt
      numberNeeded
      members { status user { name email } }
    }
  }
}
"""

MY_UPCOMING_SPOTS_QUERY = """
query getMyUpcomingSpots($startRange: DateTime!, $endRange: DateTime!) {
  allUsers(filter: {
    spots_some: {
      status: Confirmed,
      spot: { startsAt_gte: $startRange, startsAt_lt: $endRange }
    }
  }) {
    name
    email
    spots(filter: {
      status: Confirmed,
      spot: { startsAt_gte: $startRange, startsAt_lt: $endRange }
    }) {
      spot {
        startsAt
        endsAt
        activity { name organization { name timezone } }
      }
    }
  }
}
"""

ADMIN_SUMMARY_QUERY = """
query getAdminSummaries($startRange: DateTime!, $endRange: DateTime!) {
  allUsers(filter: { activities_some: { role: Admin } }) {
    name
    email
    activities(filter: { role: Admin }) {
      role
      activity {
        name
        organization { name timezone }
        spots(
          filter: { startsAt_gte: $startRange, startsAt_lt: $endRange },
          orderBy: endsAt_ASC
        ) {
          startsAt
          endsAt
          numberNeeded
          members(filter: { status_not: Canceled }) { status user { name email } }
        }
      }
    }
  }
}
"""


# =====================================================
# Unfilled-spot lane
# =====================================================


def select_understaffed(activities: list[Activity]) -> list[Activity]:
    """
    Keep only understaffed spots, dropping activities left with none.

    A spot is understaffed when it needs more people than it has
    memberships of any status.
    """
    selected = []
    for activity in activities:
        spots = tuple(spot for spot in activity.spots if spot.is_understaffed)
        if spots:
            selected.append(activity.model_copy(update={"spots": spots}))
    return selected


def unfilled_recipients(activity: Activity) -> list[EmailAddress]:
    """
    Activity members to alert, excluding anyone absent on every reported spot.
    """
    recipients: list[EmailAddress] = []
    seen: set[str] = set()
    for membership in activity.members:
        person = membership.user
        if person.email in seen:
            continue
        if activity.spots and all(spot.is_absent(person.email) for spot in activity.spots):
            continue
        seen.add(person.email)
        recipients.append(EmailAddress(**person.as_recipient()))
    return recipients


async def fetch_unfilled_activities(graphql: GraphQLClient, window: TimeWindow) -> list[Activity]:
    data = await graphql.request(
        UNFILLED_SPOTS_QUERY,
        window.to_variables(),
        operation="getUpcomingSpots",
    )
    activities = [Activity.model_validate(a) for a in data.get("allActivities") or []]
    selected = select_understaffed(activities)

    log.info(
        "unfilled_activities_found",
        activities_in_window=len(activities),
        understaffed=len(selected),
    )

    return selected


def build_unfilled_messages(activities: list[Activity], template_id: int) -> LaneBatch:
    batch = LaneBatch()
    for activity in activities:
        recipients = unfilled_recipients(activity)
        if not recipients:
            log.info("unfilled_activity_without_recipients", activity=activity.name)
            continue

        timezone = activity.organization.timezone
        try:
            spots = [
                format_spot_times(spot.starts_at, spot.ends_at, timezone).as_dict()
                for spot in activity.spots
            ]
        except InvalidTimezoneError as e:
            batch.skip(e, lane=Lane.UNFILLED.value, activity=activity.name)
            continue

        batch.messages.append(
            TemplateMessage(
                to=tuple(recipients),
                template_id=template_id,
                variables={"team": activity.name, "spots": spots},
            )
        )
    return batch


# =====================================================
# Personal-reminder lane
# =====================================================


async def fetch_personal_users(graphql: GraphQLClient, window: TimeWindow) -> list[User]:
    data = await graphql.request(
        MY_UPCOMING_SPOTS_QUERY,
        window.to_variables(),
        operation="getMyUpcomingSpots",
    )
    users = [User.model_validate(u) for u in data.get("allUsers") or []]
    log.info("personal_reminder_users_found", users=len(users))
    return users


def _personal_spot(spot: LinkedSpot) -> dict[str, Any]:
    times = format_spot_times(spot.starts_at, spot.ends_at, spot.activity.organization.timezone)
    return {
        "activity": spot.activity.model_dump(mode="json", by_alias=True),
        **times.as_dict(),
    }


def build_personal_messages(users: list[User], template_id: int) -> LaneBatch:
    batch = LaneBatch()
    for user in users:
        try:
            spots = [_personal_spot(link.spot) for link in user.spots]
        except InvalidTimezoneError as e:
            batch.skip(e, lane=Lane.PERSONAL.value, email=user.email)
            continue
        if not spots:
            continue

        batch.messages.append(
            TemplateMessage(
                to=(EmailAddress(**user.as_recipient()),),
                template_id=template_id,
                variables={"name": user.name or user.email, "spots": spots},
            )
        )
    return batch


# =====================================================
# Admin-summary lane
# =====================================================


async def fetch_admin_users(graphql: GraphQLClient, window: TimeWindow) -> list[User]:
    data = await graphql.request(
        ADMIN_SUMMARY_QUERY,
        window.to_variables(),
        operation="getAdminSummaries",
    )
    users = [User.model_validate(u) for u in data.get("allUsers") or []]
    log.info("activity_admins_found", admins=len(users))
    return users


def _summarize_member(membership: SpotMembership) -> dict[str, str]:
    return {
        "name": membership.user.name or membership.user.email,
        "email": membership.user.email,
        "status": membership.status.value,
    }


def _summarize_spot(activity: Activity, spot: Spot) -> dict[str, Any]:
    times = format_spot_times(spot.starts_at, spot.ends_at, activity.organization.timezone)
    return {
        "activity": activity.name,
        "organization": activity.organization.name,
        **times.as_dict(),
        "status": spot.fill_status.value,
        "numberNeeded": spot.number_needed,
        "confirmed": spot.confirmed_count,
        "members": [_summarize_member(m) for m in spot.members],
    }


def admin_summary_spots(user: User) -> list[dict[str, Any]]:
    """Flatten every administered activity's spots into one list."""
    return [
        _summarize_spot(link.activity, spot)
        for link in user.activities
        for spot in link.activity.spots
    ]


def build_admin_summary_messages(users: list[User], template_id: int) -> LaneBatch:
    batch = LaneBatch()
    for user in users:
        try:
            spots = admin_summary_spots(user)
        except InvalidTimezoneError as e:
            batch.skip(e, lane=Lane.ADMIN_SUMMARY.value, email=user.email)
            continue
        if not spots:
            log.debug("admin_summary_skipped_empty", email=user.email)
            continue

        batch.messages.append(
            TemplateMessage(
                to=(EmailAddress(**user.as_recipient()),),
                template_id=template_id,
                variables={"name": user.name or user.email, "spots": spots},
            )
        )
    return batch

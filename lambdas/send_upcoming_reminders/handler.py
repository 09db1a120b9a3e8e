"""
SendUpcomingReminders Function Handler

Main entry point for the reminder batch, invoked by a cron caller holding
a root token.

Input (event.data): {daysOut, filled, unfilled, adminSummary}
Output: {data: {errors, notificationsSent}} or {error, details?}

Flow:
1. Reject anonymous and non-root callers before any query runs
2. Resolve the target day window from daysOut
3. Run the enabled lanes in order: unfilled, personal, admin summary
4. Within each lane, send every notification concurrently and wait for all
5. Fold send outcomes and unrenderable recipients into one report; a
   backend failure aborts the run
"""

import asyncio
import time
from datetime import datetime
from typing import Any

from pydantic import ValidationError
import structlog

from helpout.shared.auth import AuthContext, require_root
from helpout.shared.config import Settings, get_settings
from helpout.shared.exceptions import AuthorizationError, ConfigurationError, HelpOutError
from helpout.shared.logging_config import configure_logging
from helpout.shared.models.events import ReminderRequest, error_envelope, success_envelope
from helpout.shared.tools.email import TemplateSender, build_mail_sender
from helpout.shared.tools.graphql import GraphQLClient, build_graphql_client
from lambdas.send_upcoming_reminders.dispatcher import NotificationReport, dispatch
from lambdas.send_upcoming_reminders.formatting import get_zone
from lambdas.send_upcoming_reminders.lanes import (
    Lane,
    LaneBatch,
    build_admin_summary_messages,
    build_personal_messages,
    build_unfilled_messages,
    fetch_admin_users,
    fetch_personal_users,
    fetch_unfilled_activities,
)
from lambdas.send_upcoming_reminders.window import TimeWindow, resolve_window

log = structlog.get_logger()

UNEXPECTED_ERROR = "Unexpected error sending notifications"
INVALID_REQUEST_ERROR = "Invalid reminder request"


def _enabled_lanes(request: ReminderRequest) -> list[Lane]:
    flags = {
        Lane.UNFILLED: request.unfilled,
        Lane.PERSONAL: request.filled,
        Lane.ADMIN_SUMMARY: request.admin_summary,
    }
    return [lane for lane in Lane if flags[lane]]


async def _build_lane_messages(
    lane: Lane,
    graphql: GraphQLClient,
    window: TimeWindow,
    settings: Settings,
) -> LaneBatch:
    if lane is Lane.UNFILLED:
        activities = await fetch_unfilled_activities(graphql, window)
        return build_unfilled_messages(activities, settings.unfilled_template_id)
    if lane is Lane.PERSONAL:
        users = await fetch_personal_users(graphql, window)
        return build_personal_messages(users, settings.personal_template_id)
    if lane is Lane.ADMIN_SUMMARY:
        if settings.admin_summary_template_id is None:
            raise ConfigurationError("admin_summary_template_id")
        users = await fetch_admin_users(graphql, window)
        return build_admin_summary_messages(users, settings.admin_summary_template_id)
    raise ValueError(f"Unhandled lane: {lane!r}")


async def run_reminders(
    request: ReminderRequest,
    *,
    graphql: GraphQLClient,
    mailer: TemplateSender,
    settings: Settings,
    now: datetime | None = None,
) -> NotificationReport:
    """
    Compute and send every enabled lane's notifications.

    Args:
        request: Validated invocation payload
        graphql: Backend executor
        mailer: Template sender
        settings: Template ids, timeout and window zone
        now: Invocation instant (defaults to the current time)

    Returns:
        NotificationReport across all lanes

    Raises:
        HelpOutError: If a backend query fails or a lane is misconfigured
    """
    report = NotificationReport()
    lanes = _enabled_lanes(request)
    if not lanes:
        return report

    tz = get_zone(settings.window_timezone) if settings.window_timezone else None
    window = resolve_window(request.days_out, now=now, tz=tz)

    for lane in lanes:
        batch = await _build_lane_messages(lane, graphql, window, settings)
        report.errors.extend(batch.errors)
        outcomes = await dispatch(mailer, batch.messages, timeout=settings.send_timeout_seconds)
        report.extend(outcomes)

        log.info(
            "reminder_lane_completed",
            lane=lane.value,
            messages=len(batch.messages),
            skipped=len(batch.errors),
            sent=sum(1 for o in outcomes if o.succeeded),
        )

    return report


async def send_upcoming_reminders(
    event: dict[str, Any],
    *,
    graphql: GraphQLClient,
    mailer: TemplateSender,
    settings: Settings,
    now: datetime | None = None,
) -> dict[str, Any]:
    """
    Authorize, validate and run a reminder batch, returning the envelope.
    """
    try:
        require_root(AuthContext.from_event(event), root_type=settings.root_principal_type)
    except AuthorizationError as e:
        return error_envelope(e.message)

    try:
        request = ReminderRequest.model_validate(event.get("data") or {})
    except ValidationError as e:
        log.warning("reminder_request_invalid", errors=e.error_count())
        return error_envelope(INVALID_REQUEST_ERROR, str(e))

    log.info(
        "reminder_processing_started",
        days_out=request.days_out,
        unfilled=request.unfilled,
        filled=request.filled,
        admin_summary=request.admin_summary,
    )

    try:
        report = await run_reminders(
            request,
            graphql=graphql,
            mailer=mailer,
            settings=settings,
            now=now,
        )
    except HelpOutError as e:
        log.error("reminder_processing_failed", error=str(e))
        return error_envelope(UNEXPECTED_ERROR, e.message)
    except Exception as e:
        log.exception("reminder_processing_failed", error=str(e))
        return error_envelope(UNEXPECTED_ERROR, str(e))

    return success_envelope(report.to_payload())


async def _invoke(event: dict[str, Any], settings: Settings) -> dict[str, Any]:
    mailer = build_mail_sender(settings)
    async with build_graphql_client(settings) as graphql:
        return await send_upcoming_reminders(
            event,
            graphql=graphql,
            mailer=mailer,
            settings=settings,
        )


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Function entry point.

    Args:
        event: Function event with `data` and `context.auth`
        context: Runtime context (unused)

    Returns:
        Result or error envelope
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    start_time = time.time()

    result = asyncio.run(_invoke(event, settings))

    data = result.get("data") or {}
    log.info(
        "reminder_processing_completed",
        notifications_sent=data.get("notificationsSent"),
        errors=len(data.get("errors") or []),
        error=result.get("error"),
        duration_ms=round((time.time() - start_time) * 1000, 2),
    )

    return result

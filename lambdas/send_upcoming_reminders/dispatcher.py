"""
Notification Dispatch

Fires every notification of a lane concurrently, waits for all of them to
settle, and folds the outcomes into a NotificationReport. A failed or
timed-out send is recorded and never interrupts its siblings.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Sequence

import structlog

from helpout.shared.tools.email import SendResult, TemplateMessage, TemplateSender

log = structlog.get_logger()


@dataclass(frozen=True)
class SendOutcome:
    """Settled result of one send."""

    message: TemplateMessage
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class NotificationReport:
    """Aggregate of all sends in one invocation."""

    notifications_sent: int = 0
    errors: list[str] = field(default_factory=list)

    def record(self, outcome: SendOutcome) -> None:
        if outcome.succeeded:
            self.notifications_sent += 1
        else:
            self.errors.append(outcome.error)

    def extend(self, outcomes: Sequence[SendOutcome]) -> None:
        for outcome in outcomes:
            self.record(outcome)

    def to_payload(self) -> dict[str, Any]:
        return {
            "errors": list(self.errors),
            "notificationsSent": self.notifications_sent,
        }


def classify_result(message: TemplateMessage, result: SendResult) -> SendOutcome:
    """Turn a provider acknowledgement into a success or an error message."""
    if result.error is not None:
        return SendOutcome(message=message, error=result.error)
    if result.delivered:
        return SendOutcome(message=message)
    recipients = ", ".join(message.recipient_emails)
    return SendOutcome(
        message=message,
        error=f"Template {message.template_id} rejected for {recipients}",
    )


async def _send_one(
    sender: TemplateSender,
    message: TemplateMessage,
    timeout: float,
) -> SendOutcome:
    try:
        result = await asyncio.wait_for(sender.send_template(message), timeout=timeout)
    except asyncio.TimeoutError:
        log.warning(
            "notification_send_timed_out",
            template_id=message.template_id,
            recipients=message.recipient_emails,
            timeout_seconds=timeout,
        )
        return SendOutcome(
            message=message,
            error=f"Timed out after {timeout:g}s sending template {message.template_id}",
        )
    except Exception as e:
        log.exception(
            "notification_send_crashed",
            template_id=message.template_id,
            error=str(e),
        )
        return SendOutcome(message=message, error=str(e) or type(e).__name__)

    outcome = classify_result(message, result)
    if not outcome.succeeded:
        log.warning(
            "notification_send_failed",
            template_id=message.template_id,
            recipients=message.recipient_emails,
            error=outcome.error,
        )
    return outcome


async def dispatch(
    sender: TemplateSender,
    messages: Sequence[TemplateMessage],
    *,
    timeout: float,
) -> list[SendOutcome]:
    """
    Send all messages concurrently and wait until every send settles.

    Args:
        sender: Template sender
        messages: Notifications for one lane
        timeout: Per-send upper bound in seconds

    Returns:
        One SendOutcome per message, in input order
    """
    if not messages:
        return []

    outcomes = await asyncio.gather(
        *(_send_one(sender, message, timeout) for message in messages)
    )

    log.info(
        "notifications_dispatched",
        total=len(outcomes),
        failed=sum(1 for o in outcomes if not o.succeeded),
    )

    return list(outcomes)

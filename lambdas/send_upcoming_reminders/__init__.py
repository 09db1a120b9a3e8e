"""
SendUpcomingReminders Function

Batch function invoked by a cron caller to email reminders about the
spots of one upcoming day.

Components:
- handler: function entry point, authorization and lane sequencing
- window: target-day instant range
- lanes: backend queries and message building per lane
- formatting: spot start/end rendering in the organization's timezone
- dispatcher: concurrent sends and report aggregation
"""

from lambdas.send_upcoming_reminders.dispatcher import NotificationReport, SendOutcome, dispatch
from lambdas.send_upcoming_reminders.formatting import SpotTimes, format_spot_times
from lambdas.send_upcoming_reminders.handler import (
    lambda_handler,
    run_reminders,
    send_upcoming_reminders,
)
from lambdas.send_upcoming_reminders.lanes import Lane, LaneBatch
from lambdas.send_upcoming_reminders.window import TimeWindow, resolve_window

__all__ = [
    "lambda_handler",
    "run_reminders",
    "send_upcoming_reminders",
    "NotificationReport",
    "SendOutcome",
    "dispatch",
    "SpotTimes",
    "format_spot_times",
    "Lane",
    "LaneBatch",
    "TimeWindow",
    "resolve_window",
]

"""
Pytest Configuration and Shared Fixtures

Provides sample backend payloads, fake collaborators, moto SES mocking,
and function events.
"""

import os
from datetime import datetime, timezone
from typing import Any

import boto3
import pytest
from moto import mock_aws

# Set test environment before importing application modules
os.environ["HELPOUT_GRAPHQL_ENDPOINT"] = "https://backend.test/simple/v1/project"
os.environ["HELPOUT_MAIL_FROM_ADDRESS"] = "test@example.com"
os.environ["HELPOUT_AWS_REGION"] = "us-west-2"
os.environ["AWS_DEFAULT_REGION"] = "us-west-2"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"

from helpout.shared.config import Settings  # noqa: E402
from tests.mocks.fake_clients import FakeGraphQLClient, FakeTemplateSender  # noqa: E402


ADMIN_SUMMARY_TEMPLATE_ID = 600001


# --- Time Fixtures ---


@pytest.fixture
def frozen_now() -> datetime:
    """Invocation instant: 2024-02-29 15:00 UTC, so daysOut=1 targets March 1."""
    return datetime(2024, 2, 29, 15, 0, tzinfo=timezone.utc)


# --- Settings Fixtures ---


@pytest.fixture
def settings() -> Settings:
    """Settings with a UTC reminder day and a configured admin template."""
    return Settings(
        window_timezone="UTC",
        admin_summary_template_id=ADMIN_SUMMARY_TEMPLATE_ID,
        send_timeout_seconds=0.5,
    )


# --- Collaborator Fixtures ---


@pytest.fixture
def fake_mailer() -> FakeTemplateSender:
    return FakeTemplateSender()


@pytest.fixture
def fake_graphql(
    unfilled_activities_payload: dict[str, Any],
    personal_users_payload: dict[str, Any],
    admin_users_payload: dict[str, Any],
) -> FakeGraphQLClient:
    """Backend answering all three lane queries."""
    return FakeGraphQLClient(
        {
            "getUpcomingSpots": unfilled_activities_payload,
            "getMyUpcomingSpots": personal_users_payload,
            "getAdminSummaries": admin_users_payload,
        }
    )


# --- AWS Mocking Fixtures ---


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    return {
        "aws_access_key_id": "testing",
        "aws_secret_access_key": "testing",
        "region_name": "us-west-2",
    }


@pytest.fixture
def mock_ses(aws_credentials):
    """Mocked SES with a verified sender and the reminder templates."""
    with mock_aws():
        ses = boto3.client("ses", **aws_credentials)
        ses.verify_email_identity(EmailAddress="test@example.com")
        for template_id in (349788, 477313):
            ses.create_template(
                Template={
                    "TemplateName": f"helpout-{template_id}",
                    "SubjectPart": "Upcoming spots",
                    "TextPart": "Hello {{name}}",
                    "HtmlPart": "<p>Hello {{name}}</p>",
                }
            )
        yield ses


# --- Person Fixtures ---


def person(name: str) -> dict[str, str]:
    return {"name": name.title(), "email": f"{name}@example.com"}


def membership(status: str, name: str) -> dict[str, Any]:
    return {"status": status, "user": person(name)}


@pytest.fixture
def food_bank_org() -> dict[str, str]:
    return {"name": "Eastside Food Bank", "timezone": "America/New_York"}


# --- Backend Payload Fixtures ---


@pytest.fixture
def unfilled_activities_payload(food_bank_org: dict[str, str]) -> dict[str, Any]:
    """
    allActivities response for March 1.

    Sorting Shift: morning spot short one person, evening spot fully
    booked, late spot short two. Bob is absent on both short spots.
    Park Cleanup: its only spot is fully booked.
    """
    return {
        "allActivities": [
            {
                "name": "Sorting Shift",
                "organization": food_bank_org,
                "members": [
                    {"user": person("alice")},
                    {"user": person("bob")},
                    {"user": person("carol")},
                    {"user": person("dave")},
                ],
                "spots": [
                    {
                        "startsAt": "2024-03-01T14:00:00.000Z",
                        "endsAt": "2024-03-01T16:00:00.000Z",
                        "numberNeeded": 3,
                        "members": [
                            membership("Confirmed", "alice"),
                            membership("Absent", "bob"),
                        ],
                    },
                    {
                        "startsAt": "2024-03-01T18:00:00.000Z",
                        "endsAt": "2024-03-01T20:00:00.000Z",
                        "numberNeeded": 1,
                        "members": [membership("Confirmed", "carol")],
                    },
                    {
                        "startsAt": "2024-03-01T22:00:00.000Z",
                        "endsAt": "2024-03-02T01:00:00.000Z",
                        "numberNeeded": 2,
                        "members": [membership("Absent", "bob")],
                    },
                ],
            },
            {
                "name": "Park Cleanup",
                "organization": {"name": "Friends of the Park", "timezone": "America/Chicago"},
                "members": [{"user": person("erin")}],
                "spots": [
                    {
                        "startsAt": "2024-03-01T15:00:00.000Z",
                        "endsAt": "2024-03-01T17:00:00.000Z",
                        "numberNeeded": 1,
                        "members": [membership("Confirmed", "erin")],
                    },
                ],
            },
        ]
    }


@pytest.fixture
def personal_users_payload(food_bank_org: dict[str, str]) -> dict[str, Any]:
    """allUsers response with confirmed spots on March 1."""
    return {
        "allUsers": [
            {
                **person("alice"),
                "spots": [
                    {
                        "spot": {
                            "startsAt": "2024-03-01T14:00:00.000Z",
                            "endsAt": "2024-03-01T16:00:00.000Z",
                            "activity": {"name": "Sorting Shift", "organization": food_bank_org},
                        }
                    }
                ],
            },
            {
                **person("carol"),
                "spots": [
                    {
                        "spot": {
                            "startsAt": "2024-03-01T18:00:00.000Z",
                            "endsAt": "2024-03-01T20:00:00.000Z",
                            "activity": {"name": "Sorting Shift", "organization": food_bank_org},
                        }
                    }
                ],
            },
        ]
    }


@pytest.fixture
def admin_users_payload(food_bank_org: dict[str, str]) -> dict[str, Any]:
    """
    allUsers response for activity admins.

    Gina administers Sorting Shift; Hank administers an activity with
    no spots on March 1.
    """
    return {
        "allUsers": [
            {
                **person("gina"),
                "activities": [
                    {
                        "role": "Admin",
                        "activity": {
                            "name": "Sorting Shift",
                            "organization": food_bank_org,
                            "spots": [
                                {
                                    "startsAt": "2024-03-01T14:00:00.000Z",
                                    "endsAt": "2024-03-01T16:00:00.000Z",
                                    "numberNeeded": 3,
                                    "members": [
                                        membership("Confirmed", "alice"),
                                        membership("Confirmed", "dave"),
                                        membership("Absent", "bob"),
                                    ],
                                },
                                {
                                    "startsAt": "2024-03-01T18:00:00.000Z",
                                    "endsAt": "2024-03-01T20:00:00.000Z",
                                    "numberNeeded": 1,
                                    "members": [membership("Confirmed", "carol")],
                                },
                            ],
                        },
                    }
                ],
            },
            {
                **person("hank"),
                "activities": [
                    {
                        "role": "Admin",
                        "activity": {
                            "name": "Book Drive",
                            "organization": food_bank_org,
                            "spots": [],
                        },
                    }
                ],
            },
        ]
    }


# --- Event Fixtures ---


@pytest.fixture
def root_auth() -> dict[str, str]:
    return {"nodeId": "cjroot000000001", "typeName": "PAT"}


@pytest.fixture
def user_auth() -> dict[str, str]:
    return {"nodeId": "cjuser000000001", "typeName": "User"}


@pytest.fixture
def reminder_event(root_auth: dict[str, str]) -> dict[str, Any]:
    """All three lanes enabled, targeting tomorrow."""
    return {
        "data": {"daysOut": 1, "filled": True, "unfilled": True, "adminSummary": True},
        "context": {"auth": root_auth},
    }

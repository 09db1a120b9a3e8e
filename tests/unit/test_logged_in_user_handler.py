"""
Unit tests for the LoggedInUser handler.
"""

import asyncio
from unittest.mock import patch

from lambdas.logged_in_user.handler import AUTHENTICATION_ERROR, lambda_handler, logged_in_user
from tests.mocks.fake_clients import FakeGraphQLClient


USER = {
    "id": "cjuser000000001",
    "name": "Alice",
    "email": "alice@example.com",
    "photoLink": "https://example.com/alice.png",
}


def run(event, graphql):
    return asyncio.run(logged_in_user(event, graphql=graphql))


class TestLoggedInUser:
    """Tests for logged_in_user."""

    def test_anonymous_returns_null(self):
        graphql = FakeGraphQLClient()

        assert run({"data": {}}, graphql) == {"data": None}
        assert graphql.calls == []

    def test_returns_user(self, user_auth):
        graphql = FakeGraphQLClient({"getUser": {"User": USER}})

        result = run({"context": {"auth": user_auth}}, graphql)

        assert result == {"data": USER}
        assert graphql.calls[0]["variables"] == {"id": "cjuser000000001"}

    def test_unknown_user_returns_null(self, user_auth):
        graphql = FakeGraphQLClient({"getUser": {"User": None}})

        assert run({"context": {"auth": user_auth}}, graphql) == {"data": None}

    def test_backend_failure(self, user_auth):
        graphql = FakeGraphQLClient()
        graphql.fail("getUser")

        assert run({"context": {"auth": user_auth}}, graphql) == {"error": AUTHENTICATION_ERROR}

    def test_lambda_handler(self, user_auth):
        graphql = FakeGraphQLClient({"getUser": {"User": USER}})

        with patch("lambdas.logged_in_user.handler.build_graphql_client", return_value=graphql):
            result = lambda_handler({"context": {"auth": user_auth}}, None)

        assert result == {"data": USER}

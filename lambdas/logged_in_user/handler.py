"""
LoggedInUser Function Handler

Resolves the authenticated caller to their user record. Anonymous callers
and unknown ids yield `{data: null}` rather than an error.
"""

import asyncio
from typing import Any

import structlog

from helpout.shared.auth import AuthContext
from helpout.shared.config import get_settings
from helpout.shared.exceptions import HelpOutError
from helpout.shared.logging_config import configure_logging
from helpout.shared.models.events import error_envelope, success_envelope
from helpout.shared.tools.graphql import GraphQLClient, build_graphql_client

log = structlog.get_logger()

AUTHENTICATION_ERROR = "An unexpected error occured during authentication."

GET_USER_QUERY = """
query getUser($id: ID!) {
  User(id: $id) {
    id
    name
    email
    photoLink
  }
}
"""


async def get_user(graphql: GraphQLClient, user_id: str) -> dict[str, Any] | None:
    data = await graphql.request(GET_USER_QUERY, {"id": user_id}, operation="getUser")
    return data.get("User")


async def logged_in_user(event: dict[str, Any], *, graphql: GraphQLClient) -> dict[str, Any]:
    auth = AuthContext.from_event(event)
    if auth is None or not auth.is_authenticated:
        return success_envelope(None)

    try:
        user = await get_user(graphql, auth.node_id)
    except HelpOutError as e:
        log.error("logged_in_user_lookup_failed", node_id=auth.node_id, error=str(e))
        return error_envelope(AUTHENTICATION_ERROR)

    if not user or not user.get("id"):
        log.info("logged_in_user_not_found", node_id=auth.node_id)
        return success_envelope(None)

    return success_envelope(user)


async def _invoke(event: dict[str, Any]) -> dict[str, Any]:
    async with build_graphql_client(get_settings()) as graphql:
        return await logged_in_user(event, graphql=graphql)


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Function entry point."""
    configure_logging(get_settings().log_level)
    return asyncio.run(_invoke(event))

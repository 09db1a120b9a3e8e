"""
GraphQL Tools

Async executor for queries and mutations against the hosted GraphQL
backend. Handlers receive an instance explicitly instead of building one
from process-wide state.
"""

import time
from typing import Any

import httpx
import structlog

from helpout.shared.config import Settings
from helpout.shared.exceptions import GraphQLRequestError

log = structlog.get_logger()


class GraphQLClient:
    """
    Minimal GraphQL-over-HTTP client.

    Usable as an async context manager; the underlying connection pool is
    closed on exit.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        token: str | None = None,
        timeout: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.endpoint = endpoint
        self._client = httpx.AsyncClient(
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "GraphQLClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        *,
        operation: str | None = None,
    ) -> dict[str, Any]:
        """
        Execute a query or mutation and return its `data` object.

        Args:
            query: GraphQL document
            variables: Variable values
            operation: Name used for logging and errors

        Returns:
            The response `data` object

        Raises:
            GraphQLRequestError: On transport failure, non-2xx status, or
                a response carrying GraphQL errors
        """
        start_time = time.time()
        payload = {"query": query, "variables": variables or {}}

        try:
            response = await self._client.post(self.endpoint, json=payload)
        except httpx.HTTPError as e:
            log.error("graphql_transport_failed", operation=operation, error=str(e))
            raise GraphQLRequestError(str(e) or type(e).__name__, operation=operation) from e

        duration_ms = (time.time() - start_time) * 1000

        if response.is_error:
            log.error(
                "graphql_http_error",
                operation=operation,
                status_code=response.status_code,
                duration_ms=duration_ms,
            )
            raise GraphQLRequestError(
                f"Backend responded with HTTP {response.status_code}",
                operation=operation,
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise GraphQLRequestError(
                "Backend returned a non-JSON response",
                operation=operation,
                status_code=response.status_code,
            ) from e

        errors = body.get("errors")
        if errors:
            message = "; ".join(err.get("message", "Unknown error") for err in errors)
            log.error("graphql_errors_returned", operation=operation, errors=message)
            raise GraphQLRequestError(message, operation=operation, status_code=response.status_code)

        log.debug("graphql_request_completed", operation=operation, duration_ms=duration_ms)

        return body.get("data") or {}


def build_graphql_client(
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> GraphQLClient:
    """Create a client for the configured backend endpoint."""
    token = settings.graphql_token.get_secret_value() if settings.graphql_token else None
    return GraphQLClient(
        settings.graphql_endpoint,
        token=token,
        timeout=settings.graphql_timeout_seconds,
        transport=transport,
    )

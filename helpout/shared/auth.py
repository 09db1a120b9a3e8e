"""
Function Authentication Context

Parses the `context.auth` block the backend attaches to every function
event and enforces the authorization rules shared by handlers.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
import structlog

from helpout.shared.exceptions import InsufficientPermissionsError, InvalidTokenError

log = structlog.get_logger()


class AuthContext(BaseModel):
    """Caller identity as supplied by the backend."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    node_id: str | None = Field(default=None, alias="nodeId")
    type_name: str | None = Field(default=None, alias="typeName")

    @property
    def is_authenticated(self) -> bool:
        return bool(self.node_id)

    @classmethod
    def from_event(cls, event: dict[str, Any]) -> "AuthContext | None":
        """Extract the auth context from a function event, None if anonymous."""
        context = event.get("context") or {}
        auth = context.get("auth")
        if not auth:
            return None
        return cls.model_validate(auth)


def require_authenticated(auth: AuthContext | None) -> AuthContext:
    """
    Ensure the request carries an authenticated principal.

    Raises:
        InvalidTokenError: If no auth context or node id is present
    """
    if auth is None or not auth.is_authenticated:
        log.warning("auth_missing_token")
        raise InvalidTokenError()
    return auth


def require_root(auth: AuthContext | None, *, root_type: str = "PAT") -> AuthContext:
    """
    Ensure the request comes from a root-equivalent principal.

    Args:
        auth: Parsed auth context (None for anonymous callers)
        root_type: typeName designating root principals

    Raises:
        InvalidTokenError: If the caller is anonymous
        InsufficientPermissionsError: If the caller is not root
    """
    auth = require_authenticated(auth)
    if auth.type_name != root_type:
        log.warning("auth_insufficient_permissions", type_name=auth.type_name)
        raise InsufficientPermissionsError(auth.type_name)
    return auth

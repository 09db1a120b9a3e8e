"""
Custom Exceptions for the Help Out With Us functions

All exceptions carry a caller-facing message plus the context needed for
debugging and logging.
"""

from dataclasses import dataclass
from typing import Any


class HelpOutError(Exception):
    """Base exception for the Help Out With Us functions."""

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class AuthorizationError(HelpOutError):
    """Caller is not allowed to run the function."""


class InvalidTokenError(AuthorizationError):
    """No authenticated principal on the request."""

    def __init__(self) -> None:
        super().__init__("Invalid token supplied")


@dataclass
class InsufficientPermissionsError(AuthorizationError):
    """Authenticated principal lacks root permissions."""

    type_name: str | None = None

    def __init__(self, type_name: str | None = None) -> None:
        self.type_name = type_name
        super().__init__(
            "Insufficient permissions to execute this mutation",
            type_name=type_name,
        )


@dataclass
class GraphQLRequestError(HelpOutError):
    """Backend query or mutation failed."""

    operation: str | None = None
    status_code: int | None = None

    def __init__(
        self,
        error_message: str,
        operation: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.operation = operation
        self.status_code = status_code
        super().__init__(
            error_message,
            operation=operation,
            status_code=status_code,
        )


@dataclass
class InvalidTimezoneError(HelpOutError):
    """Organization carries a timezone that is not a known IANA zone."""

    timezone: str

    def __init__(self, timezone: str) -> None:
        self.timezone = timezone
        super().__init__(f"Unknown timezone '{timezone}'", timezone=timezone)


@dataclass
class ConfigurationError(HelpOutError):
    """A required setting is missing."""

    setting: str

    def __init__(self, setting: str, error_message: str | None = None) -> None:
        self.setting = setting
        super().__init__(
            error_message or f"Setting '{setting}' must be configured",
            setting=setting,
        )

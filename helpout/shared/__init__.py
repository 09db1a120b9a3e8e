# Shared Infrastructure for Help Out With Us functions
"""
Shared infrastructure components for all function handlers.

This package provides:
- Pydantic read models for backend entities and function payloads
- Auth context parsing and authorization checks
- GraphQL executor and email-template senders
- Configuration management and structured logging
- Custom exceptions
"""

from helpout.shared.auth import AuthContext, require_authenticated, require_root
from helpout.shared.config import Settings, get_settings
from helpout.shared.exceptions import (
    AuthorizationError,
    ConfigurationError,
    GraphQLRequestError,
    HelpOutError,
    InsufficientPermissionsError,
    InvalidTimezoneError,
    InvalidTokenError,
)
from helpout.shared.logging_config import configure_logging

__all__ = [
    # Auth
    "AuthContext",
    "require_authenticated",
    "require_root",
    # Exceptions
    "HelpOutError",
    "AuthorizationError",
    "InvalidTokenError",
    "InsufficientPermissionsError",
    "GraphQLRequestError",
    "InvalidTimezoneError",
    "ConfigurationError",
    # Config
    "Settings",
    "get_settings",
    "configure_logging",
]

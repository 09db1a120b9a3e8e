"""
Configuration Management

Pydantic-settings based configuration for the Help Out With Us functions.
All settings can be overridden via environment variables.
"""

from functools import lru_cache
from typing import Literal

from botocore.config import Config as BotoConfig
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables are prefixed with HELPOUT_ and are case-insensitive.
    Example: HELPOUT_GRAPHQL_ENDPOINT=https://api.example.com/simple/v1/project
    """

    model_config = SettingsConfigDict(
        env_prefix="HELPOUT_",
        env_file=[".env.local", ".env"],  # Try .env.local first
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # GraphQL Backend Configuration
    graphql_endpoint: str = Field(
        default="http://localhost:60000/simple/v1",
        description="GraphQL endpoint of the hosted backend",
    )
    graphql_token: SecretStr | None = Field(
        default=None,
        description="Root token used for backend requests",
    )
    graphql_timeout_seconds: float = Field(
        default=20.0,
        description="HTTP timeout for backend requests",
    )

    # Authorization
    root_principal_type: str = Field(
        default="PAT",
        description="Auth typeName that designates a root-equivalent caller",
    )

    # Mail Configuration
    mail_backend: Literal["mailjet", "ses"] = Field(
        default="mailjet",
        description="Provider used to deliver templated email",
    )
    mail_from_address: str = Field(
        default="mailjet@noreply.helpoutwith.us",
        description="From address for outbound emails",
    )
    mail_from_name: str = Field(
        default="Help Out With Us",
        description="Display name for outbound emails",
    )
    mailjet_api_url: str = Field(
        default="https://api.mailjet.com/v3.1/send",
        description="Mailjet send endpoint",
    )
    mailjet_api_key_public: SecretStr | None = Field(
        default=None,
        description="Mailjet public API key",
    )
    mailjet_api_key_private: SecretStr | None = Field(
        default=None,
        description="Mailjet private API key",
    )
    ses_template_prefix: str = Field(
        default="helpout-",
        description="Prefix joined with the numeric template id to name SES templates",
    )
    ses_configuration_set: str | None = Field(
        default=None,
        description="SES configuration set for tracking",
    )
    ses_endpoint_url: str | None = Field(
        default=None,
        description="SES endpoint URL (for local development)",
    )
    aws_region: str = Field(
        default="us-west-2",
        description="AWS region",
    )

    # Reminder Configuration
    personal_template_id: int = Field(
        default=349788,
        description="Template for the personal upcoming-spot digest",
    )
    unfilled_template_id: int = Field(
        default=477313,
        description="Template for the unfilled-spot alert",
    )
    admin_summary_template_id: int | None = Field(
        default=None,
        description="Template for the admin summary digest",
    )
    send_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound for a single notification send",
    )
    window_timezone: str | None = Field(
        default=None,
        description="IANA zone used to resolve the reminder day (process zone if unset)",
    )

    # Application Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def ses_config(self) -> dict:
        """
        SES client configuration.

        Socket timeouts match the per-send bound and retries are off.
        """
        config = {
            "region_name": self.aws_region,
            "config": BotoConfig(
                connect_timeout=self.send_timeout_seconds,
                read_timeout=self.send_timeout_seconds,
                retries={"total_max_attempts": 1},
            ),
        }
        if self.ses_endpoint_url:
            config["endpoint_url"] = self.ses_endpoint_url
        return config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are loaded only once.
    Call Settings.model_validate({}) in tests to override.
    """
    return Settings()

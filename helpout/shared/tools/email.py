"""
Email Template Tools

Senders that deliver a provider-side email template to a list of
recipients. Senders never raise for delivery problems: every failure is
reported through `SendResult.error` so callers can tally outcomes.
"""

import asyncio
import json
from dataclasses import dataclass, field
from email.utils import formataddr
from typing import Any, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError
import httpx
import structlog

from helpout.shared.config import Settings

log = structlog.get_logger()

NOT_CONFIGURED_ERROR = "Module not configured correctly."


@dataclass(frozen=True)
class EmailAddress:
    email: str
    name: str

    def formatted(self) -> str:
        """RFC 5322 mailbox, e.g. `Jane Doe <jane@example.com>`."""
        return formataddr((self.name, self.email))


@dataclass(frozen=True)
class TemplateMessage:
    """One templated email addressed to one or more recipients."""

    to: tuple[EmailAddress, ...]
    template_id: int
    variables: dict[str, Any] = field(default_factory=dict)
    cc: tuple[EmailAddress, ...] = ()

    @property
    def recipient_emails(self) -> list[str]:
        return [address.email for address in self.to]


@dataclass(frozen=True)
class SendResult:
    """
    Provider acknowledgement.

    `success` holds one flag per message attempted by the provider;
    `error` is set instead when the provider refused the request.
    """

    success: list[bool] | None = None
    error: str | None = None

    @property
    def delivered(self) -> bool:
        return self.error is None and bool(self.success) and all(self.success)


class TemplateSender(Protocol):
    async def send_template(self, message: TemplateMessage) -> SendResult: ...


class MailjetTemplateSender:
    """Sends templates through the Mailjet v3.1 send API."""

    def __init__(
        self,
        *,
        api_key_public: str | None,
        api_key_private: str | None,
        from_address: str,
        from_name: str,
        api_url: str = "https://api.mailjet.com/v3.1/send",
        timeout: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key_public = api_key_public
        self.api_key_private = api_key_private
        self.from_address = from_address
        self.from_name = from_name
        self.api_url = api_url
        self.timeout = timeout
        self.transport = transport

    def _build_payload(self, message: TemplateMessage) -> dict[str, Any]:
        return {
            "Messages": [
                {
                    "From": {"Email": self.from_address, "Name": self.from_name},
                    "To": [{"Email": a.email, "Name": a.name} for a in message.to],
                    "Cc": [{"Email": a.email, "Name": a.name} for a in message.cc],
                    "TemplateID": message.template_id,
                    "TemplateLanguage": True,
                    "Variables": message.variables,
                }
            ]
        }

    async def send_template(self, message: TemplateMessage) -> SendResult:
        if not self.api_key_public:
            log.error("mailjet_not_configured", missing="public_key")
            return SendResult(error=NOT_CONFIGURED_ERROR)
        if not self.api_key_private:
            log.error("mailjet_not_configured", missing="private_key")
            return SendResult(error=NOT_CONFIGURED_ERROR)

        log.info(
            "sending_mailjet_template",
            template_id=message.template_id,
            recipients=len(message.to),
        )

        try:
            async with httpx.AsyncClient(
                auth=(self.api_key_public, self.api_key_private),
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.post(self.api_url, json=self._build_payload(message))
        except httpx.HTTPError as e:
            log.error("mailjet_send_failed", template_id=message.template_id, error=str(e))
            return SendResult(error=str(e) or type(e).__name__)

        if response.is_error:
            error_message = _mailjet_error_message(response)
            log.error(
                "mailjet_send_rejected",
                template_id=message.template_id,
                status_code=response.status_code,
                error=error_message,
            )
            return SendResult(error=error_message)

        try:
            messages = response.json().get("Messages", [])
        except ValueError:
            return SendResult(error="Mailjet returned a non-JSON response")

        success = [m.get("Status") == "success" for m in messages]
        log.info("mailjet_template_sent", template_id=message.template_id, success=success)
        return SendResult(success=success)


def _mailjet_error_message(response: httpx.Response) -> str:
    """Pull the first human-readable error out of a Mailjet error body."""
    fallback = f"Mailjet responded with HTTP {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        return fallback

    if body.get("ErrorMessage"):
        return body["ErrorMessage"]
    for entry in body.get("Messages", []):
        for error in entry.get("Errors", []):
            if error.get("ErrorMessage"):
                return error["ErrorMessage"]
    return fallback


class SESTemplateSender:
    """
    Sends templates through SES `SendTemplatedEmail`.

    Numeric template ids map to SES template names `<prefix><id>`. The boto3
    call is blocking, so it runs in a worker thread.
    """

    def __init__(
        self,
        *,
        from_address: str,
        from_name: str,
        template_prefix: str = "helpout-",
        configuration_set: str | None = None,
        client: Any = None,
        client_config: dict | None = None,
    ) -> None:
        self.from_address = from_address
        self.from_name = from_name
        self.template_prefix = template_prefix
        self.configuration_set = configuration_set
        self._client = client
        self._client_config = client_config or {}

    def _get_client(self):
        """Get SES client."""
        if self._client is None:
            self._client = boto3.client("ses", **self._client_config)
        return self._client

    def template_name(self, template_id: int) -> str:
        return f"{self.template_prefix}{template_id}"

    def _send(self, message: TemplateMessage) -> SendResult:
        send_params: dict[str, Any] = {
            "Source": formataddr((self.from_name, self.from_address)),
            "Destination": {
                "ToAddresses": [a.formatted() for a in message.to],
                "CcAddresses": [a.formatted() for a in message.cc],
            },
            "Template": self.template_name(message.template_id),
            "TemplateData": json.dumps(message.variables),
        }
        if self.configuration_set:
            send_params["ConfigurationSetName"] = self.configuration_set

        log.info(
            "sending_ses_template",
            template=send_params["Template"],
            recipients=len(message.to),
        )

        try:
            response = self._get_client().send_templated_email(**send_params)
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            error_message = e.response["Error"]["Message"]
            log.error(
                "ses_templated_send_failed",
                template=send_params["Template"],
                error_code=error_code,
                error_message=error_message,
            )
            return SendResult(error=f"{error_code}: {error_message}")
        except BotoCoreError as e:
            log.error("ses_templated_send_failed", template=send_params["Template"], error=str(e))
            return SendResult(error=str(e))

        log.info(
            "ses_template_sent",
            message_id=response["MessageId"],
            template=send_params["Template"],
        )
        return SendResult(success=[True])

    async def send_template(self, message: TemplateMessage) -> SendResult:
        return await asyncio.to_thread(self._send, message)


def build_mail_sender(
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> TemplateSender:
    """Create the sender selected by `settings.mail_backend`."""
    if settings.mail_backend == "ses":
        return SESTemplateSender(
            from_address=settings.mail_from_address,
            from_name=settings.mail_from_name,
            template_prefix=settings.ses_template_prefix,
            configuration_set=settings.ses_configuration_set,
            client_config=settings.ses_config,
        )

    public = settings.mailjet_api_key_public
    private = settings.mailjet_api_key_private
    return MailjetTemplateSender(
        api_key_public=public.get_secret_value() if public else None,
        api_key_private=private.get_secret_value() if private else None,
        from_address=settings.mail_from_address,
        from_name=settings.mail_from_name,
        api_url=settings.mailjet_api_url,
        transport=transport,
    )

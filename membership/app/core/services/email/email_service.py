"""Outbound email delivery through an HTTP provider."""

import hashlib
import uuid

import httpx
from loguru import logger
from pydantic import BaseModel, Field

from membership.app.runtime.config.config_data import EmailConfig, SiteConfig


class EmailDispatchError(Exception):
    """Raised when the provider does not accept a message."""


class EmailMessage(BaseModel):
    to: str
    subject: str
    body: str
    html: bool = Field(default=True, description="Body is HTML rather than plain text")
    send_id: str = Field(
        default_factory=lambda: uuid.uuid4().hex,
        description="Identifies one send; resending this object reuses it",
    )


def _idempotency_key(message: EmailMessage) -> str:
    """Key scoped to one send, so identical text sent twice is delivered twice."""
    payload_hash = hashlib.sha256(
        "\x1f".join((message.send_id, message.to, message.subject, message.body)).encode(
            "utf-8"
        )
    ).hexdigest()
    return f"email:{payload_hash}"


class EmailService:
    """Sends mail via a SendGrid-shaped JSON API, or only logs it.

    The ``log`` provider is meant for development; nothing leaves the process.
    """

    def __init__(
        self,
        config: EmailConfig,
        site: SiteConfig,
        transport: httpx.BaseTransport | None = None,
    ):
        self._config = config
        self._site = site
        self._transport = transport

    @property
    def sender(self) -> str:
        return self._site.email

    def send(self, message: EmailMessage) -> None:
        if self._config.provider == "log":
            logger.info(
                "Email (log provider) to={to} subject={subject}",
                to=message.to,
                subject=message.subject,
            )
            return

        if not self._config.api_url or not self._config.api_key:
            raise EmailDispatchError("Email provider not configured")

        payload = {
            "from": {"email": self._site.email, "name": self._site.name},
            "personalizations": [{"to": [{"email": message.to}], "subject": message.subject}],
            "content": [
                {
                    "type": "text/html" if message.html else "text/plain",
                    "value": message.body,
                }
            ],
        }
        headers = {
            "Authorization": f"Bearer {self._config.api_key}",
            "Idempotency-Key": _idempotency_key(message),
            "Content-Type": "application/json",
            "User-Agent": "membership-api/email",
        }

        try:
            with httpx.Client(
                timeout=self._config.timeout_seconds, transport=self._transport
            ) as client:
                resp = client.post(self._config.api_url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("Email transport error to={to}: {err}", to=message.to, err=str(exc))
            raise EmailDispatchError(str(exc)) from exc

        if 200 <= resp.status_code < 300:
            logger.debug("Email accepted to={to}", to=message.to)
            return

        raise EmailDispatchError(
            f"Email send failed {resp.status_code}: {resp.text[:200]}"
        )

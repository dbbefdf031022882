from __future__ import annotations

from membership.app.core.services.email import (
    EmailDispatchError,
    EmailMessage,
    EmailService,
)
from membership.app.runtime.config.config_data import EmailConfig, SiteConfig


class RecordingEmailService(EmailService):
    """Keeps sent messages in memory; set ``fail`` to simulate a provider outage."""

    def __init__(self, fail: bool = False):
        super().__init__(EmailConfig(provider="log"), SiteConfig())
        self.sent: list[EmailMessage] = []
        self.fail = fail

    def send(self, message: EmailMessage) -> None:
        if self.fail:
            raise EmailDispatchError("provider unavailable")
        self.sent.append(message)

    def sent_to(self, address: str) -> list[EmailMessage]:
        return [message for message in self.sent if message.to == address]

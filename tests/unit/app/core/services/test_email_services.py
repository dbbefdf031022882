"""Email delivery, templates and notification records."""

import json

import httpx
import pytest
from sqlmodel import Session

from membership.app.core.errors import DispatchFailureError
from membership.app.core.services import (
    AuditService,
    EmailTemplates,
    NotificationService,
    ReferralService,
)
from membership.app.core.services.email import EmailDispatchError, EmailMessage, EmailService
from membership.app.entities import NotificationRepository
from membership.app.entities.core.user import User
from membership.app.runtime.config.config_data import EmailConfig, SiteConfig
from tests.fixtures.dummies import RecordingEmailService

API_URL = "https://mail.example.com/v3/mail/send"


def _http_service(handler) -> EmailService:
    return EmailService(
        EmailConfig(provider="http", api_url=API_URL, api_key="key-123"),
        SiteConfig(name="Registry", email="noreply@registry.test"),
        transport=httpx.MockTransport(handler),
    )


class TestEmailService:
    def test_log_provider_sends_nothing(self):
        service = EmailService(EmailConfig(provider="log"), SiteConfig())
        service.send(EmailMessage(to="a@x.com", subject="hi", body="<p>hi</p>"))

    def test_http_provider_posts_message(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(202)

        _http_service(handler).send(EmailMessage(to="a@x.com", subject="Hello", body="<p>x</p>"))

        [request] = seen
        assert str(request.url) == API_URL
        assert request.headers["Authorization"] == "Bearer key-123"
        assert request.headers["Idempotency-Key"].startswith("email:")
        payload = json.loads(request.content)
        assert payload["from"] == {"email": "noreply@registry.test", "name": "Registry"}
        assert payload["personalizations"][0]["to"] == [{"email": "a@x.com"}]
        assert payload["personalizations"][0]["subject"] == "Hello"
        assert payload["content"][0] == {"type": "text/html", "value": "<p>x</p>"}

    def test_same_message_same_idempotency_key(self):
        keys: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            keys.append(request.headers["Idempotency-Key"])
            return httpx.Response(200)

        service = _http_service(handler)
        message = EmailMessage(to="a@x.com", subject="s", body="b")
        service.send(message)
        service.send(message)
        service.send(EmailMessage(to="b@x.com", subject="s", body="b"))

        assert keys[0] == keys[1]
        assert keys[2] != keys[0]

    def test_separate_sends_of_same_text_get_distinct_keys(self):
        keys: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            keys.append(request.headers["Idempotency-Key"])
            return httpx.Response(202)

        service = _http_service(handler)
        for _ in range(2):
            service.send(EmailMessage(to="a@x.com", subject="s", body="b"))

        assert keys[0] != keys[1]

    def test_provider_rejection(self):
        service = _http_service(lambda request: httpx.Response(401, text="bad key"))
        with pytest.raises(EmailDispatchError, match="401"):
            service.send(EmailMessage(to="a@x.com", subject="s", body="b"))

    def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(EmailDispatchError):
            _http_service(handler).send(EmailMessage(to="a@x.com", subject="s", body="b"))

    def test_http_provider_requires_credentials(self):
        service = EmailService(EmailConfig(provider="http"), SiteConfig())
        with pytest.raises(EmailDispatchError, match="not configured"):
            service.send(EmailMessage(to="a@x.com", subject="s", body="b"))


class TestTemplates:
    def test_values_are_escaped(self):
        templates = EmailTemplates("Registry")
        subject, body = templates.referral_outcome("<b>Acme</b>", "Tom & Jerry")

        assert subject == "Registry: membership application update"
        assert "&lt;b&gt;Acme&lt;/b&gt;" in body
        assert "Tom &amp; Jerry" in body

    def test_referee_alert_links(self):
        _, body = EmailTemplates("Registry").referee_alert(
            "Acme", "https://app/refer/u1", "https://app/refer/u1"
        )
        assert body.count('href="https://app/refer/u1"') == 2


class TestNotificationService:
    def test_notify_records_and_emails(
        self,
        notification_service: NotificationService,
        applicant: User,
        email_service: RecordingEmailService,
        session: Session,
    ):
        notification_service.notify(applicant, "Your referee has confirmed you")
        session.commit()

        [stored] = notification_service.for_user(applicant.id)
        assert stored.message == "Your referee has confirmed you"
        [message] = email_service.sent_to(applicant.email)
        assert "Your referee has confirmed you" in message.body
        assert "Acme Ltd" in message.body

    def test_notify_without_record(
        self,
        notification_service: NotificationService,
        applicant: User,
        email_service: RecordingEmailService,
    ):
        notification_service.notify(applicant, "hello", record=False)

        assert notification_service.for_user(applicant.id) == []
        assert len(email_service.sent) == 1

    def test_dispatch_failure_is_domain_error(
        self,
        notification_service: NotificationService,
        applicant: User,
        email_service: RecordingEmailService,
    ):
        email_service.fail = True
        with pytest.raises(DispatchFailureError):
            notification_service.notify(applicant, "hello")
        # the record is kept even though the email failed
        assert len(notification_service.for_user(applicant.id)) == 1

    def test_purge_user(
        self,
        notification_service: NotificationService,
        applicant: User,
        session: Session,
    ):
        notification_service.record(applicant.id, "one")
        notification_service.record(applicant.id, "two")
        session.commit()

        assert notification_service.purge_user(applicant.id) == 2
        assert NotificationRepository(session).list_for_user(applicant.id) == []


def test_repeated_referral_outcome_emails_are_not_merged(
    session: Session,
    applicant: User,
    email_templates: EmailTemplates,
):
    keys: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        keys.append(request.headers["Idempotency-Key"])
        return httpx.Response(202)

    referrals = ReferralService(
        session,
        NotificationService(session, _http_service(handler), email_templates),
        AuditService(session),
    )
    referrals.confirm(applicant.id, "a@x.com")
    referrals.reject(applicant.id, "a@x.com")
    referrals.confirm(applicant.id, "a@x.com")

    assert len(keys) == 3
    assert len(set(keys)) == 3

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from membership.app.core.errors import DispatchFailureError
from membership.app.core.services.email import (
    EmailDispatchError,
    EmailMessage,
    EmailService,
    EmailTemplates,
)
from membership.app.entities.core.notification.entity import Notification
from membership.app.entities.core.notification.repository import NotificationRepository
from membership.app.entities.core.user.entity import User


class NotificationService:
    """In-app notification record plus an email to the user."""

    def __init__(
        self,
        db_session: Session,
        email_service: EmailService,
        templates: EmailTemplates,
    ):
        self._db_session = db_session
        self._repo = NotificationRepository(db_session)
        self._email = email_service
        self._templates = templates

    def record(self, user_id: str, message: str) -> Notification | None:
        """Store a notification row.

        A failed insert is logged and swallowed; the email still goes out.
        """
        try:
            with self._db_session.begin_nested():
                return self._repo.create(Notification(user_id=user_id, message=message))
        except SQLAlchemyError as exc:
            logger.error(
                "Failed to record notification for user {user_id}: {err}",
                user_id=user_id,
                err=str(exc),
            )
            return None

    def notify(self, user: User, message: str, *, record: bool = True) -> None:
        """Record and email ``message`` to ``user``.

        Raises:
            DispatchFailureError: If the email provider fails
        """
        if record:
            self.record(user.id, message)

        subject, body = self._templates.referral_outcome(user.company, message)
        self.send_email(user.email, subject, body)

    def send_email(self, to: str, subject: str, body: str) -> None:
        try:
            self._email.send(EmailMessage(to=to, subject=subject, body=body))
        except EmailDispatchError as exc:
            logger.error("Email dispatch to {to} failed: {err}", to=to, err=str(exc))
            raise DispatchFailureError() from exc

    def for_user(self, user_id: str) -> list[Notification]:
        return self._repo.list_for_user(user_id)

    def purge_user(self, user_id: str) -> int:
        return self._repo.delete_for_user(user_id)

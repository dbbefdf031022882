"""Notification repository for data access operations."""

from sqlalchemy import delete
from sqlmodel import Session, select

from membership.app.entities.core.notification.entity import Notification
from membership.app.entities.core.notification.table import NotificationTable


class NotificationRepository:
    """Data-access layer for notifications."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, notification: Notification) -> Notification:
        row = NotificationTable(**notification.model_dump())
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Notification.model_validate(row, from_attributes=True)

    def list_for_user(self, user_id: str) -> list[Notification]:
        statement = (
            select(NotificationTable)
            .where(NotificationTable.user_id == user_id)
            .order_by(NotificationTable.created_at)
        )
        return [
            Notification.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement).all()
        ]

    def delete_for_user(self, user_id: str) -> int:
        statement = delete(NotificationTable).where(NotificationTable.user_id == user_id)
        return self._session.connection().execute(statement).rowcount

"""Notification database table model."""

from sqlmodel import Field

from membership.app.entities.core._base import EntityTable


class NotificationTable(EntityTable, table=True):
    """Database persistence model for notifications."""

    __tablename__ = "notifications"

    user_id: str = Field(index=True)
    message: str
    read: bool = Field(default=False)

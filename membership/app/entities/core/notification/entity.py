"""Notification domain entity."""

from pydantic import Field

from membership.app.entities.core._base import Entity


class Notification(Entity):
    """In-app message addressed to a single user."""

    user_id: str = Field(description="Recipient user id")
    message: str = Field(description="Notification text")
    read: bool = Field(default=False, description="Has the user seen it")

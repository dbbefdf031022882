"""Audit log domain entity."""

from pydantic import Field

from membership.app.entities.core._base import Entity


class AuditLog(Entity):
    """Record of who changed what."""

    category: str = Field(description="Area of the system, e.g. 'user'")
    actor: str = Field(description="Who performed the action")
    message: str = Field(description="Human readable description")

"""Audit log database table model."""

from sqlmodel import Field

from membership.app.entities.core._base import EntityTable


class AuditLogTable(EntityTable, table=True):
    """Database persistence model for audit entries."""

    __tablename__ = "audit_logs"

    category: str = Field(index=True)
    actor: str
    message: str

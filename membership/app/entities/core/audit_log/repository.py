"""Audit log repository for data access operations."""

from sqlmodel import Session, select

from membership.app.entities.core.audit_log.entity import AuditLog
from membership.app.entities.core.audit_log.table import AuditLogTable


class AuditLogRepository:
    """Data-access layer for audit entries."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, entry: AuditLog) -> AuditLog:
        row = AuditLogTable(**entry.model_dump())
        self._session.add(row)
        self._session.flush()
        return AuditLog.model_validate(row, from_attributes=True)

    def list_by_category(self, category: str) -> list[AuditLog]:
        statement = (
            select(AuditLogTable)
            .where(AuditLogTable.category == category)
            .order_by(AuditLogTable.created_at)
        )
        return [
            AuditLog.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement).all()
        ]

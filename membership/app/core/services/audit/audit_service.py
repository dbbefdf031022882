from loguru import logger
from sqlmodel import Session

from membership.app.entities.core.audit_log.entity import AuditLog
from membership.app.entities.core.audit_log.repository import AuditLogRepository


class AuditService:
    """Writes audit entries in the caller's session."""

    def __init__(self, db_session: Session):
        self._repo = AuditLogRepository(db_session)

    def log(self, category: str, message: str, actor: str) -> AuditLog:
        entry = self._repo.create(AuditLog(category=category, actor=actor, message=message))
        logger.bind(category=category, actor=actor).info(f"audit: {message}")
        return entry

    def entries(self, category: str) -> list[AuditLog]:
        return self._repo.list_by_category(category)

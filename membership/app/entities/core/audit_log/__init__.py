"""Entity package: AuditLog."""

from .entity import AuditLog
from .repository import AuditLogRepository
from .table import AuditLogTable

__all__ = ["AuditLog", "AuditLogRepository", "AuditLogTable"]

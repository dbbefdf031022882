"""Entities organized by business concept.

Each entity has its own package containing:
- entity.py: Domain model with business logic
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .core.audit_log import AuditLog, AuditLogRepository, AuditLogTable
from .core.notification import Notification, NotificationRepository, NotificationTable
from .core.user import User, UserRepository, UserTable

__all__ = [
    "AuditLog",
    "AuditLogRepository",
    "AuditLogTable",
    "Notification",
    "NotificationRepository",
    "NotificationTable",
    "User",
    "UserRepository",
    "UserTable",
]

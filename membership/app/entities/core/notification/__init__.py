"""Entity package: Notification."""

from .entity import Notification
from .repository import NotificationRepository
from .table import NotificationTable

__all__ = ["Notification", "NotificationRepository", "NotificationTable"]

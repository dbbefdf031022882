from .user_management import UserManagementService

__all__ = ["UserManagementService"]

"""Core services exports."""

# Blob storage for uploads
from membership.app.core.storage.blob_storage import (
    AzureBlobStorage,
    InMemoryBlobStorage,
)

# Audit
from .audit.audit_service import AuditService

# Database Service
from .database.db_session import DbSessionService

# Email
from .email.email_service import EmailService
from .email.templates import EmailTemplates

# JWT Services
from .jwt.jwt_gen import JwtGeneratorService
from .jwt.jwt_verify import JwtVerificationService

# Notifications
from .notification.notification_service import NotificationService

# Referral engine
from .referral.referral_service import ReferralOutcome, ReferralService

# User Services
from .user.user_management import UserManagementService

__all__ = [
    # JWT Services
    "JwtGeneratorService",
    "JwtVerificationService",
    # Email and notifications
    "EmailService",
    "EmailTemplates",
    "NotificationService",
    # Audit
    "AuditService",
    # Referral engine
    "ReferralOutcome",
    "ReferralService",
    # User Services
    "UserManagementService",
    # Blob storage
    "AzureBlobStorage",
    "InMemoryBlobStorage",
    # Database Service
    "DbSessionService",
]

from .email_service import EmailDispatchError, EmailMessage, EmailService
from .templates import EmailTemplates

__all__ = ["EmailDispatchError", "EmailMessage", "EmailService", "EmailTemplates"]

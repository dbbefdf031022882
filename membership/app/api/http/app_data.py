from dataclasses import dataclass

from membership.app.core.services import (
    DbSessionService,
    EmailService,
    EmailTemplates,
    JwtGeneratorService,
    JwtVerificationService,
)
from membership.app.core.storage import BlobStorage


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    jwt_generation_service: JwtGeneratorService
    jwt_verify_service: JwtVerificationService
    email_service: EmailService
    email_templates: EmailTemplates
    blob_storage: BlobStorage

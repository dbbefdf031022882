"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends, Request
from sqlmodel import Session

from membership.app.api.http.app_data import ApplicationDependencies
from membership.app.core.errors import InvalidTokenError
from membership.app.core.models.claims import TokenClaims
from membership.app.core.services import (
    AuditService,
    EmailService,
    EmailTemplates,
    JwtGeneratorService,
    JwtVerificationService,
    NotificationService,
    ReferralService,
    UserManagementService,
)
from membership.app.core.services.jwt import ACCESS_PURPOSE
from membership.app.core.storage import BlobStorage
from membership.app.runtime.context import get_config


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_db_session(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> Generator[Session]:
    """Open a database session for the duration of one request."""
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_jwt_generation_service(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> JwtGeneratorService:
    return app_deps.jwt_generation_service


def get_jwt_verify_service(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> JwtVerificationService:
    return app_deps.jwt_verify_service


def get_email_service(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> EmailService:
    return app_deps.email_service


def get_email_templates(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> EmailTemplates:
    return app_deps.email_templates


def get_blob_storage(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> BlobStorage:
    return app_deps.blob_storage


def get_audit_service(db_session: Session = Depends(get_db_session)) -> AuditService:
    return AuditService(db_session)


def get_notification_service(
    db_session: Session = Depends(get_db_session),
    email_service: EmailService = Depends(get_email_service),
    templates: EmailTemplates = Depends(get_email_templates),
) -> NotificationService:
    return NotificationService(db_session, email_service, templates)


def get_referral_service(
    db_session: Session = Depends(get_db_session),
    notification_service: NotificationService = Depends(get_notification_service),
    audit_service: AuditService = Depends(get_audit_service),
) -> ReferralService:
    """Get the referral confirmation engine."""
    return ReferralService(db_session, notification_service, audit_service)


def get_user_management_service(
    db_session: Session = Depends(get_db_session),
    jwt_generator: JwtGeneratorService = Depends(get_jwt_generation_service),
    jwt_verifier: JwtVerificationService = Depends(get_jwt_verify_service),
    notification_service: NotificationService = Depends(get_notification_service),
    templates: EmailTemplates = Depends(get_email_templates),
    blob_storage: BlobStorage = Depends(get_blob_storage),
    audit_service: AuditService = Depends(get_audit_service),
) -> UserManagementService:
    """Get the User Management service instance."""
    return UserManagementService(
        db_session,
        jwt_generator,
        jwt_verifier,
        notification_service,
        templates,
        blob_storage,
        audit_service,
        get_config().storage,
    )


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header.split(" ", 1)[1].strip() or None


def get_current_claims(
    request: Request,
    jwt_verify: JwtVerificationService = Depends(get_jwt_verify_service),
) -> TokenClaims:
    """Authenticate the request using a Bearer access token."""
    token = _bearer_token(request)
    if token is None:
        raise InvalidTokenError("Missing Bearer token")

    claims = jwt_verify.verify_jwt(token, expected_purpose=ACCESS_PURPOSE)
    request.state.claims = claims
    request.state.roles = set(claims.roles)
    return claims


def get_optional_claims(
    request: Request,
    jwt_verify: JwtVerificationService = Depends(get_jwt_verify_service),
) -> TokenClaims | None:
    """Claims of the caller when a valid Bearer token is present."""
    token = _bearer_token(request)
    if token is None:
        return None
    try:
        return jwt_verify.verify_jwt(token, expected_purpose=ACCESS_PURPOSE)
    except InvalidTokenError:
        return None

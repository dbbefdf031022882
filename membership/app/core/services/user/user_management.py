import hmac
import os
import uuid

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from membership.app.core.errors import (
    DispatchFailureError,
    DuplicateEmailError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingParameterError,
    NotFoundError,
    PersistenceError,
    ValidationFailureError,
)
from membership.app.core.models.claims import TokenClaims
from membership.app.core.models.user import LoginResult, UserCreate, UserCreated, UserUpdate
from membership.app.core.security import (
    hash_password,
    membership_id_from_email,
    normalize_email,
    password_fingerprint,
    verify_password,
)
from membership.app.core.services.audit import AuditService
from membership.app.core.services.email import EmailTemplates
from membership.app.core.services.jwt import (
    PASSWORD_RESET_PURPOSE,
    JwtGeneratorService,
    JwtVerificationService,
)
from membership.app.core.services.notification import NotificationService
from membership.app.core.storage import BlobStorage, BlobStorageError
from membership.app.entities.core.user.entity import User
from membership.app.entities.core.user.repository import UserRepository
from membership.app.runtime.config.config_data import StorageConfig

# bcrypt only considers the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72

_ADMIN_ONLY_FIELDS = {"role", "membership_status", "membership_fee"}
_NOT_UPDATABLE_FIELDS = {"id", "password", "confirm_password"}
# Backed by NOT NULL columns; an explicit null means "leave unchanged"
_NON_NULLABLE_FIELDS = {"email", "role", "membership_status", "membership_fee"}


def _check_password_pair(
    password: str | None, confirm_password: str | None, message: str
) -> str:
    if not password or password != confirm_password:
        raise ValidationFailureError(message)
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationFailureError("Password is too long")
    return password


class UserManagementService:
    """User lifecycle: registration, profile edits, deletion, credentials."""

    def __init__(
        self,
        db_session: Session,
        jwt_generator: JwtGeneratorService,
        jwt_verifier: JwtVerificationService,
        notification_service: NotificationService,
        templates: EmailTemplates,
        blob_storage: BlobStorage,
        audit_service: AuditService,
        storage_config: StorageConfig,
    ):
        self._db_session = db_session
        self._user_repo = UserRepository(db_session)
        self._jwt_generator = jwt_generator
        self._jwt_verifier = jwt_verifier
        self._notifications = notification_service
        self._templates = templates
        self._blobs = blob_storage
        self._audit = audit_service
        self._storage_config = storage_config

    def _commit(self) -> None:
        try:
            self._db_session.commit()
        except SQLAlchemyError as exc:
            self._db_session.rollback()
            logger.exception("Database commit failed: {err}", err=str(exc))
            raise PersistenceError() from exc

    def _require_user(self, user_id: str | None) -> User:
        if not user_id:
            raise MissingParameterError("No User id provided!")
        user = self._user_repo.get(user_id)
        if user is None:
            raise NotFoundError()
        return user

    @staticmethod
    def _ensure_owner_or_admin(user: User, actor: TokenClaims) -> None:
        if actor.subject != user.id and not actor.is_admin:
            raise ForbiddenError()

    def _delete_blob(self, url: str) -> None:
        name = self._blobs.name_from_url(url)
        try:
            self._blobs.delete(name)
        except BlobStorageError as exc:
            logger.error("Failed to delete blob {name}: {err}", name=name, err=str(exc))

    def create(self, payload: UserCreate) -> UserCreated:
        """Register a new applicant.

        Raises:
            ValidationFailureError: Password and confirmation differ
            DuplicateEmailError: Email already registered
        """
        password = _check_password_pair(
            payload.password,
            payload.confirm_password,
            "Passwords doesn't match, What a shame!",
        )

        email = normalize_email(payload.email)
        if self._user_repo.email_exists(email):
            raise DuplicateEmailError()

        fields = payload.model_dump(exclude={"email", "password", "confirm_password"})
        user = User(
            **fields,
            email=email,
            password=hash_password(password),
            membership_id=membership_id_from_email(email),
        )

        try:
            created = self._user_repo.create(user)
        except SQLAlchemyError as exc:
            self._db_session.rollback()
            logger.exception("Failed to create user {email}", email=email)
            raise PersistenceError() from exc
        self._commit()
        logger.info("Registered user {user_id}", user_id=created.id)

        subject, body = self._templates.registration_started(created.company)
        try:
            self._notifications.send_email(created.email, subject, body)
        except DispatchFailureError:
            logger.warning("Registration email to {email} not sent", email=created.email)

        return UserCreated(email=created.email, id=created.id, role=created.role)

    def update(self, user_id: str | None, changes: UserUpdate, actor: TokenClaims) -> User:
        user = self._require_user(user_id)
        self._ensure_owner_or_admin(user, actor)

        requested = changes.model_dump(exclude_unset=True)
        updates = {
            key: value
            for key, value in requested.items()
            if key not in _NOT_UPDATABLE_FIELDS
            and (key not in _ADMIN_ONLY_FIELDS or actor.is_admin)
            and not (key in _NON_NULLABLE_FIELDS and value is None)
        }

        if "email" in updates:
            if not updates["email"]:
                updates.pop("email")
            else:
                updates["email"] = normalize_email(updates["email"])
                if self._user_repo.email_exists(updates["email"], exclude_id=user.id):
                    raise DuplicateEmailError()

        if "password" in requested and requested["password"] is not None:
            password = _check_password_pair(
                requested["password"],
                requested.get("confirm_password"),
                "Passwords doesn't match, What a shame!",
            )
            updates["password"] = hash_password(password)

        stale_image = None
        if "profile_image" in updates and user.profile_image:
            if user.profile_image != updates["profile_image"]:
                stale_image = user.profile_image

        updated = user.model_copy(update=updates)
        try:
            saved = self._user_repo.update(updated)
            self._audit.log(
                "user", f"{actor.email or actor.subject} edited {saved.company}", actor.subject
            )
        except SQLAlchemyError as exc:
            self._db_session.rollback()
            logger.exception("Failed to update user {user_id}", user_id=user.id)
            raise PersistenceError() from exc
        self._commit()

        if stale_image:
            self._delete_blob(stale_image)

        logger.info("User {user_id} updated by {actor}", user_id=user.id, actor=actor.subject)
        return saved

    def delete(self, user_id: str | None, actor: TokenClaims) -> None:
        user = self._require_user(user_id)
        self._ensure_owner_or_admin(user, actor)

        try:
            self._notifications.purge_user(user.id)
            self._user_repo.delete(user.id)
            self._audit.log(
                "user", f"{actor.email or actor.subject} deleted {user.company}", actor.subject
            )
        except SQLAlchemyError as exc:
            self._db_session.rollback()
            logger.exception("Failed to delete user {user_id}", user_id=user.id)
            raise PersistenceError() from exc
        self._commit()

        if user.profile_image:
            self._delete_blob(user.profile_image)

        logger.info("User {user_id} deleted by {actor}", user_id=user.id, actor=actor.subject)

    def get(self, user_id: str) -> User:
        return self._require_user(user_id)

    def list_users(self) -> list[User]:
        return self._user_repo.list_all()

    def count(self) -> int:
        return self._user_repo.count()

    def forgot_password(self, email: str | None, url: str | None) -> None:
        """Email a password reset link.

        The link is ``url?token=<jwt>``; the token carries a fingerprint of the
        current password hash so it stops working once the password changes.
        """
        if not email:
            raise MissingParameterError("No user email provided!")

        user = self._user_repo.get_by_email(email)
        if user is None:
            raise NotFoundError("No User with such email existing")

        token = self._jwt_generator.generate_reset_token(
            user.id, user.email, password_fingerprint(user.password)
        )
        link = f"{url or ''}?token={token}"
        subject, body = self._templates.password_reset(link)
        try:
            self._notifications.send_email(user.email, subject, body)
        except DispatchFailureError as exc:
            raise DispatchFailureError(
                "There was an error while sending your password reset email."
            ) from exc
        logger.info("Password reset issued for user {user_id}", user_id=user.id)

    def change_password(
        self,
        token: str | None,
        password: str | None,
        confirm_password: str | None,
        actor: str | None = None,
    ) -> None:
        if not token:
            raise MissingParameterError("No token provided!")

        claims = self._jwt_verifier.verify_jwt(token, expected_purpose=PASSWORD_RESET_PURPOSE)
        user = self._user_repo.get(claims.subject)
        if user is None:
            raise InvalidTokenError()

        fingerprint = str(claims.custom_claims.get("pwd", ""))
        if not hmac.compare_digest(fingerprint, password_fingerprint(user.password)):
            raise InvalidTokenError()

        new_password = _check_password_pair(
            password, confirm_password, "Password doesn't match, What a shame!"
        )

        try:
            self._user_repo.update(
                user.model_copy(update={"password": hash_password(new_password)})
            )
            self._audit.log(
                "user", f"{actor or claims.email} changed password", actor or user.id
            )
        except SQLAlchemyError as exc:
            self._db_session.rollback()
            logger.exception("Failed to change password for user {user_id}", user_id=user.id)
            raise PersistenceError() from exc
        self._commit()
        logger.info("Password changed for user {user_id}", user_id=user.id)

    def login(self, email: str | None, password: str | None) -> LoginResult:
        if not email or not password:
            raise InvalidCredentialsError()

        user = self._user_repo.get_by_email(email)
        if user is None or not verify_password(password, user.password):
            logger.info("Failed login for {email}", email=normalize_email(email))
            raise InvalidCredentialsError()

        token = self._jwt_generator.generate_access_token(
            user_id=user.id, email=user.email, roles=[user.role.value]
        )
        return LoginResult(token=token, id=user.id, email=user.email, role=user.role)

    def validate_referee(self, email: str | None) -> User:
        referee = self._user_repo.get_active_paid_by_email(email) if email else None
        if referee is None:
            raise NotFoundError("The referee is either invalid or not fully paid")
        return referee

    def alert_referees(self, user_id: str | None, referrer_url: str | None) -> None:
        """Ask both referees to approve or reject, then tell the applicant.

        Referee emails are best-effort; only the applicant email decides success.
        """
        user = self._require_user(user_id)
        action_url = f"{referrer_url or ''}{user.id}"

        subject, body = self._templates.referee_alert(user.company, action_url, action_url)
        for referee in (user.referrer1, user.referrer2):
            if not referee:
                continue
            try:
                self._notifications.send_email(referee, subject, body)
            except DispatchFailureError:
                logger.warning("Referee alert to {referee} not sent", referee=referee)

        subject, body = self._templates.referral_process_started(user.company)
        self._notifications.send_email(user.email, subject, body)
        logger.info("Referees alerted for user {user_id}", user_id=user.id)

    def upload_image(
        self, filename: str | None, data: bytes, content_type: str | None = None
    ) -> str:
        """Store an uploaded file under a fresh name and return its URL."""
        if not data:
            raise ValidationFailureError("No file uploaded!")
        if len(data) > self._storage_config.max_upload_bytes:
            raise ValidationFailureError("File too large")

        extension = os.path.splitext(filename or "")[1].lower()
        name = f"{uuid.uuid4()}{extension}"
        try:
            url = self._blobs.upload(name, data, content_type)
        except BlobStorageError as exc:
            logger.error("Upload of {name} failed: {err}", name=name, err=str(exc))
            raise PersistenceError("File upload failed") from exc
        logger.info("Uploaded file {name}", name=name)
        return url

"""Referral confirmation engine.

A referee confirms or rejects an applicant who nominated them. The flag
for the referee's slot is flipped with a single conditional UPDATE so that
concurrent duplicate calls change state (and notify the applicant) once.
"""

from dataclasses import dataclass
from typing import Literal

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from membership.app.core.errors import (
    DispatchFailureError,
    MissingParameterError,
    NotFoundError,
    PersistenceError,
    RefereeMismatchError,
)
from membership.app.core.services.audit import AuditService
from membership.app.core.services.notification import NotificationService
from membership.app.entities.core.user.entity import User
from membership.app.entities.core.user.repository import Slot, UserRepository

Action = Literal["confirm", "reject"]

_ORDINAL = {1: "first", 2: "second"}
_VERB = {"confirm": "confirmed", "reject": "rejected"}


def outcome_message(action: Action, slot: Slot) -> str:
    return (
        f"Your membership application has been {_VERB[action]} "
        f"by your {_ORDINAL[slot]} referee."
    )


def _normalize(value: str | None) -> str:
    return (value or "").strip().lower()


def resolve_slot(user: User, referee_id: str) -> Slot | None:
    """Which referrer slot ``referee_id`` occupies; slot 1 wins a tie."""
    referee = _normalize(referee_id)
    if not referee:
        return None
    if _normalize(user.referrer1) == referee:
        return 1
    if _normalize(user.referrer2) == referee:
        return 2
    return None


@dataclass(frozen=True)
class ReferralOutcome:
    user_id: str
    slot: Slot
    action: Action
    message: str
    referred1: bool
    referred2: bool
    fully_referred: bool
    changed: bool


class ReferralService:
    def __init__(
        self,
        db_session: Session,
        notification_service: NotificationService,
        audit_service: AuditService,
    ):
        self._db_session = db_session
        self._user_repo = UserRepository(db_session)
        self._notifications = notification_service
        self._audit = audit_service

    def confirm(self, user_id: str | None, referee_id: str | None) -> ReferralOutcome:
        return self._apply(user_id, referee_id, "confirm")

    def reject(self, user_id: str | None, referee_id: str | None) -> ReferralOutcome:
        return self._apply(user_id, referee_id, "reject")

    def list_pending(self, user_id: str | None = None) -> User | list[User]:
        """Users with at least one outstanding referee response."""
        if user_id:
            user = self._user_repo.get(user_id)
            if user is None or user.fully_referred:
                raise NotFoundError()
            return user
        return self._user_repo.list_pending()

    def _apply(
        self, user_id: str | None, referee_id: str | None, action: Action
    ) -> ReferralOutcome:
        if not user_id or not user_id.strip() or not referee_id or not referee_id.strip():
            raise MissingParameterError()

        user = self._user_repo.get(user_id)
        if user is None:
            raise NotFoundError()

        slot = resolve_slot(user, referee_id)
        if slot is None:
            logger.warning(
                "Referee {referee} is not a referrer of user {user_id}",
                referee=referee_id,
                user_id=user_id,
            )
            raise RefereeMismatchError()

        target = action == "confirm"
        stored_referee = user.referrer1 if slot == 1 else user.referrer2
        message = outcome_message(action, slot)

        try:
            updated = self._user_repo.set_referral_flag(user_id, slot, stored_referee, target)
            if updated:
                self._audit.log(
                    "referrer", f"{referee_id} {_VERB[action]} {user.company}", referee_id
                )
            self._db_session.commit()
        except SQLAlchemyError as exc:
            self._db_session.rollback()
            logger.exception(
                "Failed to {action} user {user_id}: {err}",
                action=action,
                user_id=user_id,
                err=str(exc),
            )
            # The applicant still hears about the referee's decision.
            try:
                self._notifications.notify(user, message, record=False)
            except DispatchFailureError:
                logger.warning(
                    "Dispatch after failed update also failed for user {user_id}",
                    user_id=user_id,
                )
            raise PersistenceError() from exc

        current = self._user_repo.get(user_id, refresh=True)
        if current is None:
            raise NotFoundError()

        if updated:
            logger.info(
                "Referee slot {slot} {verb} user {user_id}",
                slot=slot,
                verb=_VERB[action],
                user_id=user_id,
            )
            self._notifications.record(user_id, message)
            try:
                self._db_session.commit()
            except SQLAlchemyError as exc:
                self._db_session.rollback()
                logger.error(
                    "Failed to store notification for user {user_id}: {err}",
                    user_id=user_id,
                    err=str(exc),
                )
            self._notifications.notify(current, message, record=False)
        else:
            logger.debug(
                "Referral {action} for user {user_id} slot {slot} already applied",
                action=action,
                user_id=user_id,
                slot=slot,
            )

        return ReferralOutcome(
            user_id=user_id,
            slot=slot,
            action=action,
            message=message,
            referred1=current.referred1,
            referred2=current.referred2,
            fully_referred=current.fully_referred,
            changed=bool(updated),
        )

"""User repository for data access operations."""

from datetime import UTC, datetime
from typing import Literal

from sqlalchemy import func, or_, update
from sqlmodel import Session, select

from membership.app.entities.core.user.entity import (
    MembershipFee,
    MembershipStatus,
    Role,
    User,
)
from membership.app.entities.core.user.table import UserTable

Slot = Literal[1, 2]

_IMMUTABLE_FIELDS = {"id", "created_at", "updated_at"}


class UserRepository:
    """Data-access layer for users."""

    def __init__(self, session: Session) -> None:
        self._session = session

    @staticmethod
    def _to_entity(row: UserTable) -> User:
        return User.model_validate(row, from_attributes=True)

    def get(self, user_id: str, *, refresh: bool = False) -> User | None:
        row = self._session.get(UserTable, user_id, populate_existing=refresh)
        if row is None:
            return None
        return self._to_entity(row)

    def get_by_email(self, email: str) -> User | None:
        statement = select(UserTable).where(
            func.lower(UserTable.email) == email.strip().lower()
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return self._to_entity(row)

    def email_exists(self, email: str, *, exclude_id: str | None = None) -> bool:
        statement = select(UserTable.id).where(
            func.lower(UserTable.email) == email.strip().lower()
        )
        if exclude_id is not None:
            statement = statement.where(UserTable.id != exclude_id)
        return self._session.exec(statement).first() is not None

    def get_active_paid_by_email(self, email: str) -> User | None:
        statement = select(UserTable).where(
            func.lower(UserTable.email) == email.strip().lower(),
            UserTable.membership_fee == MembershipFee.PAID.value,
            UserTable.membership_status == MembershipStatus.ACTIVE.value,
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return self._to_entity(row)

    def list_all(self) -> list[User]:
        rows = self._session.exec(select(UserTable).order_by(UserTable.created_at)).all()
        return [self._to_entity(row) for row in rows]

    def list_pending(self, role: Role | None = Role.USER) -> list[User]:
        """Users still waiting on at least one referee."""
        statement = select(UserTable).where(
            or_(UserTable.referred1 == False, UserTable.referred2 == False)  # noqa: E712
        )
        if role is not None:
            statement = statement.where(UserTable.role == role.value)
        rows = self._session.exec(statement.order_by(UserTable.created_at)).all()
        return [self._to_entity(row) for row in rows]

    def count(self) -> int:
        return self._session.exec(select(func.count()).select_from(UserTable)).one()

    def create(self, user: User) -> User:
        row = UserTable(**user.model_dump())
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return self._to_entity(row)

    def update(self, user: User) -> User:
        row = self._session.get(UserTable, user.id)
        if row is None:
            raise ValueError(f"User with id {user.id} not found")

        for key, value in user.model_dump(exclude=_IMMUTABLE_FIELDS).items():
            setattr(row, key, value)
        row.updated_at = datetime.now(UTC)

        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return self._to_entity(row)

    def delete(self, user_id: str) -> bool:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def set_referral_flag(
        self, user_id: str, slot: Slot, referee: str, value: bool
    ) -> int:
        """Compare-and-set a confirmation flag in a single UPDATE.

        The row only changes when the slot's referrer still equals ``referee``
        and the flag differs from ``value``. Returns the number of rows updated.
        """
        referrer_column = UserTable.referrer1 if slot == 1 else UserTable.referrer2
        flag_column = UserTable.referred1 if slot == 1 else UserTable.referred2

        statement = (
            update(UserTable)
            .where(
                UserTable.id == user_id,
                referrer_column == referee,
                flag_column != value,
            )
            .values({flag_column.key: value, "updated_at": datetime.now(UTC)})
        )
        result = self._session.connection().execute(statement)
        return result.rowcount

from __future__ import annotations

from collections.abc import Callable, Generator
from typing import Any

import pytest
from sqlmodel import Session

from membership.app.core.security import hash_password, membership_id_from_email
from membership.app.core.services.database.db_manage import DbManageService
from membership.app.core.services.database.db_session import DbSessionService
from membership.app.entities.core.user import User, UserRepository
from membership.app.runtime.config.config_data import (
    AppConfig,
    ConfigData,
    DatabaseConfig,
    EmailConfig,
    LoggingConfig,
    SecurityConfig,
    StorageConfig,
)
from membership.app.runtime.context import with_context

TEST_PASSWORD = "s3cret-passw0rd"


@pytest.fixture
def test_config() -> ConfigData:
    """In-memory database, cheap bcrypt, no outbound email or storage."""
    return ConfigData(
        app=AppConfig(environment="test", signing_secret="test-signing-secret-for-unit-tests"),
        database=DatabaseConfig(url="sqlite://"),
        logging=LoggingConfig(file=None),
        security=SecurityConfig(bcrypt_rounds=4),
        email=EmailConfig(provider="log"),
        storage=StorageConfig(provider="memory"),
    )


@pytest.fixture(autouse=True)
def app_context(test_config: ConfigData) -> Generator[None]:
    with with_context(test_config):
        yield


@pytest.fixture
def db_service(test_config: ConfigData) -> DbSessionService:
    """A database service over a fresh in-memory SQLite database."""
    service = DbSessionService(test_config)
    DbManageService(service.engine).create_all()
    return service


@pytest.fixture
def session(db_service: DbSessionService) -> Generator[Session]:
    """Create a fresh database session for testing."""
    session = db_service.get_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user_factory(session: Session) -> Callable[..., User]:
    """Persist a user with a known password; keyword arguments override fields."""

    def _create(**overrides: Any) -> User:
        email = overrides.pop("email", "applicant@example.com")
        password = overrides.pop("password", TEST_PASSWORD)
        user = User(
            email=email,
            password=hash_password(password, rounds=4),
            membership_id=membership_id_from_email(email),
            **overrides,
        )
        created = UserRepository(session).create(user)
        session.commit()
        return created

    return _create


@pytest.fixture
def applicant(user_factory: Callable[..., User]) -> User:
    """Applicant u1 nominated a@x.com and b@x.com, neither has responded."""
    return user_factory(
        email="applicant@example.com",
        company="Acme Ltd",
        referrer1="a@x.com",
        referrer2="b@x.com",
    )

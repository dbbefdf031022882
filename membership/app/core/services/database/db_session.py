"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import StaticPool, text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, create_engine

from membership.app.runtime.config.config_data import ConfigData
from membership.app.runtime.context import get_config


class DbSessionService:
    def __init__(self, config: ConfigData | None = None):
        """Initialize the shared database engine and session factory."""

        main_config = config or get_config()
        db_config = main_config.database
        url = db_config.connection_string

        logger.info(
            "Configuring database engine for environment: {}",
            main_config.app.environment,
        )

        engine_kwargs: dict = {
            "echo": False,
            "connect_args": self._get_connect_args(main_config),
        }

        if url.startswith("sqlite"):
            if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
                # Every session must see the same in-memory database
                engine_kwargs["poolclass"] = StaticPool
            if main_config.app.environment == "production":
                logger.warning(
                    "SQLite is not recommended for production use. "
                    "Consider PostgreSQL for better performance and reliability."
                )
        else:
            engine_kwargs.update(
                {
                    "pool_size": db_config.pool_size,
                    "max_overflow": db_config.max_overflow,
                    "pool_timeout": db_config.pool_timeout,
                    "pool_recycle": db_config.pool_recycle,
                    "pool_pre_ping": True,
                }
            )

        self._engine = create_engine(url, **engine_kwargs)

        if main_config.app.environment == "production":
            logger.info(
                "Database engine initialized",
                pool_size=db_config.pool_size,
                max_overflow=db_config.max_overflow,
            )

    @property
    def engine(self):
        return self._engine

    @staticmethod
    def _get_connect_args(config: ConfigData) -> dict:
        """Get database-specific connection arguments."""
        connect_args = {}

        if "postgresql" in config.database.url:
            connect_args.update(
                {
                    "application_name": f"{config.app.environment}_membership_api",
                    "connect_timeout": 30,
                }
            )
        elif "sqlite" in config.database.url:
            connect_args.update(
                {
                    "check_same_thread": False,
                    "timeout": 20,
                }
            )

        return connect_args

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Context manager style helper for scripts and tests."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(
                "Database transaction failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise
        finally:
            db.close()

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except SQLAlchemyError as e:
            logger.error(
                "Database health check failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return False

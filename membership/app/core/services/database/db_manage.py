"""Schema management for the application database."""

from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel


class DbManageService:
    def __init__(self, engine: Engine):
        self._engine = engine

    def create_all(self) -> None:
        """Create all database tables."""
        from membership.app.entities import (  # noqa: F401
            AuditLogTable,
            NotificationTable,
            UserTable,
        )

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")

    def drop_all(self) -> None:
        """Drop all database tables."""
        SQLModel.metadata.drop_all(self._engine)
        logger.warning("All database tables dropped.")

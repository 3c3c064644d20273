"""Database engine and session factory used across the application."""

from typing import Any

from loguru import logger
from sqlalchemy import StaticPool, text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, create_engine

from src.user_manager.runtime.config.config_data import ConfigData, DatabaseConfig
from src.user_manager.runtime.context import get_config


def _engine_kwargs(db_config: DatabaseConfig) -> dict[str, Any]:
    """SQLite gets thread-agnostic connections; other backends get a sized pool."""
    if not db_config.url.startswith("sqlite"):
        return {
            "pool_size": db_config.pool_size,
            "max_overflow": db_config.max_overflow,
            "pool_timeout": db_config.pool_timeout,
            "pool_recycle": db_config.pool_recycle,
            "pool_pre_ping": True,
        }

    kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False, "timeout": 20}}
    if ":memory:" in db_config.url:
        # Every connection must see the same in-memory database
        kwargs["poolclass"] = StaticPool
    return kwargs


class DbSessionService:
    """Owns the engine; hands out one session per request."""

    def __init__(self, config: ConfigData | None = None):
        db_config = (config or get_config()).database
        self._engine = create_engine(db_config.url, echo=False, **_engine_kwargs(db_config))
        logger.info("Database engine created for {}", self._engine.url.render_as_string())

    def create_all(self) -> None:
        """Create the users table if it does not exist yet."""
        from src.user_manager.entities.core.user import UserTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database tables created")

    def get_session(self) -> Session:
        return Session(self._engine, expire_on_commit=False)

    def health_check(self) -> bool:
        """True when a trivial query succeeds."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.bind(error_type=type(e).__name__).error("Database health check failed: {}", e)
            return False
        return True

    def dispose(self) -> None:
        self._engine.dispose()

"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy import Engine, StaticPool, text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, create_engine

from src.catalog.runtime.config.config_data import ConfigData, DatabaseConfig
from src.catalog.runtime.context import get_config


class DbSessionService:
    def __init__(
        self, engine: Engine | None = None, config: ConfigData | None = None
    ):
        """Initialize the shared database engine and session factory.

        Args:
            engine: Pre-built engine to use instead of one built from config.
            config: Configuration to build the engine from; defaults to the
                current context's.
        """
        if engine is not None:
            self._engine = engine
            return

        main_config = config or get_config()
        db_config = main_config.database

        logger.info(
            "Configuring database engine for environment: {}",
            main_config.app.environment,
        )
        self._engine = create_engine(
            db_config.connection_string, **self._engine_kwargs(db_config)
        )

        if main_config.app.environment == "production" and db_config.is_sqlite:
            logger.warning(
                "SQLite is not recommended for production use. "
                "Consider PostgreSQL for better performance and reliability."
            )

    @staticmethod
    def _engine_kwargs(db_config: DatabaseConfig) -> dict[str, Any]:
        """Pool and connection arguments for the configured backend."""
        if db_config.is_sqlite:
            kwargs: dict[str, Any] = {
                "echo": False,
                "connect_args": {
                    "check_same_thread": False,  # Sessions cross FastAPI threadpool workers
                    "timeout": 20,
                },
            }
            if ":memory:" in db_config.url or db_config.url.rstrip("/") == "sqlite:":
                kwargs["poolclass"] = StaticPool
            return kwargs

        return {
            "pool_size": db_config.pool_size,
            "max_overflow": db_config.max_overflow,
            "pool_timeout": db_config.pool_timeout,
            "pool_recycle": db_config.pool_recycle,
            "pool_pre_ping": True,
            "echo": False,
            "echo_pool": False,
        }

    @property
    def engine(self) -> Engine:
        return self._engine

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Yield a session that is committed on success and always closed."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.bind(
                error_type=type(e).__name__,
                error_message=str(e),
            ).error("Database transaction failed")
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
            logger.bind(
                error_type=type(e).__name__,
                error_message=str(e),
            ).error("Database health check failed")
            return False

    def dispose(self) -> None:
        self._engine.dispose()

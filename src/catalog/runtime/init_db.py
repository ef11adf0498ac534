"""Database initialization script."""

from loguru import logger
from sqlalchemy import Engine
from sqlmodel import SQLModel

from src.catalog.entities.service.product import ProductTable  # noqa: F401


def init_db(engine: Engine) -> None:
    """Create all database tables."""
    SQLModel.metadata.create_all(engine)
    logger.info("Database initialized with tables.")


if __name__ == "__main__":
    from src.catalog.core.services import DbSessionService

    init_db(DbSessionService().engine)

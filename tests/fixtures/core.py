from __future__ import annotations

from collections.abc import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine, StaticPool
from sqlmodel import Session, SQLModel, create_engine
from starlette.requests import Request

from src.catalog.api.http.app import create_app
from src.catalog.api.http.app_data import ApplicationDependencies
from src.catalog.core.services import AccountResolver, DbSessionService
from src.catalog.entities.service.product import ProductRepository
from src.catalog.runtime.config.config_data import ConfigData

ADMIN_ACCOUNT = "1"
EDITOR_ACCOUNT = "42"


@pytest.fixture
def engine() -> Generator[Engine]:
    """Create a fresh in-memory database for each test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Import models to register them with the metadata
    from src.catalog.entities.service.product import ProductTable  # noqa: F401

    SQLModel.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Generator[Session]:
    """Create a database session for testing."""
    with Session(engine, expire_on_commit=False) as session:
        try:
            yield session
        finally:
            session.rollback()


@pytest.fixture
def product_repository(session: Session) -> ProductRepository:
    return ProductRepository(session)


@pytest.fixture
def app_config() -> ConfigData:
    """Test configuration: anonymous callers hold no permissions."""
    config = ConfigData()
    config.app.environment = "test"
    config.database.url = "sqlite:///:memory:"
    config.authorization.roles = {
        "anonymous": [],
        "authenticated": ["access content"],
        "administrator": ["access content"],
        "blocked": [],
    }
    config.authorization.accounts = {ADMIN_ACCOUNT: ["administrator"]}
    config.products.owner_id = ADMIN_ACCOUNT
    return config


@pytest.fixture
def app_dependencies(app_config: ConfigData, engine: Engine) -> ApplicationDependencies:
    return ApplicationDependencies(
        config=app_config,
        database_service=DbSessionService(engine=engine),
        account_resolver=AccountResolver(app_config.authorization),
    )


@pytest.fixture
def client(app_dependencies: ApplicationDependencies) -> Generator[TestClient]:
    """Test client for an app wired to the in-memory database."""
    app = create_app(dependencies=app_dependencies)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def editor_headers() -> dict[str, str]:
    """Headers of an authenticated caller holding 'access content'."""
    return {"X-Account-Id": EDITOR_ACCOUNT}


@pytest.fixture
def request_factory() -> Callable[[dict[str, str]], Request]:
    def _make_request(headers: dict[str, str]) -> Request:
        scope = {
            "type": "http",
            "headers": [
                (name.lower().encode("ascii"), value.encode("latin-1"))
                for name, value in headers.items()
            ],
            "method": "GET",
            "path": "/",
            "query_string": b"",
        }
        return Request(scope)

    return _make_request

"""Integration tests for application lifecycle, middleware and health probes."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import inspect

from src.catalog.api.http.app import create_app
from src.catalog.runtime.config.config_data import ConfigData


class TestApplicationStartup:
    def test_startup_builds_dependencies_from_config(self, app_config: ConfigData):
        app = create_app(app_config)

        with TestClient(app) as client:
            deps = app.state.app_dependencies
            assert deps is not None
            assert deps.config is app_config
            assert "producttable" in inspect(deps.database_service.engine).get_table_names()
            assert client.get("/health/ready").status_code == 200

    def test_startup_keeps_injected_dependencies(self, app_dependencies):
        app = create_app(dependencies=app_dependencies)

        with TestClient(app):
            assert app.state.app_dependencies is app_dependencies

    def test_production_rejects_wildcard_cors(self, app_config: ConfigData):
        app_config.app.environment = "production"
        app_config.app.cors.origins = ["*"]

        with pytest.raises(RuntimeError, match="CORS misconfigured"):
            create_app(app_config)

    def test_production_hides_docs(self, app_config: ConfigData):
        app_config.app.environment = "production"

        app = create_app(app_config)

        assert app.docs_url is None
        assert app.redoc_url is None


class TestMiddleware:
    def test_request_id_is_generated(self, client: TestClient):
        response = client.get("/health")

        assert response.headers["X-Request-ID"]

    def test_request_id_is_propagated(self, client: TestClient):
        response = client.get("/health", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"

    def test_security_headers(self, client: TestClient):
        response = client.get("/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "Strict-Transport-Security" not in response.headers

    def test_unhandled_error_is_generic_500(self, client: TestClient, monkeypatch):
        from src.catalog.core.services import AccountResolver

        def explode(self, request):
            raise RuntimeError("unexpected")

        monkeypatch.setattr(AccountResolver, "from_request", explode)

        response = client.get("/api/product/anything")

        assert response.status_code == 500
        assert response.json()["detail"] == "Internal Server Error"
        assert response.json()["request_id"] == response.headers["X-Request-ID"]


class TestHealth:
    def test_liveness(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "catalog"}

    def test_readiness(self, client: TestClient):
        response = client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["checks"]["database"]["status"] == "healthy"

    def test_readiness_reports_unhealthy_database(
        self, client: TestClient, app_dependencies, monkeypatch
    ):
        monkeypatch.setattr(
            app_dependencies.database_service, "health_check", lambda: False
        )

        response = client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"

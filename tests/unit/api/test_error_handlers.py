import asyncio
import json

from fastapi.exceptions import RequestValidationError

from src.catalog.api.http.app import catalog_error_handler, request_validation_handler
from src.catalog.core.exceptions import NotFound, StoreError, ValidationError


def _body(response) -> dict:
    return json.loads(response.body)


class TestErrorHandlers:
    def test_request_validation_error_has_message_detail(self, request_factory):
        request = request_factory({})
        request.state.request_id = "req-1"
        exc = RequestValidationError(
            [{"type": "missing", "loc": ("body", "title"), "msg": "Field required"}]
        )

        response = asyncio.run(request_validation_handler(request, exc))

        assert response.status_code == 422
        body = _body(response)
        assert body["detail"] == "Request validation failed"
        assert body["request_id"] == "req-1"
        assert body["errors"][0]["loc"] == ["body", "title"]

    def test_catalog_validation_error_lists_field_errors(self, request_factory):
        exc = ValidationError(
            "Invalid product fields",
            errors=[{"type": "float_type", "loc": ("price",), "msg": "bad"}],
        )

        response = asyncio.run(catalog_error_handler(request_factory({}), exc))

        body = _body(response)
        assert response.status_code == 422
        assert body["detail"] == "Invalid product fields"
        assert body["request_id"] == "-"
        assert body["errors"][0]["loc"] == ["price"]

    def test_client_errors_keep_their_message(self, request_factory):
        response = asyncio.run(
            catalog_error_handler(request_factory({}), NotFound("Product p-1 not found"))
        )

        assert response.status_code == 404
        assert _body(response) == {"detail": "Product p-1 not found", "request_id": "-"}

    def test_store_errors_are_masked(self, request_factory):
        response = asyncio.run(
            catalog_error_handler(request_factory({}), StoreError("disk full at /var/db"))
        )

        assert response.status_code == 500
        assert _body(response)["detail"] == "Internal Server Error"

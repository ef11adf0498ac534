"""Errors raised by the catalog service layer.

Routers never catch these; the application registers one exception
handler per class that turns it into an HTTP response.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for all catalog errors."""

    status_code: int = 500
    default_detail: str = "Internal Server Error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthorized(CatalogError):
    """The caller lacks the permission the operation requires."""

    status_code = 403
    default_detail = "Access denied"


class NotFound(CatalogError):
    """The referenced record does not exist."""

    status_code = 404
    default_detail = "Not found"


class ValidationError(CatalogError):
    """The request payload is malformed."""

    status_code = 422
    default_detail = "Invalid request payload"

    def __init__(self, detail: str | None = None, errors: list | None = None) -> None:
        super().__init__(detail)
        self.errors = errors or []


class StoreError(CatalogError):
    """The record store failed to persist or load a record."""

    status_code = 500
    default_detail = "Storage failure"

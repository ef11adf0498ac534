"""Core services exports."""

from .authorization import (
    AccountAuthorization,
    AccountResolver,
    AuthorizationProvider,
)
from .database.db_session import DbSessionService
from .product_resource import ProductResource

__all__ = [
    # Authorization
    "AuthorizationProvider",
    "AccountAuthorization",
    "AccountResolver",
    # Database Service
    "DbSessionService",
    # Product Resource
    "ProductResource",
]

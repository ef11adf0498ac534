"""FastAPI dependency implementations."""

from __future__ import annotations

import json
from collections.abc import Iterator
from typing import Any

from fastapi import Depends, Request
from sqlmodel import Session

from src.catalog.api.http.app_data import ApplicationDependencies
from src.catalog.core.exceptions import Unauthorized, ValidationError
from src.catalog.core.models import Account
from src.catalog.core.services import (
    AccountAuthorization,
    AuthorizationProvider,
    ProductResource,
)
from src.catalog.entities.service.product import ProductRepository, ProductStore


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    """Get the application-wide dependency bundle."""
    return request.app.state.app_dependencies


def get_db_session(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> Iterator[Session]:
    """Open a database session for the duration of the request."""
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_current_account(
    request: Request,
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> Account:
    """Resolve the caller's account from the gateway header."""
    account = app_deps.account_resolver.from_request(request)
    request.state.account_id = account.id
    return account


def get_authorization(
    account: Account = Depends(get_current_account),
) -> AuthorizationProvider:
    return AccountAuthorization(account)


def get_product_store(session: Session = Depends(get_db_session)) -> ProductStore:
    return ProductRepository(session)


def require_product_permission(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
    authorization: AuthorizationProvider = Depends(get_authorization),
) -> None:
    """Reject callers without the product permission before the body is parsed."""
    permission = app_deps.config.products.required_permission
    if not authorization.check(permission):
        raise Unauthorized(f"Missing permission: {permission}")


def get_product_resource(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
    account: Account = Depends(get_current_account),
    authorization: AuthorizationProvider = Depends(get_authorization),
    store: ProductStore = Depends(get_product_store),
) -> ProductResource:
    """Build the product resource for the current caller."""
    products_config = app_deps.config.products
    owner_id = (
        products_config.owner_id
        if products_config.owner_id is not None
        else account.id
    )
    return ProductResource(
        authorization=authorization,
        store=store,
        owner_id=owner_id,
        required_permission=products_config.required_permission,
        log_channel=products_config.log_channel,
    )


async def get_json_payload(request: Request) -> Any:
    """Decode the request body, treating an empty body as an empty object.

    Declared after the router-level permission check so that callers without
    access are rejected before their body is looked at.
    """
    body = await request.body()
    if not body.strip():
        return {}
    try:
        return json.loads(body)
    except ValueError as e:
        raise ValidationError("Request body is not valid JSON") from e

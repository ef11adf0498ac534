"""Product resource: the four CRUD operations behind /api/product."""

from collections.abc import Mapping
from typing import Any

from loguru import logger

from src.catalog.core.exceptions import NotFound, Unauthorized
from src.catalog.core.services.authorization import AuthorizationProvider
from src.catalog.entities.service.product import (
    Product,
    ProductFields,
    ProductPublic,
    ProductStore,
)

ACCESS_CONTENT = "access content"


class ProductResource:
    """Get, create, update and delete products on behalf of one caller.

    Every operation checks ``required_permission`` before touching the
    store. Collaborators are injected; the resource holds no state across
    requests.
    """

    def __init__(
        self,
        authorization: AuthorizationProvider,
        store: ProductStore,
        owner_id: str,
        required_permission: str = ACCESS_CONTENT,
        log_channel: str = "catalog",
    ) -> None:
        self._authorization = authorization
        self._store = store
        self._owner_id = owner_id
        self._required_permission = required_permission
        self._log = logger.bind(channel=log_channel)

    def get(self, product_id: str) -> ProductPublic:
        self._authorize("get")
        return self._load(product_id).to_public()

    def create(self, fields: ProductFields | Mapping[str, Any]) -> ProductPublic:
        self._authorize("create")
        fields = self._parse(fields)

        created = self._store.create({**fields.changes(), "owner_id": self._owner_id})
        self._log.bind(product_id=created.id, owner_id=created.owner_id).info(
            "product.created"
        )
        return created.to_public()

    def update(
        self, product_id: str, fields: ProductFields | Mapping[str, Any]
    ) -> ProductPublic:
        self._authorize("update")
        fields = self._parse(fields)

        record = self._load(product_id).apply(fields)
        saved = self._store.save(record)
        self._log.bind(product_id=saved.id, fields=sorted(fields.changes())).info(
            "product.updated"
        )
        return saved.to_public()

    def delete(self, product_id: str) -> None:
        self._authorize("delete")
        record = self._load(product_id)
        self._store.delete(record)
        self._log.bind(product_id=record.id).info("product.deleted")

    def _authorize(self, operation: str) -> None:
        if not self._authorization.check(self._required_permission):
            self._log.bind(
                operation=operation, permission=self._required_permission
            ).warning("product.access_denied")
            raise Unauthorized(f"Missing permission: {self._required_permission}")

    def _load(self, product_id: str) -> Product:
        record = self._store.load(product_id)
        if record is None:
            raise NotFound(f"Product {product_id} not found")
        return record

    @staticmethod
    def _parse(fields: ProductFields | Mapping[str, Any]) -> ProductFields:
        if isinstance(fields, ProductFields):
            return fields
        return ProductFields.from_payload(fields)

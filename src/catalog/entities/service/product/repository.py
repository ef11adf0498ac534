"""Product repository for data access operations."""

from collections.abc import Mapping
from typing import Any, Protocol

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from src.catalog.core.exceptions import NotFound, StoreError
from src.catalog.entities.service.product.entity import Product
from src.catalog.entities.service.product.table import ProductTable

_MUTABLE_FIELDS = ("title", "description", "price", "owner_id")


class ProductStore(Protocol):
    """Record store contract used by the product resource."""

    def load(self, product_id: str) -> Product | None: ...

    def create(self, fields: Mapping[str, Any]) -> Product: ...

    def save(self, record: Product) -> Product: ...

    def delete(self, record: Product) -> None: ...


class ProductRepository:
    """Data-access layer for products backed by a SQLModel session.

    Every mutating call commits its own transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def load(self, product_id: str) -> Product | None:
        """Load a product by ID, or None when it does not exist."""
        try:
            row = self._session.get(ProductTable, product_id)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to load product {product_id}") from e
        if row is None:
            return None
        return Product.model_validate(row, from_attributes=True)

    def create(self, fields: Mapping[str, Any]) -> Product:
        """Insert a new product; the store assigns its ID."""
        row = ProductTable(
            **{name: value for name, value in fields.items() if name in _MUTABLE_FIELDS}
        )
        self._persist(row, action="create")
        return Product.model_validate(row, from_attributes=True)

    def save(self, record: Product) -> Product:
        """Write the record's fields over the stored row."""
        row = self._get_row(record.id)
        for name in _MUTABLE_FIELDS:
            setattr(row, name, getattr(record, name))
        self._persist(row, action="save")
        return Product.model_validate(row, from_attributes=True)

    def delete(self, record: Product) -> None:
        """Remove the record's row."""
        row = self._get_row(record.id)
        try:
            self._session.delete(row)
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.bind(product_id=record.id).error("product.store.delete_failed")
            raise StoreError(f"Failed to delete product {record.id}") from e

    def _get_row(self, product_id: str) -> ProductTable:
        try:
            row = self._session.get(ProductTable, product_id)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to load product {product_id}") from e
        if row is None:
            raise NotFound(f"Product {product_id} not found")
        return row

    def _persist(self, row: ProductTable, action: str) -> None:
        try:
            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.bind(product_id=row.id).error("product.store.{}_failed", action)
            raise StoreError(f"Failed to {action} product") from e

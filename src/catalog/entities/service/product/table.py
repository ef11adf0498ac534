"""Product database table model."""

from sqlmodel import Field

from src.catalog.entities._base import EntityTable


class ProductTable(EntityTable, table=True):
    """Database persistence model for products.

    This represents how the Product entity is stored in the database.
    It's separate from the domain entity to maintain clean architecture
    while keeping related code together.
    """

    title: str | None = None
    description: str | None = None
    price: float | None = None
    owner_id: str = Field(index=True)

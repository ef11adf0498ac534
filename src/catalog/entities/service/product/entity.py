"""Entity: Product."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from src.catalog.core.exceptions import ValidationError
from src.catalog.entities._base import Entity


class Product(Entity):
    """Product entity representing a product in the catalog.

    This is the domain model that the resource reads and mutates.
    It inherits from Entity to get auto-generated UUID identifiers.
    """

    title: str | None = Field(default=None, description="Product title")
    description: str | None = Field(default=None, description="Product description")
    price: float | None = Field(default=None, description="Product price")
    owner_id: str = Field(description="Account that owns the product")

    def apply(self, fields: "ProductFields") -> "Product":
        """Overwrite the fields present in ``fields``; absent ones are untouched."""
        for name, value in fields.changes().items():
            setattr(self, name, value)
        return self

    def to_public(self) -> "ProductPublic":
        return ProductPublic(
            id=self.id,
            title=self.title,
            description=self.description,
            price=self.price,
        )

    def __eq__(self, other: Any) -> bool:
        """Compare products by business attributes, ignoring timestamps."""
        if not isinstance(other, Product):
            return False

        return (
            self.id == other.id
            and self.title == other.title
            and self.description == other.description
            and self.price == other.price
            and self.owner_id == other.owner_id
        )


class ProductFields(BaseModel):
    """Request body for creating or patching a product.

    Keys missing from the body are left unset and never applied. A key sent
    as ``null`` clears the field, and an empty string is kept as-is.
    """

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    description: str | None = None
    price: float | None = Field(default=None, allow_inf_nan=False)

    @field_validator("price", mode="before")
    @classmethod
    def price_must_be_a_number(cls, value: Any) -> Any:
        # JSON booleans and numeric strings would otherwise coerce to floats
        if isinstance(value, (bool, str)):
            raise ValueError("price must be a number")
        return value

    def changes(self) -> dict[str, Any]:
        """Return only the fields that were present in the payload."""
        return self.model_dump(exclude_unset=True)

    @classmethod
    def from_payload(cls, payload: Any) -> "ProductFields":
        """Parse an already-decoded JSON body."""
        if not isinstance(payload, Mapping):
            raise ValidationError("Request body must be a JSON object")
        try:
            return cls.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError(
                "Invalid product fields",
                errors=e.errors(include_url=False, include_context=False),
            ) from e


class ProductPublic(BaseModel):
    """Response payload for a product."""

    id: str
    title: str | None
    description: str | None
    price: float | None

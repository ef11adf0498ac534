"""Product API router with CRUD operations."""

from typing import Any

from fastapi import APIRouter, Depends, Response, status

from src.catalog.api.http.deps import (
    get_json_payload,
    get_product_resource,
    require_product_permission,
)
from src.catalog.core.services import ProductResource
from src.catalog.entities.service.product import ProductFields, ProductPublic

router = APIRouter(dependencies=[Depends(require_product_permission)])

# Bodies are decoded by the resource, so the schema is documented by hand
_PRODUCT_BODY = {
    "requestBody": {
        "required": False,
        "content": {"application/json": {"schema": ProductFields.model_json_schema()}},
    }
}


@router.get("/{product_id}", response_model=ProductPublic)
def get_product(
    product_id: str,
    resource: ProductResource = Depends(get_product_resource),
) -> ProductPublic:
    """Get a product by ID."""
    return resource.get(product_id)


@router.post(
    "",
    response_model=ProductPublic,
    status_code=status.HTTP_201_CREATED,
    openapi_extra=_PRODUCT_BODY,
)
def create_product(
    payload: Any = Depends(get_json_payload),
    resource: ProductResource = Depends(get_product_resource),
) -> ProductPublic:
    """Create a product from the fields present in the body."""
    return resource.create(payload)


@router.patch("/{product_id}", response_model=ProductPublic, openapi_extra=_PRODUCT_BODY)
def update_product(
    product_id: str,
    payload: Any = Depends(get_json_payload),
    resource: ProductResource = Depends(get_product_resource),
) -> ProductPublic:
    """Overwrite the fields present in the body; the rest stay untouched."""
    return resource.update(product_id, payload)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def delete_product(
    product_id: str,
    resource: ProductResource = Depends(get_product_resource),
) -> Response:
    """Delete a product."""
    resource.delete(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

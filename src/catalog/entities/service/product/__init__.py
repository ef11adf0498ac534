"""Entity package: Product."""

from .entity import Product, ProductFields, ProductPublic
from .repository import ProductRepository, ProductStore
from .table import ProductTable

__all__ = [
    "Product",
    "ProductFields",
    "ProductPublic",
    "ProductRepository",
    "ProductStore",
    "ProductTable",
]

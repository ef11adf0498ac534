"""Product catalog REST service.

Exposes CRUD operations for product content entities over FastAPI,
backed by SQLModel storage.
"""

__version__ = "0.1.0"

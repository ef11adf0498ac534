"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.catalog import __version__
from src.catalog.api.http.app_data import ApplicationDependencies
from src.catalog.api.http.routers.health import router as health_router
from src.catalog.api.http.routers.service.product import router as product_router
from src.catalog.api.utils.app_startup import configure_logging
from src.catalog.core.exceptions import CatalogError, ValidationError
from src.catalog.core.services import AccountResolver, DbSessionService
from src.catalog.runtime.config.config_data import ConfigData
from src.catalog.runtime.context import get_config
from src.catalog.runtime.init_db import init_db


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, environment: str = "development"):
        super().__init__(app)
        self._environment = environment

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        # HSTS only in prod
        if self._environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or "-"


# --- Request logging middleware ---
async def log_requests(request: Request, call_next):
    # Correlation / tracing
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    # Prefer proxy headers when running behind a reverse proxy
    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()

    # Everything that logs within this block inherits base_ctx
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal Server Error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )


# --- Exception handlers ---
async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Translate service-layer errors into JSON responses."""
    if exc.status_code >= 500:
        logger.opt(exception=exc).bind(error_type=type(exc).__name__).error(
            "request.catalog_error"
        )
        detail = "Internal Server Error"
    else:
        logger.bind(
            status_code=exc.status_code, error_type=type(exc).__name__
        ).info("request.rejected: {}", exc.detail)
        detail = exc.detail

    content: dict = {"detail": detail, "request_id": _request_id(request)}
    if isinstance(exc, ValidationError) and exc.errors:
        content["errors"] = jsonable_encoder(exc.errors)
    return JSONResponse(status_code=exc.status_code, content=content)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.bind(status_code=422, error_type=type(exc).__name__).info(
        "request.validation_error"
    )
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Request validation failed",
            "request_id": _request_id(request),
            "errors": jsonable_encoder(exc.errors()),
        },
    )


# --- Lifecycle hooks ---
async def startup(app: FastAPI, config: ConfigData) -> None:
    logger.info("Starting up application in {} environment", config.app.environment)

    if getattr(app.state, "app_dependencies", None) is None:
        app.state.app_dependencies = ApplicationDependencies(
            config=config,
            database_service=DbSessionService(config=config),
            account_resolver=AccountResolver(config.authorization),
        )
        app.state.owns_dependencies = True

    deps: ApplicationDependencies = app.state.app_dependencies
    if config.database.create_tables:
        init_db(deps.database_service.engine)


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    if getattr(app.state, "owns_dependencies", False):
        app.state.app_dependencies.database_service.dispose()


def create_app(
    config: ConfigData | None = None,
    dependencies: ApplicationDependencies | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Configuration to run with; defaults to the current context's.
        dependencies: Pre-built collaborators. When omitted they are built
            from ``config`` at startup.
    """
    config = config or (dependencies.config if dependencies else get_config())
    is_production = config.app.environment == "production"

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await startup(app, config)
        try:
            yield
        finally:
            await shutdown(app)

    app = FastAPI(
        title="Product Catalog API",
        version=__version__,
        lifespan=lifespan,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
    )
    app.state.app_dependencies = dependencies
    app.state.owns_dependencies = False

    app.add_middleware(SecurityHeadersMiddleware, environment=config.app.environment)

    # --- CORS configuration ---
    if is_production and "*" in config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )

    app.middleware("http")(log_requests)

    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # --- Router registration ---
    app.include_router(health_router)
    app.include_router(product_router, prefix="/api/product", tags=["product"])

    return app


def main() -> None:
    """Run the API with uvicorn using the current configuration."""
    import uvicorn

    main_config = get_config()
    configure_logging(main_config)
    uvicorn.run(
        create_app(main_config),
        host=main_config.app.host,
        port=main_config.app.port,
        access_log=False,  # The request middleware writes the access log
    )


__all__ = ["create_app", "main", "startup", "shutdown"]


if __name__ == "__main__":
    main()

"""The storefront FastAPI application."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.responses import JSONResponse

from src.storefront.api.http.app_data import ApplicationDependencies
from src.storefront.api.http.middleware import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from src.storefront.api.http.responses import notice_response
from src.storefront.api.http.routers.admin import router as admin_router
from src.storefront.api.http.routers.auth import router as auth_router
from src.storefront.api.http.routers.health import router as health_router
from src.storefront.api.http.routers.product_form import router as product_form_router
from src.storefront.api.http.routers.storefront import router as storefront_router
from src.storefront.api.utils.app_startup import configure_logging
from src.storefront.core.backend import create_backend
from src.storefront.core.errors import StorefrontError
from src.storefront.core.models import Notice
from src.storefront.core.services import SubmissionGuard, UserSessionService
from src.storefront.core.storage import create_session_storage
from src.storefront.runtime.context import get_config

__all__ = ["app", "startup", "shutdown"]

configure_logging()


async def startup() -> None:
    """Build the backend, session storage and submission guard.

    Tests install ``app.state.app_dependencies`` themselves before the app
    starts; those are left alone.
    """
    config = get_config()
    logger.info("Starting storefront in {} environment", config.app.environment)
    if getattr(app.state, "app_dependencies", None) is not None:
        logger.info("Application dependencies already provided")
        return

    backend = await create_backend(config.backend)
    app.state.app_dependencies = ApplicationDependencies(
        backend=backend,
        user_session_service=UserSessionService(await create_session_storage(config.redis)),
        submission_guard=SubmissionGuard(),
    )
    logger.info("Serving the catalog from {}", type(backend).__name__)


async def shutdown() -> None:
    deps: ApplicationDependencies | None = getattr(app.state, "app_dependencies", None)
    if deps is None:
        return
    purged = await deps.user_session_service.purge_expired()
    logger.info("Shutting down; purged {} expired sessions", purged)
    await deps.backend.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup()
    try:
        yield
    finally:
        await shutdown()


_config = get_config()
_is_production = _config.app.environment == "production"

app = FastAPI(
    title="Storefront",
    lifespan=lifespan,
    docs_url=None if _is_production else "/docs",
    redoc_url=None if _is_production else "/redoc",
)

if _is_production and "*" in _config.app.cors.origins:
    raise RuntimeError(
        "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
    )

# Added innermost first
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_config.app.cors.origins,
    allow_credentials=_config.app.cors.allow_credentials,
    allow_methods=_config.app.cors.allow_methods,
    allow_headers=_config.app.cors.allow_headers,
)
app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    """Every failed user action ends in exactly one negative notice."""
    logger.bind(status_code=exc.status_code, error_type=type(exc).__name__).info(
        "Action rejected: {}", exc.message
    )
    return notice_response(Notice.error(exc.message), exc.status_code)


@app.exception_handler(status.HTTP_404_NOT_FOUND)
async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": "Page not found", "path": request.url.path},
    )


app.include_router(health_router)
app.include_router(storefront_router)
app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(product_form_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=_config.app.host, port=_config.app.port, access_log=False)

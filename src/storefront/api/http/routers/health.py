"""Health check endpoints."""

from typing import Any

from fastapi import APIRouter, Request

from src.storefront.api.http.app_data import ApplicationDependencies
from src.storefront.runtime.context import get_config

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health(request: Request) -> dict[str, Any]:
    """Liveness check. Reports which backend is serving without calling it.

    A session store that failed its last call makes the service ``degraded``:
    the catalog still serves but admin sign-in does not.
    """
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    sessions_up = app_deps.user_session_service.storage_available()
    return {
        "status": "healthy" if sessions_up else "degraded",
        "service": "storefront",
        "environment": get_config().app.environment,
        "backend": type(app_deps.backend).__name__,
        "session_storage": "available" if sessions_up else "unavailable",
    }

"""Response helpers shared by the routers."""

from typing import Any

from fastapi import status
from starlette.responses import JSONResponse

from src.storefront.core.models import Notice
from src.storefront.runtime.context import get_config


def see_other(location: str, notice: Notice | None = None) -> JSONResponse:
    """Navigate the client to ``location``, optionally carrying a notice."""
    content: dict[str, Any] = {"redirect_to": location}
    if notice is not None:
        content["notice"] = notice.model_dump()
    return JSONResponse(
        status_code=status.HTTP_303_SEE_OTHER,
        content=content,
        headers={"Location": location},
    )


def notice_response(notice: Notice, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"notice": notice.model_dump()})


def get_secure_cookie_settings() -> dict[str, Any]:
    """Cookie attributes for the browser session cookie.

    The cookie is first-party and only ever read by the API, so it is
    httponly. ``secure`` is enforced in production when configured.
    """
    config = get_config()
    return {
        "httponly": True,
        "secure": config.security.secure_cookies and config.app.environment == "production",
        "samesite": config.security.cookie_samesite,
        "path": "/",
    }

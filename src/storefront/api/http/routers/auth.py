"""Sign-in and sign-out for the admin area."""

from fastapi import APIRouter, Depends
from loguru import logger
from pydantic import BaseModel
from starlette.responses import JSONResponse

from src.storefront.api.http.deps import (
    get_auth_context,
    get_submission_guard,
    get_user_session,
    get_user_session_service,
)
from src.storefront.api.http.responses import get_secure_cookie_settings, see_other
from src.storefront.core.backend import AuthenticationError, BackendError
from src.storefront.core.errors import BackendFailure, InvalidCredentials, ValidationFailed
from src.storefront.core.models import Notice, UserSession
from src.storefront.core.services import (
    LOGIN_PATH,
    AuthContext,
    SubmissionGuard,
    UserSessionService,
)
from src.storefront.entities import AuthUser
from src.storefront.runtime.context import get_config

router = APIRouter(tags=["auth"])

DASHBOARD_PATH = "/admin"


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class AuthState(BaseModel):
    """Current authentication state of the browser."""

    authenticated: bool
    user: AuthUser | None = None


@router.get(LOGIN_PATH, response_model=None)
async def login_page(auth: AuthContext = Depends(get_auth_context)) -> AuthState | JSONResponse:
    if auth.is_authenticated:
        return see_other(DASHBOARD_PATH)
    return AuthState(authenticated=False)


@router.post(LOGIN_PATH)
async def login(
    payload: LoginRequest,
    auth: AuthContext = Depends(get_auth_context),
    previous: UserSession | None = Depends(get_user_session),
    session_service: UserSessionService = Depends(get_user_session_service),
    guard: SubmissionGuard = Depends(get_submission_guard),
) -> JSONResponse:
    """Exchange email and password for a browser session cookie."""
    email = payload.email.strip()
    if not email or not payload.password:
        raise ValidationFailed("Email and password are required")

    async with guard.hold(f"login:{email.casefold()}"):
        try:
            backend_session = await auth.sign_in(email, payload.password)
        except AuthenticationError as e:
            logger.info("Rejected sign-in for {}", email)
            raise InvalidCredentials() from e
        except BackendError as e:
            logger.exception("Sign-in failed for {}", email)
            raise BackendFailure("Failed to sign in") from e

        if previous is not None:
            await session_service.delete_user_session(previous.id)
        session_id = await session_service.create_user_session(backend_session)

    logger.info("User {} signed in", backend_session.user.id)
    config = get_config()
    response = see_other(DASHBOARD_PATH, Notice.success("Signed in successfully"))
    response.set_cookie(
        key=config.security.session_cookie_name,
        value=session_id,
        max_age=config.app.session_max_age,
        **get_secure_cookie_settings(),
    )
    return response


@router.post("/logout")
async def logout(
    auth: AuthContext = Depends(get_auth_context),
    user_session: UserSession | None = Depends(get_user_session),
    session_service: UserSessionService = Depends(get_user_session_service),
) -> JSONResponse:
    """Revoke the backend session and drop the browser session."""
    if auth.access_token:
        try:
            await auth.sign_out()
        except BackendError:
            # The local session is dropped either way
            logger.opt(exception=True).warning("Backend sign-out failed")

    if user_session is not None:
        await session_service.delete_user_session(user_session.id)

    response = see_other(LOGIN_PATH)
    response.delete_cookie(get_config().security.session_cookie_name, path="/")
    return response

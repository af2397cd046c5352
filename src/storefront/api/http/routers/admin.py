"""Admin dashboard: product, category and user management."""

from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.storefront.api.http.deps import (
    get_backend,
    get_submission_guard,
    get_user_session_service,
    require_user_session,
)
from src.storefront.core.backend import StoreBackend
from src.storefront.core.models import UserSession
from src.storefront.core.services import SubmissionGuard, UserSessionService
from src.storefront.core.services.views import DashboardPage, DashboardView

router = APIRouter(prefix="/admin", tags=["admin"])


class CategoryCreate(BaseModel):
    name: str = ""


class UserCreate(BaseModel):
    email: str = ""
    password: str = ""


async def get_dashboard(
    backend: StoreBackend = Depends(get_backend),
    session_service: UserSessionService = Depends(get_user_session_service),
    guard: SubmissionGuard = Depends(get_submission_guard),
    user_session: UserSession = Depends(require_user_session),
) -> AsyncIterator[DashboardView]:
    """Mounted dashboard with all three lists loaded."""
    async with DashboardView(backend, session_service, guard, user_session) as view:
        await view.load()
        yield view


@router.get("", response_model=DashboardPage)
async def dashboard(view: DashboardView = Depends(get_dashboard)) -> DashboardPage:
    return view.page()


@router.post("/products/{product_id}/delete", response_model=DashboardPage)
async def request_product_delete(
    product_id: str, view: DashboardView = Depends(get_dashboard)
) -> DashboardPage:
    """Mark a product for deletion; nothing is deleted until it is confirmed."""
    await view.request_delete(product_id)
    return view.page()


@router.post("/products/delete/confirm", response_model=DashboardPage)
async def confirm_product_delete(view: DashboardView = Depends(get_dashboard)) -> DashboardPage:
    await view.confirm_delete()
    return view.page()


@router.post("/products/delete/cancel", response_model=DashboardPage)
async def cancel_product_delete(view: DashboardView = Depends(get_dashboard)) -> DashboardPage:
    await view.cancel_delete()
    return view.page()


@router.post("/categories", response_model=DashboardPage)
async def create_category(
    payload: CategoryCreate, view: DashboardView = Depends(get_dashboard)
) -> DashboardPage:
    await view.create_category(payload.name)
    return view.page()


@router.delete("/categories/{name:path}", response_model=DashboardPage)
async def delete_category(name: str, view: DashboardView = Depends(get_dashboard)) -> DashboardPage:
    """Delete a category, refused with 409 while products still use it.

    Names are free text, so ``name`` may contain ``/``.
    """
    await view.delete_category(name)
    return view.page()


@router.post("/users", response_model=DashboardPage)
async def create_user(payload: UserCreate, view: DashboardView = Depends(get_dashboard)) -> DashboardPage:
    await view.create_user(payload.email, payload.password)
    return view.page()


@router.delete("/users/{user_id}", response_model=DashboardPage)
async def delete_user(user_id: str, view: DashboardView = Depends(get_dashboard)) -> DashboardPage:
    await view.delete_user(user_id)
    return view.page()

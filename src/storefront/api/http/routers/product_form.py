"""Product create/edit form."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from starlette.responses import JSONResponse

from src.storefront.api.http.deps import (
    get_backend,
    get_submission_guard,
    require_user_session,
)
from src.storefront.api.http.responses import see_other
from src.storefront.core.backend import StoreBackend
from src.storefront.core.models import Notice, UserSession
from src.storefront.core.services import SubmissionGuard
from src.storefront.core.services.views import (
    ProductFormPage,
    ProductFormValues,
    ProductFormView,
)
from src.storefront.core.services.views.product_form import DASHBOARD_PATH

router = APIRouter(prefix="/admin", tags=["admin"])


class InlineCategoryCreate(BaseModel):
    """A category created from inside the form, with the form's unsaved state."""

    name: str = ""
    product_id: str | None = None
    values: ProductFormValues = Field(default_factory=ProductFormValues)


class FormDependencies:
    def __init__(
        self,
        backend: StoreBackend = Depends(get_backend),
        guard: SubmissionGuard = Depends(get_submission_guard),
        user_session: UserSession = Depends(require_user_session),
    ) -> None:
        self.backend = backend
        self.guard = guard
        self.session_key = user_session.id

    def view(
        self, product_id: str | None = None, values: ProductFormValues | None = None
    ) -> ProductFormView:
        return ProductFormView(
            self.backend, self.guard, self.session_key, product_id=product_id, values=values
        )


async def _form_page(deps: FormDependencies, product_id: str | None) -> ProductFormPage | JSONResponse:
    async with deps.view(product_id) as view:
        if not await view.load():
            return see_other(DASHBOARD_PATH, Notice.error("Product not found"))
        return view.page()


async def _submit(
    deps: FormDependencies, product_id: str | None, values: ProductFormValues
) -> JSONResponse:
    async with deps.view(product_id) as view:
        outcome = await view.submit(values)
    return see_other(outcome.redirect_to, outcome.notice)


@router.get("/new", response_model=None)
async def new_product_form(deps: FormDependencies = Depends()) -> ProductFormPage | JSONResponse:
    return await _form_page(deps, None)


@router.post("/new")
async def create_product(values: ProductFormValues, deps: FormDependencies = Depends()) -> JSONResponse:
    """Validate and insert; on success go back to the dashboard."""
    return await _submit(deps, None, values)


@router.get("/edit/{product_id}", response_model=None)
async def edit_product_form(
    product_id: str, deps: FormDependencies = Depends()
) -> ProductFormPage | JSONResponse:
    """The form pre-filled from the product, or back to the dashboard if it is gone."""
    return await _form_page(deps, product_id)


@router.post("/edit/{product_id}")
async def update_product(
    product_id: str, values: ProductFormValues, deps: FormDependencies = Depends()
) -> JSONResponse:
    return await _submit(deps, product_id, values)


@router.post("/form/categories", response_model=ProductFormPage)
async def create_form_category(
    payload: InlineCategoryCreate, deps: FormDependencies = Depends()
) -> ProductFormPage:
    """Create a category and select it in the form being edited."""
    async with deps.view(payload.product_id, payload.values) as view:
        await view.create_category(payload.name)
        return view.page()

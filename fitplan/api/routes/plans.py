"""API routes for plan generation and catalog inspection."""
from fastapi import APIRouter, Depends, Request

from fitplan.models.enums import VOCABULARY_VERSION
from fitplan.repositories.catalog_repository import ExerciseCatalog
from fitplan.schemas.base import APIResponse, ResponseMeta
from fitplan.schemas.plan import CatalogSummaryResponse, UserProfileRequest, WeeklyPlanResponse
from fitplan.services.plan_generator import generate

router = APIRouter()


def get_catalog(request: Request) -> ExerciseCatalog:
    """Catalog loaded once at startup and shared by every request."""
    return request.app.state.catalog


def _meta(request: Request, warnings: list[str] | None = None) -> ResponseMeta:
    return ResponseMeta(
        request_id=getattr(request.state, "request_id", None),
        warnings=warnings or [],
        vocabulary_version=VOCABULARY_VERSION,
    )


@router.post("/plans", response_model=APIResponse[WeeklyPlanResponse])
def create_plan(
    payload: UserProfileRequest,
    request: Request,
    catalog: ExerciseCatalog = Depends(get_catalog),
):
    """
    Generate a one-week workout plan for the submitted profile.

    Safety warnings are repeated in ``meta.warnings`` so that clients which
    only render the envelope still surface them.
    """
    plan = generate(payload.to_profile(), catalog)
    return APIResponse[WeeklyPlanResponse](
        data=WeeklyPlanResponse.from_plan(plan),
        meta=_meta(request, list(plan.warnings)),
    )


@router.get("/catalog/summary", response_model=APIResponse[CatalogSummaryResponse])
def catalog_summary(request: Request, catalog: ExerciseCatalog = Depends(get_catalog)):
    """Exercise counts by role and primary muscle group."""
    return APIResponse[CatalogSummaryResponse](
        data=CatalogSummaryResponse(**catalog.summary()),
        meta=_meta(request),
    )

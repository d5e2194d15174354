"""Health check endpoint."""
from fastapi import APIRouter, Request

from fitplan import __version__
from fitplan.config.settings import get_settings
from fitplan.models.enums import VOCABULARY_VERSION

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request):
    """Report service status and the size of the loaded catalog."""
    settings = get_settings()
    catalog = getattr(request.app.state, "catalog", None)
    return {
        "status": "healthy" if catalog is not None else "unhealthy",
        "app": settings.app_name,
        "version": __version__,
        "catalog_size": len(catalog) if catalog is not None else 0,
        "vocabulary_version": VOCABULARY_VERSION,
    }

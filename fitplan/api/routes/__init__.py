"""API route modules."""
from fitplan.api.routes.health import router as health_router
from fitplan.api.routes.plans import router as plans_router

__all__ = ["health_router", "plans_router"]

"""Main FastAPI application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from fitplan import __version__
from fitplan.api.routes import health_router, plans_router
from fitplan.config.generation_config_loader import get_generation_config
from fitplan.config.settings import get_settings
from fitplan.core.error_handlers import (
    configuration_defect_handler,
    domain_error_handler,
    request_validation_handler,
)
from fitplan.core.exceptions import ConfigurationDefect, DomainError
from fitplan.core.logging import configure_logging, get_logger
from fitplan.middleware.request_id import RequestIDMiddleware
from fitplan.repositories.catalog_repository import load_catalog

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the catalog and rule tables once; they are shared read-only."""
    configure_logging()
    settings = get_settings()

    # Fail at startup, not on the first request, if a rule table is broken
    get_generation_config()
    app.state.catalog = load_catalog(settings.catalog_path)
    logger.info("startup_complete", catalog_size=len(app.state.catalog))

    yield

    app.state.catalog = None


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Rule-based weekly workout plan generator",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ConfigurationDefect, configuration_defect_handler)

    app.include_router(health_router)
    app.include_router(plans_router, prefix=settings.api_prefix, tags=["Plans"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("fitplan.main:app", host="0.0.0.0", port=8000, reload=True)

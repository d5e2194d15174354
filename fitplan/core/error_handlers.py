from datetime import datetime

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from fitplan.core.exceptions import (
    BusinessRuleError,
    ConfigurationDefect,
    DomainError,
    InsufficientCatalogCoverageError,
    InvalidProfileError,
    ValidationError,
)
from fitplan.core.logging import get_logger

logger = get_logger(__name__)


ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InvalidProfileError: status.HTTP_400_BAD_REQUEST,
    BusinessRuleError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InsufficientCatalogCoverageError: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def error_envelope(request: Request, code: str, message: str, details: dict | None) -> dict:
    return {
        "data": None,
        "meta": {
            "request_id": getattr(request.state, "request_id", None),
            "timestamp": datetime.utcnow().isoformat() + "Z",
        },
        "errors": [
            {
                "code": code,
                "message": message,
                "details": details or {},
            }
        ],
    }


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = ERROR_STATUS_MAP.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)

    return JSONResponse(
        status_code=status_code,
        content=error_envelope(request, exc.code, exc.message, exc.details),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_envelope(
            request,
            "VAL_REQUEST_001",
            "Request body failed validation",
            {"errors": jsonable_encoder(exc.errors())},
        ),
    )


async def configuration_defect_handler(request: Request, exc: ConfigurationDefect) -> JSONResponse:
    logger.error("configuration_defect", error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope(request, "SYS_CONFIG_001", "Internal configuration error", None),
    )

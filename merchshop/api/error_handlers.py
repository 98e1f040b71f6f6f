"""Error Handlers — render every failure as the {"error": {...}} envelope.

Invariants:
    - MerchShopError -> its own http_status and to_response() body
    - RequestValidationError (bad JSON body, non-integer quantity, ...) -> 400
      VALIDATION_ERROR with one detail per offending field
    - Anything else -> 500 INTERNAL_ERROR; the exception text stays in the log
    - Rejections (status < 500) log at INFO, failures at ERROR
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from merchshop.core.errors import ErrorCategory, ErrorSeverity, MerchShopError

logger = logging.getLogger(__name__)


async def handle_merchshop_error(request: Request, exc: MerchShopError) -> JSONResponse:
    logger.log(
        logging.INFO if exc.http_status < 500 else logging.ERROR,
        f"{request.method} {request.url.path} -> {exc.http_status}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "account_id": exc.context.account_id,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    logger.info(
        f"Rejected malformed request on {request.url.path}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": ErrorCategory.VALIDATION.value,
            "severity": ErrorSeverity.WARNING.value,
            "details": details,
        }},
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.url.path}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": {
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred",
            "category": ErrorCategory.INTERNAL.value,
            "severity": ErrorSeverity.CRITICAL.value,
        }},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MerchShopError, handle_merchshop_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

"""
Exception handlers mapping failures to JSON error bodies.

Every body is {"detail", "status_code"}; validation failures add "errors".
The request ID reaches the logs through structlog contextvars and is never
echoed in the body, and 5xx bodies stay generic.
"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

from caching_api.logging import get_logger

logger = get_logger("backend.errors")


def _error(status_code: int, detail: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "status_code": status_code, **extra},
    )


async def _http_error(request: Request, exc: HTTPException) -> JSONResponse:
    logger.warning("http_exception", status_code=exc.status_code, detail=exc.detail)
    return _error(exc.status_code, str(exc.detail))


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = jsonable_encoder(exc.errors())
    logger.warning("validation_error", path=request.url.path, errors=errors)
    return _error(422, "Validation error", errors=errors)


async def _store_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    # DriverService has already rolled back and left the cache alone
    logger.error("store_failure", path=request.url.path, error_type=type(exc).__name__, error=str(exc))
    return _error(503, "Storage unavailable")


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", path=request.url.path, error_type=type(exc).__name__)
    return _error(500, "Internal server error")


_HANDLERS = (
    (HTTPException, _http_error),
    (RequestValidationError, _validation_error),
    (SQLAlchemyError, _store_error),
    (Exception, _unhandled_error),
)


def register_exception_handlers(app: FastAPI) -> None:
    for exc_class, handler in _HANDLERS:
        app.add_exception_handler(exc_class, handler)

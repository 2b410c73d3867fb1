"""Exception handlers translating domain errors into HTTP responses.

Bodies follow one shape: ``{"error": <message>, "details": <optional>}``.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from notifications.exceptions import ConflictError, StorageError

logger = structlog.get_logger(__name__)


def _error(status_code: int, error: str, details=None) -> JSONResponse:
    content = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info("Request rejected", path=request.url.path, errors=exc.messages)
    return _error(400, "Validation failed", exc.messages)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = {".".join(str(p) for p in err["loc"]): [err["msg"]] for err in exc.errors()}
    logger.info("Request rejected", path=request.url.path, errors=details)
    return _error(400, "Validation failed", details)


async def handle_not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return _error(404, getattr(exc, "messages", None) or str(exc) or "Not found")


async def handle_conflict(request: Request, exc: ConflictError) -> JSONResponse:
    return _error(409, exc.message)


async def handle_storage_error(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("Storage failure", path=request.url.path, operation=exc.operation, error=exc.details)
    return _error(500, exc.message, exc.details)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return _error(404, "Route not found")
    return _error(exc.status_code, str(exc.detail))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error", path=request.url.path, error=str(exc))
    return _error(500, str(exc) or "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(ObjectNotFoundError, handle_not_found)
    app.add_exception_handler(ConflictError, handle_conflict)
    app.add_exception_handler(StorageError, handle_storage_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)

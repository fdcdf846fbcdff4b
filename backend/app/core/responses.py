"""
Exception handlers that keep every error response inside the envelope.

- HTTPException: detail dicts are sent verbatim, plain strings wrapped.
- RequestValidationError: 400 with one entry per failing field.
- Anything else: logged with traceback, 500 with a generic message.
"""
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.logging import get_logger, get_request_id
from app.middleware.request_context import REQUEST_ID_HEADER
from app.schemas.common import error_body

logger = get_logger(__name__)


def _validation_entries(exc: RequestValidationError) -> list[dict[str, Any]]:
    entries = []
    for err in exc.errors():
        loc = err.get("loc", ())
        location = str(loc[0]) if loc else "body"
        field = ".".join(str(part) for part in loc[1:])
        entries.append(
            {"field": field, "message": err.get("msg", "Invalid value"), "location": location}
        )
    return entries


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = error_body(str(exc.detail) if exc.detail else "An error occurred")
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    entries = _validation_entries(exc)
    logger.info("request_validation_failed", error_count=len(entries))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Validation failed", entries),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Never leak internals to the client; the traceback goes to the log."""
    logger.exception("unhandled_exception", error_type=type(exc).__name__)
    content = error_body("Server error")
    headers = {}
    request_id = getattr(request.state, "request_id", None) or get_request_id()
    if request_id:
        content["requestId"] = request_id
        headers[REQUEST_ID_HEADER] = request_id
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content,
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

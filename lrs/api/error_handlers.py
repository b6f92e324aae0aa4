"""Responses for LrsError, shared by exception handlers and middleware."""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from lrs.errors import LrsError, UnauthorizedError

logger = logging.getLogger(__name__)


async def unauthorized_handler(request: Request, exc: UnauthorizedError) -> PlainTextResponse:
    return PlainTextResponse(exc.message, status_code=exc.status_code)


async def lrs_error_handler(request: Request, exc: LrsError) -> JSONResponse:
    """Map an LrsError to a JSON error response with its status code."""
    if exc.status_code >= 500:
        logger.error(
            "Request failed: %s",
            exc.message,
            exc_info=exc,
            extra={"structured": {"path": request.url.path}},
        )
    else:
        logger.info(
            "Request rejected: %s",
            exc.message,
            extra={"structured": {"path": request.url.path, "status": exc.status_code}},
        )
    return JSONResponse({"detail": exc.message}, status_code=exc.status_code)


async def error_response(request: Request, exc: LrsError) -> Response:
    """Pick the handler for an error raised outside the routing stage."""
    if isinstance(exc, UnauthorizedError):
        return await unauthorized_handler(request, exc)
    return await lrs_error_handler(request, exc)

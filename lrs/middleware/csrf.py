"""Referer based CSRF guard for state-changing requests."""

import logging
from collections.abc import Sequence
from urllib.parse import urlsplit

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp

from lrs.errors import CsrfError

logger = logging.getLogger(__name__)

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


class CsrfMiddleware(BaseHTTPMiddleware):
    """Rejects state-changing requests whose Referer is not this host.

    Paths under one of ``safe_path_prefixes`` are exempt. The sequence is read
    per request, so prefixes added during startup apply.
    """

    def __init__(self, app: ASGIApp, safe_path_prefixes: Sequence[str]) -> None:
        super().__init__(app)
        self._safe_path_prefixes = safe_path_prefixes

    def is_allowed(self, method: str, path: str, host: str | None, referer: str | None) -> bool:
        if method.upper() in SAFE_METHODS:
            return True

        if any(path.startswith(prefix) for prefix in self._safe_path_prefixes):
            return True

        if not host or not referer:
            return False

        return urlsplit(referer).netloc == host

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        host = request.headers.get("host")
        referer = request.headers.get("referer")

        if not self.is_allowed(request.method, request.url.path, host, referer):
            error = CsrfError()
            logger.warning(
                error.message,
                extra={"structured": {"path": request.url.path, "host": host, "referer": referer}},
            )
            return PlainTextResponse(error.message, status_code=error.status_code)

        return await call_next(request)

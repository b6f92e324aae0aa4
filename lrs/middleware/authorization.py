"""Cookie based authorization for the /api paths.

After an LTI launch the launch flow sets one signed cookie per tenant domain and
course, holding the user id. ``AuthorizationMiddleware`` turns that cookie into
an authenticated request context for every request under
``/api/<tenant domain>/<course id>/``, before routing, so unknown paths and
methods there are rejected the same way as existing routes.
"""

import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import unquote

from fastapi import Request
from starlette.types import ASGIApp, Receive, Scope, Send

from lrs.api.context import RequestContext, get_request_context, set_request_context
from lrs.api.error_handlers import error_response
from lrs.errors import LrsError, UnauthorizedError
from lrs.utils.cookies import cookie_name, read_signed_cookie
from lrs.utils.metrics import PrometheusAuthorizationMetrics

if TYPE_CHECKING:
    from lrs.app_context import AppContext

logger = logging.getLogger(__name__)

metrics = PrometheusAuthorizationMetrics()


def parse_api_scope(path: str) -> tuple[str, str] | None:
    """Extract the tenant domain and course id from an API path.

    The expected format for all API paths is ``/api/ucberkeley.canvas.com/21312/...``.
    Segments are taken from the undecoded path and URL-decoded individually.

    Returns:
        (tenant_domain, course_id), or None if the path is not an API path
    """
    segments = path.split("?", 1)[0].split("/")
    if len(segments) < 4 or segments[1] != "api" or not segments[2] or not segments[3]:
        return None
    return unquote(segments[2]), unquote(segments[3])


def _raw_path(request: Request) -> str:
    raw_path = request.scope.get("raw_path")
    if raw_path:
        return raw_path.decode("latin-1")
    return request.url.path


async def authorize(request: Request, api_scope: tuple[str, str]) -> None:
    """Resolve the user for an API request from its scoped cookie.

    Raises:
        UnauthorizedError: If no valid cookie exists for the tenant domain and course.
        UserLookupError: If the user resolver fails.
    """
    # An upstream authorization already resolved the user
    if get_request_context(request).is_authenticated:
        metrics.inc("preauthorized")
        return

    app_ctx: AppContext = request.app.state.lrs

    tenant_domain, course_id = api_scope
    user_id = read_signed_cookie(
        request.cookies, cookie_name(tenant_domain, course_id), app_ctx.cookie_signer
    )

    if user_id is None:
        metrics.inc("missing_cookie")
        logger.info(
            "Rejected API request without a valid scoped cookie",
            extra={"structured": {"path": request.url.path, "scope": api_scope}},
        )
        raise UnauthorizedError()

    try:
        user = await app_ctx.user_resolver(user_id)
    except Exception:
        metrics.inc("lookup_error")
        raise

    set_request_context(request, RequestContext.authenticated(user))
    metrics.inc("ok")


class AuthorizationMiddleware:
    """Runs ``authorize`` for every request under an API path.

    LrsErrors are answered with the same responses as the app's exception
    handlers; anything else propagates to the server error stage.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        api_scope = parse_api_scope(_raw_path(request))
        if api_scope is None:
            await self.app(scope, receive, send)
            return

        try:
            await authorize(request, api_scope)
        except LrsError as exc:
            response = await error_response(request, exc)
            await response(scope, receive, send)
            return

        await self.app(scope, receive, send)


def get_current_user(request: Request) -> Any:
    """Dependency returning the user resolved by ``authorize``."""
    ctx = get_request_context(request)
    if not ctx.is_authenticated:
        raise UnauthorizedError()
    return ctx.user

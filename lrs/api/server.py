"""HTTP server setup and REST API registration."""

import logging

from fastapi import APIRouter, FastAPI

from lrs.api.error_handlers import lrs_error_handler, unauthorized_handler
from lrs.api.routes.health import router as health_router
from lrs.api.routes.metrics import router as metrics_router
from lrs.app_context import AppContext
from lrs.errors import LrsError, UnauthorizedError
from lrs.middleware.authorization import AuthorizationMiddleware
from lrs.middleware.csrf import CsrfMiddleware
from lrs.modules.loader import REST_UNIT
from lrs.utils.cookies import make_signer

logger = logging.getLogger(__name__)

API_PREFIX = "/api/{tenant_domain}/{course_id}"
VERSION = "0.1.0"


def create_api_router() -> APIRouter:
    """A router for all routes on /api.

    Authorization runs in AuthorizationMiddleware before routing, so unknown
    paths and methods under the prefix are rejected without a cookie too.
    """
    return APIRouter(prefix=API_PREFIX)


def setup_server(ctx: AppContext) -> FastAPI:
    """Create the app server and the API router on the context.

    Raises:
        ValueError: If no cookie secret is configured.
    """
    ctx.cookie_signer = make_signer(ctx.settings.cookie_secret, ctx.settings.cookie_salt)

    app = FastAPI(title="Learning Record Store", version=VERSION)
    app.state.lrs = ctx

    # Last added runs first: the CSRF guard wraps authorization
    app.add_middleware(AuthorizationMiddleware)
    app.add_middleware(CsrfMiddleware, safe_path_prefixes=ctx.safe_path_prefixes)
    app.add_exception_handler(UnauthorizedError, unauthorized_handler)  # type: ignore[arg-type]
    app.add_exception_handler(LrsError, lrs_error_handler)  # type: ignore[arg-type]

    app.include_router(health_router, tags=["health"])
    app.include_router(metrics_router, tags=["metrics"])

    ctx.app = app
    ctx.api_router = create_api_router()
    return app


def register_rest_apis(ctx: AppContext) -> None:
    """Let every module that ships a REST unit add its endpoints.

    Modules are visited in declared order; modules without one are skipped.
    """
    for module_name in ctx.modules.available_modules:
        rest_unit = ctx.modules.find_unit(module_name, REST_UNIT)
        if rest_unit is None:
            continue

        logger.debug(
            "Registering REST APIs for %s",
            module_name,
            extra={"structured": {"module": module_name}},
        )
        rest_unit.register(ctx)


def initialize_server(ctx: AppContext) -> FastAPI:
    """Set up the server, discover module routes and mount the API router."""
    app = setup_server(ctx)
    register_rest_apis(ctx)

    # Routes are copied at include time, so this runs after discovery
    assert ctx.api_router is not None
    app.include_router(ctx.api_router)

    logger.info("Finished initializing REST APIs")
    return app

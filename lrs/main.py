"""Learning Record Store bootstrap.

Startup runs strictly in order: database, modules, HTTP server and REST route
discovery. Each stage is awaited and an exception aborts the stages after it.
"""

import asyncio
import logging

import uvicorn

from lrs.api.server import initialize_server
from lrs.app_context import AppContext, UserResolver
from lrs.config import Settings, get_settings
from lrs.db.engine import Database
from lrs.modules.loader import ModuleLoader
from lrs.users.api import DatabaseUserResolver
from lrs.utils.fatal import install_fatal_handler
from lrs.utils.logging import configure_logging

logger = logging.getLogger(__name__)


async def init(
    settings: Settings | None = None,
    *,
    user_resolver: UserResolver | None = None,
) -> AppContext:
    """Initialize the Learning Record Store.

    Args:
        settings: Settings to use (defaults to the cached environment settings)
        user_resolver: Resolver for cookie user ids (defaults to the users table)

    Returns:
        The application context with the app server ready to serve
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    if settings.exit_on_uncaught_exception:
        install_fatal_handler(asyncio.get_running_loop())

    db = Database(settings)
    await db.init()

    modules = ModuleLoader(settings.lrs_modules)
    ctx = AppContext(
        settings=settings,
        db=db,
        modules=modules,
        user_resolver=user_resolver or DatabaseUserResolver(db),
    )
    await modules.init(ctx)

    initialize_server(ctx)
    return ctx


async def serve(settings: Settings | None = None) -> None:
    """Initialize and serve until shutdown, in a single event loop."""
    settings = settings or get_settings()
    ctx = await init(settings)
    assert ctx.app is not None

    config = uvicorn.Config(ctx.app, host=settings.host, port=settings.port, log_config=None)
    try:
        await uvicorn.Server(config).serve()
    finally:
        await ctx.db.dispose()


def main() -> None:
    asyncio.run(serve())


if __name__ == "__main__":
    main()

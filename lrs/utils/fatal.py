"""Process-fatal handling of uncaught exceptions.

Once an exception escapes we cannot guarantee the system still works, so the
process logs and exits. A supervisor is expected to restart it.
"""

import asyncio
import logging
import os
import sys
from types import TracebackType
from typing import Any

logger = logging.getLogger(__name__)

EXIT_STATUS = 1


def _exit() -> None:
    os._exit(EXIT_STATUS)


def handle_uncaught_exception(
    exc_type: type[BaseException],
    exc: BaseException,
    tb: TracebackType | None,
) -> None:
    """sys.excepthook replacement."""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc, tb)
        return

    logger.critical(
        "Uncaught exception was raised, restarting the process",
        exc_info=(exc_type, exc, tb),
    )
    _exit()


def handle_loop_exception(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
    """Event loop exception handler for exceptions nobody awaited."""
    exc = context.get("exception")
    logger.critical(
        "Uncaught exception was raised, restarting the process",
        exc_info=(type(exc), exc, exc.__traceback__) if exc is not None else None,
        extra={"structured": {"message": context.get("message")}},
    )
    _exit()


def install_fatal_handler(loop: asyncio.AbstractEventLoop | None = None) -> None:
    """Install the fatal handlers on the interpreter and the event loop."""
    sys.excepthook = handle_uncaught_exception
    if loop is not None:
        loop.set_exception_handler(handle_loop_exception)

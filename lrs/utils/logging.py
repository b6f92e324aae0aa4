"""Process-wide logging setup."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once.

    Repeated calls only adjust the level.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    if not any(getattr(h, "_lrs_handler", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._lrs_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)

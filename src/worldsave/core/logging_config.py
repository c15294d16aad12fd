"""Console logging setup for the command line tools."""
from __future__ import annotations

import logging
import sys

_FORMAT = "%(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Attach a single console handler to the package logger.

    Calling this more than once only updates the level.
    """
    package_logger = logging.getLogger("worldsave")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    package_logger.setLevel(level)
    if not any(getattr(handler, "_worldsave_console", False) for handler in package_logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._worldsave_console = True  # type: ignore[attr-defined]
        package_logger.addHandler(handler)
    return package_logger

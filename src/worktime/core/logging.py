"""Console logging setup for the CLI.

Library modules only create ``logging.getLogger(__name__)`` loggers;
handlers are attached here, once, by the entrypoint.
"""

from __future__ import annotations

import logging
import sys
from typing import Final

_PACKAGE_LOGGER: Final[str] = "worktime"
_FORMAT: Final[str] = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
_DATE_FORMAT: Final[str] = "%H:%M:%S"


class _ConsoleHandler(logging.StreamHandler):
    """Marker subclass so repeated setup can find its own handler."""


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a single stderr handler to the ``worktime`` logger.

    Calling this more than once only updates the level and rebinds the
    handler to the current ``sys.stderr``.

    Args:
        verbose: Log at DEBUG instead of WARNING.

    Returns:
        The configured package logger.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel(level)

    handler = next(
        (h for h in logger.handlers if isinstance(h, _ConsoleHandler)), None,
    )
    if handler is None:
        handler = _ConsoleHandler()
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))
        logger.addHandler(handler)
    else:
        handler.setStream(sys.stderr)
    handler.setLevel(level)
    return logger

"""Logging helpers for nativeboot.

All modules obtain their logger through :func:`get_logger` so that a single
call to :func:`configure_logging` (done by the CLI) controls verbosity.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "nativeboot"

_FORMAT = "%(levelname)s %(name)s: %(message)s"
_DEBUG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(filename)s:%(lineno)d]: %(message)s"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the ``nativeboot`` namespace.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger instance.
    """
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> None:
    """Configure the nativeboot logger hierarchy for CLI use.

    Precedence: debug > quiet > verbose > default (warnings only).

    Args:
        debug: Enable debug output with source locations.
        verbose: Enable info-level output.
        quiet: Only report errors.
    """
    if debug:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    # Reconfiguring must not stack handlers
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_DEBUG_FORMAT if debug else _FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

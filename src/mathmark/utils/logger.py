"""Logging helpers for mathmark.

Library modules only create namespaced loggers; handlers are installed
by the command line through configure_logging().

Example:
    >>> from mathmark.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.warning("unterminated bold span")
"""

from __future__ import annotations

import logging

ROOT_LOGGER_NAME = "mathmark"

# -v count -> level; anything higher means DEBUG
_VERBOSITY_LEVELS = {0: logging.ERROR, 1: logging.INFO}


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``mathmark`` namespace.

    Example:
        >>> get_logger("mymodule").name
        'mathmark.mymodule'
        >>> get_logger("mathmark.parser").name
        'mathmark.parser'
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(verbosity: int = 0) -> int:
    """Install a stderr handler for command-line use.

    At verbosity 0 only errors are logged, since diagnostics are already
    echoed by the caller. 1 adds progress messages, 2 and up debug output.

    Returns:
        The logging level that was set
    """
    level = _VERBOSITY_LEVELS.get(verbosity, logging.DEBUG)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)
    return level

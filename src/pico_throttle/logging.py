"""Logging utilities for pico-throttle.

All pico-throttle loggers live under the ``pico_throttle`` namespace.  Use
``get_logger()`` to obtain a namespaced logger and ``configure_logging()``
to set the level and handler for the entire library.
"""

import logging
import sys
from typing import Optional, Union

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
"""str: Default log format used by ``configure_logging``."""


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the pico_throttle namespace.

    Args:
        name: Logger name. If not prefixed with 'pico_throttle', it will be added.

    Returns:
        A configured Logger instance.
    """
    if not name.startswith("pico_throttle"):
        name = f"pico_throttle.{name}"
    return logging.getLogger(name)


def configure_logging(level: Union[int, str] = logging.INFO, handler: Optional[logging.Handler] = None) -> None:
    """Configure logging for the pico_throttle library.

    Args:
        level: Logging level, either a ``logging`` constant or a level
            name such as ``"debug"`` (default: INFO).
        handler: Custom handler. If None, uses StreamHandler to stderr.
    """
    if isinstance(level, str):
        level = level.upper()

    root_logger = logging.getLogger("pico_throttle")
    root_logger.setLevel(level)

    if not root_logger.handlers:
        if handler is None:
            handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        root_logger.addHandler(handler)

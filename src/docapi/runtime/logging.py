from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from ..config import DOCAPI_CONFIG

LOGGER_NAME = "docapi"


class _DocapiRichConsoleHandler(RichHandler):
    """Console handler installed once by ``configure_logging``."""


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger, or a child of it when ``name`` is given."""
    if name is None:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Attach a rich console handler to the root logger.

    Calling this more than once does not add a second handler.
    """
    resolved = level if level is not None else DOCAPI_CONFIG.log_level
    root = logging.getLogger()
    if not any(isinstance(h, _DocapiRichConsoleHandler) for h in root.handlers):
        handler = _DocapiRichConsoleHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        root.addHandler(handler)

    logger = get_logger()
    logger.setLevel(resolved)
    return logger


__all__ = ["LOGGER_NAME", "configure_logging", "get_logger"]

"""Logging setup shared by all cd2mka modules."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import AppInfo, LogConfig

_CONFIGURED = False


def setup_logging(verbose: bool = False, level: Optional[str] = None) -> None:
    """Configure the package logger once, rendering records on stderr with rich.

    Args:
        verbose: Force debug output regardless of the configured level.
        level: Optional level name; defaults to ``CD2MKA_LOG_LEVEL`` or WARNING.
    """
    global _CONFIGURED

    level_name = LogConfig.VERBOSE_LEVEL if verbose else (level or LogConfig.LEVEL)
    log_level = getattr(logging, level_name.upper(), logging.WARNING)

    logger = logging.getLogger(AppInfo.NAME)
    logger.setLevel(log_level)

    if _CONFIGURED:
        return

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(
        logging.Formatter(LogConfig.FORMAT, datefmt=LogConfig.DATE_FORMAT)
    )
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a module logger under the package namespace."""
    return logging.getLogger(name)

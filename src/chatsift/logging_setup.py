"""Centralized logging configuration for chatsift.

Library modules only create loggers; handlers are installed by the CLI.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Final, cast

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["configure_logging", "console"]

_LOG_LEVEL_ENV: Final[str] = "CHATSIFT_LOG_LEVEL"
_DEFAULT_LEVEL_NAME: Final[str] = "INFO"

console = Console(stderr=True)

if TYPE_CHECKING:

    class _ManagedRichHandler(RichHandler):
        _chatsift_managed: bool

else:
    _ManagedRichHandler = RichHandler


def _resolve_level(level: str | None = None) -> int:
    """Return the requested level, falling back to ``CHATSIFT_LOG_LEVEL``."""
    level_name = (level or os.getenv(_LOG_LEVEL_ENV, _DEFAULT_LEVEL_NAME)).upper()
    resolved = logging.getLevelName(level_name)
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: str | None = None) -> None:
    """Install one Rich handler on the root logger; safe to call repeatedly."""
    root_logger = logging.getLogger()

    managed_handler: _ManagedRichHandler | None = None
    for handler in root_logger.handlers:
        if isinstance(handler, RichHandler) and getattr(handler, "_chatsift_managed", False):
            managed_handler = cast("_ManagedRichHandler", handler)
            break

    if managed_handler is None:
        handler = _ManagedRichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            log_time_format="[%Y-%m-%d %H:%M:%S]",
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler._chatsift_managed = True
        root_logger.addHandler(handler)

    root_logger.setLevel(_resolve_level(level))
    logging.captureWarnings(True)

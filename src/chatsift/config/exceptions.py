"""Custom exceptions for configuration handling."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from chatsift.exceptions import ChatsiftError


class ConfigError(ChatsiftError):
    """Base exception for all configuration-related errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when an explicitly requested configuration file does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Configuration file not found: {path}")


class ConfigValidationError(ConfigError):
    """Raised when the configuration file fails validation."""

    def __init__(self, errors: Sequence[dict[str, Any]] | None = None, *, detail: str | None = None) -> None:
        self.errors = list(errors or [])
        message = f"Configuration validation failed with {len(self.errors)} error(s)."
        if detail:
            message = f"{message} {detail}"
        super().__init__(message)

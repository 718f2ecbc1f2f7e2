"""Import settings for chatsift.

Limits are an explicit value handed to ``ImportPipeline`` rather than module
globals, so each pipeline instance can be tested with its own limits.

Configuration priority (highest to lowest):
1. Keyword arguments passed to ``ImportSettings``
2. ``CHATSIFT_*`` environment variables
3. The ``[chatsift]`` table of ``.chatsift.toml``
4. Built-in defaults
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from chatsift.config.exceptions import ConfigNotFoundError, ConfigValidationError
from chatsift.constants import MAX_FILE_SIZE_BYTES, SUPPORTED_EXTENSIONS
from chatsift.security.zip import ZipValidationSettings

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".chatsift.toml"
CONFIG_TABLE = "chatsift"


class ImportSettings(BaseSettings):
    """Limits and vocabularies used by the import pipeline."""

    max_file_size: int = Field(
        default=MAX_FILE_SIZE_BYTES,
        gt=0,
        description="Hard upper bound, in bytes, for an import (and for an extracted archive entry)",
    )
    supported_extensions: tuple[str, ...] = Field(
        default=SUPPORTED_EXTENSIONS,
        description="Advisory list of expected filename extensions, without the dot",
    )
    transcript_extensions: tuple[str, ...] = Field(
        default=(".txt", ".html"),
        description="Archive entry suffixes that may hold a transcript",
    )
    transcript_keywords: tuple[str, ...] = Field(
        default=("chat", "whatsapp"),
        description="Substrings of an archive entry name that indicate a transcript",
    )
    source_fingerprints: tuple[str, ...] = Field(
        default=("WhatsApp",),
        description="Tokens that identify markup produced by the exporting application",
    )
    sniff_window: int = Field(
        default=4096,
        ge=4,
        description="Number of leading bytes scanned for container signatures",
    )
    zip_max_member_count: int = Field(default=2000, gt=0)
    zip_max_total_size: int = Field(default=500 * 1024 * 1024, gt=0)
    zip_max_compression_ratio: float = Field(default=100.0, gt=1.0)

    model_config = SettingsConfigDict(
        extra="forbid",
        frozen=True,
        env_prefix="CHATSIFT_",
    )

    @field_validator("supported_extensions")
    @classmethod
    def _normalize_extensions(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(ext.lower().lstrip(".") for ext in value if ext.strip("."))

    @field_validator("transcript_extensions")
    @classmethod
    def _normalize_suffixes(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        suffixes = tuple("." + ext.lower().lstrip(".") for ext in value if ext.strip("."))
        if not suffixes:
            msg = "at least one transcript extension is required"
            raise ValueError(msg)
        return suffixes

    @field_validator("transcript_keywords")
    @classmethod
    def _lowercase_keywords(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(keyword.lower() for keyword in value if keyword)

    def zip_limits(self) -> ZipValidationSettings:
        """Return archive validation limits derived from these settings."""
        return ZipValidationSettings(
            max_total_size=self.zip_max_total_size,
            max_member_size=self.max_file_size,
            max_member_count=self.zip_max_member_count,
            max_compression_ratio=self.zip_max_compression_ratio,
        )


def _env_override_keys() -> set[str]:
    """Return the setting names currently provided through ``CHATSIFT_*`` variables."""
    prefix = ImportSettings.model_config.get("env_prefix", "")
    return {name for name in ImportSettings.model_fields if f"{prefix}{name}".upper() in os.environ}


def find_config_file(start_dir: Path) -> Path | None:
    """Search ``start_dir`` and its parents for ``.chatsift.toml``."""
    current = start_dir.expanduser().resolve()
    for candidate_dir in (current, *current.parents):
        candidate = candidate_dir / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_settings(path: Path | None = None, **overrides: Any) -> ImportSettings:
    """Load ``ImportSettings`` from a TOML file.

    Args:
        path: Explicit configuration file. When omitted, ``.chatsift.toml`` is
            searched upward from the working directory and defaults are used if
            none exists.
        **overrides: Values that take precedence over the file.

    Raises:
        ConfigNotFoundError: ``path`` was given but does not exist.
        ConfigValidationError: The file is not valid TOML or fails validation.

    """
    if path is not None:
        if not path.is_file():
            raise ConfigNotFoundError(path)
        config_path: Path | None = path
    else:
        config_path = find_config_file(Path.cwd())

    file_data: dict[str, Any] = {}
    if config_path is not None:
        try:
            raw = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as exc:
            raise ConfigValidationError(detail=f"{config_path}: {exc}") from exc
        table = raw.get(CONFIG_TABLE, {})
        if not isinstance(table, dict):
            raise ConfigValidationError(detail=f"{config_path}: [{CONFIG_TABLE}] must be a table")
        # Environment variables win over the file, so drop file keys they set.
        env_keys = _env_override_keys()
        file_data = {key: value for key, value in table.items() if key not in env_keys}
        logger.debug("Loaded settings from %s", config_path)

    try:
        return ImportSettings(**{**file_data, **overrides})
    except ValidationError as exc:
        raise ConfigValidationError(exc.errors()) from exc

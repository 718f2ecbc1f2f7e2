"""Configuration for the import pipeline."""

from chatsift.config.exceptions import ConfigError, ConfigNotFoundError, ConfigValidationError
from chatsift.config.settings import ImportSettings, find_config_file, load_settings

__all__ = [
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "ImportSettings",
    "find_config_file",
    "load_settings",
]

"""Configuration loading and validation."""

from .loader import load_config, validate_config
from .schema import (
    DEFAULT_WINDOW_SIZE,
    ClassifierConfig,
    LoggingConfig,
    ParserConfig,
    RemoteSourceConfig,
    StacklensConfig,
)

__all__ = [
    # Loader
    "load_config",
    "validate_config",
    # Root config
    "StacklensConfig",
    # Sections
    "ClassifierConfig",
    "LoggingConfig",
    "ParserConfig",
    "RemoteSourceConfig",
    # Defaults
    "DEFAULT_WINDOW_SIZE",
]

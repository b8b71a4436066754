"""Configuration loader with YAML parsing and environment variable substitution."""

import os
import re
from pathlib import Path

import yaml

from ..utils.async_helpers import ConfigError
from .schema import StacklensConfig


# ${NAME} or ${NAME:-fallback}; NAME must be a shell-style identifier
ENV_REFERENCE = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<default>[^}]*))?\}")


def substitute_env_vars(text: str) -> str:
    """Expand environment references in a stacklens YAML document.

    Lets deployment-specific values such as the source server URL stay out
    of the committed file::

        remote:
          base_url: ${STACKLENS_SOURCE_URL:-http://localhost:8000/sources}

    A set variable always wins over the fallback, even when it is empty.

    Raises:
        ConfigError: If a reference without fallback names an unset variable
    """

    def expand(match: re.Match[str]) -> str:
        name = match.group("name")
        value = os.environ.get(name, match.group("default"))
        if value is None:
            raise ConfigError(f"Environment variable {name} not found")
        return value

    return ENV_REFERENCE.sub(expand, text)


def load_config(path: Path) -> StacklensConfig:
    """
    Load configuration from YAML file with environment variable substitution.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated StacklensConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigError: If environment variables are missing or config is inconsistent
        ValidationError: If config doesn't match schema
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with path.open() as f:
        raw_yaml = f.read()

    yaml_with_env = substitute_env_vars(raw_yaml)

    # An empty file means "all defaults"
    config_dict = yaml.safe_load(yaml_with_env) or {}
    if not isinstance(config_dict, dict):
        raise ConfigError(f"Configuration root must be a mapping: {path}")

    config = StacklensConfig.model_validate(config_dict)

    validate_config(config)

    return config


def validate_config(config: StacklensConfig) -> None:
    """
    Perform additional cross-field validation.

    Args:
        config: Configuration to validate

    Raises:
        ConfigError: If the remote loader is enabled without a base URL
    """
    if config.remote.enabled and not config.remote.base_url:
        raise ConfigError("Remote source loader enabled but remote.base_url missing")

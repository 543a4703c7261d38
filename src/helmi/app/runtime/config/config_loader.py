"""Configuration loading with environment variable substitution."""

import os
from pathlib import Path
from typing import Any, Literal, overload

import yaml
from loguru import logger
from pydantic import ValidationError

from helmi.app.runtime.config.config_data import ConfigData
from helmi.app.runtime.config.config_utils import substitute_env_vars

CONFIG_PATH = Path(os.getenv("HELMI_CONFIG", "config.yaml"))


@overload
def load_config(file_path: Path = ..., *, processed: Literal[False]) -> dict[str, Any]: ...


@overload
def load_config(file_path: Path = ..., processed: Literal[True] = ...) -> ConfigData: ...


def load_config(
    file_path: Path = CONFIG_PATH, processed: bool = True
) -> ConfigData | dict[str, Any]:
    """
    Load a YAML file with environment variable substitution.

    Args:
        file_path: Path to the YAML file (default: config.yaml or $HELMI_CONFIG)
        processed: Whether to substitute environment variables and validate.
                  - True (default): substitute env vars and validate as ConfigData
                  - False: return raw dict without validation or substitution

    Returns:
        ConfigData if processed is True, raw dict if processed is False

    Raises:
        ValueError: If required environment variables are missing, validation fails,
                   or YAML structure is invalid (missing 'config' key)
        FileNotFoundError: If the YAML file doesn't exist

    Environment-Specific Behavior:
        Reads APP_ENVIRONMENT (default: 'development') and applies overrides from
        environment variables prefixed with the uppercased environment name
        (e.g., PRODUCTION_TIMEOUT -> TIMEOUT) before substitution.
    """
    with open(file_path) as f:
        content = f.read()

    env_mode = os.getenv("APP_ENVIRONMENT", "development")

    if processed:
        logger.info(f"Loading configuration for environment: {env_mode}")

        prefix = f"{env_mode.upper()}_"
        env_variables = [
            (var, value) for var, value in os.environ.items() if var.startswith(prefix)
        ]
        logger.debug(f"Applying {len(env_variables)} environment-specific overrides")

        for var_name, var_value in env_variables:
            os.environ[var_name[len(prefix) :]] = var_value

        content = substitute_env_vars(content)

    try:
        loaded: dict[str, Any] = yaml.safe_load(content)
        if not processed:
            return loaded
        if not loaded:
            raise ValueError("Failed to parse YAML")
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e

    if "config" not in loaded:
        raise ValueError("Invalid YAML structure: missing 'config' key")

    try:
        config = ConfigData(**(loaded["config"] or {}))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    logger.debug(
        f"Configuration loaded: timeout={config.release.status_timeout}, "
        f"topology={config.topology.backend}, auth={config.broker.auth_enabled}"
    )
    return config

"""Broker configuration: data model, loader and substitution helpers."""

from helmi.app.runtime.config.config_data import (
    BrokerConfig,
    ConfigData,
    LoggingConfig,
    ReleaseConfig,
    ToolConfig,
    TopologyConfig,
)
from helmi.app.runtime.config.config_loader import CONFIG_PATH, load_config
from helmi.app.runtime.config.config_utils import parse_duration, substitute_env_vars

__all__ = [
    "BrokerConfig",
    "ConfigData",
    "LoggingConfig",
    "ReleaseConfig",
    "ToolConfig",
    "TopologyConfig",
    "CONFIG_PATH",
    "load_config",
    "parse_duration",
    "substitute_env_vars",
]

"""Configuration data model.

Mirrors the ``config:`` section of ``config.yaml``. All models are frozen:
configuration is read once at startup and never changes afterwards.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from helmi.app.runtime.config.config_utils import parse_duration


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class BrokerConfig(_Frozen):
    """HTTP surface of the broker."""

    host: str = "0.0.0.0"
    port: int = 5000
    username: str = ""
    password: str = ""
    catalog_path: str = "catalog.yaml"

    @field_validator("username", "password", mode="before")
    @classmethod
    def _empty_credential(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def auth_enabled(self) -> bool:
        return bool(self.username)


class ReleaseConfig(_Frozen):
    """Release naming, staleness and credential settings."""

    status_timeout: timedelta = Field(
        default=timedelta(minutes=30),
        description="Under-provisioned releases older than this count as failed",
    )
    domain: str | None = Field(
        default=None,
        description="External domain returned by cluster/address lookups",
    )
    name_prefix: str = "helmi"

    @field_validator("status_timeout", mode="before")
    @classmethod
    def _parse_timeout(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_duration(value)
        return value

    @field_validator("domain", mode="before")
    @classmethod
    def _empty_domain(cls, value: Any) -> Any:
        return value or None


class ToolConfig(_Frozen):
    """An external command line tool."""

    binary: str


class TopologyConfig(_Frozen):
    backend: Literal["kubectl", "kr8s"] = "kubectl"


class LoggingConfig(_Frozen):
    level: str = "INFO"
    serialize: bool = False

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


class ConfigData(_Frozen):
    """Root of the broker configuration."""

    broker: BrokerConfig = Field(default_factory=BrokerConfig)
    release: ReleaseConfig = Field(default_factory=ReleaseConfig)
    helm: ToolConfig = Field(default_factory=lambda: ToolConfig(binary="helm"))
    kubectl: ToolConfig = Field(default_factory=lambda: ToolConfig(binary="kubectl"))
    topology: TopologyConfig = Field(default_factory=TopologyConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

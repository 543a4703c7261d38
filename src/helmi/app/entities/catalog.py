"""Service catalog model and loader.

The catalog file is a YAML list of services, each with its plans::

    - _id: 201cb950-e640-4453-9d91-4708ea0a1342
      _name: cassandra
      description: Apache Cassandra
      chart: incubator/cassandra
      chart-version: 0.1.0
      chart-values:
        image.tag: "3.11"
        config.cluster_name: "{{ lookup('username', 'cluster') }}"
      user-credentials:
        host: "{{ lookup('cluster', 'address') }}"
        port: "{{ lookup('cluster', 'port:9042') }}"
      plans:
        - _id: 7b16d6aa-260a-4b8d-b12c-464d2cedb9d0
          _name: dev
          chart-values:
            replicaCount: 1

A plan's chart and version replace the service's when set; its
``chart-values`` and ``user-credentials`` override the service's key by key.
The catalog is loaded once at startup and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

# =============================================================================
# Credential Templates
# =============================================================================


@dataclass(frozen=True)
class TemplateString:
    """A single credential template."""

    template: str


@dataclass(frozen=True)
class TemplateList:
    """A list of credential templates, each resolved independently."""

    templates: tuple[str, ...]


CredentialTemplate = TemplateString | TemplateList


def _scalar_to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _to_credential_template(value: Any) -> CredentialTemplate:
    if isinstance(value, TemplateString | TemplateList):
        return value
    if isinstance(value, list | tuple):
        return TemplateList(tuple(_scalar_to_str(v) for v in value))
    return TemplateString(_scalar_to_str(value))


# =============================================================================
# Catalog Entities
# =============================================================================


class CatalogPlan(BaseModel):
    """A plan of a catalog service."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default="", alias="_id")
    name: str = Field(default="", alias="_name")
    description: str = ""

    chart: str = ""
    chart_version: str = Field(default="", alias="chart-version")
    chart_values: dict[str, str] = Field(default_factory=dict, alias="chart-values")
    user_credentials: dict[str, CredentialTemplate] = Field(
        default_factory=dict, alias="user-credentials"
    )

    @field_validator("chart", "chart_version", "description", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _scalar_to_str(value)

    @field_validator("chart_values", mode="before")
    @classmethod
    def _coerce_chart_values(cls, value: Any) -> dict[str, str]:
        return {str(k): _scalar_to_str(v) for k, v in (value or {}).items()}

    @field_validator("user_credentials", mode="before")
    @classmethod
    def _coerce_user_credentials(cls, value: Any) -> dict[str, CredentialTemplate]:
        return {str(k): _to_credential_template(v) for k, v in (value or {}).items()}


class CatalogService(CatalogPlan):
    """A catalog service; the plan fields act as service-wide defaults."""

    plans: tuple[CatalogPlan, ...] = ()

    @field_validator("plans", mode="before")
    @classmethod
    def _coerce_plans(cls, value: Any) -> Any:
        return value or ()

    def get_plan(self, plan_id: str) -> CatalogPlan | None:
        for plan in self.plans:
            if plan.id.lower() == plan_id.lower():
                return plan
        return None


class Catalog(BaseModel):
    """All offerable services."""

    model_config = ConfigDict(frozen=True)

    services: tuple[CatalogService, ...] = ()

    def get_service(self, service_id: str) -> CatalogService | None:
        """Find a service by id, ignoring case."""
        for service in self.services:
            if service.id.lower() == service_id.lower():
                return service
        return None

    def get_plan(self, service_id: str, plan_id: str) -> CatalogPlan | None:
        """Find a plan of a service by ids, ignoring case."""
        service = self.get_service(service_id)
        if service is None:
            return None
        return service.get_plan(plan_id)


# =============================================================================
# Merging
# =============================================================================


def merge_chart_values(service: CatalogPlan, plan: CatalogPlan) -> dict[str, str]:
    """Service chart values overridden key by key by the plan's."""
    return {**service.chart_values, **plan.chart_values}


def merge_user_credentials(
    service: CatalogPlan, plan: CatalogPlan
) -> dict[str, CredentialTemplate]:
    """Service credential templates overridden key by key by the plan's."""
    return {**service.user_credentials, **plan.user_credentials}


# =============================================================================
# Loading
# =============================================================================


def load_catalog(file_path: Path) -> Catalog:
    """Load the catalog YAML file.

    Args:
        file_path: Path to the catalog file

    Returns:
        The validated catalog

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid YAML or not a valid catalog
    """
    with open(file_path) as f:
        content = f.read()

    try:
        loaded = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing catalog YAML: {e}") from e

    if loaded is None:
        loaded = []
    if isinstance(loaded, dict):
        loaded = loaded.get("services") or []
    if not isinstance(loaded, list):
        raise ValueError("Invalid catalog structure: expected a list of services")

    try:
        catalog = Catalog(services=tuple(loaded))
    except ValidationError as e:
        raise ValueError(f"Invalid catalog: {e}") from e

    logger.info(
        f"Loaded catalog from {file_path} with {len(catalog.services)} services"
    )
    return catalog

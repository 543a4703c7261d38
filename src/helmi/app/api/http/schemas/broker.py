"""Open Service Broker request and response schemas.

Only the subset of the OSB v2 API the broker implements is modelled.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from helmi.app.entities.catalog import Catalog

# =============================================================================
# Catalog
# =============================================================================


class PlanEntry(BaseModel):
    id: str
    name: str
    description: str
    free: bool = True
    bindable: bool = True


class ServiceEntry(BaseModel):
    id: str
    name: str
    description: str
    bindable: bool = True
    plan_updateable: bool = False
    plans: list[PlanEntry] = Field(default_factory=list)


class CatalogResponse(BaseModel):
    """Response model for ``GET /v2/catalog``."""

    services: list[ServiceEntry] = Field(default_factory=list)

    @classmethod
    def from_catalog(cls, catalog: Catalog) -> CatalogResponse:
        return cls(
            services=[
                ServiceEntry(
                    id=service.id,
                    name=service.name,
                    description=service.description,
                    plans=[
                        PlanEntry(id=plan.id, name=plan.name, description=plan.description)
                        for plan in service.plans
                    ],
                )
                for service in catalog.services
            ]
        )


# =============================================================================
# Instances and Bindings
# =============================================================================


class InstanceRequest(BaseModel):
    """Body of provision and bind requests.

    Both ids are required; missing or empty ids are rejected with 400.
    """

    model_config = ConfigDict(extra="allow")

    service_id: str = ""
    plan_id: str = ""

    @property
    def is_valid(self) -> bool:
        return bool(self.service_id and self.plan_id)


class LastOperationResponse(BaseModel):
    """Response model for ``GET .../last_operation``."""

    state: str = Field(description="One of 'failed', 'succeeded', 'in progress'")


class BindingResponse(BaseModel):
    """Response model for a successful bind."""

    credentials: dict[str, str | list[str]] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Error body returned on 4xx/5xx responses."""

    error: str | None = None
    description: str | None = None

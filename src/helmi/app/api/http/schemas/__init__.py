"""API schema definitions for HTTP endpoints."""

from helmi.app.api.http.schemas.broker import (
    BindingResponse,
    CatalogResponse,
    ErrorResponse,
    InstanceRequest,
    LastOperationResponse,
    PlanEntry,
    ServiceEntry,
)

__all__ = [
    "BindingResponse",
    "CatalogResponse",
    "ErrorResponse",
    "InstanceRequest",
    "LastOperationResponse",
    "PlanEntry",
    "ServiceEntry",
]

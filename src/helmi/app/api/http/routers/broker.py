"""Open Service Broker endpoints.

Endpoint Summary:
    GET    /v2/catalog                                          - Offered services and plans
    PUT    /v2/service_instances/{id}                           - Provision (install release)
    DELETE /v2/service_instances/{id}                           - Deprovision (delete release)
    GET    /v2/service_instances/{id}/last_operation            - Provisioning state
    PUT    /v2/service_instances/{id}/service_bindings/{bid}    - Bind (resolve credentials)
    DELETE /v2/service_instances/{id}/service_bindings/{bid}    - Unbind

Handlers are plain functions: FastAPI runs them in its threadpool, so the
blocking helm and kubectl calls never stall the event loop.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from helmi.app.api.http.deps import get_catalog, get_orchestrator, require_basic_auth
from helmi.app.api.http.errors import INVALID_REQUEST, empty_response, error_response
from helmi.app.api.http.schemas.broker import (
    BindingResponse,
    CatalogResponse,
    ErrorResponse,
    InstanceRequest,
    LastOperationResponse,
)
from helmi.app.core.release import InstanceNotFound, ReleaseOrchestrator
from helmi.app.entities.catalog import Catalog

router = APIRouter(
    prefix="/v2", tags=["broker"], dependencies=[Depends(require_basic_auth)]
)


def _accepts_incomplete(value: str) -> bool:
    return value.lower() == "true"


@router.get("/catalog", response_model=CatalogResponse, summary="Service catalog")
def get_service_catalog(catalog: Catalog = Depends(get_catalog)) -> CatalogResponse:
    return CatalogResponse.from_catalog(catalog)


@router.put(
    "/service_instances/{instance_id}",
    responses={
        202: {"description": "Provisioning accepted (asynchronous)"},
        400: {"model": ErrorResponse},
        409: {"description": "Instance already exists"},
        500: {"model": ErrorResponse},
    },
    summary="Provision a service instance",
)
def create_instance(
    instance_id: str,
    request: InstanceRequest,
    accepts_incomplete: str = "",
    orchestrator: ReleaseOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    """Install a release for the instance.

    Synchronous requests wait until the release is deployed or failed.
    """
    if not request.is_valid:
        return error_response(status.HTTP_400_BAD_REQUEST, INVALID_REQUEST)

    asynchronous = _accepts_incomplete(accepts_incomplete)
    orchestrator.install(
        request.service_id, request.plan_id, instance_id, accepts_incomplete=asynchronous
    )

    return empty_response(
        status.HTTP_202_ACCEPTED if asynchronous else status.HTTP_200_OK
    )


@router.delete(
    "/service_instances/{instance_id}",
    responses={500: {"model": ErrorResponse}},
    summary="Deprovision a service instance",
)
def delete_instance(
    instance_id: str,
    accepts_incomplete: str = "",
    orchestrator: ReleaseOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    """Delete the instance's release; deleting a missing instance succeeds."""
    orchestrator.delete(instance_id)

    if _accepts_incomplete(accepts_incomplete):
        return empty_response(status.HTTP_202_ACCEPTED)
    return empty_response()


@router.get(
    "/service_instances/{instance_id}/last_operation",
    response_model=LastOperationResponse,
    responses={410: {"description": "Instance does not exist"}},
    summary="Last operation state",
)
def query_instance(
    instance_id: str,
    orchestrator: ReleaseOrchestrator = Depends(get_orchestrator),
) -> LastOperationResponse:
    return LastOperationResponse(state=orchestrator.status(instance_id).state)


@router.put(
    "/service_instances/{instance_id}/service_bindings/{binding_id}",
    response_model=BindingResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"description": "Instance does not exist"},
        500: {"model": ErrorResponse},
    },
    summary="Bind to a service instance",
)
def bind_instance(
    instance_id: str,
    binding_id: str,
    request: InstanceRequest,
    orchestrator: ReleaseOrchestrator = Depends(get_orchestrator),
) -> BindingResponse | JSONResponse:
    """Resolve the instance's user credentials.

    Bindings are stateless, so ``binding_id`` is accepted but not stored.
    """
    if not request.is_valid:
        return error_response(status.HTTP_400_BAD_REQUEST, INVALID_REQUEST)

    try:
        credentials = orchestrator.credentials(
            request.service_id, request.plan_id, instance_id
        )
    except InstanceNotFound:
        return empty_response(status.HTTP_404_NOT_FOUND)

    return BindingResponse(credentials=credentials)


@router.delete(
    "/service_instances/{instance_id}/service_bindings/{binding_id}",
    responses={410: {"description": "Instance does not exist"}},
    summary="Unbind from a service instance",
)
def unbind_instance(
    instance_id: str,
    binding_id: str,
    orchestrator: ReleaseOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    orchestrator.unbind(instance_id)
    return empty_response()

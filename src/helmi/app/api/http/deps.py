"""FastAPI dependencies for the broker routes."""

from __future__ import annotations

import secrets

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from helmi.app.api.http.app_data import ApplicationDependencies
from helmi.app.core.release import ReleaseOrchestrator
from helmi.app.entities.catalog import Catalog
from helmi.app.runtime.config import BrokerConfig

_basic = HTTPBasic(auto_error=False)


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_orchestrator(
    deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> ReleaseOrchestrator:
    return deps.orchestrator


def get_catalog(deps: ApplicationDependencies = Depends(get_app_dependencies)) -> Catalog:
    return deps.catalog


def get_broker_config(
    deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> BrokerConfig:
    return deps.config.broker


def check_credentials(config: BrokerConfig, username: str, password: str) -> bool:
    """Validate basic auth credentials; always valid when auth is disabled."""
    if not config.auth_enabled:
        return True
    user_ok = secrets.compare_digest(username.encode(), config.username.encode())
    pass_ok = secrets.compare_digest(password.encode(), config.password.encode())
    return user_ok and pass_ok


def require_basic_auth(
    credentials: HTTPBasicCredentials | None = Depends(_basic),
    config: BrokerConfig = Depends(get_broker_config),
) -> None:
    """Reject the request with 401 unless the broker credentials match."""
    username = credentials.username if credentials else ""
    password = credentials.password if credentials else ""

    if not check_credentials(config, username, password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized.",
            headers={"WWW-Authenticate": "Basic"},
        )

"""Application assembly.

Wires configuration, catalog, external clients and the release
orchestrator together and builds the FastAPI application.
"""

from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from loguru import logger

from helmi import __version__
from helmi.app.api.http.app_data import ApplicationDependencies
from helmi.app.api.http.errors import register_exception_handlers
from helmi.app.api.http.routers import broker, health
from helmi.app.core.release import CredentialResolver, ReleaseOrchestrator, StatusParser
from helmi.app.entities.catalog import Catalog, load_catalog
from helmi.app.runtime.config import CONFIG_PATH, ConfigData, load_config
from helmi.app.runtime.logging import configure_logging
from helmi.infra.k8s import create_topology_client
from helmi.infra.shell import CommandRunner, HelmClient


def build_orchestrator(
    config: ConfigData,
    catalog: Catalog,
    runner: CommandRunner | None = None,
) -> ReleaseOrchestrator:
    """Create the orchestrator with the clients selected by the configuration."""
    runner = runner or CommandRunner()
    return ReleaseOrchestrator(
        catalog=catalog,
        deployment=HelmClient(runner, config.helm.binary),
        topology=create_topology_client(
            config.topology.backend, runner, config.kubectl.binary
        ),
        resolver=CredentialResolver(domain=config.release.domain),
        parser=StatusParser(timeout=config.release.status_timeout),
        logger=logger,
        name_prefix=config.release.name_prefix,
    )


def load_dependencies(config_path: Path = CONFIG_PATH) -> ApplicationDependencies:
    """Read configuration and catalog once and build the dependency graph."""
    config = load_config(config_path)
    configure_logging(config.logging)
    catalog = load_catalog(Path(config.broker.catalog_path))
    return ApplicationDependencies(
        config=config,
        catalog=catalog,
        orchestrator=build_orchestrator(config, catalog),
    )


def create_app(dependencies: ApplicationDependencies) -> FastAPI:
    """Build the broker FastAPI application."""
    app = FastAPI(
        title="Helmi",
        description="Open Service Broker backed by Helm releases",
        version=__version__,
    )
    app.state.app_dependencies = dependencies

    app.add_middleware(GZipMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["HEAD", "GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_credentials=True,
    )

    register_exception_handlers(app)
    app.include_router(health.router)
    app.include_router(broker.router)
    return app


def app_factory() -> FastAPI:
    """Entry point for ``uvicorn --factory helmi.app.main:app_factory``."""
    return create_app(load_dependencies())

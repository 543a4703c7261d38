"""Integration tests for application startup from the shipped config files."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from helmi.app.main import create_app, load_dependencies
from helmi.infra.k8s import KubectlTopologyClient
from helmi.infra.shell import HelmClient

REPO_ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture
def broker_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Point the shipped config at the shipped catalog with auth enabled."""
    monkeypatch.setenv("APP_ENVIRONMENT", "integration")
    monkeypatch.setenv("CATALOG_PATH", str(REPO_ROOT / "catalog.yaml"))
    monkeypatch.setenv("USERNAME", "broker")
    monkeypatch.setenv("PASSWORD", "s3cret")
    monkeypatch.setenv("TIMEOUT", "10m")
    for var in ("PORT", "DOMAIN", "TOPOLOGY_BACKEND", "LOG_LEVEL", "LOG_JSON"):
        monkeypatch.delenv(var, raising=False)


class TestApplicationStartup:
    """Test application assembly and configuration validation."""

    def test_dependencies_are_wired_from_config(self, broker_env: None) -> None:
        deps = load_dependencies(REPO_ROOT / "config.yaml")

        assert deps.config.broker.port == 5000
        assert deps.config.broker.auth_enabled
        assert {s.name for s in deps.catalog.services} == {"cassandra", "mariadb"}
        assert isinstance(deps.orchestrator.deployment, HelmClient)
        assert isinstance(deps.orchestrator.topology, KubectlTopologyClient)
        assert deps.orchestrator.parser.timeout.total_seconds() == 600

    def test_catalog_served_with_basic_auth(self, broker_env: None) -> None:
        client = TestClient(create_app(load_dependencies(REPO_ROOT / "config.yaml")))

        assert client.get("/v2/catalog").status_code == 401

        response = client.get("/v2/catalog", auth=("broker", "s3cret"))
        assert response.status_code == 200
        services = {s["name"]: s for s in response.json()["services"]}
        assert [p["name"] for p in services["cassandra"]["plans"]] == ["dev", "prod"]

    def test_missing_catalog_fails_startup(
        self, broker_env: None, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.setenv("CATALOG_PATH", str(tmp_path / "absent.yaml"))

        with pytest.raises(FileNotFoundError):
            load_dependencies(REPO_ROOT / "config.yaml")

"""Shared fixtures: a small catalog mirroring a typical service definition."""

from __future__ import annotations

from typing import Any

import pytest

from helmi.app.core.release import DeploymentStatus, Node
from helmi.app.entities.catalog import Catalog, CatalogPlan, CatalogService

SERVICE_ID = "12345"
PLAN_ID = "67890"


def plan_data() -> dict[str, Any]:
    return {
        "_id": PLAN_ID,
        "_name": "test_plan",
        "description": "plan_description",
        "chart": "plan_chart",
        "chart-version": "1.2.3",
        "chart-values": {
            "foo": "bar",
            "password": "{{ lookup('password', 'password') }}",
        },
        "user-credentials": {"key": "{{ lookup('value', 'foo') }}"},
    }


def service_data() -> dict[str, Any]:
    return {
        "_id": SERVICE_ID,
        "_name": "test_service",
        "description": "service_description",
        "chart": "service_chart",
        "chart-version": "1.2.3",
        "chart-values": {
            "foo": "bar",
            "password": "{{ lookup('password', 'password') }}",
        },
        "user-credentials": {
            "key": "{{ lookup('value', 'foo') }}",
            "hostname": "{{ lookup('cluster', 'address') }}",
            "port": "{{ lookup('cluster', 'port') }}",
        },
        "plans": [plan_data()],
    }


@pytest.fixture
def service() -> CatalogService:
    return CatalogService.model_validate(service_data())


@pytest.fixture
def plan(service: CatalogService) -> CatalogPlan:
    return service.plans[0]


@pytest.fixture
def catalog(service: CatalogService) -> Catalog:
    return Catalog(services=(service,))


@pytest.fixture
def nodes() -> list[Node]:
    return [
        Node(
            name="test_node",
            hostname="test_hostname",
            internal_ip="1.1.1.1",
            external_ip="2.2.2.2",
        )
    ]


@pytest.fixture
def deployed_status() -> DeploymentStatus:
    return DeploymentStatus(
        name="helmi12345",
        is_deployed=True,
        desired_nodes=1,
        available_nodes=1,
        node_ports={80: 30001},
        cluster_ports={80},
    )

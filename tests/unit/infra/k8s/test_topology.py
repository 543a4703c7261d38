"""Tests for the node topology clients."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from helmi.app.core.release import ExternalToolFailure, Node
from helmi.infra.k8s import (
    KubectlTopologyClient,
    create_topology_client,
    node_from_resource,
    run_sync,
)
from helmi.infra.shell import CommandResult

NODE_LIST = {
    "items": [
        {
            "metadata": {"name": "minikube"},
            "spec": {"externalID": "i-0abc"},
            "status": {
                "addresses": [
                    {"type": "InternalIP", "address": "192.168.99.100"},
                    {"type": "ExternalIP", "address": "35.1.2.3"},
                    {"type": "Hostname", "address": "minikube"},
                ]
            },
        },
        {
            "metadata": {"name": "worker-1"},
            "spec": {},
            "status": {"addresses": [{"type": "internalip", "address": "10.0.0.5"}]},
        },
    ]
}


@pytest.fixture
def mock_runner() -> MagicMock:
    """Create a mock command runner."""
    return MagicMock()


class TestNodeFromResource:
    """Tests for mapping Node resources."""

    def test_external_id_is_preferred(self) -> None:
        node = node_from_resource(NODE_LIST["items"][0])

        assert node == Node(
            name="i-0abc",
            hostname="minikube",
            internal_ip="192.168.99.100",
            external_ip="35.1.2.3",
        )

    def test_metadata_name_fallback_and_case_insensitive_types(self) -> None:
        node = node_from_resource(NODE_LIST["items"][1])

        assert node == Node(name="worker-1", internal_ip="10.0.0.5")

    def test_empty_resource(self) -> None:
        assert node_from_resource({}) == Node()


class TestKubectlTopologyClient:
    """Tests for listing nodes through kubectl."""

    def test_lists_nodes(self, mock_runner: MagicMock) -> None:
        mock_runner.run.return_value = CommandResult(
            success=True, stdout=json.dumps(NODE_LIST)
        )

        nodes = KubectlTopologyClient(mock_runner).list_nodes()

        mock_runner.run.assert_called_once_with(
            ["kubectl", "get", "nodes", "--output", "json"]
        )
        assert [n.name for n in nodes] == ["i-0abc", "worker-1"]

    def test_command_failure(self, mock_runner: MagicMock) -> None:
        mock_runner.run.return_value = CommandResult(
            success=False, stderr="Unable to connect to the server", returncode=1
        )

        with pytest.raises(ExternalToolFailure, match="Unable to connect"):
            KubectlTopologyClient(mock_runner).list_nodes()

    def test_invalid_json(self, mock_runner: MagicMock) -> None:
        mock_runner.run.return_value = CommandResult(success=True, stdout="not json")

        with pytest.raises(ExternalToolFailure, match="unparseable"):
            KubectlTopologyClient(mock_runner).list_nodes()

    def test_missing_items(self, mock_runner: MagicMock) -> None:
        mock_runner.run.return_value = CommandResult(success=True, stdout="{}")

        with pytest.raises(ExternalToolFailure, match="items"):
            KubectlTopologyClient(mock_runner).list_nodes()

    def test_missing_binary(self, mock_runner: MagicMock) -> None:
        mock_runner.run.side_effect = FileNotFoundError("kubectl")

        with pytest.raises(ExternalToolFailure) as exc_info:
            KubectlTopologyClient(mock_runner, binary="kubectl").list_nodes()

        assert exc_info.value.returncode == 127


class TestCreateTopologyClient:
    """Tests for backend selection."""

    def test_kubectl_backend(self, mock_runner: MagicMock) -> None:
        client = create_topology_client("kubectl", mock_runner, "/opt/kubectl")

        assert isinstance(client, KubectlTopologyClient)

    def test_kr8s_backend(self) -> None:
        from helmi.infra.k8s.kr8s_topology import Kr8sTopologyClient

        assert isinstance(create_topology_client("kr8s"), Kr8sTopologyClient)


class TestKr8sTopologyClient:
    """Tests for listing nodes through kr8s."""

    def test_lists_nodes(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from helmi.infra.k8s import kr8s_topology

        resources = NODE_LIST["items"]

        async def fake_list(api: object = None):
            for resource in resources:
                yield MagicMock(raw=resource)

        async def fake_api(self: object) -> object:
            return object()

        monkeypatch.setattr(kr8s_topology.Kr8sNode, "list", fake_list)
        monkeypatch.setattr(kr8s_topology.Kr8sTopologyClient, "_get_api", fake_api)

        nodes = kr8s_topology.Kr8sTopologyClient().list_nodes()

        assert [n.external_ip for n in nodes] == ["35.1.2.3", ""]

    def test_connection_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from helmi.infra.k8s import kr8s_topology

        async def failing_api(self: object) -> object:
            raise ConnectionRefusedError("no cluster")

        monkeypatch.setattr(kr8s_topology.Kr8sTopologyClient, "_get_api", failing_api)

        with pytest.raises(ExternalToolFailure, match="failed to reach cluster"):
            kr8s_topology.Kr8sTopologyClient().list_nodes()


def test_run_sync_without_running_loop() -> None:
    async def answer() -> int:
        return 42

    assert run_sync(answer()) == 42

"""Kubernetes topology clients.

Two backends list the cluster nodes:

- KubectlTopologyClient: ``kubectl get nodes --output json`` subprocess
- Kr8sTopologyClient: native kr8s API calls

Example:
    from helmi.infra.k8s import create_topology_client

    topology = create_topology_client("kubectl")
    for node in topology.list_nodes():
        print(node.name, node.external_ip)
"""

from __future__ import annotations

from typing import Literal

from helmi.app.core.release.clients import TopologyClient
from helmi.infra.shell.runner import CommandRunner

from .kubectl_topology import KubectlTopologyClient
from .nodes import node_from_resource
from .utils import run_sync

TopologyBackend = Literal["kubectl", "kr8s"]


def create_topology_client(
    backend: TopologyBackend,
    runner: CommandRunner | None = None,
    binary: str = "kubectl",
) -> TopologyClient:
    """Create the topology client for a configured backend."""
    if backend == "kr8s":
        from .kr8s_topology import Kr8sTopologyClient

        return Kr8sTopologyClient()
    return KubectlTopologyClient(runner or CommandRunner(), binary)


__all__ = [
    "KubectlTopologyClient",
    "TopologyBackend",
    "create_topology_client",
    "node_from_resource",
    "run_sync",
]

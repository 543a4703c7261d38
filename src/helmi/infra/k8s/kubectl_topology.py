"""Kubectl-based implementation of TopologyClient.

Uses a subprocess call to ``kubectl get nodes`` for the node listing.
"""

from __future__ import annotations

import json

from helmi.app.core.release.clients import TopologyClient
from helmi.app.core.release.errors import ExternalToolFailure
from helmi.app.core.release.types import Node
from helmi.infra.shell.runner import CommandRunner

from .nodes import node_from_resource


class KubectlTopologyClient(TopologyClient):
    """Topology client using kubectl subprocess calls."""

    def __init__(self, runner: CommandRunner, binary: str = "kubectl") -> None:
        self._runner = runner
        self._binary = binary

    def list_nodes(self) -> list[Node]:
        cmd = [self._binary, "get", "nodes", "--output", "json"]

        try:
            result = self._runner.run(cmd)
        except OSError as e:
            raise ExternalToolFailure(cmd, str(e), returncode=127) from e

        if not result.success:
            raise ExternalToolFailure(cmd, result.output, result.returncode)

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise ExternalToolFailure(cmd, f"unparseable node list: {e}") from e

        items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise ExternalToolFailure(cmd, "node list has no 'items' array")

        return [node_from_resource(item) for item in items]

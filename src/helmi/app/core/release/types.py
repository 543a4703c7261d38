"""Data types shared by the release layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Node:
    """A cluster machine as reported by the topology client."""

    name: str = ""
    hostname: str = ""
    internal_ip: str = ""
    external_ip: str = ""


@dataclass
class DeploymentStatus:
    """Structured form of a deployment tool status report.

    Attributes:
        name: Release name
        namespace: Namespace the release lives in
        is_failed: Report signalled failure, or the rollout is stuck
        is_deployed: Report signalled a deployed release
        desired_nodes: Sum of desired replicas over all resource blocks
        available_nodes: Sum of available replicas over all resource blocks
        node_ports: Cluster port -> node port
        cluster_ports: Every cluster port seen in the report
        last_deployed_at: Local time of the last deployment, ``datetime.min``
            when unknown
    """

    name: str = ""
    namespace: str = ""
    is_failed: bool = False
    is_deployed: bool = False
    desired_nodes: int = 0
    available_nodes: int = 0
    node_ports: dict[int, int] = field(default_factory=dict)
    cluster_ports: set[int] = field(default_factory=set)
    last_deployed_at: datetime = datetime.min


@dataclass(frozen=True)
class ReleaseStatus:
    """Classified status returned to callers of the orchestrator."""

    is_failed: bool
    is_deployed: bool
    is_available: bool

    @property
    def state(self) -> str:
        """Last-operation state; failure wins over availability."""
        if self.is_failed:
            return "failed"
        if self.is_available:
            return "succeeded"
        return "in progress"

"""Contracts of the external collaborators driven by the orchestrator.

Implementations live in :mod:`helmi.infra`; the orchestrator only sees
these interfaces so tests can substitute fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping

from .types import Node


class DeploymentClient(ABC):
    """The deployment tool (system of record for releases).

    Every method raises :class:`~.errors.ExternalToolFailure` when the tool
    fails, carrying its output verbatim.
    """

    @abstractmethod
    def install(
        self,
        name: str,
        chart: str,
        version: str | None,
        values: Mapping[str, str],
        *,
        wait: bool,
    ) -> None:
        """Install ``chart`` as release ``name``.

        Args:
            name: Release name
            chart: Chart reference
            version: Chart version, latest when ``None``
            values: Flat key path -> value overrides
            wait: Block until the release is deployed or failed
        """
        ...

    @abstractmethod
    def delete(self, name: str) -> None:
        """Delete a release and purge its history."""
        ...

    @abstractmethod
    def status(self, name: str) -> str:
        """Return the raw textual status report of a release."""
        ...

    @abstractmethod
    def get_values(self, name: str) -> dict[str, str]:
        """Return all values of a release flattened to dotted key paths."""
        ...

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Check whether a release exists."""
        ...


class TopologyClient(ABC):
    """Source of cluster node descriptors."""

    @abstractmethod
    def list_nodes(self) -> list[Node]:
        """Return all cluster nodes.

        Raises:
            ExternalToolFailure: If the cluster cannot be queried
        """
        ...

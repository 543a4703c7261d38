"""Kr8s-based implementation of TopologyClient.

Uses the kr8s library for the node listing, driven synchronously through
:func:`run_sync`.
"""

from __future__ import annotations

from typing import Any

import kr8s
from kr8s.asyncio.objects import Node as Kr8sNode

from helmi.app.core.release.clients import TopologyClient
from helmi.app.core.release.errors import ExternalToolFailure
from helmi.app.core.release.types import Node

from .nodes import node_from_resource
from .utils import run_sync


class Kr8sTopologyClient(TopologyClient):
    """Topology client using the kr8s library.

    Note: The kr8s API client is not cached because it is tied to the event
    loop that was running when created, and run_sync() creates a new loop
    per call.
    """

    async def _get_api(self) -> Any:  # Returns kr8s._api.Api
        return await kr8s.asyncio.api()

    async def list_nodes_async(self) -> list[Node]:
        api = await self._get_api()
        return [node_from_resource(node.raw) async for node in Kr8sNode.list(api=api)]

    def list_nodes(self) -> list[Node]:
        try:
            return run_sync(self.list_nodes_async())
        except kr8s.ServerError as e:
            raise ExternalToolFailure(None, f"failed to list nodes: {e}") from e
        except (OSError, ValueError) as e:
            raise ExternalToolFailure(None, f"failed to reach cluster: {e}") from e

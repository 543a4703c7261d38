"""Mapping of Kubernetes Node resources to node descriptors."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from helmi.app.core.release.types import Node

ADDRESS_FIELDS = {
    "hostname": "hostname",
    "internalip": "internal_ip",
    "externalip": "external_ip",
}


def node_from_resource(resource: Mapping[str, Any]) -> Node:
    """Build a Node from a Node resource dictionary.

    The name is ``spec.externalID`` when the cluster still reports it,
    otherwise ``metadata.name``. Addresses are matched by type ignoring case.
    """
    spec = resource.get("spec") or {}
    metadata = resource.get("metadata") or {}
    status = resource.get("status") or {}

    node = Node(name=spec.get("externalID") or metadata.get("name", ""))

    for address in status.get("addresses") or []:
        attribute = ADDRESS_FIELDS.get(str(address.get("type", "")).lower())
        if attribute:
            setattr(node, attribute, address.get("address", ""))

    return node

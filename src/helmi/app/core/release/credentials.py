"""Expansion of chart value and user credential templates.

Both entry points share the placeholder grammar of :mod:`.placeholders`
but resolve placeholders against different contexts:

- Chart values are resolved before installation. ``username`` and
  ``password`` lookups generate fresh secrets, ``env`` reads the process
  environment, everything else expands to an empty string.
- User credentials are resolved at bind time against what was actually
  deployed: the release values, the node topology and the node ports of
  the release.
"""

from __future__ import annotations

import os
import secrets
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field

from helmi.app.entities.catalog import (
    CatalogPlan,
    TemplateList,
    TemplateString,
    merge_chart_values,
    merge_user_credentials,
)

from .placeholders import LookupKind, LookupPlaceholder, render
from .types import DeploymentStatus, Node

EnvLookup = Callable[[str], str | None]
Credentials = dict[str, str | list[str]]


def generate_secret() -> str:
    """Return a random 32 character lowercase hex token."""
    return secrets.token_hex(16)


@dataclass
class ResolutionContext:
    """Everything a placeholder may be resolved against.

    Attributes:
        values: Flattened values of the deployed release
        nodes: Cluster node topology
        node_ports: Cluster port -> node port of the release
        domain: External domain override for ``cluster/address``
        environ: Environment variable accessor
        secrets: Secrets generated during this resolution, keyed by
            ``(kind, path)``
    """

    values: Mapping[str, str] = field(default_factory=dict)
    nodes: Sequence[Node] = ()
    node_ports: Mapping[int, int] = field(default_factory=dict)
    domain: str | None = None
    environ: EnvLookup = os.environ.get
    secrets: dict[tuple[str, str], str] = field(default_factory=dict)


class CredentialResolver:
    """Resolves catalog templates into chart values and credentials.

    Args:
        domain: External domain returned by ``cluster/address`` lookups
        environ: Environment variable accessor for ``env`` lookups
        secret_factory: Produces generated usernames and passwords
    """

    def __init__(
        self,
        domain: str | None = None,
        environ: EnvLookup = os.environ.get,
        secret_factory: Callable[[], str] = generate_secret,
    ) -> None:
        self.domain = domain or None
        self.environ = environ
        self.secret_factory = secret_factory

    # =========================================================================
    # Chart Values
    # =========================================================================

    def resolve_chart_values(
        self, service: CatalogPlan, plan: CatalogPlan
    ) -> dict[str, str]:
        """Materialize the chart values to install with.

        Secrets are generated once per ``(kind, path)`` within this call and
        never shared between calls. Keys resolving to an empty string are
        left out.
        """
        context = ResolutionContext(environ=self.environ)
        values: dict[str, str] = {}

        for key, template in merge_chart_values(service, plan).items():
            value = render(template, lambda p: self._install_lookup(p, context))
            if value:
                values[key] = value

        return values

    def _install_lookup(
        self, placeholder: LookupPlaceholder, context: ResolutionContext
    ) -> str:
        match placeholder.kind:
            case LookupKind.USERNAME | LookupKind.PASSWORD:
                cache_key = (placeholder.kind, placeholder.path)
                if cache_key not in context.secrets:
                    context.secrets[cache_key] = self.secret_factory()
                return context.secrets[cache_key]
            case LookupKind.ENV:
                return context.environ(placeholder.path) or ""
            case _:
                return ""

    # =========================================================================
    # User Credentials
    # =========================================================================

    def resolve_user_credentials(
        self,
        service: CatalogPlan,
        plan: CatalogPlan,
        nodes: Sequence[Node],
        status: DeploymentStatus,
        deployed_values: Mapping[str, str],
    ) -> Credentials:
        """Materialize the credentials handed out on bind.

        Keys whose value, or whose whole list, resolves empty are left out;
        empty list elements are dropped.
        """
        context = ResolutionContext(
            values=deployed_values,
            nodes=nodes,
            node_ports=status.node_ports,
            domain=self.domain,
            environ=self.environ,
        )

        def resolve(template: str) -> str:
            return render(template, lambda p: self._bind_lookup(p, context))

        credentials: Credentials = {}
        for key, template in merge_user_credentials(service, plan).items():
            match template:
                case TemplateString(template=text):
                    value = resolve(text)
                    if value:
                        credentials[key] = value
                case TemplateList(templates=texts):
                    items = [v for v in (resolve(t) for t in texts) if v]
                    if items:
                        credentials[key] = items

        return credentials

    def _bind_lookup(
        self, placeholder: LookupPlaceholder, context: ResolutionContext
    ) -> str:
        match placeholder.kind:
            case LookupKind.VALUE | LookupKind.USERNAME | LookupKind.PASSWORD:
                return context.values.get(placeholder.path, "")
            case LookupKind.CLUSTER:
                return _cluster_lookup(placeholder.path, context)
            case _:
                return ""


def _cluster_lookup(path: str, context: ResolutionContext) -> str:
    path = path.lower()

    if path.startswith("port"):
        return _node_port(path, context.node_ports)

    if path == "address":
        if context.domain:
            return context.domain
        for node in context.nodes:
            if node.external_ip:
                return node.external_ip
        for node in context.nodes:
            if node.internal_ip:
                return node.internal_ip
        return ""

    if path == "hostname":
        for node in context.nodes:
            if node.hostname:
                return node.hostname

    return ""


def _node_port(path: str, node_ports: Mapping[int, int]) -> str:
    """Node port for ``port`` or ``port:<clusterPort>``.

    Without a cluster port the lowest cluster port wins. No match is "0".
    """
    _, _, cluster_port = path.partition(":")

    for port in sorted(node_ports):
        if not cluster_port or str(port) == cluster_port:
            return str(node_ports[port])

    return "0"

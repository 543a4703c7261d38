"""Release orchestration.

Implements the broker lifecycle operations (install, delete, status,
credentials, unbind) on top of the deployment and topology clients.

Each operation is attempted exactly once. When the deployment tool fails,
a second existence check decides whether the failure means "not found",
"conflict" or a real tool error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from helmi.app.entities.catalog import Catalog, CatalogPlan, CatalogService

from .credentials import CredentialResolver, Credentials
from .errors import (
    ChartNotSpecified,
    ExternalToolFailure,
    InstanceConflict,
    InstanceNotFound,
)
from .naming import NAME_PREFIX, derive_name
from .status_parser import StatusParser
from .types import DeploymentStatus, ReleaseStatus

if TYPE_CHECKING:
    from loguru import Logger

    from .clients import DeploymentClient, TopologyClient


def get_chart(service: CatalogPlan, plan: CatalogPlan) -> str:
    """Chart of the plan, else of the service.

    Raises:
        ChartNotSpecified: If neither declares a chart
    """
    if plan.chart:
        return plan.chart
    if service.chart:
        return service.chart
    raise ChartNotSpecified(service.id, plan.id)


def get_chart_version(service: CatalogPlan, plan: CatalogPlan) -> str | None:
    """Chart version of the plan, else of the service, else ``None`` (latest)."""
    return plan.chart_version or service.chart_version or None


class ReleaseOrchestrator:
    """Maps broker instances onto releases of the deployment tool.

    Args:
        catalog: Offerable services and plans
        deployment: Deployment tool client
        topology: Cluster topology client
        resolver: Template resolver for chart values and credentials
        parser: Status report parser
        logger: Logger used for all operation logging
        name_prefix: Prefix of derived release names
    """

    def __init__(
        self,
        catalog: Catalog,
        deployment: DeploymentClient,
        topology: TopologyClient,
        resolver: CredentialResolver,
        parser: StatusParser,
        logger: Logger,
        name_prefix: str = NAME_PREFIX,
    ) -> None:
        self.catalog = catalog
        self.deployment = deployment
        self.topology = topology
        self.resolver = resolver
        self.parser = parser
        self.name_prefix = name_prefix
        self._logger = logger.bind(component="release")

    def name_for(self, instance_id: str) -> str:
        return derive_name(instance_id, self.name_prefix)

    def _lookup(
        self, service_id: str, plan_id: str
    ) -> tuple[CatalogService, CatalogPlan]:
        service = self.catalog.get_service(service_id) or CatalogService()
        plan = service.get_plan(plan_id) or CatalogPlan()
        return service, plan

    # =========================================================================
    # Install / Delete
    # =========================================================================

    def install(
        self,
        service_id: str,
        plan_id: str,
        instance_id: str,
        accepts_incomplete: bool = False,
    ) -> None:
        """Install a release for a new instance.

        With ``accepts_incomplete`` the call returns as soon as the
        deployment tool accepted the release; otherwise it waits for the
        release to be deployed or failed.

        Raises:
            ChartNotSpecified: If the catalog entry has no chart
            InstanceConflict: If the install failed because the release exists
            ExternalToolFailure: For any other deployment tool failure
        """
        name = self.name_for(instance_id)
        log = self._logger.bind(
            id=instance_id, name=name, service_id=service_id, plan_id=plan_id
        )
        service, plan = self._lookup(service_id, plan_id)

        try:
            chart = get_chart(service, plan)
        except ChartNotSpecified as e:
            log.error(f"failed to install release: {e}")
            raise

        chart_version = get_chart_version(service, plan)
        values = self.resolver.resolve_chart_values(service, plan)
        log = log.bind(chart=chart, chart_version=chart_version or "")

        try:
            self.deployment.install(
                name, chart, chart_version, values, wait=not accepts_incomplete
            )
        except ExternalToolFailure as e:
            log.error(f"failed to install release: {e}")
            if self._exists_after_failure(name):
                raise InstanceConflict(instance_id, name) from e
            raise

        log.info("new release installed")

    def delete(self, instance_id: str) -> None:
        """Delete the release of an instance.

        Deleting a release that does not exist succeeds.

        Raises:
            ExternalToolFailure: If the delete failed and the release still exists
        """
        name = self.name_for(instance_id)
        log = self._logger.bind(id=instance_id, name=name)

        try:
            self.deployment.delete(name)
        except ExternalToolFailure as e:
            if self._exists_after_failure(name) is False:
                log.info("release deleted (did not exist)")
                return
            log.error(f"failed to delete release: {e}")
            raise

        log.info("release deleted")

    # =========================================================================
    # Queries
    # =========================================================================

    def exists(self, instance_id: str) -> bool:
        """Check whether the release of an instance exists."""
        name = self.name_for(instance_id)
        try:
            return self.deployment.exists(name)
        except ExternalToolFailure as e:
            self._logger.bind(id=instance_id, name=name).error(
                f"failed to check if release exists: {e}"
            )
            raise

    def unbind(self, instance_id: str) -> None:
        """Bindings hold no state; only require the instance to exist.

        Raises:
            InstanceNotFound: If the release does not exist
        """
        if not self.exists(instance_id):
            raise InstanceNotFound(instance_id, self.name_for(instance_id))

    def deployment_status(self, instance_id: str) -> DeploymentStatus:
        """Query and parse the status report of an instance's release.

        Raises:
            InstanceNotFound: If the release does not exist
            ExternalToolFailure: For any other deployment tool failure
        """
        name = self.name_for(instance_id)
        log = self._logger.bind(id=instance_id, name=name)

        try:
            raw = self.deployment.status(name)
        except ExternalToolFailure as e:
            if self._exists_after_failure(name) is False:
                log.info("asked status for deleted release")
                raise InstanceNotFound(instance_id, name) from e
            log.error(f"failed to get release status: {e}")
            raise

        return self.parser.parse(raw, name=name)

    def status(self, instance_id: str) -> ReleaseStatus:
        """Classified status of an instance's release."""
        status = self.deployment_status(instance_id)
        self._logger.bind(id=instance_id, name=status.name).debug(
            "sending release status"
        )
        return ReleaseStatus(
            is_failed=status.is_failed,
            is_deployed=status.is_deployed,
            is_available=status.available_nodes >= status.desired_nodes,
        )

    def credentials(
        self, service_id: str, plan_id: str, instance_id: str
    ) -> Credentials:
        """Resolve the user credentials of an instance.

        Raises:
            InstanceNotFound: If the release does not exist
            ExternalToolFailure: If the deployment or topology query failed
        """
        status = self.deployment_status(instance_id)
        log = self._logger.bind(id=instance_id, name=status.name)
        service, plan = self._lookup(service_id, plan_id)

        try:
            nodes = self.topology.list_nodes()
        except ExternalToolFailure as e:
            log.error(f"failed to get kubernetes nodes: {e}")
            raise

        try:
            values = self.deployment.get_values(status.name)
        except ExternalToolFailure as e:
            log.error(f"failed to get helm values: {e}")
            raise

        credentials = self.resolver.resolve_user_credentials(
            service, plan, nodes, status, values
        )
        log.debug("sending release credentials")
        return credentials

    def _exists_after_failure(self, name: str) -> bool | None:
        """Existence check after a failed command; ``None`` if it failed too."""
        try:
            return self.deployment.exists(name)
        except ExternalToolFailure:
            return None

"""Parser for the deployment tool's textual status report.

The report is a header section followed by resource blocks separated by
blank lines::

    LAST DEPLOYED: Mon Jan  8 10:37:33 2018
    NAMESPACE: default
    STATUS: DEPLOYED

    RESOURCES:
    ==> v1/Service
    NAME           TYPE      CLUSTER-IP  EXTERNAL-IP  PORT(S)         AGE
    helmi-mariadb  NodePort  10.0.0.206  <none>       3306:31565/TCP  5s

    ==> v1beta1/Deployment
    NAME           DESIRED  CURRENT  UP-TO-DATE  AVAILABLE  AGE
    helmi-mariadb  1        1        1           0          5s

Table values are read by column offset: a header line records where each
label starts, and data lines of the same block are read at those offsets.
Any field that fails to parse keeps its default, the parser never raises.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta

from .errors import ParseDegraded
from .types import DeploymentStatus

DEFAULT_TIMEOUT = timedelta(minutes=30)

STATUS_FAILED = "STATUS: FAILED"
STATUS_DEPLOYED = "STATUS: DEPLOYED"
NAMESPACE_PREFIX = "NAMESPACE: "
DEPLOYED_PREFIX = "LAST DEPLOYED: "

DESIRED_LABEL = "DESIRED"
CURRENT_LABEL = "CURRENT"
AVAILABLE_LABEL = "AVAILABLE"
PORTS_LABEL = "PORT(S)"

# asctime layout, e.g. "Mon Jan  8 10:37:33 2018"
DEPLOYED_FORMAT = "%a %b %d %H:%M:%S %Y"


def _token_at(line: str, column: int) -> str:
    fields = line[column:].split()
    if not fields:
        raise ParseDegraded(f"no value at column {column}")
    return fields[0]


def _int_at(line: str, column: int) -> int:
    token = _token_at(line, column)
    try:
        return int(token)
    except ValueError as e:
        raise ParseDegraded(f"'{token}' is not a number") from e


def _parse_deployed_at(value: str) -> datetime:
    try:
        return datetime.strptime(value.strip(), DEPLOYED_FORMAT)
    except ValueError:
        return datetime.min


class _Columns:
    """Column offsets of the current resource block, -1 when unset."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.desired = -1
        self.current = -1
        self.available = -1
        self.ports = -1


class StatusParser:
    """Turns a raw status report into a :class:`DeploymentStatus`.

    Args:
        timeout: How long an under-provisioned release may stay that way
            before it is classified as failed
        clock: Returns the current local time
    """

    def __init__(
        self,
        timeout: timedelta = DEFAULT_TIMEOUT,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.timeout = timeout
        self.clock = clock

    def parse(self, raw_text: str, name: str = "") -> DeploymentStatus:
        status = DeploymentStatus(name=name)
        columns = _Columns()

        for line in raw_text.splitlines():
            if line.startswith(STATUS_FAILED):
                status.is_failed = True
            if line.startswith(STATUS_DEPLOYED):
                status.is_deployed = True

            if not line:
                columns.reset()
                continue

            if line.startswith(NAMESPACE_PREFIX):
                status.namespace = line[len(NAMESPACE_PREFIX) :]
            if line.startswith(DEPLOYED_PREFIX):
                status.last_deployed_at = _parse_deployed_at(
                    line[len(DEPLOYED_PREFIX) :]
                )

            self._read_replicas(line, columns, status)
            self._read_ports(line, columns, status)

        if (
            status.available_nodes < status.desired_nodes
            and self.clock() > status.last_deployed_at + self.timeout
        ):
            status.is_failed = True

        return status

    def _read_replicas(
        self, line: str, columns: _Columns, status: DeploymentStatus
    ) -> None:
        desired_at = line.find(DESIRED_LABEL)
        current_at = line.find(CURRENT_LABEL)

        if desired_at >= 0 and current_at >= 0:
            columns.desired = desired_at
            columns.current = current_at
            available_at = line.find(AVAILABLE_LABEL)
            if available_at >= 0:
                columns.available = available_at
            return

        if columns.desired < 0 or columns.current < 0:
            return

        desired = 0
        available = 0
        try:
            desired = _int_at(line, columns.desired)
        except ParseDegraded:
            pass
        try:
            available = _int_at(line, columns.current)
        except ParseDegraded:
            pass
        if columns.available >= 0:
            try:
                available = _int_at(line, columns.available)
            except ParseDegraded:
                pass

        status.desired_nodes += desired
        status.available_nodes += available

    def _read_ports(
        self, line: str, columns: _Columns, status: DeploymentStatus
    ) -> None:
        ports_at = line.find(PORTS_LABEL)
        if ports_at >= 0:
            columns.ports = ports_at
            return

        if columns.ports < 0:
            return

        try:
            entries = _token_at(line, columns.ports).split(",")
        except ParseDegraded:
            return

        for entry in entries:
            try:
                self._read_port_entry(entry, status)
            except ParseDegraded:
                continue

    @staticmethod
    def _read_port_entry(entry: str, status: DeploymentStatus) -> None:
        # "80/TCP" or "80:30001/TCP"
        fields = [f for f in entry.replace(":", "/").split("/") if f]
        try:
            numbers = [int(f) for f in fields[:-1]]
        except ValueError as e:
            raise ParseDegraded(f"bad port entry '{entry}'") from e

        if len(fields) == 2:
            status.cluster_ports.add(numbers[0])
        elif len(fields) == 3:
            cluster_port, node_port = numbers
            status.node_ports[cluster_port] = node_port
            status.cluster_ports.add(cluster_port)
        else:
            raise ParseDegraded(f"bad port entry '{entry}'")


def parse_status(
    raw_text: str,
    timeout: timedelta = DEFAULT_TIMEOUT,
    *,
    name: str = "",
    now: datetime | None = None,
) -> DeploymentStatus:
    """Parse a status report with a one-off :class:`StatusParser`."""
    clock = (lambda: now) if now is not None else datetime.now
    return StatusParser(timeout, clock).parse(raw_text, name=name)

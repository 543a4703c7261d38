"""Release error taxonomy.

Every failure that leaves the release layer is one of these types, so the
HTTP layer and the CLI can tell a missing instance from a conflicting one
from a genuinely broken external tool without inspecting messages.
"""

from __future__ import annotations


class ReleaseError(Exception):
    """Base class for all release-level failures."""


class ChartNotSpecified(ReleaseError):
    """Neither the plan nor the service declares a chart."""

    def __init__(self, service_id: str, plan_id: str) -> None:
        self.service_id = service_id
        self.plan_id = plan_id
        super().__init__(
            f"no helm chart specified for service '{service_id}' plan '{plan_id}'"
        )


class InstanceNotFound(ReleaseError):
    """The instance does not exist in the deployment tool."""

    def __init__(self, instance_id: str, name: str) -> None:
        self.instance_id = instance_id
        self.name = name
        super().__init__(f"release '{name}' for instance '{instance_id}' not found")


class InstanceConflict(ReleaseError):
    """An install was attempted against an instance that already exists."""

    def __init__(self, instance_id: str, name: str) -> None:
        self.instance_id = instance_id
        self.name = name
        super().__init__(f"release '{name}' for instance '{instance_id}' already exists")


class ExternalToolFailure(ReleaseError):
    """An external command failed.

    Attributes:
        command: The command that was executed
        output: Combined tool output, verbatim
        returncode: Process exit code (0 when the failure was not an exit code)
    """

    def __init__(
        self, command: list[str] | None, output: str, returncode: int = 0
    ) -> None:
        self.command = list(command or [])
        self.output = output
        self.returncode = returncode
        super().__init__(output.strip() or f"command failed with exit code {returncode}")


class ParseDegraded(ValueError):
    """A single field of a status report could not be parsed.

    Only raised and caught inside the status parser.
    """

"""Helm command abstractions.

This module implements the deployment client on top of the ``helm`` CLI
(Helm 2 command contract: ``install --name``, ``delete --purge``).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import yaml

from helmi.app.core.release.clients import DeploymentClient
from helmi.app.core.release.errors import ExternalToolFailure

from .runner import CommandResult, CommandRunner

if TYPE_CHECKING:
    from collections.abc import Iterator


def escape_set_value(value: str) -> str:
    """Escape a value for ``--set``, where a bare comma separates pairs."""
    return value.replace(",", "\\,")


def flatten_values(data: Any, prefix: str = "") -> dict[str, str]:
    """Flatten nested mappings into dotted key paths.

    Scalars are stringified (booleans as ``true``/``false``, null as an
    empty string); lists are skipped.
    """
    return dict(_walk(data, prefix))


def _walk(data: Any, prefix: str) -> Iterator[tuple[str, str]]:
    if isinstance(data, dict):
        for key, value in data.items():
            path = f"{prefix}.{key}" if prefix else str(key)
            yield from _walk(value, path)
    elif isinstance(data, list):
        return
    elif isinstance(data, bool):
        yield prefix, "true" if data else "false"
    elif data is None:
        yield prefix, ""
    else:
        yield prefix, str(data)


class HelmClient(DeploymentClient):
    """Deployment client driving the ``helm`` binary.

    Provides operations for:
    - Release management (install, delete)
    - Status queries (status report, values, existence)
    """

    def __init__(self, runner: CommandRunner, binary: str = "helm") -> None:
        """Initialize the Helm client.

        Args:
            runner: Command runner for executing shell commands
            binary: Name or path of the helm executable
        """
        self._runner = runner
        self._binary = binary

    def _run(self, *args: str) -> CommandResult:
        cmd = [self._binary, *args]
        try:
            return self._runner.run(cmd)
        except OSError as e:
            raise ExternalToolFailure(cmd, str(e), returncode=127) from e

    def _run_checked(self, *args: str) -> CommandResult:
        result = self._run(*args)
        if not result.success:
            raise ExternalToolFailure(
                [self._binary, *args], result.output, result.returncode
            )
        return result

    # =========================================================================
    # Release Management
    # =========================================================================

    def install(
        self,
        name: str,
        chart: str,
        version: str | None,
        values: Mapping[str, str],
        *,
        wait: bool,
    ) -> None:
        """Install a chart as a named release.

        Example:
            >>> helm.install("helmi1234", "stable/mariadb", "2.1.0",
            ...              {"rootUser.password": "s3cret"}, wait=True)
        """
        args = ["install", chart, "--name", name]

        if version:
            args.extend(["--version", version])
        if wait:
            args.append("--wait")

        for key, value in values.items():
            args.extend(["--set", f"{key}={escape_set_value(value)}"])

        self._run_checked(*args)

    def delete(self, name: str) -> None:
        self._run_checked("delete", name, "--purge")

    # =========================================================================
    # Status Queries
    # =========================================================================

    def status(self, name: str) -> str:
        return self._run_checked("status", name).stdout

    def get_values(self, name: str) -> dict[str, str]:
        result = self._run_checked("get", "values", name, "--all")

        try:
            data = yaml.safe_load(result.stdout)
        except yaml.YAMLError as e:
            raise ExternalToolFailure(
                [self._binary, "get", "values", name, "--all"],
                f"unparseable values: {e}",
            ) from e

        return flatten_values(data or {})

    def exists(self, name: str) -> bool:
        """Check release existence via ``helm status``.

        Raises:
            ExternalToolFailure: If helm failed for any reason other than
                the release not being found
        """
        result = self._run("status", name)

        if result.success:
            return bool(result.output)
        if "not found" in result.output.lower():
            return False

        raise ExternalToolFailure(
            [self._binary, "status", name], result.output, result.returncode
        )

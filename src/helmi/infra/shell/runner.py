"""Command runner for executing shell commands.

This module provides the base command execution functionality used by
the helm and kubectl clients.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path


@dataclass
class CommandResult:
    """Result of a command execution."""

    success: bool
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr, as the tools print them."""
        if self.stdout and self.stderr:
            return f"{self.stdout.rstrip()}\n{self.stderr}"
        return self.stdout or self.stderr


class CommandRunner:
    """Low-level command executor with consistent result handling.

    Commands run synchronously and block until the process exits; there is
    no timeout and no cancellation.
    """

    def __init__(self, cwd: Path | None = None) -> None:
        """Initialize the command runner.

        Args:
            cwd: Working directory for commands (defaults to the process cwd)
        """
        self.cwd = cwd

    def run(
        self,
        cmd: Sequence[str],
        *,
        check: bool = False,
    ) -> CommandResult:
        """Execute a command and return a structured result.

        Args:
            cmd: Command and arguments as a sequence
            check: Whether to raise exception on non-zero exit code

        Returns:
            CommandResult with success status, output, and return code

        Raises:
            subprocess.CalledProcessError: If check=True and command fails
            FileNotFoundError: If the executable does not exist
        """
        result = subprocess.run(
            list(cmd),
            cwd=self.cwd,
            capture_output=True,
            text=True,
            check=check,
        )
        return CommandResult(
            success=result.returncode == 0,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            returncode=result.returncode,
        )

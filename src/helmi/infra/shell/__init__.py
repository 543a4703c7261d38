"""Shell command abstractions for the deployment tool.

- runner: subprocess execution with structured results
- helm: deployment client backed by the ``helm`` CLI

Usage:
    from helmi.infra.shell import CommandRunner, HelmClient

    helm = HelmClient(CommandRunner())
    if helm.exists("helmi1234abcd"):
        print(helm.status("helmi1234abcd"))
"""

from .helm import HelmClient, escape_set_value, flatten_values
from .runner import CommandResult, CommandRunner

__all__ = [
    "CommandResult",
    "CommandRunner",
    "HelmClient",
    "escape_set_value",
    "flatten_values",
]

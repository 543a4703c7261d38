"""Release state and credential resolution.

This package turns broker requests into deployment tool calls:

- status_parser: raw status report -> DeploymentStatus
- placeholders: ``{{ lookup('kind', 'path') }}`` template grammar
- credentials: chart value and user credential resolution
- orchestrator: lifecycle operations and failure classification
"""

from .clients import DeploymentClient, TopologyClient
from .credentials import CredentialResolver, Credentials, ResolutionContext
from .errors import (
    ChartNotSpecified,
    ExternalToolFailure,
    InstanceConflict,
    InstanceNotFound,
    ReleaseError,
)
from .naming import derive_name
from .orchestrator import ReleaseOrchestrator, get_chart, get_chart_version
from .placeholders import LookupKind, LookupPlaceholder, render, tokenize
from .status_parser import DEFAULT_TIMEOUT, StatusParser, parse_status
from .types import DeploymentStatus, Node, ReleaseStatus

__all__ = [
    # Collaborators
    "DeploymentClient",
    "TopologyClient",
    # Orchestration
    "ReleaseOrchestrator",
    "derive_name",
    "get_chart",
    "get_chart_version",
    # Resolution
    "CredentialResolver",
    "Credentials",
    "ResolutionContext",
    "LookupKind",
    "LookupPlaceholder",
    "render",
    "tokenize",
    # Status
    "StatusParser",
    "parse_status",
    "DEFAULT_TIMEOUT",
    # Data classes
    "DeploymentStatus",
    "ReleaseStatus",
    "Node",
    # Errors
    "ReleaseError",
    "ChartNotSpecified",
    "InstanceNotFound",
    "InstanceConflict",
    "ExternalToolFailure",
]

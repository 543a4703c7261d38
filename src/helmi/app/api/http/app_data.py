from dataclasses import dataclass

from helmi.app.core.release import ReleaseOrchestrator
from helmi.app.entities.catalog import Catalog
from helmi.app.runtime.config import ConfigData


@dataclass
class ApplicationDependencies:
    config: ConfigData
    catalog: Catalog
    orchestrator: ReleaseOrchestrator

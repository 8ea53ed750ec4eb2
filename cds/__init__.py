"""
Contract Deployment Sequencer (CDS): deploys smart contracts in dependency order, threading earlier addresses into later constructors.
"""

from cds.application.services.deployment_sequencer import DeploymentSequencer
from cds.application.services.deployment_step import DeploymentStep
from cds.application.services.dependency_graph_service import DependencyGraphService
from cds.application.services.exceptions import DeploymentFailure, DependencyUnresolved
from cds.config import Settings, get_settings

__version__ = "0.1.0"

__all__ = [
    "DeploymentSequencer",
    "DeploymentStep",
    "DependencyGraphService",
    "DeploymentFailure",
    "DependencyUnresolved",
    "Settings",
    "get_settings",
]

"""Interface for persisting completed deployments."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from cds.domain.models import DeployedInstance


class IDeploymentRecord(ABC):
    """Stores the outcome of each confirmed deployment by artifact name."""

    @abstractmethod
    def lookup(self, name: str) -> Optional[Dict[str, Any]]:
        """Get the recorded entry for an artifact.

        Args:
            name: Artifact name

        Returns:
            Dict with at least "address", "bytecode_hash" and
            "constructor_args", or None
        """
        pass

    @abstractmethod
    def save(self, instance: DeployedInstance) -> None:
        """Record a confirmed deployment, replacing any earlier entry."""
        pass

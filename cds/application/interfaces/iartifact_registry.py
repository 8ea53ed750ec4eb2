"""Interface for artifact registry operations."""

from abc import ABC, abstractmethod
from typing import List

from cds.domain.models import ArtifactDescriptor


class IArtifactRegistry(ABC):
    """Resolves contract names to artifact descriptors."""

    @abstractmethod
    def get_artifact(self, name: str) -> ArtifactDescriptor:
        """Get an artifact by contract name.

        Args:
            name: Contract name, e.g. "StateVerification"

        Returns:
            The artifact descriptor

        Raises:
            ArtifactNotFoundError: If no artifact has that name
        """
        pass

    @abstractmethod
    def list_names(self) -> List[str]:
        """List the names of all known artifacts."""
        pass

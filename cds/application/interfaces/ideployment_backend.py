"""Interface for deployment backends."""

from abc import ABC, abstractmethod
from typing import Any, Sequence

from cds.domain.models import ArtifactDescriptor, DeployedInstance


class IDeploymentBackend(ABC):
    """Submits contract deployments to a network and waits for confirmation."""

    @abstractmethod
    def deploy(
        self, artifact: ArtifactDescriptor, constructor_args: Sequence[Any]
    ) -> DeployedInstance:
        """Deploy an artifact and block until it is confirmed.

        Args:
            artifact: The contract to deploy
            constructor_args: Concrete constructor arguments

        Returns:
            The deployed instance. Its address is final.

        Raises:
            DeploymentFailure: If the submission is rejected or not confirmed
        """
        pass

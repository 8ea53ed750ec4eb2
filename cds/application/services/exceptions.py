"""Custom exceptions for the Contract Deployment Sequencer services."""

from typing import Optional


class DeploymentError(Exception):
    """Base class for errors that abort a deployment sequence."""


class DeploymentFailure(DeploymentError):
    """Raised when the backend cannot confirm a deployment.

    This covers rejected submissions, reverted execution, transport errors
    and confirmation timeouts.
    """

    def __init__(
        self,
        reason: str,
        artifact_name: Optional[str] = None,
        step_index: Optional[int] = None,
    ):
        self.reason = reason
        self.artifact_name = artifact_name
        self.step_index = step_index
        super().__init__(self._format())

    def _format(self) -> str:
        if self.artifact_name is None:
            return self.reason
        if self.step_index is None:
            return f"Deployment of {self.artifact_name} failed: {self.reason}"
        return (
            f"Deployment of {self.artifact_name} (step {self.step_index + 1}) "
            f"failed: {self.reason}"
        )

    def at_step(self, artifact_name: str, step_index: int) -> "DeploymentFailure":
        """Return a copy tagged with the step that failed."""
        return DeploymentFailure(self.reason, artifact_name, step_index)


class DependencyUnresolved(DeploymentError):
    """Raised when a step needs an address that is not available.

    This is a configuration error in the step ordering and is detected
    before anything is submitted.
    """

    def __init__(self, artifact_name: str, dependency: str, detail: str = ""):
        self.artifact_name = artifact_name
        self.dependency = dependency
        message = f"{artifact_name} depends on {dependency}, which is not deployed earlier in the sequence"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class DeploymentRecordError(DeploymentError):
    """Raised when the deployment record cannot be read or written."""


class ArtifactNotFoundError(ValueError):
    """Raised when a requested artifact cannot be found in the registry."""


class ArtifactFormatError(ValueError):
    """Raised when a build artifact is missing required fields."""


class AbiEncodingError(ValueError):
    """Raised when constructor arguments cannot be ABI-encoded."""

"""Deploys StateVerification, then ProductProvenance pointing at it."""

from typing import List, Optional

from cds.domain.models import DeployedInstance
from cds.application.interfaces.ideployment_backend import IDeploymentBackend
from cds.application.interfaces.iartifact_registry import IArtifactRegistry
from cds.application.interfaces.ideployment_record import IDeploymentRecord
from cds.application.services.deployment_sequencer import DeploymentSequencer
from cds.application.services.deployment_step import DeploymentStep

STATE_VERIFICATION = "StateVerification"
PRODUCT_PROVENANCE = "ProductProvenance"


def build_provenance_steps(registry: IArtifactRegistry) -> List[DeploymentStep]:
    """Build the two-step provenance sequence.

    ProductProvenance takes the StateVerification address as its only
    constructor argument.
    """
    state_verification = registry.get_artifact(STATE_VERIFICATION)
    product_provenance = registry.get_artifact(PRODUCT_PROVENANCE)

    return [
        DeploymentStep.without_args(state_verification),
        DeploymentStep(
            artifact=product_provenance,
            args_producer=lambda addresses: [addresses[STATE_VERIFICATION]],
            depends_on=(STATE_VERIFICATION,),
        ),
    ]


def deploy_provenance(
    backend: IDeploymentBackend,
    registry: IArtifactRegistry,
    record: Optional[IDeploymentRecord] = None,
    resume: bool = False,
) -> List[DeployedInstance]:
    """Run the provenance migration.

    Returns:
        [StateVerification instance, ProductProvenance instance]

    Raises:
        DeploymentFailure: If either deployment fails
        DependencyUnresolved: If the sequence is malformed
    """
    sequencer = DeploymentSequencer(backend, record=record, resume=resume)
    return sequencer.run(build_provenance_steps(registry))

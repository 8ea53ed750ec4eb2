"""
Basic example demonstrating how to use the Contract Deployment Sequencer (CDS).

Deploys the provenance contracts against the simulated chain, then shows how
an arbitrary sequence with a shared library can be built by hand.
"""

from cds.domain.models import ArtifactDescriptor
from cds.application.services.deployment_sequencer import DeploymentSequencer
from cds.application.services.deployment_step import DeploymentStep
from cds.infrastructure.backends.in_memory_backend import InMemoryBackend
from cds.infrastructure.logging_config import configure_logging
from cds.infrastructure.registry.artifact_registry import InMemoryArtifactRegistry
from cds.migrations.provenance import deploy_provenance


def main():
    configure_logging("INFO")

    registry = InMemoryArtifactRegistry(
        [
            ArtifactDescriptor(name="StateVerification", bytecode="0x6080604052"),
            ArtifactDescriptor(
                name="ProductProvenance",
                abi=(
                    {
                        "type": "constructor",
                        "inputs": [{"name": "_stateVerification", "type": "address"}],
                    },
                ),
                bytecode="0x6080604052",
            ),
        ]
    )
    backend = InMemoryBackend()

    for instance in deploy_provenance(backend, registry):
        print(f"{instance.name}: {instance.address}")

    # A hand-built sequence: two consumers of the same library
    library = ArtifactDescriptor(name="Library")
    steps = [DeploymentStep.without_args(library)]
    for name in ("ConsumerA", "ConsumerB"):
        steps.append(
            DeploymentStep(
                artifact=ArtifactDescriptor(
                    name=name,
                    abi=({"type": "constructor", "inputs": [{"type": "address"}]},),
                ),
                args_producer=lambda addresses: [addresses["Library"]],
                depends_on=("Library",),
            )
        )

    for edge in DeploymentSequencer.plan(steps):
        print(f"{edge.dependent} needs {edge.dependency}")
    for instance in DeploymentSequencer(backend).run(steps):
        print(f"{instance.name}: {instance.address} args={list(instance.constructor_args)}")


if __name__ == "__main__":
    main()

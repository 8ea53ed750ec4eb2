"""End-to-end tests of the StateVerification -> ProductProvenance migration."""

import pytest

from cds.application.services.exceptions import (
    ArtifactNotFoundError,
    DeploymentFailure,
)
from cds.infrastructure.backends.in_memory_backend import InMemoryBackend
from cds.infrastructure.records.deployment_record import JsonDeploymentRecord
from cds.infrastructure.registry.artifact_registry import (
    FileArtifactRegistry,
    InMemoryArtifactRegistry,
)
from cds.migrations.provenance import build_provenance_steps, deploy_provenance
from cds.test.fixtures import ADDRESS_A, ADDRESS_B


def test_build_provenance_steps(registry):
    steps = build_provenance_steps(registry)

    assert [s.name for s in steps] == ["StateVerification", "ProductProvenance"]
    assert steps[0].depends_on == ()
    assert steps[1].depends_on == ("StateVerification",)
    assert steps[1].resolve_args({"StateVerification": ADDRESS_A}) == [ADDRESS_A]


def test_deploy_provenance(scripted_backend, registry):
    instances = deploy_provenance(scripted_backend, registry)

    assert [(i.name, i.address) for i in instances] == [
        ("StateVerification", ADDRESS_A),
        ("ProductProvenance", ADDRESS_B),
    ]
    assert scripted_backend.calls[1] == ("ProductProvenance", [ADDRESS_A])


def test_deploy_provenance_failure_never_submits_product_provenance(
    failing_backend, registry
):
    with pytest.raises(DeploymentFailure, match="network timeout"):
        deploy_provenance(failing_backend, registry)
    assert "ProductProvenance" not in failing_backend.submitted_names()


def test_missing_artifact(scripted_backend, state_verification):
    registry = InMemoryArtifactRegistry([state_verification])
    with pytest.raises(ArtifactNotFoundError):
        deploy_provenance(scripted_backend, registry)
    assert scripted_backend.calls == []


def test_resume_after_partial_failure(tmp_path, build_dir):
    registry = FileArtifactRegistry(build_dir)
    record = JsonDeploymentRecord(tmp_path / "deployments.json")

    first_run = InMemoryBackend(fail_on={"ProductProvenance": "out of gas"})
    with pytest.raises(DeploymentFailure):
        deploy_provenance(first_run, registry, record=record)
    recorded = record.lookup("StateVerification")["address"]

    second_run = InMemoryBackend(deployer="0x" + "99" * 20)
    instances = deploy_provenance(second_run, registry, record=record, resume=True)

    assert instances[0].address == recorded
    assert instances[0].reused
    assert second_run.submissions == [("ProductProvenance", [recorded])]
    assert record.lookup("ProductProvenance")["address"] == instances[1].address

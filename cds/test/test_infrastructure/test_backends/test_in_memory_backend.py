import pytest

from cds.application.services.exceptions import DeploymentFailure
from cds.domain.models import normalize_address
from cds.infrastructure.backends.in_memory_backend import InMemoryBackend


def test_addresses_are_deterministic_and_distinct(state_verification, product_provenance):
    first = InMemoryBackend()
    second = InMemoryBackend()

    a1 = first.deploy(state_verification, [])
    b1 = first.deploy(product_provenance, [a1.address])
    a2 = second.deploy(state_verification, [])

    assert a1.address == a2.address
    assert a1.address != b1.address
    assert normalize_address(b1.address) == b1.address
    assert b1.constructor_args == (a1.address,)
    assert first.submitted_names() == ["StateVerification", "ProductProvenance"]


def test_deployer_changes_addresses(state_verification):
    default = InMemoryBackend().deploy(state_verification, [])
    other = InMemoryBackend(deployer="0x" + "42" * 20).deploy(state_verification, [])
    assert default.address != other.address


def test_injected_failure(state_verification):
    backend = InMemoryBackend(fail_on={"StateVerification": "insufficient funds"})

    with pytest.raises(DeploymentFailure, match="insufficient funds"):
        backend.deploy(state_verification, [])
    assert backend.nonce == 0
    assert backend.submitted_names() == ["StateVerification"]


def test_wrong_constructor_args_fail(product_provenance):
    backend = InMemoryBackend()
    with pytest.raises(DeploymentFailure, match="takes 1 argument"):
        backend.deploy(product_provenance, [])

import pytest

from cds.domain.models import (
    ArtifactDescriptor,
    DeployedInstance,
    normalize_address,
)


def test_normalize_address_lowercases():
    address = "0xAbCdEf0123456789aBcDeF0123456789AbCdEf01"
    assert normalize_address(address) == address.lower()


@pytest.mark.parametrize(
    "value",
    [
        "",
        "0x1234",
        "abcdef0123456789abcdef0123456789abcdef01",
        "0xZZcdef0123456789abcdef0123456789abcdef01",
        None,
    ],
)
def test_normalize_address_rejects_malformed(value):
    with pytest.raises(ValueError, match="Invalid address"):
        normalize_address(value)


def test_constructor_inputs(product_provenance, state_verification):
    assert product_provenance.constructor_inputs() == ["address"]
    # No constructor entry in the ABI means no arguments
    assert state_verification.constructor_inputs() == []


def test_bytecode_hash_ignores_hex_case():
    lower = ArtifactDescriptor(name="A", bytecode="0xabcdef")
    upper = ArtifactDescriptor(name="A", bytecode="0xABCDEF")
    other = ArtifactDescriptor(name="A", bytecode="0xabcdee")
    assert lower.bytecode_hash() == upper.bytecode_hash()
    assert lower.bytecode_hash() != other.bytecode_hash()


def test_deployed_instance_is_immutable(state_verification):
    instance = DeployedInstance(
        artifact=state_verification,
        address="0x" + "11" * 20,
    )
    assert instance.name == "StateVerification"
    with pytest.raises(Exception):
        instance.address = "0x" + "22" * 20  # type: ignore[misc]

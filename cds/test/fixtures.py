"""Shared test data and test doubles."""

from typing import Any, Dict, List, Sequence

from cds.domain.models import ArtifactDescriptor, DeployedInstance
from cds.application.interfaces.ideployment_backend import IDeploymentBackend

STATE_VERIFICATION_ABI: List[Dict[str, Any]] = [
    {"type": "function", "name": "verify", "inputs": [], "outputs": []},
]
PRODUCT_PROVENANCE_ABI: List[Dict[str, Any]] = [
    {
        "type": "constructor",
        "inputs": [{"name": "_stateVerification", "type": "address"}],
        "stateMutability": "nonpayable",
    },
    {"type": "function", "name": "registerProduct", "inputs": [], "outputs": []},
]

ADDRESS_A = "0x" + "a" * 39 + "1"
ADDRESS_B = "0x" + "b" * 39 + "2"


class ScriptedBackend(IDeploymentBackend):
    """Backend that hands out preset addresses and logs every call."""

    def __init__(self, addresses: Sequence[str], failures: Dict[str, Exception] = None):
        self.addresses = list(addresses)
        self.failures = dict(failures or {})
        self.calls: List[tuple] = []
        self.confirmed: List[str] = []

    def deploy(self, artifact: ArtifactDescriptor, constructor_args) -> DeployedInstance:
        self.calls.append((artifact.name, list(constructor_args)))
        if artifact.name in self.failures:
            raise self.failures[artifact.name]
        instance = DeployedInstance(
            artifact=artifact,
            address=self.addresses.pop(0),
            constructor_args=tuple(constructor_args),
        )
        self.confirmed.append(artifact.name)
        return instance

    def submitted_names(self) -> List[str]:
        return [name for name, _ in self.calls]

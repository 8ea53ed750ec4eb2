import hashlib
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from cds.domain.models import ArtifactDescriptor, DeployedInstance
from cds.application.interfaces.ideployment_backend import IDeploymentBackend
from cds.application.services.exceptions import AbiEncodingError, DeploymentFailure
from cds.infrastructure.abi.encoder import encode_constructor_args

DEFAULT_DEPLOYER = "0x" + "00" * 19 + "01"


class InMemoryBackend(IDeploymentBackend):
    """Simulated chain for dry runs and tests.

    Addresses are derived from the deployer address and a nonce, so the same
    sequence of deployments always yields the same addresses.
    """

    def __init__(
        self,
        deployer: str = DEFAULT_DEPLOYER,
        fail_on: Optional[Dict[str, str]] = None,
    ):
        self.deployer = deployer.lower()
        self.fail_on = dict(fail_on or {})
        self.nonce = 0
        self.submissions: List[Tuple[str, List[Any]]] = []
        self.logger = logging.getLogger(__name__)

    def deploy(
        self, artifact: ArtifactDescriptor, constructor_args: Sequence[Any]
    ) -> DeployedInstance:
        args = list(constructor_args)
        self.submissions.append((artifact.name, args))

        try:
            encoded = encode_constructor_args(artifact.constructor_inputs(), args)
        except AbiEncodingError as e:
            raise DeploymentFailure(str(e), artifact.name) from e

        if artifact.name in self.fail_on:
            raise DeploymentFailure(self.fail_on[artifact.name], artifact.name)

        seed = f"{self.deployer}:{self.nonce}".encode()
        address = "0x" + hashlib.sha256(seed).hexdigest()[:40]
        tx_hash = "0x" + hashlib.sha256(seed + encoded.encode()).hexdigest()
        self.nonce += 1

        instance = DeployedInstance(
            artifact=artifact,
            address=address,
            transaction_hash=tx_hash,
            constructor_args=tuple(args),
        )
        self.logger.debug("Simulated deployment of %s at %s", artifact.name, address)
        return instance

    def submitted_names(self) -> List[str]:
        """Names of every artifact submitted so far, in order."""
        return [name for name, _ in self.submissions]

import logging
import time
from itertools import count
from typing import Any, Callable, Dict, List, Optional, Sequence

import requests

from cds.domain.models import ArtifactDescriptor, DeployedInstance, normalize_address
from cds.application.interfaces.ideployment_backend import IDeploymentBackend
from cds.application.services.exceptions import AbiEncodingError, DeploymentFailure
from cds.infrastructure.abi.encoder import encode_constructor_args


class JsonRpcBackend(IDeploymentBackend):
    """
    Deploys contracts through an Ethereum JSON-RPC node.

    Transactions are sent with eth_sendTransaction, so the sending account
    must be managed (unlocked) by the node. Confirmation is awaited by
    polling eth_getTransactionReceipt until the receipt appears or the
    timeout expires.
    """

    def __init__(
        self,
        rpc_url: str,
        deployer_address: Optional[str] = None,
        gas_limit: Optional[int] = None,
        confirmation_timeout: float = 120.0,
        poll_interval: float = 1.0,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.rpc_url = rpc_url
        self.deployer_address = (
            normalize_address(deployer_address) if deployer_address else None
        )
        self.gas_limit = gas_limit
        self.confirmation_timeout = confirmation_timeout
        self.poll_interval = poll_interval
        self.session = session or requests.Session()
        self._sleep = sleep
        self._clock = clock
        self._ids = count(1)
        self.logger = logging.getLogger(__name__)

    def deploy(
        self, artifact: ArtifactDescriptor, constructor_args: Sequence[Any]
    ) -> DeployedInstance:
        args = list(constructor_args)
        try:
            encoded = encode_constructor_args(artifact.constructor_inputs(), args)
        except AbiEncodingError as e:
            raise DeploymentFailure(str(e), artifact.name) from e

        bytecode = artifact.bytecode
        if not bytecode or bytecode in ("0x", "0x0"):
            raise DeploymentFailure(
                "artifact has no bytecode (abstract contract or interface?)",
                artifact.name,
            )
        if not bytecode.startswith("0x"):
            bytecode = "0x" + bytecode

        tx: Dict[str, Any] = {"from": self._sender(), "data": bytecode + encoded}
        if self.gas_limit is not None:
            tx["gas"] = hex(self.gas_limit)

        tx_hash = self._call("eth_sendTransaction", [tx])
        self.logger.info("Submitted %s in transaction %s", artifact.name, tx_hash)

        receipt = self._wait_for_receipt(artifact.name, tx_hash)
        if receipt.get("status") in ("0x0", "0x00", 0):
            raise DeploymentFailure(
                f"transaction {tx_hash} reverted", artifact.name
            )
        address = receipt.get("contractAddress")
        if not address:
            raise DeploymentFailure(
                f"receipt for {tx_hash} has no contract address", artifact.name
            )

        return DeployedInstance(
            artifact=artifact,
            address=normalize_address(address),
            transaction_hash=tx_hash,
            constructor_args=tuple(args),
        )

    def _sender(self) -> str:
        if self.deployer_address:
            return self.deployer_address
        accounts: List[str] = self._call("eth_accounts", [])
        if not accounts:
            raise DeploymentFailure("node manages no accounts and none is configured")
        self.deployer_address = normalize_address(accounts[0])
        self.logger.info("Using node account %s as deployer", self.deployer_address)
        return self.deployer_address

    def _wait_for_receipt(self, name: str, tx_hash: str) -> Dict[str, Any]:
        deadline = self._clock() + self.confirmation_timeout
        while True:
            receipt = self._call("eth_getTransactionReceipt", [tx_hash])
            if receipt:
                return receipt
            if self._clock() >= deadline:
                raise DeploymentFailure(
                    f"transaction {tx_hash} not confirmed within "
                    f"{self.confirmation_timeout:g}s",
                    name,
                )
            self._sleep(self.poll_interval)

    def _call(self, method: str, params: List[Any]) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        try:
            response = self.session.post(self.rpc_url, json=payload, timeout=30)
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as e:
            raise DeploymentFailure(f"{method} request failed: {e}") from e
        except ValueError as e:
            raise DeploymentFailure(f"{method} returned invalid JSON") from e

        if body.get("error"):
            error = body["error"]
            message = error.get("message", error) if isinstance(error, dict) else error
            raise DeploymentFailure(f"{method} error: {message}")
        return body.get("result")

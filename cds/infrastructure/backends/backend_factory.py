from typing import Optional

from cds.config import Settings
from cds.application.interfaces.ideployment_backend import IDeploymentBackend
from cds.infrastructure.backends.in_memory_backend import InMemoryBackend
from cds.infrastructure.backends.jsonrpc_backend import JsonRpcBackend


class BackendFactory:
    @staticmethod
    def get_backend(kind: str, settings: Optional[Settings] = None) -> IDeploymentBackend:
        settings = settings or Settings()
        if kind == "memory":
            if settings.DEPLOYER_ADDRESS:
                return InMemoryBackend(deployer=settings.DEPLOYER_ADDRESS)
            return InMemoryBackend()
        elif kind == "rpc":
            return JsonRpcBackend(
                rpc_url=settings.RPC_URL,
                deployer_address=settings.DEPLOYER_ADDRESS,
                gas_limit=settings.GAS_LIMIT,
                confirmation_timeout=settings.CONFIRMATION_TIMEOUT,
                poll_interval=settings.POLL_INTERVAL,
            )
        else:
            raise ValueError(f"Unsupported backend type: {kind}")

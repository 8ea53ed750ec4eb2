import json
import logging
import os
from pathlib import Path
from typing import Dict, Generator

import pytest

from cds.domain.models import ArtifactDescriptor
from cds.application.services.exceptions import DeploymentFailure
from cds.infrastructure.registry.artifact_registry import InMemoryArtifactRegistry
from cds.test.fixtures import (
    ADDRESS_A,
    ADDRESS_B,
    PRODUCT_PROVENANCE_ABI,
    STATE_VERIFICATION_ABI,
    ScriptedBackend,
)


@pytest.fixture
def state_verification() -> ArtifactDescriptor:
    return ArtifactDescriptor(
        name="StateVerification",
        abi=tuple(STATE_VERIFICATION_ABI),
        bytecode="0x6080604052348015600f57600080fd5b50",
    )


@pytest.fixture
def product_provenance() -> ArtifactDescriptor:
    return ArtifactDescriptor(
        name="ProductProvenance",
        abi=tuple(PRODUCT_PROVENANCE_ABI),
        bytecode="0x608060405234801561001057600080fd5b5060",
    )


@pytest.fixture
def registry(state_verification, product_provenance) -> InMemoryArtifactRegistry:
    return InMemoryArtifactRegistry([state_verification, product_provenance])


@pytest.fixture
def scripted_backend() -> ScriptedBackend:
    return ScriptedBackend([ADDRESS_A, ADDRESS_B])


@pytest.fixture
def failing_backend() -> ScriptedBackend:
    return ScriptedBackend(
        [ADDRESS_A, ADDRESS_B],
        failures={"StateVerification": DeploymentFailure("network timeout")},
    )


@pytest.fixture
def build_dir(tmp_path: Path) -> Path:
    """Create a Truffle-style build directory with both contracts."""
    contracts = tmp_path / "build" / "contracts"
    contracts.mkdir(parents=True)
    artifacts = {
        "StateVerification": (STATE_VERIFICATION_ABI, "0x6080604052348015600f57600080fd5b50"),
        "ProductProvenance": (PRODUCT_PROVENANCE_ABI, "0x608060405234801561001057600080fd5b5060"),
    }
    for name, (abi, bytecode) in artifacts.items():
        (contracts / f"{name}.json").write_text(
            json.dumps(
                {
                    "contractName": name,
                    "abi": abi,
                    "bytecode": bytecode,
                    "sourcePath": f"contracts/{name}.sol",
                }
            )
        )
    return contracts


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Provide a clean environment for tests."""
    original_env: Dict[str, str] = dict(os.environ)

    env_vars = [
        "BACKEND",
        "RPC_URL",
        "DEPLOYER_ADDRESS",
        "BUILD_DIR",
        "GAS_LIMIT",
        "CONFIRMATION_TIMEOUT",
        "POLL_INTERVAL",
        "RECORD_FILE",
        "LOG_LEVEL",
        "LIBRARY_LOG_LEVEL",
        "LOG_FILE",
    ]
    for var in env_vars:
        if var in os.environ:
            del os.environ[var]

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """Undo handlers installed by configure_logging."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    levels = {
        name: logging.getLogger(name).level
        for name in ("cds", "urllib3", "requests")
    }
    level = root_logger.level
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers = handlers
    root_logger.setLevel(level)
    for name, saved in levels.items():
        logging.getLogger(name).setLevel(saved)

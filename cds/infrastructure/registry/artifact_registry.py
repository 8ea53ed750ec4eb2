"""Artifact registries backed by build output or by memory."""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from cds.domain.models import ArtifactDescriptor
from cds.application.interfaces.iartifact_registry import IArtifactRegistry
from cds.application.services.exceptions import (
    ArtifactFormatError,
    ArtifactNotFoundError,
)


class FileArtifactRegistry(IArtifactRegistry):
    """Loads Truffle-style build artifacts from ``<build_dir>/<Name>.json``.

    Each file must contain ``abi`` and ``bytecode``; ``contractName``, when
    present, must match the file name. Loaded descriptors are cached.
    """

    def __init__(self, build_dir: Union[str, Path]):
        self.build_dir = Path(build_dir)
        self._cache: Dict[str, ArtifactDescriptor] = {}
        self.logger = logging.getLogger(__name__)

    def get_artifact(self, name: str) -> ArtifactDescriptor:
        if name in self._cache:
            return self._cache[name]

        path = self.build_dir / f"{name}.json"
        if not path.is_file():
            raise ArtifactNotFoundError(f"No build artifact for {name} in {self.build_dir}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ArtifactFormatError(f"{path} is not valid JSON: {e}") from e

        descriptor = self._parse(name, data, path)
        self._cache[name] = descriptor
        self.logger.debug("Loaded artifact %s from %s", name, path)
        return descriptor

    def list_names(self) -> List[str]:
        if not self.build_dir.is_dir():
            return []
        return sorted(p.stem for p in self.build_dir.glob("*.json"))

    @staticmethod
    def _parse(name: str, data: dict, path: Path) -> ArtifactDescriptor:
        if not isinstance(data, dict):
            raise ArtifactFormatError(f"{path} does not contain a JSON object")

        contract_name = data.get("contractName", name)
        if contract_name != name:
            raise ArtifactFormatError(
                f"{path} declares contractName {contract_name!r}, expected {name!r}"
            )

        abi = data.get("abi")
        if not isinstance(abi, list):
            raise ArtifactFormatError(f"{path} is missing an 'abi' list")

        bytecode = data.get("bytecode")
        if not isinstance(bytecode, str):
            raise ArtifactFormatError(f"{path} is missing 'bytecode'")

        return ArtifactDescriptor(
            name=name,
            abi=tuple(abi),
            bytecode=bytecode,
            source_path=data.get("sourcePath"),
        )


class InMemoryArtifactRegistry(IArtifactRegistry):
    """Registry of descriptors registered in code."""

    def __init__(self, artifacts: Optional[List[ArtifactDescriptor]] = None):
        self._artifacts: Dict[str, ArtifactDescriptor] = {}
        for artifact in artifacts or []:
            self.register(artifact)

    def register(self, artifact: ArtifactDescriptor) -> None:
        self._artifacts[artifact.name] = artifact

    def get_artifact(self, name: str) -> ArtifactDescriptor:
        if name not in self._artifacts:
            raise ArtifactNotFoundError(f"Artifact {name} is not registered")
        return self._artifacts[name]

    def list_names(self) -> List[str]:
        return sorted(self._artifacts)

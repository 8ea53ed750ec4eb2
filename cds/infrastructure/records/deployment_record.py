import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from cds.domain.models import DeployedInstance, canonical_args
from cds.application.interfaces.ideployment_record import IDeploymentRecord
from cds.application.services.exceptions import DeploymentRecordError


class JsonDeploymentRecord(IDeploymentRecord):
    """Deployment record kept in a JSON file.

    The file maps artifact names to ``address``, ``transaction_hash``,
    ``bytecode_hash``, ``constructor_args`` and ``deployed_at``. It is
    rewritten after every save so that an interrupted run still leaves the
    confirmed deployments on disk.

    An existing file is read when the record is created, so a corrupt file
    is reported before anything is deployed.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.logger = logging.getLogger(__name__)
        self._load()

    def _load(self) -> Dict[str, Dict[str, Any]]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise DeploymentRecordError(
                f"Deployment record {self.path} is not valid JSON: {e}"
            ) from e
        except OSError as e:
            raise DeploymentRecordError(
                f"Cannot read deployment record {self.path}: {e}"
            ) from e

        if not isinstance(data, dict):
            raise DeploymentRecordError(
                f"Deployment record {self.path} is not a JSON object"
            )
        for name, entry in data.items():
            if not isinstance(entry, dict) or "address" not in entry:
                raise DeploymentRecordError(
                    f"Deployment record {self.path} has a malformed entry for {name}"
                )
        return data

    def lookup(self, name: str) -> Optional[Dict[str, Any]]:
        return self._load().get(name)

    def save(self, instance: DeployedInstance) -> None:
        data = self._load()
        data[instance.name] = {
            "address": instance.address,
            "transaction_hash": instance.transaction_hash,
            "bytecode_hash": instance.artifact.bytecode_hash(),
            "constructor_args": canonical_args(instance.constructor_args),
            "deployed_at": datetime.now(timezone.utc).isoformat(),
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        tmp_path.replace(self.path)
        self.logger.debug("Recorded %s at %s in %s", instance.name, instance.address, self.path)

    def entries(self) -> Dict[str, Dict[str, Any]]:
        """All recorded entries."""
        return self._load()

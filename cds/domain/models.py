"""Core domain models for the Contract Deployment Sequencer."""

import hashlib
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")


def normalize_address(value: str) -> str:
    """Validate an address and return it in lower-case form.

    Args:
        value: A 0x-prefixed, 40 hex digit address

    Returns:
        The lower-cased address

    Raises:
        ValueError: If the value is not a well-formed address
    """
    if not isinstance(value, str) or not ADDRESS_PATTERN.match(value):
        raise ValueError(f"Invalid address: {value!r}")
    return value.lower()


def canonical_args(args: Sequence[Any]) -> List[Any]:
    """JSON-friendly form of constructor arguments, used to compare runs.

    Bytes become 0x-prefixed hex and address-shaped strings are lower-cased.
    """
    result: List[Any] = []
    for value in args:
        if isinstance(value, (bytes, bytearray)):
            value = "0x" + bytes(value).hex()
        elif isinstance(value, str) and ADDRESS_PATTERN.match(value):
            value = value.lower()
        elif isinstance(value, (list, tuple)):
            value = canonical_args(value)
        result.append(value)
    return result


@dataclass(frozen=True)
class ArtifactDescriptor:
    """A deployable contract: its name, ABI and creation bytecode."""

    name: str
    abi: Tuple[Dict[str, Any], ...] = ()
    bytecode: str = "0x"
    source_path: Optional[str] = None

    def constructor_inputs(self) -> List[str]:
        """Get the ABI types of the constructor inputs.

        Returns:
            List of type strings, empty if the ABI declares no constructor
        """
        for entry in self.abi:
            if entry.get("type") == "constructor":
                return [inp["type"] for inp in entry.get("inputs", [])]
        return []

    def bytecode_hash(self) -> str:
        """SHA-256 hex digest of the creation bytecode."""
        return hashlib.sha256(self.bytecode.lower().encode()).hexdigest()


@dataclass(frozen=True)
class DeployedInstance:
    """Result of a confirmed deployment."""

    artifact: ArtifactDescriptor
    address: str
    transaction_hash: Optional[str] = None
    constructor_args: Tuple[Any, ...] = ()
    reused: bool = False

    @property
    def name(self) -> str:
        return self.artifact.name


@dataclass(frozen=True)
class DependencyEdge:
    """`dependent` needs the address of `dependency` as constructor input."""

    dependent: str
    dependency: str

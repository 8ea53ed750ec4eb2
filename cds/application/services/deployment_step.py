"""Deployment steps and the address view handed to argument producers."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Mapping, Sequence, Set, Tuple

from cds.domain.models import ArtifactDescriptor
from cds.application.services.exceptions import DependencyUnresolved


class AddressBook(Mapping[str, str]):
    """Read-only view of the addresses deployed before a step.

    Reading any other name raises DependencyUnresolved. Every successful
    read is remembered in ``reads``.
    """

    def __init__(self, owner: str, addresses: Dict[str, str]):
        self._owner = owner
        self._addresses = addresses
        self.reads: Set[str] = set()

    def __getitem__(self, name: str) -> str:
        if name not in self._addresses:
            raise DependencyUnresolved(self._owner, name)
        self.reads.add(name)
        return self._addresses[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._addresses)

    def __len__(self) -> int:
        return len(self._addresses)


ArgsProducer = Callable[[AddressBook], List[Any]]


def _no_args(addresses: AddressBook) -> List[Any]:
    return []


def placeholder_address(index: int) -> str:
    """Stand-in address for the step at ``index`` during a dry run."""
    return "0x" + f"{index + 1:040x}"


@dataclass(frozen=True)
class DeploymentStep:
    """One artifact to deploy plus how to build its constructor arguments."""

    artifact: ArtifactDescriptor
    args_producer: ArgsProducer = _no_args
    depends_on: Tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return self.artifact.name

    @classmethod
    def without_args(cls, artifact: ArtifactDescriptor) -> "DeploymentStep":
        """Build a step with no constructor arguments and no dependencies."""
        return cls(artifact=artifact)

    def resolve_args(self, addresses: Dict[str, str]) -> List[Any]:
        """Call the producer with the addresses deployed so far.

        Raises:
            DependencyUnresolved: If the producer reads an address that is
                not in ``addresses``
        """
        return list(self.args_producer(AddressBook(self.name, addresses)))

    def dry_run(self, earlier: Sequence[str]) -> Set[str]:
        """Call the producer against placeholder addresses of earlier steps.

        Args:
            earlier: Names of the steps that come before this one

        Returns:
            Names the producer read, together with the declared dependencies

        Raises:
            DependencyUnresolved: If the producer reads a name outside ``earlier``
        """
        book = AddressBook(
            self.name, {name: placeholder_address(i) for i, name in enumerate(earlier)}
        )
        self.args_producer(book)
        return book.reads | set(self.depends_on)

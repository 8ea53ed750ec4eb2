"""Service for deploying contracts in dependency order."""

import logging
from typing import Any, Dict, List, Optional, Sequence, Set

from cds.domain.models import DeployedInstance, DependencyEdge, canonical_args
from cds.application.interfaces.ideployment_backend import IDeploymentBackend
from cds.application.interfaces.ideployment_record import IDeploymentRecord
from cds.application.services.dependency_graph_service import DependencyGraphService
from cds.application.services.deployment_step import DeploymentStep
from cds.application.services.exceptions import (
    DeploymentError,
    DeploymentFailure,
    DeploymentRecordError,
)


class DeploymentSequencer:
    """Deploys a fixed sequence of artifacts, one at a time.

    Addresses of earlier deployments are threaded into the constructor
    arguments of later ones. Exactly one submission is in flight at any
    time, and a step is never submitted before every step it depends on
    has been confirmed.

    A failure aborts the remaining steps. Already confirmed deployments
    are left in place, since they cannot be undone on-chain.
    """

    def __init__(
        self,
        backend: IDeploymentBackend,
        record: Optional[IDeploymentRecord] = None,
        resume: bool = False,
    ):
        """Initialize the sequencer.

        Args:
            backend: Backend that performs the deployments
            record: Optional record every confirmed deployment is written to
            resume: Reuse recorded deployments whose bytecode, constructor
                arguments and dependencies are unchanged
        """
        if resume and record is None:
            raise ValueError("resume requires a deployment record")
        self.backend = backend
        self.record = record
        self.resume = resume
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def dependencies(steps: Sequence[DeploymentStep]) -> Dict[str, Set[str]]:
        """Validate a sequence and find what each step depends on.

        Every producer is dry-run against placeholder addresses of the steps
        before it, so a producer reading a later or unknown step fails here,
        before anything is submitted.

        Returns:
            Step name to the names it depends on, declared or read

        Raises:
            DependencyUnresolved: If the ordering is malformed
        """
        graph = DependencyGraphService.from_steps(steps)
        graph.check_order()

        names = [step.name for step in steps]
        return {
            step.name: step.dry_run(names[:index]) for index, step in enumerate(steps)
        }

    @classmethod
    def plan(cls, steps: Sequence[DeploymentStep]) -> List[DependencyEdge]:
        """Validate a sequence without submitting anything.

        Returns:
            The dependency edges of the sequence, in step order

        Raises:
            DependencyUnresolved: If the ordering is malformed
        """
        deps = cls.dependencies(steps)
        order = [step.name for step in steps]
        return [
            DependencyEdge(dependent=step.name, dependency=dep)
            for step in steps
            for dep in sorted(deps[step.name], key=order.index)
        ]

    def run(self, steps: Sequence[DeploymentStep]) -> List[DeployedInstance]:
        """Deploy each step in order.

        Args:
            steps: Ordered deployment steps

        Returns:
            One deployed instance per step, in input order

        Raises:
            DependencyUnresolved: If the ordering is malformed. Raised before
                any submission.
            DeploymentFailure: If the backend fails a step. Later steps are
                not started.
            DeploymentRecordError: If a confirmed deployment cannot be recorded
        """
        deps = self.dependencies(steps)

        addresses: Dict[str, str] = {}
        fresh: Set[str] = set()
        instances: List[DeployedInstance] = []

        for index, step in enumerate(steps):
            args = step.resolve_args(addresses)
            instance = self._reuse_recorded(step, args, deps[step.name] & fresh)
            if instance is None:
                instance = self._deploy_step(index, step, args)
                fresh.add(step.name)
            addresses[step.name] = instance.address
            instances.append(instance)

        self.logger.info(
            "Deployment sequence complete: %s",
            ", ".join(f"{i.name}={i.address}" for i in instances),
        )
        return instances

    def _deploy_step(
        self, index: int, step: DeploymentStep, args: List[Any]
    ) -> DeployedInstance:
        self.logger.info(
            "Deploying %s (step %d) with args %s", step.name, index + 1, args
        )
        try:
            instance = self.backend.deploy(step.artifact, args)
        except DeploymentFailure as e:
            failure = e.at_step(step.name, index)
            self.logger.error("%s", failure)
            raise failure from e
        except DeploymentError:
            raise
        except Exception as e:
            failure = DeploymentFailure(str(e), step.name, index)
            self.logger.error("%s", failure)
            raise failure from e

        self.logger.info("Deployed %s at %s", step.name, instance.address)
        if self.record is not None:
            try:
                self.record.save(instance)
            except (OSError, TypeError, ValueError) as e:
                error = DeploymentRecordError(
                    f"{step.name} (step {index + 1}) was deployed at "
                    f"{instance.address} but could not be recorded: {e}"
                )
                self.logger.error("%s", error)
                raise error from e
        return instance

    def _reuse_recorded(
        self, step: DeploymentStep, args: List[Any], fresh_deps: Set[str]
    ) -> Optional[DeployedInstance]:
        if not self.resume or self.record is None:
            return None
        entry = self.record.lookup(step.name)
        if entry is None:
            return None

        if fresh_deps:
            reason = "dependencies were redeployed: " + ", ".join(sorted(fresh_deps))
        elif entry.get("bytecode_hash") != step.artifact.bytecode_hash():
            reason = "bytecode changed"
        elif entry.get("constructor_args") != canonical_args(args):
            reason = "constructor arguments changed"
        else:
            reason = None

        if reason is not None:
            self.logger.info(
                "Not reusing %s recorded at %s (%s); redeploying",
                step.name,
                entry.get("address"),
                reason,
            )
            return None

        self.logger.info("Reusing recorded %s at %s", step.name, entry["address"])
        return DeployedInstance(
            artifact=step.artifact,
            address=entry["address"],
            transaction_hash=entry.get("transaction_hash"),
            constructor_args=tuple(args),
            reused=True,
        )

import pytest

from cds.domain.models import ArtifactDescriptor
from cds.application.services.dependency_graph_service import DependencyGraphService
from cds.application.services.deployment_step import DeploymentStep
from cds.application.services.exceptions import DependencyUnresolved


def step(name: str, *deps: str) -> DeploymentStep:
    return DeploymentStep(
        artifact=ArtifactDescriptor(name=name),
        args_producer=lambda addresses: [addresses[d] for d in deps],
        depends_on=tuple(deps),
    )


def test_topological_sort_puts_dependencies_first():
    """
    Chain: Registry -> Verifier -> Provenance, listed in reverse.
    """
    graph = DependencyGraphService.from_steps(
        [
            step("Provenance", "Verifier"),
            step("Verifier", "Registry"),
            step("Registry"),
        ]
    )
    assert graph.topological_sort() == ["Registry", "Verifier", "Provenance"]


def test_topological_sort_keeps_input_order_for_independent_steps():
    graph = DependencyGraphService.from_steps(
        [step("B"), step("A"), step("C", "A", "B")]
    )
    assert graph.topological_sort() == ["B", "A", "C"]


def test_topological_sort_returns_valid_sequence_unchanged():
    graph = DependencyGraphService.from_steps([step("A"), step("B", "A"), step("C")])
    graph.check_order()
    assert graph.topological_sort() == ["A", "B", "C"]


def test_cycle_is_rejected():
    with pytest.raises(DependencyUnresolved, match="cycle"):
        DependencyGraphService.from_steps([step("A", "B"), step("B", "A")])


def test_self_dependency_is_a_cycle():
    with pytest.raises(DependencyUnresolved, match="cycle: A -> A"):
        DependencyGraphService.from_steps([step("A", "A")])


def test_unknown_dependency_is_rejected():
    with pytest.raises(DependencyUnresolved) as exc_info:
        DependencyGraphService.from_steps([step("A", "Missing")])
    assert exc_info.value.artifact_name == "A"
    assert exc_info.value.dependency == "Missing"


def test_duplicate_step_name_is_rejected():
    with pytest.raises(DependencyUnresolved, match="duplicate"):
        DependencyGraphService.from_steps([step("A"), step("A")])


def test_check_order_accepts_dependency_first():
    graph = DependencyGraphService.from_steps([step("A"), step("B", "A")])
    graph.check_order()


def test_check_order_rejects_dependency_after_dependent():
    graph = DependencyGraphService.from_steps([step("B", "A"), step("A")])
    with pytest.raises(DependencyUnresolved, match="listed after"):
        graph.check_order()

"""Service for building and analyzing dependency graphs between deployment steps."""

import heapq
from typing import Dict, Set, List, Sequence
from collections import defaultdict

from cds.application.services.deployment_step import DeploymentStep
from cds.application.services.exceptions import DependencyUnresolved


class DependencyGraphService:
    """Service for building and analyzing dependency graphs between steps.

    Builds a graph of "needs the address of" relationships between the steps
    of a deployment and provides checks on it, including topological sorting
    to determine a valid deployment order.
    """

    def __init__(self) -> None:
        self.edges: Dict[str, Set[str]] = defaultdict(set)
        self.steps: Dict[str, DeploymentStep] = {}

    @classmethod
    def from_steps(cls, steps: Sequence[DeploymentStep]) -> "DependencyGraphService":
        """Build a dependency graph from deployment steps.

        Args:
            steps: Steps to build the graph from

        Returns:
            A populated service

        Raises:
            DependencyUnresolved: If a name is duplicated, a dependency is
                unknown, or a cycle is detected
        """
        graph = cls()
        for step in steps:
            if step.name in graph.steps:
                raise DependencyUnresolved(step.name, step.name, "duplicate step name")
            graph.steps[step.name] = step

        for step in steps:
            for dep in step.depends_on:
                if dep not in graph.steps:
                    raise DependencyUnresolved(step.name, dep, "no such step")
                graph.edges[step.name].add(dep)

        # Check for cycles using DFS
        visited: Set[str] = set()
        path: List[str] = []

        def find_cycle(node: str) -> List[str]:
            if node in path:
                return path[path.index(node):] + [node]
            if node in visited:
                return []

            visited.add(node)
            path.append(node)

            for dep in sorted(graph.edges[node]):
                cycle = find_cycle(dep)
                if cycle:
                    return cycle

            path.pop()
            return []

        for node in graph.steps:
            if node not in visited:
                cycle = find_cycle(node)
                if cycle:
                    raise DependencyUnresolved(
                        cycle[0], cycle[1], "cycle: " + " -> ".join(cycle)
                    )

        return graph

    def check_order(self) -> None:
        """Verify that every dependency precedes its dependent in step order.

        Raises:
            DependencyUnresolved: On the first dependency that comes later
        """
        seen: Set[str] = set()
        for name in self.steps:
            for dep in self.steps[name].depends_on:
                if dep not in seen:
                    raise DependencyUnresolved(name, dep, "listed after its dependent")
            seen.add(name)

    def topological_sort(self) -> List[str]:
        """Sort steps so that dependencies come first.

        Returns:
            Step names in deployment order. Among the steps that are ready,
            the one listed first goes first, so a sequence that already
            passes check_order comes back unchanged.

        Raises:
            DependencyUnresolved: If a cycle is detected
        """
        # If A depends on B, increment A's in-degree
        in_degree = {name: len(self.edges[name]) for name in self.steps}

        position = {name: index for index, name in enumerate(self.steps)}

        # Start with nodes that have no dependencies
        ready = [position[name] for name in in_degree if in_degree[name] == 0]
        heapq.heapify(ready)
        names = list(self.steps)
        order = []

        while ready:
            node = names[heapq.heappop(ready)]
            order.append(node)

            # For each node that depends on the current node
            for name in self.steps:
                if node in self.edges[name]:
                    in_degree[name] -= 1
                    if in_degree[name] == 0:
                        heapq.heappush(ready, position[name])

        if len(order) != len(self.steps):
            remaining = [n for n in self.steps if n not in order]
            raise DependencyUnresolved(
                remaining[0], sorted(self.edges[remaining[0]])[0], "cycle detected"
            )

        return order

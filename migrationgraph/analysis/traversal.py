"""
Traversal engine: transitive dependency closure of one seed component
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

from migrationgraph.core.models import AnalysisInputError, Component
from migrationgraph.graph.component_graph import ComponentGraph

logger = logging.getLogger(__name__)


@dataclass
class TraversalResult:
    """Components reachable from one seed plus the notes explaining why"""
    seed_id: str
    discovered: Dict[str, Component] = field(default_factory=dict)
    notes: List[str] = field(default_factory=list)


def discovery_note(component: Component, source: Component) -> str:
    return f"pulled in {component.name} ({component.type.value}) because it is required by {source.name}"


def unresolved_note(dependency_id: str, source: Component) -> str:
    return (f"dependency {dependency_id} referenced by {source.name} "
            f"could not be found and was skipped.")


def resolve(seed: Component, graph: ComponentGraph) -> TraversalResult:
    """
    Walk `dependencies` edges breadth-first from a seed

    Cycles, self-edges and duplicate edges are absorbed by the visited set;
    dangling edges are recorded as notes and skipped. The seed is never
    part of the discovered set and discovery order is first-seen.

    Args:
        seed: Starting component, must be present in the graph
        graph: Component graph of the organization

    Returns:
        TraversalResult with discovered components and notes

    Raises:
        AnalysisInputError: If the seed is not in the graph
    """
    if seed.id not in graph:
        raise AnalysisInputError(f"Component not found in graph: {seed.id}", missing_ids=[seed.id])

    result = TraversalResult(seed_id=seed.id)
    visited: Set[str] = {seed.id}
    reported_missing: Set[Tuple[str, str]] = set()
    queue = deque([seed])

    while queue:
        source = queue.popleft()
        for dep in source.dependencies:
            if dep.id in visited:
                continue

            component = graph.get(dep.id)
            if component is None:
                if (source.id, dep.id) not in reported_missing:
                    reported_missing.add((source.id, dep.id))
                    result.notes.append(unresolved_note(dep.id, source))
                    logger.debug(f"Dangling edge {source.id} -> {dep.id}")
                continue

            visited.add(component.id)
            result.discovered[component.id] = component
            result.notes.append(discovery_note(component, source))
            queue.append(component)

    logger.debug(f"Seed {seed.id}: {len(result.discovered)} components discovered")
    return result

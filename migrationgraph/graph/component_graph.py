"""
Component Graph for one organization
Immutable id-keyed snapshot of components and their dependency edges
"""

import logging
from types import MappingProxyType
from typing import Dict, List, Optional, Iterable, Iterator, Any, Tuple
from collections import defaultdict, deque

import networkx as nx

from migrationgraph.core.models import Component, ComponentType, MigrationStatus

logger = logging.getLogger(__name__)


class ComponentGraph:
    """
    Read-only snapshot of an organization's components

    Components are stored in an id-keyed mapping (insertion order preserved)
    so traversal is a plain lookup. A networkx DiGraph view is built lazily
    for the reporting helpers (dependents, cycles, statistics).

    Duplicate ids are not re-validated: the last record wins.
    """

    def __init__(self, components: Iterable[Component] = ()):
        """
        Initialize component graph

        Args:
            components: Components of one organization
        """
        by_id: Dict[str, Component] = {}
        for component in components:
            by_id[component.id] = component
        self._components = MappingProxyType(by_id)
        self._by_api_name: Optional[Dict[Tuple[str, str], Component]] = None
        self._nx_graph: Optional[nx.DiGraph] = None
        logger.debug(f"Component graph created with {len(by_id)} components")

    @property
    def components(self) -> MappingProxyType:
        """id -> Component mapping"""
        return self._components

    def get(self, component_id: str) -> Optional[Component]:
        return self._components.get(component_id)

    def __contains__(self, component_id: object) -> bool:
        return component_id in self._components

    def __iter__(self) -> Iterator[Component]:
        return iter(self._components.values())

    def __len__(self) -> int:
        return len(self._components)

    def find_by_api_name(
        self,
        api_name: str,
        component_type: Optional[ComponentType] = None
    ) -> Optional[Component]:
        """
        Find component by API name

        Args:
            api_name: API name (e.g. 'Account', 'Invoice__c.Total__c')
            component_type: Restrict lookup to one type

        Returns:
            First matching component or None
        """
        if self._by_api_name is None:
            index: Dict[Tuple[str, str], Component] = {}
            for component in self._components.values():
                index.setdefault((component.type.value, component.api_name), component)
            self._by_api_name = index

        if component_type is not None:
            return self._by_api_name.get((component_type.value, api_name))

        for component_type in ComponentType:
            match = self._by_api_name.get((component_type.value, api_name))
            if match is not None:
                return match
        return None

    def to_networkx(self) -> nx.DiGraph:
        """
        DiGraph view: nodes are component ids, edges follow `dependencies`

        Dangling targets are added as nodes with `missing=True`.
        """
        if self._nx_graph is not None:
            return self._nx_graph

        graph = nx.DiGraph()
        for component in self._components.values():
            graph.add_node(
                component.id,
                name=component.name,
                component_type=component.type.value,
                is_custom=component.is_custom,
                missing=False
            )

        for component in self._components.values():
            for dep in component.dependencies:
                if dep.id not in self._components and not graph.has_node(dep.id):
                    graph.add_node(dep.id, name=dep.name, component_type=dep.type.value, missing=True)
                graph.add_edge(component.id, dep.id, required=dep.required)

        self._nx_graph = graph
        return graph

    def get_all_dependents(self, component_id: str) -> List[Component]:
        """
        Components that transitively depend on the given one (impact analysis)

        Args:
            component_id: Component id

        Returns:
            Dependents in breadth-first order, without the component itself
        """
        if component_id not in self._components:
            return []

        graph = self.to_networkx()
        visited = {component_id}
        queue = deque([component_id])
        dependents: List[Component] = []

        while queue:
            current = queue.popleft()
            for source in graph.predecessors(current):
                if source in visited:
                    continue
                visited.add(source)
                dependents.append(self._components[source])
                queue.append(source)

        return dependents

    def find_circular_dependencies(self) -> List[List[str]]:
        """
        Find groups of components that depend on each other in a cycle

        Each group is a strongly connected component of the dependency
        graph with more than one member, or a single component with a
        self-edge. Runs in linear time, however many distinct cycles
        the group contains.

        Returns:
            List of groups, members and groups in graph insertion order
        """
        graph = self.to_networkx()
        order = {node_id: i for i, node_id in enumerate(self._components)}

        def position(node_id: str) -> Tuple[int, str]:
            return order.get(node_id, len(order)), node_id

        groups = []
        for members in nx.strongly_connected_components(graph):
            if len(members) == 1:
                node_id = next(iter(members))
                if not graph.has_edge(node_id, node_id):
                    continue
            groups.append(sorted(members, key=position))
        return sorted(groups, key=lambda group: position(group[0]))

    def can_migrate(self, component_id: str) -> bool:
        """
        True if every required dependency is present and completed

        Args:
            component_id: Component id

        Returns:
            False for unknown components
        """
        component = self._components.get(component_id)
        if component is None:
            return False

        for dep in component.dependencies:
            if not dep.required:
                continue
            target = self._components.get(dep.id)
            if target is None or target.migration_status != MigrationStatus.COMPLETED:
                return False
        return True

    def get_blocked_components(self) -> List[Component]:
        """Pending or in-progress components with an unmet required dependency"""
        return [
            component for component in self._components.values()
            if component.migration_status in (MigrationStatus.PENDING, MigrationStatus.IN_PROGRESS)
            and not self.can_migrate(component.id)
        ]

    def get_ready_to_migrate(self) -> List[Component]:
        """Pending components whose required dependencies are all completed"""
        return [
            component for component in self._components.values()
            if component.migration_status == MigrationStatus.PENDING
            and self.can_migrate(component.id)
        ]

    def find_dangling_edges(self) -> List[Tuple[str, str]]:
        """(source id, missing target id) pairs"""
        dangling = []
        for component in self._components.values():
            for dep in component.dependencies:
                if dep.id not in self._components:
                    dangling.append((component.id, dep.id))
        return dangling

    def get_statistics(self) -> Dict[str, Any]:
        """Get graph statistics"""
        by_status = {status.value: 0 for status in MigrationStatus}
        by_type: Dict[str, Dict[str, int]] = defaultdict(lambda: {"total": 0, "completed": 0, "custom": 0})

        total_edges = 0
        for component in self._components.values():
            by_status[component.migration_status.value] += 1
            type_stats = by_type[component.type.value]
            type_stats["total"] += 1
            if component.migration_status == MigrationStatus.COMPLETED:
                type_stats["completed"] += 1
            if component.is_custom:
                type_stats["custom"] += 1
            total_edges += len(component.dependencies)

        return {
            "total_components": len(self._components),
            "total_edges": total_edges,
            "dangling_edges": len(self.find_dangling_edges()),
            "by_status": by_status,
            "by_type": dict(by_type),
        }

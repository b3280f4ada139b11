"""
Ingestion helpers that pre-compute edges before a graph is built
"""

import logging
from dataclasses import replace
from typing import Dict, List, Iterable

from migrationgraph.core.models import Component, ComponentType, Dependency
from migrationgraph.graph.component_graph import ComponentGraph
from migrationgraph.graph.source_parser import parse_source_dependencies, resolve_references

logger = logging.getLogger(__name__)


def _append_edges(existing: Iterable[Dependency], extra: Iterable[Dependency]) -> tuple:
    edges = list(existing)
    seen = {edge.id for edge in edges}
    for edge in extra:
        if edge.id not in seen:
            edges.append(edge)
            seen.add(edge.id)
    return tuple(edges)


def link_object_fields(components: Iterable[Component]) -> List[Component]:
    """
    Add structural edges between objects and their fields

    An object depends on every field whose API name starts with
    `<object api name>.`, and a field depends on its parent object.
    Existing edges are kept and never duplicated.

    Args:
        components: Components of one organization

    Returns:
        New list of components with the structural edges added
    """
    components = list(components)
    objects: Dict[str, Component] = {}
    fields_by_object: Dict[str, List[Component]] = {}

    for component in components:
        if component.type == ComponentType.OBJECT:
            objects.setdefault(component.api_name, component)
        elif component.type == ComponentType.FIELD and component.object_name:
            fields_by_object.setdefault(component.object_name, []).append(component)

    linked = []
    added = 0
    for component in components:
        extra: List[Dependency] = []
        if component.type == ComponentType.OBJECT:
            extra = [f.as_dependency() for f in fields_by_object.get(component.api_name, [])]
        elif component.type == ComponentType.FIELD and component.object_name in objects:
            extra = [objects[component.object_name].as_dependency()]

        if extra:
            dependencies = _append_edges(component.dependencies, extra)
            added += len(dependencies) - len(component.dependencies)
            component = replace(component, dependencies=dependencies)
        linked.append(component)

    logger.debug(f"Structural linking added {added} edges")
    return linked


def link_source_references(components: Iterable[Component]) -> List[Component]:
    """
    Add edges resolved from the `source` metadata of LWC, Apex and triggers

    References are resolved against the components passed in; unresolved
    references and platform base components add no edge.

    Args:
        components: Components of one organization

    Returns:
        New list of components with the source edges added
    """
    components = list(components)
    graph = ComponentGraph(components)

    linked = []
    added = 0
    for component in components:
        references = parse_source_dependencies(component)
        if references:
            extra = resolve_references(component, references, graph)
            if extra:
                added += len(extra)
                component = replace(component, dependencies=_append_edges(component.dependencies, extra))
        linked.append(component)

    logger.debug(f"Source parsing added {added} edges")
    return linked


def compute_dependents(components: Iterable[Component]) -> List[Component]:
    """
    Rebuild every `dependents` list as the inverse of `dependencies`

    Args:
        components: Components of one organization

    Returns:
        New list of components with recomputed dependents
    """
    components = list(components)
    inverse: Dict[str, List[Dependency]] = {c.id: [] for c in components}

    for component in components:
        for dep in component.dependencies:
            if dep.id in inverse and dep.id != component.id:
                inverse[dep.id].append(component.as_dependency(dep.required))

    return [
        replace(component, dependents=_append_edges((), inverse[component.id]))
        for component in components
    ]


def build_graph(components: Iterable[Component], derive_structure: bool = False) -> ComponentGraph:
    """
    Build a ComponentGraph, optionally deriving source and structural edges first

    Args:
        components: Components of one organization
        derive_structure: Add edges parsed from component source, link
            objects and fields, then recompute dependents

    Returns:
        ComponentGraph snapshot
    """
    components = list(components)
    if derive_structure:
        components = compute_dependents(link_object_fields(link_source_references(components)))
    return ComponentGraph(components)

"""
Regex-based reference extraction from LWC and Apex source code

build_graph(derive_structure=True) parses the `source` metadata entry of
LWC, Apex and trigger components and adds the edges it resolves.
"""

import re
import logging
from typing import List, Iterable

from migrationgraph.core.models import Component, ComponentType, Dependency
from migrationgraph.graph.component_graph import ComponentGraph

logger = logging.getLogger(__name__)

IMPORT_PATTERN = re.compile(r"import\s+[\s\S]*?\s+from\s+['\"]([^'\"]+)['\"]")
APEX_CLASS_REF_PATTERN = re.compile(r"\b([A-Z][a-zA-Z0-9_]*)\s+\w+\s*=")
APEX_CONTROLLER_IMPORT = re.compile(r"^@salesforce/apex/([A-Za-z0-9_]+)\.")
SCHEMA_IMPORT = re.compile(r"^@salesforce/schema/([A-Za-z0-9_]+)(?:\.([A-Za-z0-9_]+))?$")

APEX_BUILTIN_TYPES = frozenset([
    'String', 'Integer', 'Boolean', 'Decimal', 'Double', 'Long', 'Date',
    'Datetime', 'Time', 'Id', 'Object', 'Blob', 'List', 'Map', 'Set',
])


def parse_lwc_dependencies(js_content: str) -> List[str]:
    """
    Extract module imports from LWC JavaScript

    Keeps `c/` (custom components), `lightning/` (base components) and
    `@salesforce/apex` / `@salesforce/schema` imports.

    Args:
        js_content: JavaScript source

    Returns:
        Import paths in order of appearance, without duplicates
    """
    imports: List[str] = []
    for match in IMPORT_PATTERN.finditer(js_content or ""):
        path = match.group(1)
        if path.startswith(('c/', 'lightning/', '@salesforce/apex/', '@salesforce/schema/')):
            if path not in imports:
                imports.append(path)
    return imports


def parse_apex_dependencies(apex_content: str) -> List[str]:
    """
    Extract class references (`ClassName variable =`) from Apex source

    Args:
        apex_content: Apex class or trigger body

    Returns:
        Referenced type names, built-in types excluded, without duplicates
    """
    references: List[str] = []
    for match in APEX_CLASS_REF_PATTERN.finditer(apex_content or ""):
        class_name = match.group(1)
        if class_name not in APEX_BUILTIN_TYPES and class_name not in references:
            references.append(class_name)
    return references


def parse_source_dependencies(component: Component) -> List[str]:
    """
    Parse the references in a component's `source` metadata entry

    Args:
        component: LWC, Apex class or trigger component

    Returns:
        Parsed references; empty for other types or when no source is attached
    """
    source = component.metadata.get("source")
    if not isinstance(source, str) or not source:
        return []
    if component.type == ComponentType.LWC:
        return parse_lwc_dependencies(source)
    if component.type in (ComponentType.APEX, ComponentType.TRIGGER):
        return parse_apex_dependencies(source)
    return []


def _lookup_reference(reference: str, graph: ComponentGraph) -> List[Component]:
    if reference.startswith('c/'):
        match = graph.find_by_api_name(reference[2:], ComponentType.LWC)
        return [match] if match else []

    apex = APEX_CONTROLLER_IMPORT.match(reference)
    if apex:
        match = graph.find_by_api_name(apex.group(1), ComponentType.APEX)
        return [match] if match else []

    schema = SCHEMA_IMPORT.match(reference)
    if schema:
        object_name, field_name = schema.groups()
        if field_name:
            match = graph.find_by_api_name(f"{object_name}.{field_name}", ComponentType.FIELD)
        else:
            match = graph.find_by_api_name(object_name, ComponentType.OBJECT)
        return [match] if match else []

    if reference.startswith('lightning/'):
        # Base components ship with the platform
        return []

    match = graph.find_by_api_name(reference, ComponentType.APEX)
    return [match] if match else []


def resolve_references(
    component: Component,
    references: Iterable[str],
    graph: ComponentGraph
) -> List[Dependency]:
    """
    Map parsed references to dependency edges

    Args:
        component: Component whose source was parsed
        references: Output of parse_lwc_dependencies / parse_apex_dependencies
        graph: Graph used to resolve names

    Returns:
        Dependencies not already present on the component
    """
    existing = {dep.id for dep in component.dependencies}
    edges: List[Dependency] = []
    for reference in references:
        for target in _lookup_reference(reference, graph):
            if target.id == component.id or target.id in existing:
                continue
            existing.add(target.id)
            edges.append(target.as_dependency())

    logger.debug(f"{component.api_name}: {len(edges)} references resolved")
    return edges

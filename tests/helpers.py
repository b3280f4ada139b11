"""
Builders shared by the test modules
"""

from migrationgraph.core.models import Component, ComponentType, Dependency


def dep(component_id, component_type="object", name=None, required=True):
    """Shorthand for a dependency edge"""
    return Dependency(
        id=component_id,
        name=name or component_id,
        type=ComponentType(component_type),
        required=required
    )


def make_component(component_id, component_type, dependencies=(), api_name=None, **kwargs):
    """Shorthand for a component with name and api_name defaulting to the id"""
    return Component(
        id=component_id,
        name=kwargs.pop("name", component_id),
        type=ComponentType(component_type),
        api_name=api_name or component_id,
        dependencies=tuple(dependencies),
        **kwargs
    )

"""
Categorizer: splits discovered components into migration buckets
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Iterable, Optional, Tuple

from migrationgraph.core.component_utils import is_custom_object_name
from migrationgraph.core.models import Component, ComponentType, StandardObjectWithFields

logger = logging.getLogger(__name__)


@dataclass
class CategorizedDependencies:
    """
    Result of categorize()

    Attributes:
        custom_dependencies: Components migrated wholesale, discovery order
        standard_objects_with_fields: Custom fields grouped by standard object
        folded_fields: Custom fields carried by their custom owning object,
            keyed by object API name
        flags: (component id, message) pairs for ambiguous classifications
    """
    custom_dependencies: List[Component] = field(default_factory=list)
    standard_objects_with_fields: List[StandardObjectWithFields] = field(default_factory=list)
    folded_fields: Dict[str, List[Component]] = field(default_factory=dict)
    flags: List[Tuple[str, str]] = field(default_factory=list)


class _ObjectIndex:
    """Object lookup by API name, falling back to id"""

    def __init__(self, components: Iterable[Component]):
        self._by_api_name: Dict[str, Component] = {}
        self._by_id: Dict[str, Component] = {}
        for component in components:
            if component.type != ComponentType.OBJECT:
                continue
            self._by_api_name.setdefault(component.api_name, component)
            self._by_id.setdefault(component.id, component)

    def get(self, object_name: str) -> Optional[Component]:
        return self._by_api_name.get(object_name) or self._by_id.get(object_name)


def categorize(
    discovered: Iterable[Component],
    selected: Iterable[Component] = ()
) -> CategorizedDependencies:
    """
    Classify discovered components

    Rules, per component:
      1. custom field on a custom object -> folded into the object
      2. custom field on a standard object -> grouped by object name
      3. standard field -> dropped
      4. custom object, lwc, apex, trigger, visualforce, flow -> custom
         dependency; standard objects are dropped (they exist in the target)

    The owning object is looked up among discovered components first, then
    selected ones. When it is absent its kind is inferred from its name; an
    absent owner that looks custom is grouped like a standard object and
    flagged, since nothing in the migration set carries the field. A custom
    field with no known owning object is flagged and left out of every bucket.

    Args:
        discovered: Discovered components in discovery order
        selected: Selected components, consulted for owning objects

    Returns:
        CategorizedDependencies
    """
    discovered = list(discovered)
    owners = _ObjectIndex(discovered + list(selected))
    result = CategorizedDependencies()
    groups: Dict[str, StandardObjectWithFields] = {}

    for component in discovered:
        if component.type == ComponentType.FIELD:
            if not component.is_custom:
                logger.debug(f"Dropping standard field {component.api_name}")
                continue

            object_name = component.object_name or ""
            if not object_name:
                result.flags.append((
                    component.id,
                    f"owning object of custom field {component.name} is unknown; "
                    f"left out of the standard object field additions"
                ))
                logger.warning(f"Owning object of {component.id} is unknown")
                continue

            owner = owners.get(object_name)

            if owner is not None and owner.is_custom:
                result.folded_fields.setdefault(owner.api_name, []).append(component)
                continue

            if owner is None and is_custom_object_name(object_name):
                result.flags.append((
                    component.id,
                    f"custom field {component.name} belongs to custom object {object_name}, "
                    f"which is not part of this migration; grouped under {object_name} "
                    f"as a field addition"
                ))
                logger.warning(f"Owning object {object_name} of {component.id} not in migration set")

            if object_name not in groups:
                groups[object_name] = StandardObjectWithFields(object_name=object_name)
                result.standard_objects_with_fields.append(groups[object_name])
            groups[object_name].custom_fields.append(component)
            continue

        if component.type == ComponentType.OBJECT and not component.is_custom:
            logger.debug(f"Standard object {component.api_name} already exists in target")
            continue

        result.custom_dependencies.append(component)

    logger.debug(
        f"Categorized {len(discovered)} components: "
        f"{len(result.custom_dependencies)} custom, "
        f"{len(result.standard_objects_with_fields)} standard objects with fields"
    )
    return result

"""
Analysis orchestrator: runs the traversal for every selected component,
merges the discoveries and hands them to the categorizer
"""

import logging
from typing import Dict, Iterable, List

from migrationgraph.analysis.categorizer import categorize
from migrationgraph.analysis.traversal import resolve
from migrationgraph.core.models import AnalysisInputError, AnalysisResult, Component
from migrationgraph.graph.component_graph import ComponentGraph

logger = logging.getLogger(__name__)


def analyze(
    selection_ids: Iterable[str],
    graph: ComponentGraph,
    allow_partial: bool = False
) -> AnalysisResult:
    """
    Compute and categorize the dependency closure of a selection

    Seeds are processed in graph order, so the result does not depend on
    the iteration order of `selection_ids`.

    Args:
        selection_ids: Ids of the components chosen for migration
        graph: Immutable component graph of the organization
        allow_partial: Skip ids missing from the graph instead of failing

    Returns:
        AnalysisResult

    Raises:
        AnalysisInputError: Empty selection, or ids missing from the graph
            (unless allow_partial and at least one id is valid)
    """
    if isinstance(selection_ids, str):
        selection_ids = [selection_ids]
    selection = set(selection_ids)
    if not selection:
        raise AnalysisInputError("At least one component id is required")

    missing = sorted(cid for cid in selection if cid not in graph)
    if missing:
        if not allow_partial or len(missing) == len(selection):
            raise AnalysisInputError(
                f"{len(missing)} component(s) not found in graph: {', '.join(missing)}",
                missing_ids=missing
            )
        logger.warning(f"Skipping {len(missing)} unknown component(s): {', '.join(missing)}")

    selected: List[Component] = [c for c in graph if c.id in selection]
    logger.info(f"Analyzing {len(selected)} selected components against {len(graph)} in graph")

    discovered: Dict[str, Component] = {}
    discovered_by: Dict[str, str] = {}
    analysis_notes: Dict[str, List[str]] = {}

    for seed in selected:
        traversal = resolve(seed, graph)
        analysis_notes[seed.id] = list(traversal.notes)

        for component_id, component in traversal.discovered.items():
            if component_id in selection or component_id in discovered:
                continue
            discovered[component_id] = component
            discovered_by[component_id] = seed.id
            logger.debug(f"Discovered dependency: {component.name} ({component.type.value})")

    categorized = categorize(discovered.values(), selected)
    for component_id, message in categorized.flags:
        analysis_notes[discovered_by[component_id]].append(message)

    result = AnalysisResult(
        selected_components=tuple(selected),
        custom_dependencies=tuple(categorized.custom_dependencies),
        standard_objects_with_fields=tuple(categorized.standard_objects_with_fields),
        analysis_notes=analysis_notes
    )

    logger.info(
        f"Analysis complete: {len(result.selected_components)} selected, "
        f"{len(result.custom_dependencies)} custom dependencies, "
        f"{len(result.standard_objects_with_fields)} standard objects with "
        f"{result.total_custom_fields_on_standard_objects} custom fields"
    )
    return result

"""
Dry-run mode for validating an analysis request.

Checks a selection against a component graph and reports what an
analysis would work on, without running the traversal.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Iterable
import logging

from migrationgraph.config.config import Config
from migrationgraph.graph.component_graph import ComponentGraph

logger = logging.getLogger(__name__)


@dataclass
class DryRunResult:
    """Result of a dry-run validation"""
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    info: List[str] = field(default_factory=list)
    estimated_operations: Dict[str, Any] = field(default_factory=dict)

    def add_error(self, message: str) -> None:
        """Add an error"""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning"""
        self.warnings.append(message)

    def add_info(self, message: str) -> None:
        """Add an info line"""
        self.info.append(message)


class DryRunValidator:
    """Validator for dry-run mode"""

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize validator

        Args:
            config: MigrationGraph configuration (global one if None)
        """
        if config is None:
            from migrationgraph.config import get_config
            config = get_config()
        self.config = config

    def validate_analysis(
            self,
            graph: ComponentGraph,
            component_ids: Iterable[str],
            allow_partial: bool = False
    ) -> DryRunResult:
        """
        Validate a selection against a graph without analysing it

        Args:
            graph: Component graph of the organization
            component_ids: Selected component ids
            allow_partial: Whether unknown ids would be skipped

        Returns:
            DryRunResult
        """
        result = DryRunResult(is_valid=True)
        selection = list(dict.fromkeys(component_ids))

        if not selection:
            result.add_error("At least one component id is required")

        if len(selection) > self.config.max_selection_size:
            result.add_error(
                f"Selection of {len(selection)} components exceeds the limit "
                f"of {self.config.max_selection_size}"
            )

        if len(graph) > self.config.max_graph_size:
            result.add_error(
                f"Graph of {len(graph)} components exceeds the limit of {self.config.max_graph_size}"
            )
        else:
            result.add_info(f"Graph: {len(graph)} components")

        missing = [cid for cid in selection if cid not in graph]
        valid = [cid for cid in selection if cid in graph]
        if missing:
            message = f"Components not found in graph: {', '.join(missing)}"
            if allow_partial and valid:
                result.add_warning(message + " (will be skipped)")
            else:
                result.add_error(message)

        for component_id in valid:
            component = graph.get(component_id)
            result.add_info(f"Selected: {component.name} ({component.type.value})")

        dangling = graph.find_dangling_edges()
        if dangling:
            result.add_warning(f"{len(dangling)} dangling dependency edge(s) will be skipped")

        cycles = graph.find_circular_dependencies()
        if cycles:
            result.add_info(f"{len(cycles)} circular dependency group(s) in graph")

        result.estimated_operations = {
            "seeds": len(valid),
            "graph_components": len(graph),
            "graph_edges": sum(len(c.dependencies) for c in graph),
            "dangling_edges": len(dangling),
            "cycles": len(cycles),
        }

        logger.info(f"Dry-run validation: valid={result.is_valid}, "
                    f"{len(result.errors)} error(s), {len(result.warnings)} warning(s)")
        return result

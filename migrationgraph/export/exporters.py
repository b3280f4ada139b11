"""
Export of analysis results: JSON, Mermaid and PNG
"""

import re
import json
import logging
from datetime import datetime
from typing import Dict, List, Optional

import networkx as nx
import matplotlib.pyplot as plt

from migrationgraph.core.models import AnalysisResult, ExportError
from migrationgraph.graph.component_graph import ComponentGraph

logger = logging.getLogger(__name__)

GRAPH_FIGSIZE = (16, 12)
GRAPH_NODE_SIZE = 2200
GRAPH_FONT_SIZE = 8
GRAPH_DPI = 200

BUCKET_COLORS = {
    "selected": "#4dabf7",
    "custom": "#ff922b",
    "standard_field": "#51cf66",
}


def _bucket_of(result: AnalysisResult) -> Dict[str, str]:
    buckets = {c.id: "selected" for c in result.selected_components}
    for component in result.custom_dependencies:
        buckets.setdefault(component.id, "custom")
    for group in result.standard_objects_with_fields:
        for component in group.custom_fields:
            buckets.setdefault(component.id, "standard_field")
    return buckets


def _mermaid_id(value: str) -> str:
    return "n_" + re.sub(r'[^A-Za-z0-9_]', '_', value)


def build_summary(result: AnalysisResult) -> Dict[str, int]:
    return {
        "selected_count": len(result.selected_components),
        "custom_dependencies_count": len(result.custom_dependencies),
        "standard_objects_with_fields_count": len(result.standard_objects_with_fields),
        "total_custom_fields_on_standard_objects": result.total_custom_fields_on_standard_objects,
    }


def export_analysis_json(
    result: AnalysisResult,
    output_file: str = "dependency_analysis.json",
    organization_id: Optional[str] = None
) -> None:
    """
    Export the analysis result to JSON

    Args:
        result: Analysis result
        output_file: Output file path
        organization_id: Recorded in the export metadata

    Raises:
        ExportError: If the file cannot be written
    """
    data = {
        "metadata": {
            "organization_id": organization_id,
            "exported_at": datetime.now().isoformat(),
        },
        **result.to_dict(),
        "statistics": build_summary(result),
    }
    try:
        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        logger.info(f"Analysis exported to {output_file}")
    except (OSError, TypeError) as e:
        logger.error(f"Error exporting analysis: {e}")
        raise ExportError(f"Error exporting analysis to {output_file}: {e}")


def render_mermaid_diagram(result: AnalysisResult, graph: ComponentGraph, max_nodes: int = 50) -> str:
    """
    Mermaid flowchart of the selection and what it pulls in

    Selected components, custom dependencies and custom fields of standard
    objects are styled per bucket; standard objects appear as target nodes
    of their field additions.
    """
    buckets = _bucket_of(result)
    node_ids: List[str] = list(buckets)[:max_nodes]
    included = set(node_ids)

    lines = ["```mermaid", "graph TD"]
    for component_id in node_ids:
        component = graph.get(component_id)
        name = component.name if component else component_id
        type_name = component.type.value if component else "?"
        label = f"{name}\\n[{type_name}]".replace('"', "'")
        lines.append(f'    {_mermaid_id(component_id)}["{label}"]:::{buckets[component_id]}')

    for group in result.standard_objects_with_fields:
        object_node = _mermaid_id(f"std_{group.object_name}")
        fields_shown = [f for f in group.custom_fields if f.id in included]
        if not fields_shown:
            continue
        lines.append(f'    {object_node}[("{group.object_name}\\n[standard]")]:::standard')
        for component in fields_shown:
            lines.append(f"    {_mermaid_id(component.id)} -. adds field .-> {object_node}")

    for component_id in node_ids:
        component = graph.get(component_id)
        if component is None:
            continue
        for dep in component.dependencies:
            if dep.id in included and dep.id != component_id:
                lines.append(f"    {_mermaid_id(component_id)} --> {_mermaid_id(dep.id)}")

    lines.append("")
    lines.append("    classDef selected fill:#4dabf7,stroke:#1864ab,color:#fff")
    lines.append("    classDef custom fill:#ff922b,stroke:#d9480f,color:#000")
    lines.append("    classDef standard_field fill:#51cf66,stroke:#2b8a3e,color:#000")
    lines.append("    classDef standard fill:#e9ecef,stroke:#868e96,color:#000")
    lines.append("```")
    return "\n".join(lines) + "\n"


def export_mermaid_diagram(
    result: AnalysisResult,
    graph: ComponentGraph,
    output_file: str = "dependency_diagram.md",
    max_nodes: int = 50
) -> None:
    """
    Export a Mermaid diagram of the analysis

    Args:
        result: Analysis result
        graph: Graph the result was computed from (for edges)
        output_file: Output file path
        max_nodes: Maximum number of component nodes

    Raises:
        ExportError: If the result is empty or the file cannot be written
    """
    if not result.selected_components:
        raise ExportError("Empty analysis result")

    try:
        with open(output_file, 'w', encoding='utf-8') as f:
            f.write(render_mermaid_diagram(result, graph, max_nodes))
        logger.info(f"Mermaid diagram exported to {output_file}")
    except OSError as e:
        logger.error(f"Error exporting Mermaid diagram: {e}")
        raise ExportError(f"Error exporting Mermaid diagram: {e}")


def visualize_analysis(
    result: AnalysisResult,
    graph: ComponentGraph,
    output_file: str = "dependency_graph.png"
) -> None:
    """
    Draw the analysed subgraph to a PNG file

    Args:
        result: Analysis result
        graph: Graph the result was computed from
        output_file: Output file path

    Raises:
        ExportError: If there is nothing to draw or drawing fails
    """
    buckets = _bucket_of(result)
    if not buckets:
        raise ExportError("Empty analysis result")

    subgraph = graph.to_networkx().subgraph(buckets.keys())
    labels = {node: (graph.get(node).name if graph.get(node) else node) for node in subgraph.nodes()}
    colors = [BUCKET_COLORS[buckets[node]] for node in subgraph.nodes()]

    try:
        plt.figure(figsize=GRAPH_FIGSIZE)
        pos = nx.spring_layout(subgraph, k=2, iterations=50, seed=42)

        nx.draw(
            subgraph,
            pos,
            labels=labels,
            node_color=colors,
            node_size=GRAPH_NODE_SIZE,
            with_labels=True,
            font_size=GRAPH_FONT_SIZE,
            arrows=True,
            edge_color='gray',
            alpha=0.8
        )

        plt.title("Migration dependency graph", fontsize=16)
        plt.savefig(output_file, dpi=GRAPH_DPI, bbox_inches='tight')
        logger.info(f"Graph exported to {output_file}")
    except (OSError, ValueError) as e:
        logger.error(f"Error exporting graph: {e}")
        raise ExportError(f"Error exporting graph to {output_file}: {e}")
    finally:
        plt.close()

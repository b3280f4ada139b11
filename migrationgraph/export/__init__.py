"""
Export of dependency analysis results
"""

from migrationgraph.export.exporters import (
    export_analysis_json,
    export_mermaid_diagram,
    render_mermaid_diagram,
    visualize_analysis,
)

__all__ = [
    "export_analysis_json",
    "export_mermaid_diagram",
    "render_mermaid_diagram",
    "visualize_analysis",
]

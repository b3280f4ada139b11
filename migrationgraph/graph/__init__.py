"""
Component graph module for MigrationGraph
Immutable, id-keyed snapshot of an organization's components
"""

from migrationgraph.graph.component_graph import ComponentGraph
from migrationgraph.graph.ingestion import build_graph

__all__ = ['ComponentGraph', 'build_graph']

"""
Dependency resolution and categorization engine
"""

from migrationgraph.analysis.categorizer import CategorizedDependencies, categorize
from migrationgraph.analysis.orchestrator import analyze
from migrationgraph.analysis.traversal import TraversalResult, resolve

__all__ = [
    "CategorizedDependencies",
    "TraversalResult",
    "analyze",
    "categorize",
    "resolve",
]

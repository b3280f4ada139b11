"""
I/O layer for loading component graphs from different sources
"""

from migrationgraph.io.base import ComponentLoaderBase, SourceType
from migrationgraph.io.factory import create_loader, get_available_loaders

__all__ = [
    "ComponentLoaderBase",
    "SourceType",
    "create_loader",
    "get_available_loaders",
]

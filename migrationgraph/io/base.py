"""
Abstract interface for component loaders
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List
import logging

from migrationgraph.core.models import Component, ValidationError
from migrationgraph.graph.component_graph import ComponentGraph

logger = logging.getLogger(__name__)


class SourceType(str, Enum):
    """Where component snapshots come from"""
    FILE = "file"
    CACHE = "cache"


class ComponentLoaderBase(ABC):
    """Abstract interface for loaders of an organization's components"""

    @abstractmethod
    def load_components(self, organization_id: str) -> List[Component]:
        """
        Load every component of an organization

        Args:
            organization_id: Organization identifier

        Returns:
            Components in a stable order

        Raises:
            ComponentLoadError: If the components cannot be loaded
        """
        pass

    @abstractmethod
    def get_source_type(self) -> SourceType:
        """
        Return the source type handled by this loader

        Returns:
            SourceType of the loader
        """
        pass

    def load_graph(self, organization_id: str) -> ComponentGraph:
        """
        Load components and wrap them in an immutable graph snapshot

        Args:
            organization_id: Organization identifier

        Returns:
            ComponentGraph
        """
        self.validate_organization_id(organization_id)
        components = self.load_components(organization_id)
        logger.info(f"Loaded {len(components)} components for organization {organization_id}")
        return ComponentGraph(components)

    def validate_organization_id(self, organization_id: str) -> None:
        """
        Validate the organization id before loading

        Raises:
            ValidationError: If the id is empty
        """
        if not organization_id or not str(organization_id).strip():
            raise ValidationError("Organization id cannot be empty")

"""
Loader of components from the on-disk cache
"""

import logging
from typing import List, Optional

from migrationgraph.core.models import CacheError, Component, ComponentLoadError
from migrationgraph.io.base import ComponentLoaderBase, SourceType
from migrationgraph.io.component_cache import ComponentCache
from migrationgraph.io.factory import register_loader

logger = logging.getLogger(__name__)


class CacheLoader(ComponentLoaderBase):
    """Loads an organization's components from a ComponentCache"""

    def __init__(self, cache: Optional[ComponentCache] = None, cache_dir: Optional[str] = None):
        self.cache = cache if cache is not None else ComponentCache(cache_dir)

    def get_source_type(self) -> SourceType:
        return SourceType.CACHE

    def load_components(self, organization_id: str) -> List[Component]:
        """
        Raises:
            ComponentLoadError: If nothing is cached for the organization or
                a record is invalid
        """
        self.validate_organization_id(organization_id)
        try:
            components = self.cache.get_components(organization_id)
        except CacheError as e:
            raise ComponentLoadError(str(e))

        if not components:
            raise ComponentLoadError(
                f"No cached components for organization {organization_id}. Run 'sync' first."
            )
        return components


register_loader(SourceType.CACHE, CacheLoader)

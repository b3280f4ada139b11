"""
On-disk cache of organizations and their components
"""

import json
import logging
import re
import shutil
import threading
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from migrationgraph.core.models import CacheError, Component, Organization, ValidationError
from migrationgraph.graph.component_graph import ComponentGraph

logger = logging.getLogger(__name__)

# Cache format version (for future migrations)
CACHE_VERSION = "1.0"


class ComponentCache:
    """
    Keyed store of component records scoped by organization

    One JSON file per organization. Writes are single-row upserts keyed by
    component id; a record keeps its position when replaced.
    """

    def __init__(self, cache_dir: Optional[str] = None):
        """
        Initialize cache

        Args:
            cache_dir: Cache directory (defaults to config CACHE_DIR)
        """
        if cache_dir is None:
            from migrationgraph.config import get_config
            cache_dir = get_config().cache_dir
        self.cache_dir = Path(cache_dir)
        self._lock = threading.Lock()

    def get_cache_path(self, organization_id: str) -> Path:
        """
        Path of the cache file for an organization

        Args:
            organization_id: Organization identifier

        Returns:
            Path of the cache file
        """
        if not organization_id or not organization_id.strip():
            raise ValidationError("Organization id cannot be empty")
        # Sanitize file name
        safe_id = re.sub(r'[^A-Za-z0-9_.-]', '_', organization_id)
        return self.cache_dir / f"{safe_id}.json"

    def _read(self, organization_id: str) -> Dict[str, Any]:
        cache_path = self.get_cache_path(organization_id)
        empty = {"organization": None, "components": {}}
        if not cache_path.exists():
            return empty

        try:
            with open(cache_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Error reading cache for {organization_id}: {e}")
            return empty

        metadata = data.get('metadata', {})
        if metadata.get('cache_version') != CACHE_VERSION:
            logger.warning(
                f"Incompatible cache version for {organization_id}, "
                f"expected {CACHE_VERSION}, found {metadata.get('cache_version')}"
            )
            return empty

        return {
            "organization": data.get("organization"),
            "components": data.get("components") or {},
        }

    def _write(self, organization_id: str, data: Dict[str, Any]) -> None:
        cache_path = self.get_cache_path(organization_id)
        payload = {
            'metadata': {
                'cache_version': CACHE_VERSION,
                'organization_id': organization_id,
                'updated_at': datetime.now().isoformat(),
            },
            'organization': data.get("organization"),
            'components': data.get("components", {}),
        }
        try:
            cache_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = cache_path.with_suffix('.json.tmp')
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            tmp_path.replace(cache_path)
        except OSError as e:
            raise CacheError(f"Error writing cache for {organization_id}: {e}")

    def upsert_organization(self, organization: Organization) -> None:
        """Insert or replace the organization record"""
        with self._lock:
            data = self._read(organization.id)
            data["organization"] = asdict(organization)
            self._write(organization.id, data)
        logger.debug(f"Organization cached: {organization.id}")

    def get_organization(self, organization_id: str) -> Optional[Organization]:
        record = self._read(organization_id).get("organization")
        if not record:
            return None
        try:
            return Organization(**record)
        except (TypeError, ValidationError) as e:
            logger.warning(f"Invalid organization record for {organization_id}: {e}")
            return None

    def upsert_component(self, organization_id: str, component: Component) -> None:
        """
        Insert or replace one component record

        Args:
            organization_id: Organization identifier
            component: Component to store
        """
        self.upsert_components(organization_id, [component])

    def upsert_components(self, organization_id: str, components: Iterable[Component]) -> int:
        """
        Upsert several component records in one write

        Returns:
            Number of records written
        """
        with self._lock:
            data = self._read(organization_id)
            count = 0
            for component in components:
                data["components"][component.id] = component.to_dict()
                count += 1
            self._write(organization_id, data)
        logger.debug(f"{count} components cached for {organization_id}")
        return count

    def get_component(self, organization_id: str, component_id: str) -> Optional[Component]:
        record = self._read(organization_id)["components"].get(component_id)
        if record is None:
            return None
        return Component.from_dict(record)

    def get_components(self, organization_id: str) -> List[Component]:
        """
        All cached components of an organization, in insertion order

        Raises:
            CacheError: If a cached record is invalid
        """
        components = []
        for component_id, record in self._read(organization_id)["components"].items():
            try:
                components.append(Component.from_dict(record))
            except ValidationError as e:
                raise CacheError(f"Invalid cached component {component_id}: {e}")
        return components

    def load_graph(self, organization_id: str) -> ComponentGraph:
        return ComponentGraph(self.get_components(organization_id))

    def clear(self, organization_id: Optional[str] = None) -> None:
        """
        Remove cached data of one organization, or the whole cache

        Args:
            organization_id: Organization to clear (all if None)
        """
        with self._lock:
            if organization_id is not None:
                cache_path = self.get_cache_path(organization_id)
                if cache_path.exists():
                    cache_path.unlink()
                logger.info(f"Cache cleared for {organization_id}")
            elif self.cache_dir.exists():
                shutil.rmtree(self.cache_dir)
                logger.info(f"Cache cleared: {self.cache_dir}")

"""
Loader of component snapshots from JSON files
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from migrationgraph.core.models import Component, ComponentLoadError, Organization, ValidationError
from migrationgraph.graph.component_graph import ComponentGraph
from migrationgraph.graph.ingestion import build_graph
from migrationgraph.io.base import ComponentLoaderBase, SourceType
from migrationgraph.io.factory import register_loader

logger = logging.getLogger(__name__)


def read_snapshot(path: Path) -> Tuple[Optional[Organization], List[Component]]:
    """
    Read a snapshot file

    Accepted layouts: a list of components, or an object with
    `components` and an optional `organization` entry.

    Raises:
        ComponentLoadError: If the file cannot be read or parsed
    """
    if not path.exists():
        raise ComponentLoadError(f"Snapshot file not found: {path}")
    if not path.is_file():
        raise ComponentLoadError(f"Snapshot path is not a file: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ComponentLoadError(f"Invalid JSON in {path}: {e}")
    except OSError as e:
        raise ComponentLoadError(f"Error reading {path}: {e}")

    organization = None
    if isinstance(data, dict):
        org_data: Dict[str, Any] = data.get("organization") or {}
        if org_data:
            try:
                organization = Organization(
                    id=str(org_data.get("id", "")),
                    name=org_data.get("name", ""),
                    instance_url=org_data.get("instanceUrl", ""),
                    org_type=org_data.get("orgType", "production"),
                    api_version=org_data.get("apiVersion", "59.0"),
                    last_synced_at=org_data.get("lastSyncedAt"),
                )
            except ValidationError as e:
                raise ComponentLoadError(f"Invalid organization in {path}: {e}")
        raw_components = data.get("components")
    else:
        raw_components = data

    if not isinstance(raw_components, list):
        raise ComponentLoadError(f"Snapshot {path} has no component list")

    components = []
    for index, raw in enumerate(raw_components):
        try:
            components.append(Component.from_dict(raw))
        except (ValidationError, AttributeError, TypeError) as e:
            raise ComponentLoadError(f"Invalid component #{index} in {path}: {e}")

    return organization, components


class JsonFileLoader(ComponentLoaderBase):
    """Loader of components from a JSON snapshot file"""

    def __init__(self, path: str, derive_structure: bool = False):
        """
        Initialize file loader

        Args:
            path: Snapshot file path
            derive_structure: Add source-parsed and object/field edges, then
                recompute dependents
        """
        self.path = Path(path)
        self.derive_structure = derive_structure
        self.organization: Optional[Organization] = None

    def get_source_type(self) -> SourceType:
        return SourceType.FILE

    def load_components(self, organization_id: Optional[str] = None) -> List[Component]:
        """
        Load components from the snapshot file

        Args:
            organization_id: Checked against the snapshot organization when
                the file declares one

        Raises:
            ComponentLoadError: If the file is missing, invalid or belongs
                to another organization
        """
        organization, components = read_snapshot(self.path)
        if organization and organization_id and organization.id != organization_id:
            raise ComponentLoadError(
                f"Snapshot {self.path} belongs to organization {organization.id}, "
                f"not {organization_id}"
            )
        self.organization = organization
        logger.info(f"Loaded {len(components)} components from {self.path.name}")
        return components

    def load_graph(self, organization_id: Optional[str] = None) -> ComponentGraph:
        components = self.load_components(organization_id)
        return build_graph(components, derive_structure=self.derive_structure)


register_loader(SourceType.FILE, JsonFileLoader)

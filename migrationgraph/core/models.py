"""
Data models and exceptions for MigrationGraph
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List, Dict, Tuple, Optional, Any, Iterable


# Custom exceptions
class MigrationGraphError(Exception):
    """Base exception for MigrationGraph errors"""
    pass


class ValidationError(MigrationGraphError):
    """Invalid input or configuration"""
    pass


class ComponentLoadError(MigrationGraphError):
    """Error while loading components from a source"""
    pass


class CacheError(MigrationGraphError):
    """Error while reading or writing the component cache"""
    pass


class DependencyAnalysisError(MigrationGraphError):
    """Error during dependency analysis"""
    pass


class AnalysisInputError(DependencyAnalysisError):
    """Caller misuse: empty selection or ids absent from the graph"""

    def __init__(self, message: str, missing_ids: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.missing_ids: List[str] = list(missing_ids or [])


class ExportError(MigrationGraphError):
    """Error exporting analysis results"""
    pass


class ComponentType(str, Enum):
    """Migratable component types"""
    OBJECT = "object"
    FIELD = "field"
    LWC = "lwc"
    APEX = "apex"
    TRIGGER = "trigger"
    VISUALFORCE = "visualforce"
    FLOW = "flow"

    @classmethod
    def from_string(cls, value: str) -> 'ComponentType':
        """Create type from string with validation"""
        try:
            return cls(value)
        except ValueError:
            valid = [t.value for t in cls]
            raise ValidationError(f"Invalid component type: {value}. Valid: {valid}")


class MigrationStatus(str, Enum):
    """Migration lifecycle of a component"""
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"
    SKIPPED = "skipped"

    @classmethod
    def from_string(cls, value: str) -> 'MigrationStatus':
        """Create status from string with validation"""
        try:
            return cls(value)
        except ValueError:
            valid = [s.value for s in cls]
            raise ValidationError(f"Invalid migration status: {value}. Valid: {valid}")


@dataclass(frozen=True)
class Dependency:
    """Directed edge to another component"""
    id: str
    name: str
    type: ComponentType
    required: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Dependency':
        if not data.get("id"):
            raise ValidationError(f"Dependency without id: {data}")
        return cls(
            id=str(data["id"]),
            name=data.get("name") or str(data["id"]),
            type=ComponentType.from_string(data.get("type", ComponentType.OBJECT.value)),
            required=bool(data.get("required", True)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "required": self.required,
        }


@dataclass(frozen=True)
class Component:
    """
    One migratable or referenceable artifact of an organization

    `is_custom` and `object_name` are inferred from naming conventions
    when not provided. `object_name` is only meaningful for fields.
    """
    id: str
    name: str
    type: ComponentType
    api_name: str
    namespace: Optional[str] = None
    description: Optional[str] = None
    is_custom: Optional[bool] = None
    object_name: Optional[str] = None
    dependencies: Tuple[Dependency, ...] = ()
    dependents: Tuple[Dependency, ...] = ()
    migration_status: MigrationStatus = MigrationStatus.PENDING
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self):
        # Imported here to avoid a circular import with component_utils
        from migrationgraph.core.component_utils import get_parent_object_name, infer_is_custom

        if not self.id or not str(self.id).strip():
            raise ValidationError("Component id cannot be empty")
        object.__setattr__(self, "dependencies", tuple(self.dependencies))
        object.__setattr__(self, "dependents", tuple(self.dependents))

        if self.type == ComponentType.FIELD:
            if not self.object_name:
                object.__setattr__(self, "object_name", get_parent_object_name(self.api_name))
        elif self.object_name is not None:
            object.__setattr__(self, "object_name", None)

        if self.is_custom is None:
            object.__setattr__(self, "is_custom", infer_is_custom(self))

    def as_dependency(self, required: bool = True) -> Dependency:
        """Edge pointing at this component"""
        return Dependency(id=self.id, name=self.name, type=self.type, required=required)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Component':
        """
        Build a component from its camelCase wire representation

        Args:
            data: Dict with keys id, name, type, apiName and optional
                namespace, description, isCustom, objectName,
                dependencies, dependents, migrationStatus, metadata

        Raises:
            ValidationError: If required keys are missing or invalid
        """
        if not data.get("id"):
            raise ValidationError(f"Component without id: {data}")
        if not data.get("type"):
            raise ValidationError(f"Component {data['id']} without type")

        api_name = data.get("apiName") or data.get("api_name") or data.get("name") or str(data["id"])
        is_custom = data.get("isCustom", data.get("is_custom"))
        return cls(
            id=str(data["id"]),
            name=data.get("name") or api_name,
            type=ComponentType.from_string(data["type"]),
            api_name=api_name,
            namespace=data.get("namespace") or None,
            description=data.get("description") or None,
            is_custom=None if is_custom is None else bool(is_custom),
            object_name=data.get("objectName") or data.get("object_name"),
            dependencies=tuple(Dependency.from_dict(d) for d in data.get("dependencies") or []),
            dependents=tuple(Dependency.from_dict(d) for d in data.get("dependents") or []),
            migration_status=MigrationStatus.from_string(
                data.get("migrationStatus") or data.get("migration_status") or MigrationStatus.PENDING.value
            ),
            metadata=dict(data.get("metadata") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        """camelCase wire representation"""
        result = {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "apiName": self.api_name,
            "namespace": self.namespace,
            "description": self.description,
            "isCustom": self.is_custom,
            "dependencies": [d.to_dict() for d in self.dependencies],
            "dependents": [d.to_dict() for d in self.dependents],
            "migrationStatus": self.migration_status.value,
            "metadata": dict(self.metadata),
        }
        if self.type == ComponentType.FIELD:
            result["objectName"] = self.object_name
        return result


@dataclass
class StandardObjectWithFields:
    """Standard object that only needs custom fields added in the target"""
    object_name: str
    custom_fields: List[Component] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "objectName": self.object_name,
            "customFields": [f.to_dict() for f in self.custom_fields],
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Output of one dependency analysis run"""
    selected_components: Tuple[Component, ...]
    custom_dependencies: Tuple[Component, ...]
    standard_objects_with_fields: Tuple[StandardObjectWithFields, ...]
    analysis_notes: Dict[str, List[str]]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "selectedComponents": [c.to_dict() for c in self.selected_components],
            "customDependencies": [c.to_dict() for c in self.custom_dependencies],
            "standardObjectsWithFields": [s.to_dict() for s in self.standard_objects_with_fields],
            "analysisNotes": {k: list(v) for k, v in self.analysis_notes.items()},
        }

    @property
    def total_custom_fields_on_standard_objects(self) -> int:
        return sum(len(s.custom_fields) for s in self.standard_objects_with_fields)


@dataclass
class Organization:
    """Source organization metadata kept alongside cached components"""
    id: str
    name: str
    instance_url: str = ""
    org_type: str = "production"
    api_version: str = "59.0"
    last_synced_at: Optional[str] = None

    def __post_init__(self):
        if not self.id or not self.id.strip():
            raise ValidationError("Organization id cannot be empty")
        valid_types = ['production', 'sandbox', 'developer', 'scratch']
        if self.org_type not in valid_types:
            raise ValidationError(f"Invalid org type: {self.org_type}. Valid: {valid_types}")

"""
Request/response schemas for the dependency analysis operation
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AnalyzeRequest(BaseModel):
    """Input schema for a dependency analysis request"""
    model_config = ConfigDict(populate_by_name=True)

    organization_id: str = Field(
        alias="organizationId",
        min_length=1,
        description="Organization whose component graph is analysed"
    )
    component_ids: List[str] = Field(
        alias="componentIds",
        min_length=1,
        description="Ids of the components selected for migration"
    )
    allow_partial: bool = Field(
        default=False,
        alias="allowPartial",
        description="Skip ids missing from the graph instead of failing"
    )

    @field_validator("component_ids")
    @classmethod
    def _strip_ids(cls, value: List[str]) -> List[str]:
        ids = [v.strip() for v in value]
        if any(not v for v in ids):
            raise ValueError("component ids cannot be empty")
        # Keep first occurrence order
        return list(dict.fromkeys(ids))


class StandardObjectWithFieldsSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    object_name: str = Field(alias="objectName")
    custom_fields: List[Dict[str, Any]] = Field(alias="customFields")


class AnalyzeResponse(BaseModel):
    """Successful analysis response"""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    selected_components: List[Dict[str, Any]] = Field(alias="selectedComponents")
    custom_dependencies: List[Dict[str, Any]] = Field(alias="customDependencies")
    standard_objects_with_fields: List[StandardObjectWithFieldsSchema] = Field(
        alias="standardObjectsWithFields"
    )
    analysis_notes: Dict[str, List[str]] = Field(alias="analysisNotes")


class ErrorDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str
    message: str
    missing_ids: List[str] = Field(default_factory=list, alias="missingIds")


class ErrorResponse(BaseModel):
    """Structured failure, distinct from an empty successful result"""
    success: bool = False
    error: ErrorDetail

    @classmethod
    def build(cls, error_type: str, message: str, missing_ids: Optional[List[str]] = None) -> 'ErrorResponse':
        return cls(error=ErrorDetail(type=error_type, message=message, missing_ids=missing_ids or []))

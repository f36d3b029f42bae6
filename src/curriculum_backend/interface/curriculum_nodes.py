from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from curriculum_backend.interface.base import BaseEntityGet
from curriculum_backend.interface.curriculum_activities import CurriculumActivityGet
from curriculum_backend.interface.curriculum_resources import CurriculumResourceGet
from curriculum_backend.model.curriculum import NodeType

# Required parent type for each node type; None means the node is a root.
PARENT_TYPES = {
    NodeType.CHAPTER: None,
    NodeType.TOPIC: NodeType.CHAPTER,
    NodeType.SUBTOPIC: NodeType.TOPIC,
}


class CurriculumNodeCreate(BaseModel):
    """DTO for creating a curriculum node."""
    title: str
    description: Optional[str] = None
    type: NodeType
    parent_id: Optional[str] = None
    order: int
    subject_id: str

    @field_validator('title')
    @classmethod
    def validate_title(cls, value: str) -> str:
        if not value.strip():
            raise ValueError('Title cannot be empty or only whitespace')
        return value.strip()

    model_config = ConfigDict(use_enum_values=True)


class CurriculumNodeUpdate(BaseModel):
    """DTO for partially updating a curriculum node.

    Only fields that are explicitly set are applied; an explicit
    ``parent_id: null`` detaches the node from its parent.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[NodeType] = None
    parent_id: Optional[str] = None
    order: Optional[int] = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError('Title cannot be empty or only whitespace')
        return value.strip() if value is not None else value

    model_config = ConfigDict(use_enum_values=True)


class CurriculumNodeGet(BaseEntityGet):
    """DTO for curriculum node responses, with its leaf content."""
    title: str
    description: Optional[str] = None
    type: NodeType
    parent_id: Optional[str] = None
    order: int
    subject_id: str
    resources: List[CurriculumResourceGet] = Field(default_factory=list)
    activities: List[CurriculumActivityGet] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class CurriculumNodeQuery(BaseModel):
    subject_id: str

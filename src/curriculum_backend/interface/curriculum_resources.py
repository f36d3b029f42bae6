from typing import Optional
from pydantic import BaseModel, ConfigDict
from curriculum_backend.interface.base import BaseEntityGet
from curriculum_backend.model.curriculum import CurriculumResourceType


class FileInfo(BaseModel):
    """Metadata of an uploaded file backing a resource."""
    name: str
    size: int
    type: str
    url: Optional[str] = None


class CurriculumResourceCreate(BaseModel):
    """DTO for creating a resource.

    ``content`` depends on ``type``: rich editor markup for READING,
    a bare URL for VIDEO and URL, free text for DOCUMENT.
    """
    title: str
    type: CurriculumResourceType
    content: str
    node_id: str
    file_info: Optional[FileInfo] = None

    model_config = ConfigDict(use_enum_values=True)


class CurriculumResourceUpdate(BaseModel):
    title: Optional[str] = None
    type: Optional[CurriculumResourceType] = None
    content: Optional[str] = None
    file_info: Optional[FileInfo] = None

    model_config = ConfigDict(use_enum_values=True)


class CurriculumResourceGet(BaseEntityGet):
    title: str
    type: CurriculumResourceType
    content: str
    node_id: str
    file_info: Optional[FileInfo] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

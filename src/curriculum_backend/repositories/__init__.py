"""
Repository pattern implementation for direct database access.
"""

from .base import (
    BaseRepository,
    RepositoryError,
    NotFoundError,
    DuplicateError,
    InvalidHierarchyError,
    InvalidContentError
)
from .curriculum_node import CurriculumNodeRepository
from .curriculum_content import CurriculumResourceRepository, CurriculumActivityRepository
from .user import UserRepository

__all__ = [
    "BaseRepository",
    "RepositoryError",
    "NotFoundError",
    "DuplicateError",
    "InvalidHierarchyError",
    "InvalidContentError",
    "CurriculumNodeRepository",
    "CurriculumResourceRepository",
    "CurriculumActivityRepository",
    "UserRepository"
]

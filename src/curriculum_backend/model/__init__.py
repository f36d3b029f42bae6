from .base import Base, metadata
from .auth import User, TeacherProfile, StudentProfile, CoordinatorProfile, ParentProfile
from .role import Role, Permission, RolePermission, UserRole
from .curriculum import (
    NodeType,
    CurriculumResourceType,
    ActivityType,
    CurriculumNode,
    CurriculumResource,
    CurriculumActivity
)

# Import all models to ensure relationships are properly set up
from . import auth, role, curriculum

__all__ = [
    'Base',
    'metadata',
    # Auth models
    'User',
    'TeacherProfile',
    'StudentProfile',
    'CoordinatorProfile',
    'ParentProfile',
    # Role/Permission models
    'Role',
    'Permission',
    'RolePermission',
    'UserRole',
    # Curriculum models
    'NodeType',
    'CurriculumResourceType',
    'ActivityType',
    'CurriculumNode',
    'CurriculumResource',
    'CurriculumActivity',
]

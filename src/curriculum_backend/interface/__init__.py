from .curriculum_nodes import (
    CurriculumNodeCreate,
    CurriculumNodeGet,
    CurriculumNodeQuery,
    CurriculumNodeUpdate,
)
from .curriculum_resources import (
    FileInfo,
    CurriculumResourceCreate,
    CurriculumResourceGet,
    CurriculumResourceUpdate,
)
from .curriculum_activities import (
    ActivityCategory,
    CurriculumActivityCreate,
    CurriculumActivityGet,
    CurriculumActivityUpdate,
    validate_activity_content,
)

"""
Activity DTOs and the closed mapping from activity type to content shape.

Every ActivityType belongs to exactly one ActivityCategory, and every
category has exactly one content model. Validation dispatches through
these two tables only.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Type, Union
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from curriculum_backend.interface.base import BaseEntityGet
from curriculum_backend.model.curriculum import ActivityType


class ActivityCategory(str, Enum):
    QUIZ = "QUIZ"
    ASSIGNMENT = "ASSIGNMENT"
    DISCUSSION = "DISCUSSION"
    PROJECT = "PROJECT"
    READING = "READING"


class _ContentModel(BaseModel):
    # camelCase on the wire and in storage, snake_case accepted on input
    model_config = ConfigDict(extra='forbid', alias_generator=to_camel, populate_by_name=True)


class QuizQuestion(_ContentModel):
    question: str
    options: Optional[List[str]] = None
    correct_answer: Optional[Union[str, int]] = None
    points: Optional[float] = None


class QuizContent(_ContentModel):
    questions: List[QuizQuestion]


class RubricCriterion(_ContentModel):
    criteria: str
    points: float


class AssignmentContent(_ContentModel):
    instructions: str
    due_date: Optional[datetime] = None
    total_points: Optional[float] = None
    rubric: Optional[List[RubricCriterion]] = None


class DiscussionContent(_ContentModel):
    topic: str
    guidelines: Optional[List[str]] = None
    due_date: Optional[datetime] = None
    min_responses: Optional[int] = Field(None, ge=0)


class ProjectContent(_ContentModel):
    description: str
    objectives: Optional[List[str]] = None
    due_date: Optional[datetime] = None
    deliverables: Optional[List[str]] = None
    rubric: Optional[List[RubricCriterion]] = None


class ReadingContent(_ContentModel):
    # opaque rich-text editor output
    content: str
    estimated_reading_time: Optional[int] = Field(None, ge=0)
    references: Optional[List[str]] = None




ACTIVITY_CATEGORIES: Dict[ActivityType, ActivityCategory] = {
    ActivityType.QUIZ_MULTIPLE_CHOICE: ActivityCategory.QUIZ,
    ActivityType.QUIZ_DRAG_DROP: ActivityCategory.QUIZ,
    ActivityType.QUIZ_FILL_BLANKS: ActivityCategory.QUIZ,
    ActivityType.QUIZ_MEMORY: ActivityCategory.QUIZ,
    ActivityType.QUIZ_TRUE_FALSE: ActivityCategory.QUIZ,
    ActivityType.GAME_WORD_SEARCH: ActivityCategory.QUIZ,
    ActivityType.GAME_CROSSWORD: ActivityCategory.QUIZ,
    ActivityType.GAME_FLASHCARDS: ActivityCategory.QUIZ,
    ActivityType.CLASS_ASSIGNMENT: ActivityCategory.ASSIGNMENT,
    ActivityType.CLASS_TEST: ActivityCategory.ASSIGNMENT,
    ActivityType.CLASS_EXAM: ActivityCategory.ASSIGNMENT,
    ActivityType.CLASS_PRESENTATION: ActivityCategory.DISCUSSION,
    ActivityType.CLASS_PROJECT: ActivityCategory.PROJECT,
    ActivityType.READING: ActivityCategory.READING,
    ActivityType.VIDEO_YOUTUBE: ActivityCategory.READING,
}

CONTENT_SHAPES: Dict[ActivityCategory, Type[BaseModel]] = {
    ActivityCategory.QUIZ: QuizContent,
    ActivityCategory.ASSIGNMENT: AssignmentContent,
    ActivityCategory.DISCUSSION: DiscussionContent,
    ActivityCategory.PROJECT: ProjectContent,
    ActivityCategory.READING: ReadingContent,
}


def content_model_for(activity_type: ActivityType | str) -> Type[BaseModel]:
    """Return the content model for an activity type."""
    category = ACTIVITY_CATEGORIES[ActivityType(activity_type)]
    return CONTENT_SHAPES[category]


def validate_activity_content(activity_type: ActivityType | str, content: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate ``content`` against the shape implied by ``activity_type``.

    Returns the normalized JSON-ready payload with camelCase keys. Raises pydantic's
    ValidationError on a shape mismatch.
    """
    model = content_model_for(activity_type)
    return model.model_validate(content).model_dump(mode="json", by_alias=True, exclude_none=True)


class CurriculumActivityCreate(BaseModel):
    title: str
    type: ActivityType
    content: Dict[str, Any]
    is_graded: bool = False
    node_id: str

    model_config = ConfigDict(use_enum_values=True)


class CurriculumActivityUpdate(BaseModel):
    title: Optional[str] = None
    type: Optional[ActivityType] = None
    content: Optional[Dict[str, Any]] = None
    is_graded: Optional[bool] = None

    model_config = ConfigDict(use_enum_values=True)


class CurriculumActivityGet(BaseEntityGet):
    title: str
    type: ActivityType
    content: Dict[str, Any]
    is_graded: bool
    node_id: str

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

"""
Repositories for the leaf content attached to curriculum nodes.

Resources keep their content verbatim; escaping markup is left to
whoever renders it. Activity content is validated against the shape of
the activity type's category.
"""

import logging
from typing import Any, Dict, List
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .base import BaseRepository, InvalidContentError, NotFoundError
from ..interface.curriculum_activities import (
    CurriculumActivityCreate,
    CurriculumActivityUpdate,
    validate_activity_content,
)
from ..interface.curriculum_resources import CurriculumResourceCreate, CurriculumResourceUpdate
from ..model.curriculum import (
    ActivityType,
    CurriculumActivity,
    CurriculumNode,
    CurriculumResource,
    CurriculumResourceType,
)

logger = logging.getLogger(__name__)


def _require_text(field: str, value: Any) -> str:
    if value is None or not str(value).strip():
        raise InvalidContentError(f"{field} is required")
    return value


class _NodeScopedRepository(BaseRepository):

    def ensure_node(self, node_id: str) -> None:
        try:
            exists = self.db.query(CurriculumNode.id).filter(CurriculumNode.id == node_id).first()
        except SQLAlchemyError as e:
            raise self._storage_error("query", e)
        if exists is None:
            raise NotFoundError(CurriculumNode.__name__, node_id)


class CurriculumResourceRepository(_NodeScopedRepository):
    """Repository for CurriculumResource entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db, CurriculumResource)

    def create_resource(self, data: CurriculumResourceCreate) -> CurriculumResource:
        """
        Attach a resource to a node.

        Raises:
            InvalidContentError: If title or content is blank
            NotFoundError: If the node does not exist
        """
        values = data.model_dump()

        title = _require_text("title", values["title"]).strip()
        content = _require_text("content", values["content"])

        self.ensure_node(values["node_id"])

        resource = CurriculumResource(
            title=title,
            type=CurriculumResourceType(values["type"]),
            content=content,
            node_id=values["node_id"],
            file_info=values.get("file_info"),
        )
        return self.create(resource)

    def update_resource(self, resource_id: str, data: CurriculumResourceUpdate) -> CurriculumResource:
        """
        Raises:
            NotFoundError: If the resource does not exist
            InvalidContentError: If a supplied title or content is blank
        """
        resource = self.get_by_id(resource_id)
        updates = data.model_dump(exclude_unset=True)

        if "title" in updates:
            updates["title"] = _require_text("title", updates["title"]).strip()
        if "content" in updates:
            _require_text("content", updates["content"])
        if "type" in updates:
            updates["type"] = CurriculumResourceType(_require_text("type", updates["type"]))

        return self.apply_updates(resource, updates)

    def delete_resource(self, resource_id: str) -> bool:
        """
        Raises:
            NotFoundError: If the resource does not exist
        """
        return self.delete(resource_id)


class CurriculumActivityRepository(_NodeScopedRepository):
    """Repository for CurriculumActivity entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db, CurriculumActivity)

    def list_activities(self, node_id: str) -> List[CurriculumActivity]:
        """Activities of a node, newest first."""
        try:
            return (
                self.db.query(CurriculumActivity)
                .filter(CurriculumActivity.node_id == node_id)
                .order_by(CurriculumActivity.created_at.desc())
                .all()
            )
        except SQLAlchemyError as e:
            raise self._storage_error("list", e)

    def create_activity(self, data: CurriculumActivityCreate) -> CurriculumActivity:
        """
        Attach an activity to a node.

        Raises:
            InvalidContentError: If the content does not match the activity type
            NotFoundError: If the node does not exist
        """
        values = data.model_dump()
        activity_type = ActivityType(values["type"])

        title = _require_text("title", values["title"]).strip()
        content = self._validated_content(activity_type, values["content"])

        self.ensure_node(values["node_id"])

        activity = CurriculumActivity(
            title=title,
            type=activity_type,
            content=content,
            is_graded=values["is_graded"],
            node_id=values["node_id"],
        )
        return self.create(activity)

    def update_activity(self, activity_id: str, data: CurriculumActivityUpdate) -> CurriculumActivity:
        """
        Content is re-validated whenever the type or the content changes.

        Raises:
            NotFoundError: If the activity does not exist
            InvalidContentError: If the resulting content does not match the type
        """
        activity = self.get_by_id(activity_id)
        updates = {key: value for key, value in data.model_dump(exclude_unset=True).items() if value is not None}

        if "title" in updates:
            updates["title"] = _require_text("title", updates["title"]).strip()

        activity_type = ActivityType(updates.get("type", activity.type))
        if "type" in updates:
            updates["type"] = activity_type

        if "type" in updates or "content" in updates:
            updates["content"] = self._validated_content(
                activity_type, updates.get("content", activity.content)
            )

        return self.apply_updates(activity, updates)

    def delete_activity(self, activity_id: str) -> bool:
        """
        Raises:
            NotFoundError: If the activity does not exist
        """
        return self.delete(activity_id)

    def _validated_content(self, activity_type: ActivityType, content: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return validate_activity_content(activity_type, content)
        except ValidationError as e:
            raise InvalidContentError(
                f"Content does not match the shape required by {activity_type.value}",
                errors=e.errors(include_url=False, include_context=False, include_input=False),
            )

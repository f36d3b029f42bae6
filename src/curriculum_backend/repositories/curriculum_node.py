"""
Curriculum tree repository.

Nodes form a fixed three-level hierarchy per subject:
CHAPTER (root) -> TOPIC -> SUBTOPIC. Siblings are listed by
``(order, sequence)``; gaps in ``order`` are kept as they are.
"""

import logging
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from .base import BaseRepository, InvalidHierarchyError
from ..interface.curriculum_nodes import CurriculumNodeCreate, CurriculumNodeUpdate, PARENT_TYPES
from ..model.curriculum import CurriculumNode, NodeType

logger = logging.getLogger(__name__)


class CurriculumNodeRepository(BaseRepository[CurriculumNode]):
    """Repository for CurriculumNode entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db, CurriculumNode)

    def list_nodes(self, subject_id: str) -> List[CurriculumNode]:
        """
        List all nodes of a subject with resources and activities loaded.

        Args:
            subject_id: The subject whose curriculum is listed

        Returns:
            Nodes ordered by ``order`` ascending, then insertion order
        """
        try:
            return (
                self.db.query(CurriculumNode)
                .options(
                    selectinload(CurriculumNode.resources),
                    selectinload(CurriculumNode.activities)
                )
                .filter(CurriculumNode.subject_id == subject_id)
                .order_by(
                    CurriculumNode.order.asc(),
                    CurriculumNode.sequence.asc(),
                    CurriculumNode.created_at.asc(),
                    CurriculumNode.id.asc()
                )
                .all()
            )
        except SQLAlchemyError as e:
            raise self._storage_error("list", e)

    def create_node(self, data: CurriculumNodeCreate) -> CurriculumNode:
        """
        Create a node after checking its type against its parent.

        Raises:
            InvalidHierarchyError: If the type/parent combination is not allowed
        """
        values = data.model_dump()
        node_type = NodeType(values.pop("type"))

        self.validate_parent(node_type, values.get("parent_id"), values["subject_id"])

        node = CurriculumNode(type=node_type, sequence=self._next_sequence(), **values)
        node = self.create(node)

        logger.info(f"Created {node_type.value} node {node.id} in subject {node.subject_id}")
        return node

    def update_node(self, node_id: str, data: CurriculumNodeUpdate) -> CurriculumNode:
        """
        Apply a partial update to a node.

        Setting the type to CHAPTER without a parent_id detaches the node
        from its parent. The type of a node that still has children cannot
        change.

        Raises:
            NotFoundError: If the node does not exist
            InvalidHierarchyError: If the resulting type/parent combination is not allowed
        """
        node = self.get_by_id(node_id)
        # only parent_id and description may be cleared with an explicit null
        updates = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key in ("parent_id", "description")
        }

        new_type = NodeType(updates["type"]) if "type" in updates else node.type
        if "type" in updates:
            updates["type"] = new_type

        if "type" in updates and new_type == NodeType.CHAPTER and "parent_id" not in updates:
            updates["parent_id"] = None

        if new_type != node.type and self.has_children(node.id):
            raise InvalidHierarchyError(
                f"Cannot change type of node {node.id} to {new_type.value} while it has child nodes"
            )

        if "type" in updates or "parent_id" in updates:
            new_parent_id = updates.get("parent_id", node.parent_id)
            self.validate_parent(new_type, new_parent_id, node.subject_id, node_id=node.id)

        return self.apply_updates(node, updates)

    def delete_node(self, node_id: str) -> bool:
        """
        Delete a node together with its resources and activities.

        Raises:
            NotFoundError: If the node does not exist
            InvalidHierarchyError: If the node still has child nodes
        """
        node = self.get_by_id(node_id)

        if self.has_children(node.id):
            raise InvalidHierarchyError(
                f"Node {node.id} still has child nodes; delete or move them first"
            )

        try:
            self.db.delete(node)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise self._storage_error("delete", e)

        logger.info(f"Deleted node {node_id}")
        return True

    def has_children(self, node_id: str) -> bool:
        try:
            return self.db.query(CurriculumNode).filter(
                CurriculumNode.parent_id == node_id
            ).count() > 0
        except SQLAlchemyError as e:
            raise self._storage_error("query", e)

    def validate_parent(
        self,
        node_type: NodeType,
        parent_id: Optional[str],
        subject_id: str,
        node_id: Optional[str] = None
    ) -> None:
        """Check that ``parent_id`` is an allowed parent for a node of ``node_type``."""
        expected = PARENT_TYPES[node_type]

        if expected is None:
            if parent_id is not None:
                raise InvalidHierarchyError(f"A {node_type.value} node cannot have a parent")
            return

        if parent_id is None:
            raise InvalidHierarchyError(f"A {node_type.value} node requires a {expected.value} parent")

        if node_id is not None and parent_id == node_id:
            raise InvalidHierarchyError("A node cannot be its own parent")

        parent = self.get_by_id_optional(parent_id)

        if parent is None:
            raise InvalidHierarchyError(f"Parent node {parent_id} does not exist")

        if parent.type != expected:
            raise InvalidHierarchyError(
                f"A {node_type.value} node requires a {expected.value} parent, got {parent.type.value}"
            )

        if parent.subject_id != subject_id:
            raise InvalidHierarchyError("Parent node belongs to a different subject")

    def _next_sequence(self) -> int:
        # read-then-write; concurrent creates may share a value, list_nodes
        # falls back to created_at and id for those
        try:
            current = self.db.query(func.max(CurriculumNode.sequence)).scalar()
        except SQLAlchemyError as e:
            raise self._storage_error("query", e)
        return (current or 0) + 1

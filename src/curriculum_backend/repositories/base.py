"""
Base repository pattern implementation.

Repositories own every storage round trip of the curriculum core and
report failures as the exceptions defined here; the API layer maps them
to HTTP responses.
"""

import logging
from abc import ABC
from typing import TypeVar, Generic, List, Optional, Dict, Any, Type
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy import inspect

logger = logging.getLogger(__name__)

# Type variable for generic entity type
T = TypeVar('T')


class RepositoryError(Exception):
    """Base exception for repository operations; raised as-is for storage failures."""
    pass


class NotFoundError(RepositoryError):
    """Exception raised when entity is not found."""

    def __init__(self, entity_type: str, entity_id: Any):
        super().__init__(f"{entity_type} with id {entity_id} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class DuplicateError(RepositoryError):
    """Exception raised when attempting to create duplicate entity."""

    def __init__(self, entity_type: str, criteria: Dict[str, Any]):
        super().__init__(f"{entity_type} already exists with criteria: {criteria}")
        self.entity_type = entity_type
        self.criteria = criteria


class MissingReferenceError(NotFoundError):
    """Exception raised when an entity points at a row that does not exist."""

    def __init__(self, entity_type: str, detail: str):
        RepositoryError.__init__(self, f"{entity_type} references a record that does not exist: {detail}")
        self.entity_type = entity_type
        self.entity_id = None


class InvalidHierarchyError(RepositoryError):
    """Exception raised when a node type does not fit its parent."""
    pass


class InvalidContentError(RepositoryError):
    """Exception raised when a field or a content payload is malformed."""

    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.errors = errors or []


def _is_foreign_key_violation(error: IntegrityError) -> bool:
    # 23503 is foreign_key_violation on PostgreSQL
    if getattr(error.orig, "pgcode", None) == "23503":
        return True
    return "foreign key" in str(error.orig).lower()


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository providing common database operations.

    This class implements the repository pattern, providing a clean
    abstraction over SQLAlchemy operations.
    """

    def __init__(self, db: Session, model: Type[T]):
        """
        Initialize repository with database session and model class.

        Args:
            db: SQLAlchemy database session
            model: SQLAlchemy model class
        """
        self.db = db
        self.model = model

    def get_by_id(self, entity_id: Any) -> T:
        """
        Get entity by ID.

        Raises:
            NotFoundError: If entity not found
        """
        entity = self.get_by_id_optional(entity_id)
        if entity is None:
            raise NotFoundError(self.model.__name__, entity_id)
        return entity

    def get_by_id_optional(self, entity_id: Any) -> Optional[T]:
        """Get entity by ID, returning None if not found."""
        try:
            return self.db.query(self.model).filter(
                self.model.id == entity_id
            ).first()
        except SQLAlchemyError as e:
            raise self._storage_error("load", e)

    def create(self, entity: T) -> T:
        """
        Create a new entity.

        Args:
            entity: Entity instance to create

        Returns:
            Created entity with updated fields (e.g., ID)

        Raises:
            DuplicateError: If entity violates unique constraints
            MissingReferenceError: If a foreign key points nowhere
            RepositoryError: If database operation fails
        """
        try:
            self.db.add(entity)
            self.db.commit()
            self.db.refresh(entity)
            return entity
        except IntegrityError as e:
            self.db.rollback()
            if _is_foreign_key_violation(e):
                raise MissingReferenceError(self.model.__name__, str(e.orig))
            raise DuplicateError(
                self.model.__name__,
                self._extract_entity_dict(entity)
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise self._storage_error("create", e)

    def apply_updates(self, entity: T, updates: Dict[str, Any]) -> T:
        """Set the given attributes on an already loaded entity and commit."""
        try:
            for key, value in updates.items():
                if hasattr(entity, key):
                    setattr(entity, key, value)

            self.db.commit()
            self.db.refresh(entity)
            return entity
        except SQLAlchemyError as e:
            self.db.rollback()
            raise self._storage_error("update", e)

    def delete(self, entity_id: Any) -> bool:
        """
        Delete an entity by ID.

        Raises:
            NotFoundError: If entity not found
            RepositoryError: If deletion fails
        """
        entity = self.get_by_id(entity_id)

        try:
            self.db.delete(entity)
            self.db.commit()
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            raise self._storage_error("delete", e)

    def _storage_error(self, operation: str, error: SQLAlchemyError) -> RepositoryError:
        logger.error(f"Failed to {operation} {self.model.__name__}: {error}")
        return RepositoryError(f"Failed to {operation} {self.model.__name__}: {str(error)}")

    def _extract_entity_dict(self, entity: T) -> Dict[str, Any]:
        """Extract column attributes of an entity as dictionary."""
        mapper = inspect(entity).mapper
        return {
            column.key: getattr(entity, column.key)
            for column in mapper.column_attrs
        }

"""
User repository for direct database access.

Used by the operator CLI and the test suite to provision users, profiles
and role assignments.
"""

from typing import Optional
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .base import BaseRepository, NotFoundError
from ..model.auth import CoordinatorProfile, ParentProfile, StudentProfile, TeacherProfile, User
from ..model.role import Role, UserRole

PROFILE_MODELS = {
    "teacher": TeacherProfile,
    "student": StudentProfile,
    "coordinator": CoordinatorProfile,
    "parent": ParentProfile,
}


class UserRepository(BaseRepository[User]):
    """Repository for User entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db, User)

    def find_by_login(self, login: str) -> Optional[User]:
        """
        Find a user by username or email.

        Args:
            login: Username or email address

        Returns:
            User if found, None otherwise
        """
        try:
            return self.db.query(User).filter(
                or_(User.username == login, User.email == login)
            ).first()
        except SQLAlchemyError as e:
            raise self._storage_error("query", e)

    def create_user(
        self,
        username: str,
        password: Optional[str] = None,
        email: Optional[str] = None,
        given_name: Optional[str] = None,
        family_name: Optional[str] = None,
        profile: Optional[str] = None
    ) -> User:
        """
        Create a user, optionally with one profile.

        Args:
            password: Already encrypted password
            profile: One of 'teacher', 'student', 'coordinator', 'parent'
        """
        if profile is not None and profile not in PROFILE_MODELS:
            raise ValueError(f"Unknown profile kind: {profile}")

        user = User(
            username=username,
            password=password,
            email=email,
            given_name=given_name,
            family_name=family_name,
        )

        if profile == "teacher":
            user.teacher_profile = TeacherProfile()
        elif profile == "student":
            user.student_profile = StudentProfile()
        elif profile == "coordinator":
            user.coordinator_profile = CoordinatorProfile()
        elif profile == "parent":
            user.parent_profile = ParentProfile()

        return self.create(user)

    def assign_role(self, user_id: str, role_name: str) -> UserRole:
        """
        Assign a role to a user; assigning a held role is a no-op.

        Raises:
            NotFoundError: If the user or role does not exist
        """
        self.get_by_id(user_id)
        role = self._get_role(role_name)

        existing = self.db.query(UserRole).filter(
            UserRole.user_id == user_id, UserRole.role_id == role.id
        ).first()
        if existing is not None:
            return existing

        user_role = UserRole(user_id=user_id, role_id=role.id)
        try:
            self.db.add(user_role)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise self._storage_error("assign role to", e)
        return user_role

    def revoke_role(self, user_id: str, role_name: str) -> bool:
        """
        Remove a role from a user.

        Returns:
            True if an assignment was removed
        """
        role = self._get_role(role_name)

        try:
            removed = self.db.query(UserRole).filter(
                UserRole.user_id == user_id, UserRole.role_id == role.id
            ).delete()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise self._storage_error("revoke role from", e)
        return removed > 0

    def _get_role(self, role_name: str) -> Role:
        role = self.db.query(Role).filter(Role.name == role_name).first()
        if role is None:
            raise NotFoundError(Role.__name__, role_name)
        return role

"""
Permission resolution and authorization.

Resolution is split in two: ``db_get_identity_assignments`` fetches the raw
role/permission/profile rows, ``build_effective_identity`` folds them.
Nothing here is cached; every authorization check resolves again against
the stored state.
"""

import logging
from typing import Dict, Iterable, List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from curriculum_backend.api.exceptions import ForbiddenException, StorageException, UnauthorizedException
from curriculum_backend.model.auth import User
from curriculum_backend.model.role import Permission, Role, RolePermission, UserRole
from curriculum_backend.permissions.principal import (
    EffectiveIdentity,
    IdentityAssignments,
    RequestContext,
    RoleAssignment,
    build_effective_identity,
)
from curriculum_backend.repositories.base import NotFoundError, RepositoryError
from curriculum_backend.repositories.user import PROFILE_MODELS

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("curriculum_backend.audit")


def db_get_identity_assignments(user_id: str, db: Session) -> IdentityAssignments:
    """
    Load role assignments, their permissions and profile flags of a user.

    Raises:
        NotFoundError: If the user does not exist
        RepositoryError: If the store cannot be queried
    """
    try:
        if db.query(User.id).filter(User.id == user_id).first() is None:
            raise NotFoundError(User.__name__, user_id)

        rows = (
            db.query(Role.name, Permission.name)
            .select_from(UserRole)
            .join(Role, Role.id == UserRole.role_id)
            .outerjoin(RolePermission, RolePermission.role_id == Role.id)
            .outerjoin(Permission, Permission.id == RolePermission.permission_id)
            .filter(UserRole.user_id == user_id)
            .all()
        )

        profiles = {
            kind
            for kind, profile_model in PROFILE_MODELS.items()
            if db.query(profile_model.id).filter(profile_model.user_id == user_id).first() is not None
        }
    except SQLAlchemyError as e:
        logger.error(f"Failed to load role assignments for user {user_id}: {e}")
        raise RepositoryError(f"Failed to load role assignments: {str(e)}")

    role_permissions: Dict[str, List[str]] = {}
    for role_name, permission_name in rows:
        granted = role_permissions.setdefault(role_name, [])
        if permission_name is not None:
            granted.append(permission_name)

    return IdentityAssignments(
        user_id=user_id,
        roles=tuple(
            RoleAssignment(role=role_name, permissions=tuple(sorted(permissions)))
            for role_name, permissions in sorted(role_permissions.items())
        ),
        profiles=frozenset(profiles),
    )


def resolve_effective_identity(user_id: str, db: Session) -> EffectiveIdentity:
    """Compute the effective roles and permissions of a user from stored state."""
    return build_effective_identity(db_get_identity_assignments(user_id, db))


def _audit(context: RequestContext, required_permission: str, effective: Optional[EffectiveIdentity], decision: str):
    record = {
        "required_permission": required_permission,
        "user_id": context.user_id,
        "roles": sorted(effective.roles) if effective else [],
        "permissions": sorted(effective.permissions) if effective else [],
        "decision": decision,
    }
    level = logging.INFO if decision == "allow" else logging.WARNING
    audit_logger.log(level, f"Permission check: {record}", extra={"audit": record})


def authorize(context: RequestContext, required_permission: str, db: Session) -> RequestContext:
    """
    Check ``required_permission`` against the caller's current roles.

    Returns a new context carrying the freshly resolved effective identity.

    Raises:
        UnauthorizedException: If the context has no identity or the user is gone
        ForbiddenException: If the caller lacks the permission
        StorageException: If the store cannot be queried
    """
    if context.identity is None:
        _audit(context, required_permission, None, "unauthenticated")
        raise UnauthorizedException()

    try:
        effective = resolve_effective_identity(context.identity.user_id, db)
    except NotFoundError:
        _audit(context, required_permission, None, "unauthenticated")
        raise UnauthorizedException("User no longer exists")
    except RepositoryError as e:
        _audit(context, required_permission, None, "error")
        raise StorageException(str(e))

    if not effective.permitted(required_permission):
        _audit(context, required_permission, effective, "deny")
        raise ForbiddenException()

    _audit(context, required_permission, effective, "allow")
    return context.with_effective(effective)


def db_apply_roles(
    role_name: str,
    permissions: Iterable[str],
    db: Session,
    description: Optional[str] = None,
    builtin: bool = True
) -> Role:
    """Create the role and permissions if missing and link them; existing links are kept."""

    role = db.query(Role).filter(Role.name == role_name).first()
    if role is None:
        role = Role(name=role_name, description=description, builtin=builtin)
        db.add(role)
        db.flush()
    elif description is not None:
        role.description = description

    linked = {
        permission_id
        for (permission_id,) in db.query(RolePermission.permission_id).filter(RolePermission.role_id == role.id)
    }

    for permission_name in permissions:
        permission = db.query(Permission).filter(Permission.name == permission_name).first()
        if permission is None:
            permission = Permission(name=permission_name)
            db.add(permission)
            db.flush()
        if permission.id not in linked:
            db.add(RolePermission(role_id=role.id, permission_id=permission.id))
            linked.add(permission.id)

    db.commit()
    return role

from typing import FrozenSet, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field


class DefaultRoles:
    """Built-in role names"""

    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    PROGRAM_COORDINATOR = "PROGRAM_COORDINATOR"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"
    PARENT = "PARENT"

    # lowest-privilege role, assigned when nothing else applies
    FALLBACK = STUDENT


class Permissions:
    """Permission names declared by the system role catalogue"""

    CURRICULUM_VIEW = "curriculum.view"
    CURRICULUM_EDIT = "curriculum.edit"
    USER_MANAGE = "user.manage"
    ROLE_MANAGE = "role.manage"


# Profile kinds in fallback preference order, with the role each one implies
PROFILE_DEFAULT_ROLES: List[Tuple[str, str]] = [
    ("teacher", DefaultRoles.TEACHER),
    ("student", DefaultRoles.STUDENT),
    ("coordinator", DefaultRoles.PROGRAM_COORDINATOR),
    ("parent", DefaultRoles.PARENT),
]


class RoleAssignment(BaseModel):
    """A role held by a user together with the permissions attached to it"""

    model_config = ConfigDict(frozen=True)

    role: str
    permissions: Tuple[str, ...] = ()


class IdentityAssignments(BaseModel):
    """Raw role and profile data fetched for one user"""

    model_config = ConfigDict(frozen=True)

    user_id: str
    roles: Tuple[RoleAssignment, ...] = ()
    profiles: FrozenSet[str] = frozenset()

    def default_role(self) -> Optional[str]:
        """Role implied by the most preferred profile the user has"""
        for profile, role in PROFILE_DEFAULT_ROLES:
            if profile in self.profiles:
                return role
        return None


class EffectiveIdentity(BaseModel):
    """Resolved roles and permissions of a user at check time"""

    model_config = ConfigDict(frozen=True)

    roles: FrozenSet[str] = frozenset()
    permissions: FrozenSet[str] = frozenset()

    @property
    def is_super_admin(self) -> bool:
        return DefaultRoles.SUPER_ADMIN in self.roles

    def permitted(self, permission: str) -> bool:
        """Super admins pass every check, everyone else needs the permission"""
        if self.is_super_admin:
            return True
        return permission in self.permissions


def build_effective_identity(assignments: IdentityAssignments) -> EffectiveIdentity:
    """
    Fold raw assignments into an effective identity.

    - SUPER_ADMIN suppresses every other role but keeps the union of the
      permissions attached to the assigned roles.
    - Otherwise the assigned roles are joined by the profile default role.
    - A user left without any role gets exactly one fallback role.
    """

    assigned_roles = {assignment.role for assignment in assignments.roles}
    permissions = frozenset(
        permission
        for assignment in assignments.roles
        for permission in assignment.permissions
    )

    if DefaultRoles.SUPER_ADMIN in assigned_roles:
        return EffectiveIdentity(roles=frozenset({DefaultRoles.SUPER_ADMIN}), permissions=permissions)

    default_role = assignments.default_role()

    roles = set(assigned_roles)
    if default_role:
        roles.add(default_role)

    if not roles:
        roles.add(default_role or DefaultRoles.FALLBACK)

    return EffectiveIdentity(roles=frozenset(roles), permissions=permissions)


class Identity(BaseModel):
    """Authenticated caller as reported by the identity provider"""

    model_config = ConfigDict(frozen=True)

    user_id: str
    username: Optional[str] = None
    provider: str = "unknown"


class RequestContext(BaseModel):
    """Immutable per-request context handed to every handler"""

    model_config = ConfigDict(frozen=True)

    identity: Optional[Identity] = None
    effective: EffectiveIdentity = Field(default_factory=EffectiveIdentity)

    @property
    def user_id(self) -> Optional[str]:
        return self.identity.user_id if self.identity is not None else None

    def with_effective(self, effective: EffectiveIdentity) -> "RequestContext":
        """Return a copy carrying a freshly resolved effective identity"""
        return RequestContext(identity=self.identity, effective=effective)

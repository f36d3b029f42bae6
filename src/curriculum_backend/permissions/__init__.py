"""
Permission system of the curriculum backend.

Main components:
- principal: effective identity, request context and the resolution fold
- core: fetching role assignments, resolution and authorization
- auth: authentication and per-request context construction
- role_setup: applying the built-in role catalogue
"""

from .principal import (
    DefaultRoles,
    Permissions,
    Identity,
    EffectiveIdentity,
    IdentityAssignments,
    RoleAssignment,
    RequestContext,
    build_effective_identity,
)

from .core import (
    authorize,
    db_apply_roles,
    db_get_identity_assignments,
    resolve_effective_identity,
)

__all__ = [
    "DefaultRoles",
    "Permissions",
    "Identity",
    "EffectiveIdentity",
    "IdentityAssignments",
    "RoleAssignment",
    "RequestContext",
    "build_effective_identity",
    "authorize",
    "db_apply_roles",
    "db_get_identity_assignments",
    "resolve_effective_identity",
]

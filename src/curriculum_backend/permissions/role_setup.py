"""
Role setup utilities for initializing system roles with permissions.

The role catalogue lives in a YAML file; applying it is idempotent so it
can run on every startup.
"""

import logging
from typing import List, Optional
import yaml
from pydantic import BaseModel, Field, model_validator
from sqlalchemy.orm import Session

from curriculum_backend.model.role import Permission, Role
from curriculum_backend.permissions.core import db_apply_roles
from curriculum_backend.settings import settings

logger = logging.getLogger(__name__)


class PermissionConfig(BaseModel):
    name: str
    description: Optional[str] = None


class RoleConfig(BaseModel):
    name: str
    description: Optional[str] = None
    permissions: List[str] = Field(default_factory=list)


class SystemRolesConfig(BaseModel):
    permissions: List[PermissionConfig] = Field(default_factory=list)
    roles: List[RoleConfig] = Field(default_factory=list)

    @model_validator(mode='after')
    def check_role_permissions_declared(self):
        declared = {permission.name for permission in self.permissions}
        for role in self.roles:
            unknown = set(role.permissions) - declared
            if unknown:
                raise ValueError(f"Role {role.name} references undeclared permissions: {sorted(unknown)}")
        return self


def load_system_roles(path: Optional[str] = None) -> SystemRolesConfig:
    """
    Read the role catalogue.

    Args:
        path: YAML file, defaults to settings.SYSTEM_ROLES_FILE
    """
    with open(path or settings.SYSTEM_ROLES_FILE, 'r') as file:
        return SystemRolesConfig.model_validate(yaml.safe_load(file) or {})


def initialize_system_roles(db: Session, path: Optional[str] = None) -> List[Role]:
    """Apply the role catalogue to the database."""

    config = load_system_roles(path)

    for permission_config in config.permissions:
        permission = db.query(Permission).filter(Permission.name == permission_config.name).first()
        if permission is None:
            db.add(Permission(name=permission_config.name, description=permission_config.description))
        else:
            permission.description = permission_config.description
    db.commit()

    roles = [
        db_apply_roles(role_config.name, role_config.permissions, db, description=role_config.description)
        for role_config in config.roles
    ]

    logger.info(f"Applied {len(roles)} system roles and {len(config.permissions)} permissions")
    return roles

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, text
from sqlalchemy.orm import relationship

from .base import Base, generate_uuid, utcnow


class Role(Base):
    __tablename__ = 'role'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(String(4096))
    builtin = Column(Boolean, nullable=False, default=False, server_default=text("false"))

    # Relationships
    role_permissions = relationship('RolePermission', back_populates='role', cascade='all, delete-orphan')
    user_roles = relationship('UserRole', back_populates='role')


class Permission(Base):
    __tablename__ = 'permission'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(String(4096))

    role_permissions = relationship('RolePermission', back_populates='permission', cascade='all, delete-orphan')


class RolePermission(Base):
    __tablename__ = 'role_permission'

    role_id = Column(ForeignKey('role.id', ondelete='CASCADE'), primary_key=True, nullable=False)
    permission_id = Column(ForeignKey('permission.id', ondelete='CASCADE'), primary_key=True, nullable=False)
    created_at = Column(DateTime(True), nullable=False, default=utcnow)

    role = relationship('Role', back_populates='role_permissions')
    permission = relationship('Permission', back_populates='role_permissions')


class UserRole(Base):
    __tablename__ = 'user_role'

    user_id = Column(ForeignKey('user.id', ondelete='CASCADE'), primary_key=True, nullable=False)
    role_id = Column(ForeignKey('role.id', ondelete='RESTRICT', onupdate='CASCADE'), primary_key=True, nullable=False)
    created_at = Column(DateTime(True), nullable=False, default=utcnow)

    role = relationship('Role', back_populates='user_roles')
    user = relationship('User', back_populates='user_roles')

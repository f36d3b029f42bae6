from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from .base import Base, generate_uuid, utcnow


class User(Base):
    __tablename__ = 'user'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    created_at = Column(DateTime(True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(True), nullable=False, default=utcnow, onupdate=utcnow)
    given_name = Column(String(255))
    family_name = Column(String(255))
    email = Column(String(320), unique=True)
    username = Column(String(255), unique=True, nullable=False)
    password = Column(String(255))

    # Relationships
    user_roles = relationship("UserRole", back_populates="user", uselist=True, lazy="select", cascade="all, delete-orphan")
    teacher_profile = relationship("TeacherProfile", back_populates="user", uselist=False, lazy="select", cascade="all, delete-orphan")
    student_profile = relationship("StudentProfile", back_populates="user", uselist=False, lazy="select", cascade="all, delete-orphan")
    coordinator_profile = relationship("CoordinatorProfile", back_populates="user", uselist=False, lazy="select", cascade="all, delete-orphan")
    parent_profile = relationship("ParentProfile", back_populates="user", uselist=False, lazy="select", cascade="all, delete-orphan")


class TeacherProfile(Base):
    __tablename__ = 'teacher_profile'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    created_at = Column(DateTime(True), nullable=False, default=utcnow)
    user_id = Column(ForeignKey('user.id', ondelete='CASCADE'), nullable=False, unique=True)

    user = relationship('User', back_populates='teacher_profile')


class StudentProfile(Base):
    __tablename__ = 'student_profile'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    created_at = Column(DateTime(True), nullable=False, default=utcnow)
    user_id = Column(ForeignKey('user.id', ondelete='CASCADE'), nullable=False, unique=True)

    user = relationship('User', back_populates='student_profile')


class CoordinatorProfile(Base):
    __tablename__ = 'coordinator_profile'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    created_at = Column(DateTime(True), nullable=False, default=utcnow)
    user_id = Column(ForeignKey('user.id', ondelete='CASCADE'), nullable=False, unique=True)

    user = relationship('User', back_populates='coordinator_profile')


class ParentProfile(Base):
    __tablename__ = 'parent_profile'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    created_at = Column(DateTime(True), nullable=False, default=utcnow)
    user_id = Column(ForeignKey('user.id', ondelete='CASCADE'), nullable=False, unique=True)

    user = relationship('User', back_populates='parent_profile')

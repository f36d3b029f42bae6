from enum import Enum as PyEnum
from sqlalchemy import (
    BigInteger, Boolean, Column, DateTime, Enum,
    ForeignKey, Index, Integer, JSON, String, Text
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from .base import Base, generate_uuid, utcnow

_JSON = JSON().with_variant(JSONB(), "postgresql")


class NodeType(str, PyEnum):
    CHAPTER = "CHAPTER"
    TOPIC = "TOPIC"
    SUBTOPIC = "SUBTOPIC"


class CurriculumResourceType(str, PyEnum):
    READING = "READING"
    VIDEO = "VIDEO"
    URL = "URL"
    DOCUMENT = "DOCUMENT"


class ActivityType(str, PyEnum):
    QUIZ_MULTIPLE_CHOICE = "QUIZ_MULTIPLE_CHOICE"
    QUIZ_DRAG_DROP = "QUIZ_DRAG_DROP"
    QUIZ_FILL_BLANKS = "QUIZ_FILL_BLANKS"
    QUIZ_MEMORY = "QUIZ_MEMORY"
    QUIZ_TRUE_FALSE = "QUIZ_TRUE_FALSE"
    GAME_WORD_SEARCH = "GAME_WORD_SEARCH"
    GAME_CROSSWORD = "GAME_CROSSWORD"
    GAME_FLASHCARDS = "GAME_FLASHCARDS"
    VIDEO_YOUTUBE = "VIDEO_YOUTUBE"
    READING = "READING"
    CLASS_ASSIGNMENT = "CLASS_ASSIGNMENT"
    CLASS_PROJECT = "CLASS_PROJECT"
    CLASS_PRESENTATION = "CLASS_PRESENTATION"
    CLASS_TEST = "CLASS_TEST"
    CLASS_EXAM = "CLASS_EXAM"


class CurriculumNode(Base):
    __tablename__ = 'curriculum_node'
    __table_args__ = (
        Index('curriculum_node_subject_order_key', 'subject_id', 'order', 'sequence'),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    created_at = Column(DateTime(True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(True), nullable=False, default=utcnow, onupdate=utcnow)
    title = Column(String(255), nullable=False)
    description = Column(String(4096))
    type = Column(Enum(NodeType, name='curriculum_node_type'), nullable=False)
    parent_id = Column(ForeignKey('curriculum_node.id', ondelete='RESTRICT'), nullable=True, index=True)
    order = Column(Integer, nullable=False)
    subject_id = Column(String(255), nullable=False, index=True)
    # insertion counter, breaks ties between siblings with equal order
    sequence = Column(BigInteger, nullable=False)

    # Relationships
    parent = relationship('CurriculumNode', remote_side=[id], back_populates='children')
    children = relationship('CurriculumNode', back_populates='parent')
    resources = relationship(
        'CurriculumResource',
        back_populates='node',
        cascade='all, delete-orphan',
        order_by='CurriculumResource.created_at'
    )
    activities = relationship(
        'CurriculumActivity',
        back_populates='node',
        cascade='all, delete-orphan',
        order_by='CurriculumActivity.created_at'
    )


class CurriculumResource(Base):
    __tablename__ = 'curriculum_resource'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    created_at = Column(DateTime(True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(True), nullable=False, default=utcnow, onupdate=utcnow)
    title = Column(String(255), nullable=False)
    type = Column(Enum(CurriculumResourceType, name='curriculum_resource_type'), nullable=False)
    content = Column(Text, nullable=False)
    file_info = Column(_JSON)
    node_id = Column(ForeignKey('curriculum_node.id', ondelete='CASCADE'), nullable=False, index=True)

    node = relationship('CurriculumNode', back_populates='resources')


class CurriculumActivity(Base):
    __tablename__ = 'curriculum_activity'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    created_at = Column(DateTime(True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(True), nullable=False, default=utcnow, onupdate=utcnow)
    title = Column(String(255), nullable=False)
    type = Column(Enum(ActivityType, name='curriculum_activity_type'), nullable=False)
    content = Column(_JSON, nullable=False)
    is_graded = Column(Boolean, nullable=False, default=False)
    node_id = Column(ForeignKey('curriculum_node.id', ondelete='CASCADE'), nullable=False, index=True)

    node = relationship('CurriculumNode', back_populates='activities')

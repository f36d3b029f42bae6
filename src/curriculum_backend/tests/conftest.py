"""
Pytest configuration and fixtures for all tests.
"""

import base64
import os
import sys
from typing import Generator
from uuid import uuid4
import pytest
from fastapi.testclient import TestClient
from keycove import generate_secret_key
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure curriculum_backend is importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from curriculum_backend.database import get_db
from curriculum_backend.interface.curriculum_nodes import CurriculumNodeCreate
from curriculum_backend.interface.tokens import encrypt_api_key
from curriculum_backend.model import Base
from curriculum_backend.model.curriculum import NodeType
from curriculum_backend.permissions.role_setup import initialize_system_roles
from curriculum_backend.repositories.curriculum_node import CurriculumNodeRepository
from curriculum_backend.repositories.user import UserRepository
from curriculum_backend.server import app
from curriculum_backend.settings import settings

DEFAULT_PASSWORD = "correct horse battery staple"


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without the HTTP stack")
    config.addinivalue_line("markers", "api: tests going through the FastAPI application")


@pytest.fixture(scope="session", autouse=True)
def token_secret():
    """Stored passwords are keycove-encrypted with a throwaway secret."""
    previous = settings.TOKEN_SECRET
    settings.TOKEN_SECRET = generate_secret_key()
    yield settings.TOKEN_SECRET
    settings.TOKEN_SECRET = previous


@pytest.fixture(scope="function")
def engine():
    """In-memory SQLite engine with the full schema."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)

    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def SessionLocal(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def test_db(SessionLocal) -> Generator[Session, None, None]:
    """Database session with the built-in roles applied."""
    session = SessionLocal()
    initialize_system_roles(session)

    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user_factory(test_db):
    """Create users with encrypted passwords, roles and an optional profile."""

    def create(username=None, roles=(), profile=None, password=DEFAULT_PASSWORD, email=None):
        repository = UserRepository(test_db)
        user = repository.create_user(
            username=username or f"user-{uuid4().hex[:8]}",
            password=encrypt_api_key(password),
            email=email,
            profile=profile,
        )
        for role in roles:
            repository.assign_role(user.id, role)
        return user

    return create


@pytest.fixture
def node_factory(test_db):
    """Create curriculum nodes through the repository."""

    def create(node_type=NodeType.CHAPTER, parent_id=None, order=0, subject_id="subject-1", title=None):
        return CurriculumNodeRepository(test_db).create_node(
            CurriculumNodeCreate(
                title=title or f"{node_type.value.title()} {uuid4().hex[:6]}",
                type=node_type,
                parent_id=parent_id,
                order=order,
                subject_id=subject_id,
            )
        )

    return create


@pytest.fixture
def client(SessionLocal, test_db) -> Generator[TestClient, None, None]:
    """TestClient whose requests use the in-memory database."""

    def override_get_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def basic_auth():
    """Build an HTTP Basic Authorization header."""

    def header(username: str, password: str = DEFAULT_PASSWORD) -> dict:
        token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
        return {"Authorization": f"Basic {token}"}

    return header

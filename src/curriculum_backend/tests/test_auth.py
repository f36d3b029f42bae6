"""
Tests for authentication and request context construction.
"""

import pytest

from curriculum_backend.api.exceptions import UnauthorizedException
from curriculum_backend.permissions.auth import (
    AuthenticationResult,
    AuthenticationService,
    RequestContextBuilder,
)
from curriculum_backend.permissions.principal import DefaultRoles, Permissions
from curriculum_backend.repositories.user import UserRepository

PASSWORD = "s3cret-classroom"


class TestAuthenticationService:

    def test_basic_auth_with_username(self, test_db, user_factory):
        user = user_factory(username="alice", password=PASSWORD)

        result = AuthenticationService.authenticate_basic("alice", PASSWORD, test_db)

        assert result.user_id == user.id
        assert result.username == "alice"
        assert result.provider == "basic"

    def test_basic_auth_with_email(self, test_db, user_factory):
        user = user_factory(username="bob", email="bob@school.example", password=PASSWORD)

        result = AuthenticationService.authenticate_basic("bob@school.example", PASSWORD, test_db)

        assert result.user_id == user.id

    def test_wrong_password(self, test_db, user_factory):
        user_factory(username="carol", password=PASSWORD)

        with pytest.raises(UnauthorizedException):
            AuthenticationService.authenticate_basic("carol", "not the password", test_db)

    def test_unknown_user(self, test_db):
        with pytest.raises(UnauthorizedException):
            AuthenticationService.authenticate_basic("nobody", PASSWORD, test_db)

    def test_user_without_password(self, test_db):
        UserRepository(test_db).create_user(username="sso-only")

        with pytest.raises(UnauthorizedException):
            AuthenticationService.authenticate_basic("sso-only", "", test_db)


class TestRequestContextBuilder:

    def test_no_identity_is_unauthenticated(self, test_db):
        with pytest.raises(UnauthorizedException):
            RequestContextBuilder.build(None, test_db)

    def test_context_carries_resolved_roles(self, test_db, user_factory):
        user = user_factory(roles=[DefaultRoles.PROGRAM_COORDINATOR], profile="teacher")

        context = RequestContextBuilder.build(AuthenticationResult(user.id, user.username, "basic"), test_db)

        assert context.user_id == user.id
        assert context.effective.roles == frozenset({DefaultRoles.PROGRAM_COORDINATOR, DefaultRoles.TEACHER})
        assert Permissions.CURRICULUM_EDIT in context.effective.permissions

    def test_unknown_user_is_unauthenticated(self, test_db):
        with pytest.raises(UnauthorizedException):
            RequestContextBuilder.build(AuthenticationResult("ghost"), test_db)

"""
Tests for the operator command line.
"""

import pytest
from click.testing import CliRunner

from curriculum_backend.cli import admin
from curriculum_backend.cli.cli import cli
from curriculum_backend.interface.tokens import decrypt_api_key
from curriculum_backend.model.auth import User
from curriculum_backend.permissions.core import resolve_effective_identity
from curriculum_backend.permissions.principal import DefaultRoles


@pytest.fixture
def runner(monkeypatch, engine, SessionLocal, test_db):
    """CliRunner with the commands bound to the in-memory database."""

    def get_test_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    monkeypatch.setattr(admin, "get_db", get_test_db)
    monkeypatch.setattr(admin, "get_engine", lambda: engine)

    return CliRunner()


class TestCli:

    def test_commands_registered(self):
        assert {"init-db", "seed-roles", "create-user", "assign-role", "serve"} <= set(cli.commands)

    def test_init_db(self, runner):
        result = runner.invoke(cli, ["init-db"])

        assert result.exit_code == 0
        assert "schema created" in result.output

    def test_seed_roles(self, runner):
        result = runner.invoke(cli, ["seed-roles"])

        assert result.exit_code == 0
        assert f"Role {DefaultRoles.SUPER_ADMIN}" in result.output

    def test_create_user(self, runner, test_db):
        result = runner.invoke(cli, [
            "create-user", "--username", "teacher1", "--password", "chalk-and-board",
            "--email", "teacher1@school.example", "--profile", "teacher",
        ])

        assert result.exit_code == 0, result.output
        user = test_db.query(User).filter(User.username == "teacher1").one()
        assert decrypt_api_key(user.password) == "chalk-and-board"
        assert DefaultRoles.TEACHER in resolve_effective_identity(user.id, test_db).roles

    def test_create_duplicate_user(self, runner, user_factory):
        user_factory(username="taken")

        result = runner.invoke(cli, ["create-user", "--username", "taken", "--password", "whatever"])

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_assign_and_revoke_role(self, runner, test_db, user_factory):
        user = user_factory(username="coordinator1")

        result = runner.invoke(cli, ["assign-role", "--username", "coordinator1", "--role", DefaultRoles.PROGRAM_COORDINATOR])
        assert result.exit_code == 0, result.output
        assert DefaultRoles.PROGRAM_COORDINATOR in resolve_effective_identity(user.id, test_db).roles

        result = runner.invoke(cli, ["assign-role", "--username", "coordinator1", "--role", DefaultRoles.PROGRAM_COORDINATOR, "--revoke"])
        assert result.exit_code == 0, result.output
        assert DefaultRoles.PROGRAM_COORDINATOR not in resolve_effective_identity(user.id, test_db).roles

    def test_assign_unknown_role(self, runner, user_factory):
        user_factory(username="someone")

        result = runner.invoke(cli, ["assign-role", "--username", "someone", "--role", "WIZARD"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_assign_role_unknown_user(self, runner):
        result = runner.invoke(cli, ["assign-role", "--username", "ghost", "--role", DefaultRoles.TEACHER])

        assert result.exit_code == 1
        assert "ghost" in result.output

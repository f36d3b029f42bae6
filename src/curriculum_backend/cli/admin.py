import click
from curriculum_backend.database import get_db, get_engine
from curriculum_backend.interface.tokens import encrypt_api_key
from curriculum_backend.model.base import Base
from curriculum_backend.permissions.role_setup import initialize_system_roles
from curriculum_backend.repositories.base import DuplicateError, NotFoundError
from curriculum_backend.repositories.user import PROFILE_MODELS, UserRepository


def _session():
    return next(get_db())


@click.command()
def init_db():
    """Create all tables."""

    Base.metadata.create_all(bind=get_engine())
    click.echo("Database schema created")


@click.command()
@click.option("--file", "-f", "path", type=click.Path(exists=True, dir_okay=False), default=None, help="YAML role catalogue")
def seed_roles(path):
    """Apply the built-in roles and permissions."""

    db = _session()
    try:
        role_names = [role.name for role in initialize_system_roles(db, path)]
    finally:
        db.close()

    for role_name in role_names:
        click.echo(f"Role {role_name}")


@click.command()
@click.option("--username", "-u", "username", required=True)
@click.option("--password", "-p", "password", prompt=True, hide_input=True)
@click.option("--email", "-e", "email", default=None)
@click.option("--given-name", "given_name", default=None)
@click.option("--family-name", "family_name", default=None)
@click.option("--profile", "profile", type=click.Choice(list(PROFILE_MODELS.keys())), default=None)
def create_user(username, password, email, given_name, family_name, profile):
    """Create a user with an optional profile."""

    db = _session()
    try:
        user = UserRepository(db).create_user(
            username=username,
            password=encrypt_api_key(password),
            email=email,
            given_name=given_name,
            family_name=family_name,
            profile=profile
        )
        user_id = user.id
    except DuplicateError:
        raise click.ClickException(f"User {username} already exists")
    finally:
        db.close()

    click.echo(f"Created user {username} ({user_id})")


@click.command()
@click.option("--username", "-u", "username", required=True)
@click.option("--role", "-r", "role", required=True)
@click.option("--revoke", is_flag=True, default=False, help="Remove the role instead")
def assign_role(username, role, revoke):
    """Assign a role to a user."""

    db = _session()
    try:
        repository = UserRepository(db)
        user = repository.find_by_login(username)
        if user is None:
            raise click.ClickException(f"User {username} not found")

        if revoke:
            repository.revoke_role(user.id, role)
        else:
            repository.assign_role(user.id, role)
    except NotFoundError as e:
        raise click.ClickException(str(e))
    finally:
        db.close()

    click.echo(f"{'Revoked' if revoke else 'Assigned'} role {role} {'from' if revoke else 'to'} {username}")

import click

from .admin import assign_role, create_user, init_db, seed_roles
from .server import serve

@click.group()
def cli():
    pass

cli.add_command(init_db,"init-db")
cli.add_command(seed_roles,"seed-roles")
cli.add_command(create_user,"create-user")
cli.add_command(assign_role,"assign-role")
cli.add_command(serve,"serve")

if __name__ == '__main__':
    cli()

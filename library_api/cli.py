import click
from flask.cli import with_appcontext

from library_api.errors import LibraryError
from library_api.extensions import db
from library_api.repositories.user_repo import UserRepo
from library_api.services.auth_service import AuthService
from library_api.utils.validators import normalize_email, require_strong_password


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo("Initialized database")


@click.command("create-admin")
@click.option("--name", required=True, help="display name")
@click.option("--email", required=True, help="login email")
@click.option("--password", required=True, prompt=True, hide_input=True, confirmation_prompt=True)
@with_appcontext
def create_admin_command(name, email, password):
    """Create an admin account, or promote an existing one and reset its password."""
    db.create_all()
    try:
        email = normalize_email(email)
        require_strong_password(password)
        user = UserRepo.get_by_email(email)
        if user is None:
            user = AuthService.register(name=name, email=email, password=password, admin=True)
            click.echo(f"Created new admin user: {user.email}")
            return

        user.admin = True
        user.password_hash = AuthService.hash_password(password)
        UserRepo.update()
        click.echo(f"Updated existing user '{user.email}' to admin and set new password")
    except LibraryError as e:
        raise click.ClickException(e.message) from e


def register_commands(app):
    app.cli.add_command(init_db_command)
    app.cli.add_command(create_admin_command)

# fechamento/cli.py
import click
from flask import Flask

from .errors import ServiceError
from .services.bootstrap import initialize_database


def register_commands(app: Flask):
    @app.cli.command("init-db")
    def init_db():
        """Create the tables and seed the selection and current closing."""
        initialize_database()
        click.echo("Database initialized.")

    @app.cli.command("create-user")
    @click.argument("email")
    @click.argument("name")
    @click.password_option()
    def create_user(email, name, password):
        """Add a user that can log in to the API."""
        from .services.auth import create_user as _create

        try:
            user = _create(email, name, password)
        except ServiceError as e:
            raise click.ClickException(e.message)
        click.echo(f"User {user.id} created for {user.email}.")

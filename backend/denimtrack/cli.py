# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/denimtrack/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Create any missing tables (use `flask db upgrade` for migration-managed databases).
# - python -m flask system check-db
#   Verify the database is reachable; exits non-zero if not.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list
#   List all users with their roles.
# - python -m flask users create --username admin --password "secret" --role ADMIN
#   Create a user (prompts if options are omitted).

import click
from flask.cli import with_appcontext
from sqlalchemy import text

from .errors import DenimTrackError
from .extensions import db
from .models import User
from .permissions import ROLES
from .services.auth_service import register_user


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo("PASS Database tables created")


@system_group.command('check-db')
@with_appcontext
def check_db():
    """Verify the configured database accepts connections."""
    try:
        now = db.session.execute(text("SELECT CURRENT_TIMESTAMP")).scalar()
    except Exception as e:
        db.session.rollback()
        click.echo(f"FAIL Database connection error: {e}")
        raise SystemExit(1)
    click.echo(f"PASS Database connected. Current time from DB: {now}")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Confirm dropping every table')
@with_appcontext
def reset_db(yes):
    """DEV/TEST only: drop and recreate all tables."""
    if not yes:
        click.echo("FAIL Refusing to reset without --yes")
        return
    db.drop_all()
    db.create_all()
    click.echo("PASS Database reset")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice(list(ROLES)), prompt=True, help='Role')
@with_appcontext
def create_user_cli(username, password, role):
    """Create a new user (bcrypt-hashed password)."""
    try:
        user = register_user(username, password, role)
    except DenimTrackError as e:
        click.echo(f"FAIL {e.message}")
        raise SystemExit(1)

    click.echo(f"PASS Created user: {user.username} with role '{user.role}' (ID: {user.id})")


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with their roles."""
    users = db.session.query(User).order_by(User.id).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "=" * 60)
    click.echo(f"{'ID':<5} {'Username':<25} {'Role':<12} {'Created'}")
    click.echo("=" * 60)
    for user in users:
        created = user.created_at.strftime("%Y-%m-%d") if user.created_at else ""
        click.echo(f"{user.id:<5} {user.username:<25} {user.role:<12} {created}")
    click.echo("")


def register_commands(app):
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)

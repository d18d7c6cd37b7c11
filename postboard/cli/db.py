"""Database and maintenance CLI commands."""
import click
from flask import Blueprint
from flask.cli import with_appcontext
from postboard.auth import generate_token
from postboard.extensions import db
from postboard.models.user import User
from postboard.services import get_services

bp = Blueprint("db_cli", __name__)


@bp.cli.command("init")
@with_appcontext
def init_db():
    """Initialize the database tables."""
    click.echo("Creating database tables...")
    db.create_all()
    click.echo("✅ Database initialization completed!")


@bp.cli.command("reset")
@click.confirmation_option(prompt="This will delete all data. Are you sure?")
@with_appcontext
def reset_db():
    """Reset the database (drop and recreate all tables)."""
    click.echo("Dropping all database tables...")
    db.drop_all()

    click.echo("Recreating database tables...")
    db.create_all()

    click.echo("✅ Database reset completed!")


def _find_user(username: str) -> User:
    user = User.find_by_username(username)
    if user is None:
        raise click.ClickException(f"No user named {username!r}")
    return user


@bp.cli.command("grant-admin")
@click.argument("username")
@click.option("--revoke", is_flag=True, help="Remove the admin flag instead.")
@with_appcontext
def grant_admin(username: str, revoke: bool):
    """Give (or take away) admin rights."""
    user = _find_user(username)
    user.is_admin = not revoke
    db.session.commit()
    click.echo(f"{user.username} is {'now' if user.is_admin else 'no longer'} an admin")


@bp.cli.command("issue-token")
@click.argument("username")
@with_appcontext
def issue_token(username: str):
    """Print a bearer token for a user (development only)."""
    user = _find_user(username)
    click.echo(generate_token(user.id))


@bp.cli.command("check-storage")
@with_appcontext
def check_storage():
    """Check that the configured S3 bucket is reachable."""
    assets = get_services().assets
    result = assets.validate_configuration()
    if result.get("success"):
        click.echo(f"✅ Connected to bucket {result['bucket_name']} ({result['region']})")
    else:
        raise click.ClickException(result.get("error", "Storage check failed"))

"""User management commands."""

import click

from ..db import UserRepository
from ..db.repositories import new_id
from ..models.user import User
from .base import async_command, echo_error, echo_info, echo_success, ensure_initialized, format_table


@click.group()
def users():
    """Manage users."""
    pass


@users.command("add")
@click.argument("email")
@click.option("--first-name", default=None, help="First name")
@click.option("--last-name", default=None, help="Last name")
@click.pass_context
@async_command
async def add_user(ctx: click.Context, email: str, first_name: str | None, last_name: str | None):
    """Register a user by email address."""
    ensure_initialized(ctx)

    repo = UserRepository()
    if await repo.get_by_email(email):
        echo_error(f"A user with email {email} already exists.")
        ctx.exit(1)

    user_id = await repo.create(
        User(id=new_id(), email=email, first_name=first_name, last_name=last_name)
    )
    echo_success(f"Added user {email} ({user_id})")


@users.command("list")
@click.pass_context
@async_command
async def list_users(ctx: click.Context):
    """List registered users."""
    ensure_initialized(ctx)

    all_users = await UserRepository().list_all()
    if not all_users:
        echo_info("No users yet. Run 'balance-lift users add EMAIL'.")
        return

    rows = [[u.email, u.get_display_name(), u.id] for u in all_users]
    click.echo(format_table(["Email", "Name", "ID"], rows))

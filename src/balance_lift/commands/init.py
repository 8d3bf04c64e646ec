"""Initialize project command."""

import click

from ..data.exercise_loader import seed_exercises_from_json
from ..db import get_data_dir, get_db_path, get_local_storage_path, init_db
from ..storage.snapshots import SqliteKeyValueStore
from .base import async_command, echo_info, echo_success


@click.command()
@async_command
async def init():
    """Initialize the balance-lift data directory and database.

    Creates the SQLite database with the required schema, the local
    progress store, and the exercise catalog.
    """
    data_dir = get_data_dir()
    echo_info(f"Initializing balance-lift in {data_dir}")

    db_path = get_db_path(data_dir)
    await init_db(db_path)
    echo_success("Database initialized")

    SqliteKeyValueStore(get_local_storage_path(data_dir))
    echo_success("Local progress store ready")

    count = await seed_exercises_from_json(db_path)
    echo_success(f"Exercise catalog populated ({count} exercises)")

    click.echo()
    click.echo("balance-lift is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Add a user:")
    click.echo("     balance-lift users add you@example.com")
    click.echo()
    click.echo("  2. Import a training plan:")
    click.echo("     balance-lift plan import plan.json --user you@example.com")
    click.echo()
    click.echo("  3. Start your workout:")
    click.echo("     balance-lift workout run --user you@example.com")

"""Training plan commands."""

from pathlib import Path

import click

from ..services.plan_import import PlanImportError, PlanImportService
from .base import (
    async_command,
    echo_error,
    echo_success,
    echo_warning,
    ensure_initialized,
    resolve_user,
)


@click.group()
def plan():
    """Manage training plans."""
    pass


@plan.command("import")
@click.argument("plan_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--user", "email", required=True, help="Email of the plan's owner")
@click.pass_context
@async_command
async def import_plan(ctx: click.Context, plan_file: Path, email: str):
    """Import a training plan from a JSON file.

    The file lists the test date and the workouts, each with its
    exercises by catalog name or id:

        {"test_date": "2026-10-01",
         "workouts": [{"week": 1, "day": 1,
                       "exercises": ["Goblet Squat", "Hip Thrust"]}]}
    """
    ensure_initialized(ctx)
    user = await resolve_user(ctx, email)

    try:
        result = await PlanImportService().import_file(plan_file, user.id)
    except PlanImportError as e:
        echo_error(str(e))
        ctx.exit(1)

    echo_success(
        f"Imported {len(result.workout_ids)} workout(s) with "
        f"{result.exercise_count} exercise(s)"
    )
    for name in result.unmatched:
        echo_warning(f"No catalog exercise for '{name}'; it will show as a placeholder")

"""Workout session commands."""

import click

from ..services.workout_session import (
    RedirectReason,
    SessionContext,
    SessionStatus,
    SubmitStatus,
    WorkoutSession,
    open_local_session,
)
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    resolve_user,
)

REDIRECT_MESSAGES = {
    RedirectReason.UNAUTHENTICATED: "Sign in to start your workout.",
    RedirectReason.NO_TEST: "No strength test found. Import a plan first.",
    RedirectReason.NO_WORKOUTS: "Your latest test has no workouts.",
    RedirectReason.ALL_COMPLETE: "Every workout in your plan is done!",
    RedirectReason.NO_EXERCISES: "Your next workout has no exercises.",
}

RUN_HELP = "n=next  p=back  j N=jump to exercise N  t N=toggle set N  r=review  s=submit  q=quit"


async def _open_session(ctx: click.Context, email: str) -> WorkoutSession | None:
    """Load the user's session, printing why when there is nothing to do."""
    ensure_initialized(ctx)
    user = await resolve_user(ctx, email)

    session = open_local_session(SessionContext(user_id=user.id, email=user.email))
    status = await session.load()

    if status == SessionStatus.ERROR:
        echo_error(session.error)
        ctx.exit(1)
    if status == SessionStatus.REDIRECT:
        echo_info(REDIRECT_MESSAGES[session.redirect_reason])
        return None
    return session


def _set_boxes(flags: list[bool]) -> str:
    return "".join("[x]" if done else "[ ]" for done in flags)


def render_session(session: WorkoutSession) -> None:
    """Print the workout with per-set progress."""
    click.echo()
    click.echo(click.style(f"Workout: {session.workout.get_position_display()}", bold=True))
    click.echo("=" * 50)

    for index, exercise in enumerate(session.exercises):
        is_current = index == session.current_step_index
        prefix = ">" if is_current else " "
        flags = session.completion[exercise.user_exercise_id]
        status = ""
        if session.is_exercise_complete(exercise.user_exercise_id):
            status = click.style(" [done]", fg="green")
        click.echo(
            f"  {prefix} {index + 1}. {exercise.name}  {_set_boxes(flags)}  "
            f"{exercise.get_target_display()}{status}"
        )

    click.echo()
    exercise = session.current_exercise
    if exercise is None:
        click.echo(click.style("Review", bold=True))
        for row in session.review_rows():
            mark = click.style("done", fg="green") if row["complete"] else click.style("incomplete", fg="yellow")
            click.echo(f"  {row['index'] + 1}. {row['name']}: {row['completed_sets']}/{row['sets']} sets, {mark}")
        return

    click.echo(click.style(exercise.name, bold=True))
    if exercise.equipment:
        click.echo(f"  Equipment: {exercise.equipment}")
    if exercise.setup:
        click.echo(f"  Setup: {exercise.setup}")
    if exercise.cues:
        click.echo(f"  Cues: {exercise.cues}")
    click.echo(f"  Video: {exercise.embed_url or 'not available'}")


async def _submit(session: WorkoutSession, confirmed: bool) -> bool:
    """Submit from the review step, asking before submitting an unfinished workout.

    Returns:
        True if the workout was submitted
    """
    result = await session.submit(confirmed=confirmed)

    if result.status == SubmitStatus.NEEDS_CONFIRMATION:
        if not click.confirm(result.message):
            session.cancel_submit()
            echo_info("Submission cancelled.")
            return False
        result = await session.submit(confirmed=True)

    if result.status == SubmitStatus.FAILED:
        echo_error(result.message)
        return False

    echo_success(result.message)
    return True


@click.group()
def workout():
    """Perform your next workout.

    Set progress is kept locally between commands until the workout
    is submitted.
    """
    pass


@workout.command("show")
@click.option("--user", "email", required=True, help="Your email")
@click.pass_context
@async_command
async def show(ctx: click.Context, email: str):
    """Show the next workout and set progress."""
    session = await _open_session(ctx, email)
    if session:
        render_session(session)


@workout.command("toggle")
@click.argument("exercise_number", type=int)
@click.argument("set_number", type=int)
@click.option("--user", "email", required=True, help="Your email")
@click.pass_context
@async_command
async def toggle(ctx: click.Context, exercise_number: int, set_number: int, email: str):
    """Mark a set done (or not done).

    EXERCISE_NUMBER and SET_NUMBER are 1-based positions as shown by
    'balance-lift workout show'.
    """
    session = await _open_session(ctx, email)
    if session is None:
        return

    if not 1 <= exercise_number <= session.exercise_count:
        echo_error(f"Exercise must be between 1 and {session.exercise_count}.")
        ctx.exit(1)
    exercise = session.exercises[exercise_number - 1]
    if not 1 <= set_number <= exercise.sets:
        echo_error(f"{exercise.name} has {exercise.sets} sets.")
        ctx.exit(1)

    done = session.toggle_set(exercise.user_exercise_id, set_number - 1)
    session.jump_to(exercise_number - 1)
    state = "done" if done else "not done"
    echo_success(f"{exercise.name}, set {set_number}: {state}")
    render_session(session)


@workout.command("submit")
@click.option("--user", "email", required=True, help="Your email")
@click.option("--yes", "-y", is_flag=True, help="Submit even if some sets are unfinished")
@click.pass_context
@async_command
async def submit(ctx: click.Context, email: str, yes: bool):
    """Review and submit the workout."""
    session = await _open_session(ctx, email)
    if session is None:
        return

    while not session.is_review:
        session.go_next()
    render_session(session)
    click.echo()

    if not await _submit(session, confirmed=yes):
        ctx.exit(1)


@workout.command("run")
@click.option("--user", "email", required=True, help="Your email")
@click.pass_context
@async_command
async def run(ctx: click.Context, email: str):
    """Step through the workout interactively."""
    session = await _open_session(ctx, email)
    if session is None:
        return

    while True:
        render_session(session)
        click.echo()
        click.echo(click.style(RUN_HELP, dim=True))
        command = click.prompt("Command", default="n").strip().lower()
        action, _, argument = command.partition(" ")

        if action == "q":
            echo_info("Progress saved. Run this command again to resume.")
            return
        elif action == "n":
            session.go_next()
        elif action == "p":
            session.go_prev()
        elif action == "r":
            while not session.is_review:
                session.go_next()
        elif action == "j" and argument.isdigit():
            if not session.jump_to(int(argument) - 1):
                echo_warning(f"Exercise must be between 1 and {session.exercise_count}.")
        elif action == "t" and argument.isdigit():
            exercise = session.current_exercise
            if exercise is None:
                echo_warning("Pick an exercise first (j N).")
            elif not 1 <= int(argument) <= exercise.sets:
                echo_warning(f"{exercise.name} has {exercise.sets} sets.")
            else:
                session.toggle_set(exercise.user_exercise_id, int(argument) - 1)
        elif action == "s":
            if not session.is_review:
                echo_warning("Open the review first (r).")
            elif await _submit(session, confirmed=False):
                return
        else:
            echo_warning(f"Unknown command: {command}")

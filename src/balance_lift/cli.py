"""CLI entry point for balance-lift."""

import logging

import click

from . import __version__
from .commands import init, plan, serve, users, workout


@click.group()
@click.version_option(version=__version__, prog_name="balance-lift")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def main(verbose: bool):
    """balance-lift: follow your strength training plan, one set at a time.

    Example usage:

        # Initialize the project
        balance-lift init

        # Add yourself and import a plan
        balance-lift users add you@example.com
        balance-lift plan import plan.json --user you@example.com

        # Work through the next workout
        balance-lift workout run --user you@example.com
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


main.add_command(init)
main.add_command(users)
main.add_command(plan)
main.add_command(workout)
main.add_command(serve)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()

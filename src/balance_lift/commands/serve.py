"""Web server command."""

import click

from .base import ensure_initialized


@click.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
@click.option("--port", "-p", default=8000, type=int, help="Port to bind to (default: 8000)")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int, reload: bool):
    """Start the web server.

    Serves the training home at /training and the guided workout at
    /workout. Requests identify the user with the 'user_id' cookie or
    the 'X-User-Id' header.

    Examples:

        # Start on default port (8000)
        balance-lift serve

        # Expose to network (all interfaces)
        balance-lift serve --host 0.0.0.0

        # Development mode with auto-reload
        balance-lift serve --reload
    """
    ensure_initialized(ctx)

    import uvicorn

    from ..web import create_app

    click.echo()
    click.echo(click.style("Starting balance-lift web server...", fg="green"))
    click.echo()
    click.echo(f"  Local:   http://{host}:{port}/training")
    click.echo()
    click.echo("Press Ctrl+C to stop the server.")
    click.echo()

    uvicorn.run(
        "balance_lift.web:create_app" if reload else create_app(),
        host=host,
        port=port,
        reload=reload,
        factory=reload,
    )

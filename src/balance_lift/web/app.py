"""FastAPI application for the balance-lift web interface."""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from .. import __version__
from ..db.engine import get_db_path, get_local_storage_path, init_db
from .routers import training, workout
from .session_registry import SessionRegistry

TEMPLATES_DIR = Path(__file__).parent / "templates"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - runs on startup and shutdown."""
    await init_db(app.state.db_path)
    yield


def create_app(
    db_path: Path | None = None, local_storage_path: Path | None = None
) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="balance-lift",
        description="Strength plan workout tracker",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.db_path = db_path or get_db_path()
    app.state.local_storage_path = local_storage_path or get_local_storage_path()
    app.state.sessions = SessionRegistry()

    app.state.templates = Jinja2Templates(directory=TEMPLATES_DIR)

    app.include_router(training.router)
    app.include_router(workout.router)

    @app.get("/", response_class=HTMLResponse)
    async def root(request: Request):
        """Root redirect to the training home."""
        return RedirectResponse(url="/training", status_code=302)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app

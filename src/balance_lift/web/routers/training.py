"""Training home routes."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from ...clients.base import StoreError
from ...clients.local import LocalWorkoutStore
from ...db.repositories import UserRepository
from ..auth import get_session_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/training", tags=["training"])

REASON_MESSAGES = {
    "unauthenticated": "Sign in to start your workout.",
    "no_test": "Record a strength test to get a training plan.",
    "no_workouts": "Your plan has no workouts yet.",
    "all_complete": "Every workout in your plan is done.",
    "no_exercises": "Your next workout has no exercises.",
    "completed": "Workout complete!",
}
LOAD_FAILED_MESSAGE = "Could not load your training plan. Please try again."


def get_templates(request: Request):
    """Get templates from app state."""
    return request.app.state.templates


@router.get("", response_class=HTMLResponse)
async def training_home(request: Request, reason: str | None = None):
    """Training home: the latest plan's workouts and their status."""
    templates = get_templates(request)
    context = get_session_context(request)

    user = None
    test = None
    workouts = []
    notice = REASON_MESSAGES.get(reason) if reason else None
    load_failed = False
    if context.is_authenticated:
        db_path = request.app.state.db_path
        user = await UserRepository(db_path).get(context.user_id)

        store = LocalWorkoutStore(db_path)
        try:
            test = await store.get_latest_test(context.user_id)
            if test:
                workouts = await store.list_workouts(test.id)
        except StoreError as e:
            logger.warning("Could not load training plan for %s: %s", context.user_id, e)
            test = None
            workouts = []
            notice = LOAD_FAILED_MESSAGE
            load_failed = True

    next_workout = next((w for w in workouts if not w.is_complete), None)

    return templates.TemplateResponse(
        request,
        "training.html",
        {
            "user": user,
            "test": test,
            "workouts": workouts,
            "next_workout": next_workout,
            "notice": notice,
            "load_failed": load_failed,
        },
        status_code=503 if load_failed else 200,
    )

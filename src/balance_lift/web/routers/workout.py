"""Workout session routes."""

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from ...services.workout_session import (
    SessionContext,
    SessionStateError,
    SessionStatus,
    SubmitStatus,
    WorkoutSession,
    open_local_session,
)
from ..auth import get_session_context

router = APIRouter(prefix="/workout", tags=["workout"])


def get_templates(request: Request):
    """Get templates from app state."""
    return request.app.state.templates


def _factory(request: Request, context: SessionContext):
    state = request.app.state
    return lambda: open_local_session(context, state.db_path, state.local_storage_path)


async def _load_session(request: Request) -> tuple[WorkoutSession | None, JSONResponse | None]:
    """Return the caller's ready session, or an error response."""
    context = get_session_context(request)
    if not context.is_authenticated:
        return None, JSONResponse({"error": "Not signed in"}, status_code=401)

    session = await request.app.state.sessions.get_or_load(
        context.user_id, _factory(request, context)
    )
    if session.status != SessionStatus.READY:
        return None, JSONResponse(
            {"error": "No workout in progress", "session": session.to_dict()},
            status_code=409,
        )
    return session, None


@router.get("", response_class=HTMLResponse)
async def workout_page(request: Request):
    """Guided workout page.

    Every visit loads the session anew, so catalog changes and progress
    saved elsewhere are picked up.
    """
    context = get_session_context(request)
    if not context.is_authenticated:
        return RedirectResponse(url="/training?reason=unauthenticated", status_code=302)

    session = await request.app.state.sessions.load(context.user_id, _factory(request, context))

    if session.status == SessionStatus.REDIRECT:
        return RedirectResponse(
            url=f"{session.redirect_to}?reason={session.redirect_reason.value}",
            status_code=302,
        )

    templates = get_templates(request)
    return templates.TemplateResponse(
        request,
        "workout.html",
        {"session": session},
        status_code=500 if session.status == SessionStatus.ERROR else 200,
    )


@router.get("/state")
async def workout_state(request: Request):
    """Current session state as JSON."""
    session, error = await _load_session(request)
    if error:
        return error
    return session.to_dict()


@router.post("/toggle")
async def toggle_set(
    request: Request,
    user_exercise_id: str = Form(...),
    set_index: int = Form(...),
):
    """Flip one set's done flag."""
    session, error = await _load_session(request)
    if error:
        return error

    flags = session.completion.get(user_exercise_id)
    if flags is None:
        return JSONResponse({"error": f"Unknown exercise {user_exercise_id}"}, status_code=400)
    if not 0 <= set_index < len(flags):
        return JSONResponse({"error": f"Invalid set {set_index}"}, status_code=400)

    session.toggle_set(user_exercise_id, set_index)
    return session.to_dict()


@router.post("/prev")
async def go_prev(request: Request):
    """Move to the previous exercise."""
    session, error = await _load_session(request)
    if error:
        return error
    session.go_prev()
    return session.to_dict()


@router.post("/next")
async def go_next(request: Request):
    """Move to the next exercise, or to the review step after the last one."""
    session, error = await _load_session(request)
    if error:
        return error
    session.go_next()
    return session.to_dict()


@router.post("/jump")
async def jump_to(request: Request, index: int = Form(...)):
    """Jump straight to an exercise."""
    session, error = await _load_session(request)
    if error:
        return error
    if not session.jump_to(index):
        return JSONResponse({"error": f"Invalid exercise index {index}"}, status_code=400)
    return session.to_dict()


@router.post("/submit")
async def submit_workout(request: Request, confirmed: bool = Form(False)):
    """Submit the workout from the review step."""
    session, error = await _load_session(request)
    if error:
        return error

    try:
        result = await session.submit(confirmed=confirmed)
    except SessionStateError as e:
        return JSONResponse({"error": str(e)}, status_code=409)

    if result.status == SubmitStatus.SUBMITTED:
        await request.app.state.sessions.discard(session.context.user_id)
        return {"result": result.to_dict()}

    status_code = 502 if result.status == SubmitStatus.FAILED else 200
    return JSONResponse(
        {"result": result.to_dict(), "session": session.to_dict()},
        status_code=status_code,
    )


@router.post("/submit/cancel")
async def cancel_submit(request: Request):
    """Dismiss the incomplete-workout confirmation."""
    session, error = await _load_session(request)
    if error:
        return error
    session.cancel_submit()
    return session.to_dict()

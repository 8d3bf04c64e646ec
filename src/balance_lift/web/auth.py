"""Request authentication helpers."""

from fastapi import Request

from ..services.workout_session import SessionContext

USER_COOKIE = "user_id"
USER_HEADER = "X-User-Id"


def get_session_context(request: Request) -> SessionContext:
    """Build the session context for the requesting user.

    The user id comes from the ``user_id`` cookie, falling back to the
    ``X-User-Id`` header. An empty context means the request is anonymous.
    """
    user_id = request.cookies.get(USER_COOKIE) or request.headers.get(USER_HEADER)
    return SessionContext(user_id=user_id or None)

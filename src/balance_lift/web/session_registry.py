"""Tracks the live workout session of each signed-in user."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from ..services.workout_session import SessionStatus, WorkoutSession


@dataclass
class TrackedSession:
    """A workout session held between requests."""

    user_id: str
    session: WorkoutSession
    created_at: datetime = field(default_factory=datetime.now)
    last_used_at: datetime = field(default_factory=datetime.now)

    def touch(self) -> None:
        self.last_used_at = datetime.now()


class SessionRegistry:
    """Keeps one workout session per user.

    Page loads always replace the session with a freshly loaded one. JSON
    actions reuse the live session; one that is no longer usable
    (submitted, redirected or failed to load) is replaced on the next
    request, which reloads progress from the local snapshot.
    """

    def __init__(self, max_sessions: int = 100):
        self._sessions: dict[str, TrackedSession] = {}
        self._max_sessions = max_sessions
        self._lock = asyncio.Lock()

    async def get_or_load(
        self, user_id: str, factory: Callable[[], WorkoutSession]
    ) -> WorkoutSession:
        """Return the user's live session, loading a new one if needed."""
        async with self._lock:
            tracked = self._sessions.get(user_id)
            if tracked and tracked.session.status == SessionStatus.READY:
                tracked.touch()
                return tracked.session

        return await self.load(user_id, factory)

    async def load(
        self, user_id: str, factory: Callable[[], WorkoutSession]
    ) -> WorkoutSession:
        """Load a fresh session and make it the user's live one.

        The store round-trips run outside the lock; only the registry
        update holds it.
        """
        session = factory()
        await session.load()

        async with self._lock:
            if session.status == SessionStatus.READY:
                self._sessions[user_id] = TrackedSession(user_id=user_id, session=session)
                self._cleanup_old_sessions()
            else:
                self._sessions.pop(user_id, None)
        return session

    async def discard(self, user_id: str) -> None:
        """Forget a user's session."""
        async with self._lock:
            self._sessions.pop(user_id, None)

    def __contains__(self, user_id: str) -> bool:
        return user_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def _cleanup_old_sessions(self) -> None:
        """Drop the least recently used sessions when over the limit."""
        if len(self._sessions) <= self._max_sessions:
            return
        ordered = sorted(self._sessions.values(), key=lambda t: t.last_used_at)
        for tracked in ordered[: len(self._sessions) - self._max_sessions]:
            del self._sessions[tracked.user_id]

"""Base protocol for the workout data store."""

from datetime import datetime
from typing import Protocol, runtime_checkable

from ..models.workout import CatalogExercise, StrengthTest, UserExercise, Workout


class StoreError(Exception):
    """Raised when the backing store cannot complete a read or write."""


@runtime_checkable
class WorkoutStore(Protocol):
    """Protocol for the store that owns tests, workouts and the catalog.

    Every call is scoped to the authenticated user by the store itself.
    Implementations raise StoreError for backend failures.
    """

    async def get_latest_test(self, user_id: str) -> StrengthTest | None:
        """Return the user's most recent test, if any."""
        ...

    async def list_workouts(self, test_id: str) -> list[Workout]:
        """Return the test's workouts ordered by (week, day)."""
        ...

    async def list_user_exercises(self, workout_id: str) -> list[UserExercise]:
        """Return the workout's join-records ordered by their order field."""
        ...

    async def get_exercises(self, exercise_ids: list[str]) -> list[CatalogExercise]:
        """Return the catalog rows for the given ids in a single lookup.

        Unknown ids are simply absent from the result.
        """
        ...

    async def mark_user_exercises_complete(
        self, user_exercise_ids: list[str], completed_at: datetime
    ) -> None:
        """Write one completion timestamp to every listed join-record."""
        ...

    async def mark_workout_complete(self, workout_id: str, completed_at: datetime) -> None:
        """Write the workout's completion timestamp."""
        ...

"""SQLite-backed implementation of the workout store."""

import logging
from datetime import datetime
from pathlib import Path

import aiosqlite

from ..db.engine import get_db_path
from ..db.repositories import (
    ExerciseRepository,
    TestRepository,
    UserExerciseRepository,
    WorkoutRepository,
)
from ..models.workout import CatalogExercise, StrengthTest, UserExercise, Workout
from .base import StoreError

logger = logging.getLogger(__name__)


class LocalWorkoutStore:
    """Workout store that reads and writes the local SQLite database.

    Database errors are re-raised as StoreError so callers only have to
    handle one failure type regardless of the backend.
    """

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()
        self.tests = TestRepository(self.db_path)
        self.workouts = WorkoutRepository(self.db_path)
        self.user_exercises = UserExerciseRepository(self.db_path)
        self.exercises = ExerciseRepository(self.db_path)

    async def get_latest_test(self, user_id: str) -> StrengthTest | None:
        try:
            return await self.tests.get_latest(user_id)
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to load latest test: {e}") from e

    async def list_workouts(self, test_id: str) -> list[Workout]:
        try:
            return await self.workouts.list_by_test(test_id)
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to load workouts: {e}") from e

    async def list_user_exercises(self, workout_id: str) -> list[UserExercise]:
        try:
            return await self.user_exercises.list_by_workout(workout_id)
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to load workout exercises: {e}") from e

    async def get_exercises(self, exercise_ids: list[str]) -> list[CatalogExercise]:
        try:
            return await self.exercises.get_by_ids(exercise_ids)
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to load exercise catalog: {e}") from e

    async def mark_user_exercises_complete(
        self, user_exercise_ids: list[str], completed_at: datetime
    ) -> None:
        try:
            updated = await self.user_exercises.set_completed(user_exercise_ids, completed_at)
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to mark exercises complete: {e}") from e
        logger.debug("Marked %d exercise(s) complete", updated)

    async def mark_workout_complete(self, workout_id: str, completed_at: datetime) -> None:
        try:
            await self.workouts.set_completed(workout_id, completed_at)
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to mark workout complete: {e}") from e
        logger.debug("Marked workout %s complete", workout_id)

"""Data access layer for balance-lift."""

from datetime import date, datetime
from pathlib import Path
from uuid import uuid4

import aiosqlite

from ..models.user import User
from ..models.workout import (
    CatalogExercise,
    PlannedWorkout,
    RepsOrSeconds,
    StrengthTest,
    UserExercise,
    Workout,
)
from .engine import get_db_path


def new_id() -> str:
    """Generate an opaque record identifier."""
    return uuid4().hex


def _parse_timestamp(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _parse_reps_seconds(value: str | None) -> RepsOrSeconds | None:
    """Unknown or empty values read as unset."""
    try:
        return RepsOrSeconds(value) if value else None
    except ValueError:
        return None


def _placeholders(values: list) -> str:
    return ", ".join("?" for _ in values)


class UserRepository:
    """Repository for user accounts."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, user: User) -> str:
        """Create a new user."""
        user_id = user.id or new_id()
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                """
                INSERT INTO users (id, email, first_name, last_name)
                VALUES (?, ?, ?, ?)
                """,
                (user_id, user.email, user.first_name, user.last_name),
            )
            await db.commit()
        return user_id

    async def get(self, user_id: str) -> User | None:
        """Get a user by ID."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_user(row)

    async def get_by_email(self, email: str) -> User | None:
        """Get a user by email address (case-insensitive)."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM users WHERE lower(email) = lower(?)", (email,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_user(row)

    async def list_all(self) -> list[User]:
        """List all users."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute("SELECT * FROM users ORDER BY email")
            rows = await cursor.fetchall()
            return [self._row_to_user(row) for row in rows]

    def _row_to_user(self, row: aiosqlite.Row) -> User:
        """Convert a database row to a User."""
        return User(
            id=row["id"],
            email=row["email"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            created_at=_parse_timestamp(row["created_at"]),
        )


class TestRepository:
    """Repository for strength tests."""

    __test__ = False  # not a pytest test class

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create_with_workouts(
        self, user_id: str, test_date: date, workouts: list[PlannedWorkout]
    ) -> tuple[str, list[str]]:
        """Create a test with its workouts and join-records.

        Everything is written in one transaction: if any insert fails,
        nothing is stored.

        Returns:
            (test_id, workout_ids) with workout ids in the given order
        """
        test_id = new_id()
        workout_ids = []
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                "INSERT INTO tests (id, user_id, test_date) VALUES (?, ?, ?)",
                (test_id, user_id, test_date.isoformat()),
            )
            for workout in workouts:
                workout_id = new_id()
                await db.execute(
                    "INSERT INTO workouts (id, test_id, week, day) VALUES (?, ?, ?, ?)",
                    (workout_id, test_id, workout.week, workout.day),
                )
                for order, exercise_id in enumerate(workout.exercise_ids, start=1):
                    await db.execute(
                        """
                        INSERT INTO user_exercises (id, workout_id, exercise_id, "order")
                        VALUES (?, ?, ?, ?)
                        """,
                        (new_id(), workout_id, exercise_id, order),
                    )
                workout_ids.append(workout_id)
            await db.commit()
        return test_id, workout_ids

    async def get_latest(self, user_id: str) -> StrengthTest | None:
        """Get the user's most recent test."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                """
                SELECT * FROM tests
                WHERE user_id = ?
                ORDER BY test_date DESC, created_at DESC, rowid DESC
                LIMIT 1
                """,
                (user_id,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_test(row)

    def _row_to_test(self, row: aiosqlite.Row) -> StrengthTest:
        """Convert a database row to a StrengthTest."""
        return StrengthTest(
            id=row["id"],
            user_id=row["user_id"],
            test_date=date.fromisoformat(row["test_date"]),
            created_at=_parse_timestamp(row["created_at"]),
        )


class WorkoutRepository:
    """Repository for scheduled workouts."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def list_by_test(self, test_id: str) -> list[Workout]:
        """List a test's workouts ordered by week, then day (nulls last)."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                """
                SELECT * FROM workouts
                WHERE test_id = ?
                ORDER BY week IS NULL, week, day IS NULL, day
                """,
                (test_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_workout(row) for row in rows]

    async def set_completed(self, workout_id: str, completed_at: datetime) -> None:
        """Write the workout's completion timestamp."""
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                "UPDATE workouts SET completed_at = ? WHERE id = ?",
                (completed_at.isoformat(), workout_id),
            )
            await db.commit()

    def _row_to_workout(self, row: aiosqlite.Row) -> Workout:
        """Convert a database row to a Workout."""
        return Workout(
            id=row["id"],
            test_id=row["test_id"],
            week=row["week"],
            day=row["day"],
            completed_at=_parse_timestamp(row["completed_at"]),
        )


class UserExerciseRepository:
    """Repository for workout/exercise join-records."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def list_by_workout(self, workout_id: str) -> list[UserExercise]:
        """List a workout's join-records by their order field (nulls last)."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                """
                SELECT * FROM user_exercises
                WHERE workout_id = ?
                ORDER BY "order" IS NULL, "order", rowid
                """,
                (workout_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_user_exercise(row) for row in rows]

    async def set_completed(
        self, user_exercise_ids: list[str], completed_at: datetime
    ) -> int:
        """Write one completion timestamp to many join-records."""
        if not user_exercise_ids:
            return 0

        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                f"""
                UPDATE user_exercises SET completed_at = ?
                WHERE id IN ({_placeholders(user_exercise_ids)})
                """,
                (completed_at.isoformat(), *user_exercise_ids),
            )
            await db.commit()
            return cursor.rowcount

    def _row_to_user_exercise(self, row: aiosqlite.Row) -> UserExercise:
        """Convert a database row to a UserExercise."""
        return UserExercise(
            id=row["id"],
            workout_id=row["workout_id"],
            exercise_id=row["exercise_id"],
            order=row["order"],
            completed_at=_parse_timestamp(row["completed_at"]),
        )


class ExerciseRepository:
    """Repository for the exercise catalog."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def upsert(self, exercise: CatalogExercise) -> str:
        """Insert or replace a catalog exercise."""
        exercise_id = exercise.id or new_id()
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                """
                INSERT OR REPLACE INTO exercises
                (id, name, sets, reps_seconds, duration, video_link, equipment, setup, cues)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    exercise_id,
                    exercise.name,
                    exercise.sets,
                    exercise.reps_seconds.value if exercise.reps_seconds else None,
                    exercise.duration,
                    exercise.video_link,
                    exercise.equipment,
                    exercise.setup,
                    exercise.cues,
                ),
            )
            await db.commit()
        return exercise_id

    async def get_by_ids(self, exercise_ids: list[str]) -> list[CatalogExercise]:
        """Fetch many catalog exercises in one query."""
        if not exercise_ids:
            return []

        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"SELECT * FROM exercises WHERE id IN ({_placeholders(exercise_ids)})",
                tuple(exercise_ids),
            )
            rows = await cursor.fetchall()
            return [self._row_to_exercise(row) for row in rows]

    async def list_all(self) -> list[CatalogExercise]:
        """List all catalog exercises."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute("SELECT * FROM exercises ORDER BY name")
            rows = await cursor.fetchall()
            return [self._row_to_exercise(row) for row in rows]

    def _row_to_exercise(self, row: aiosqlite.Row) -> CatalogExercise:
        """Convert a database row to a CatalogExercise."""
        return CatalogExercise(
            id=row["id"],
            name=row["name"],
            sets=row["sets"],
            reps_seconds=_parse_reps_seconds(row["reps_seconds"]),
            duration=row["duration"],
            video_link=row["video_link"],
            equipment=row["equipment"],
            setup=row["setup"],
            cues=row["cues"],
        )

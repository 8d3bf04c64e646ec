"""Database engine setup and initialization."""

import os
from pathlib import Path

import aiosqlite

# Overrides the default data directory when set
DATA_DIR_ENV = "BALANCE_LIFT_DATA_DIR"


def get_data_dir() -> Path:
    """Get the data directory path."""
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override)
    return Path.cwd() / "data"


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path."""
    if data_dir is None:
        data_dir = get_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / "balance_lift.db"


def get_local_storage_path(data_dir: Path | None = None) -> Path:
    """Get the path of the local key-value slot used for session snapshots."""
    if data_dir is None:
        data_dir = get_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / "local_storage.db"


async def init_db(db_path: Path | None = None) -> None:
    """Initialize the database schema."""
    if db_path is None:
        db_path = get_db_path()

    async with aiosqlite.connect(db_path) as db:
        await db.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                email TEXT UNIQUE NOT NULL,
                first_name TEXT,
                last_name TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS tests (
                id TEXT PRIMARY KEY,
                user_id TEXT,
                test_date DATE NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS workouts (
                id TEXT PRIMARY KEY,
                test_id TEXT,
                week INTEGER,
                day INTEGER,
                completed_at TIMESTAMP,
                FOREIGN KEY (test_id) REFERENCES tests(id) ON DELETE CASCADE
            )
        """)

        # Exercise catalog
        await db.execute("""
            CREATE TABLE IF NOT EXISTS exercises (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                sets INTEGER,
                reps_seconds TEXT,
                duration REAL,
                video_link TEXT,
                equipment TEXT,
                setup TEXT,
                cues TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        # Join-records between workouts and catalog exercises
        await db.execute("""
            CREATE TABLE IF NOT EXISTS user_exercises (
                id TEXT PRIMARY KEY,
                workout_id TEXT,
                exercise_id TEXT,
                "order" INTEGER,
                completed_at TIMESTAMP,
                FOREIGN KEY (workout_id) REFERENCES workouts(id) ON DELETE CASCADE
            )
        """)

        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_tests_user
            ON tests(user_id, test_date)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_workouts_test
            ON workouts(test_id, week, day)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_user_exercises_workout
            ON user_exercises(workout_id, "order")
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_exercises_name
            ON exercises(name)
        """)

        await db.commit()

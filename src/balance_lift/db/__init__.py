"""Database layer for balance-lift."""

from .engine import get_data_dir, get_db_path, get_local_storage_path, init_db
from .repositories import (
    ExerciseRepository,
    TestRepository,
    UserExerciseRepository,
    UserRepository,
    WorkoutRepository,
)

__all__ = [
    "ExerciseRepository",
    "get_data_dir",
    "get_db_path",
    "get_local_storage_path",
    "init_db",
    "TestRepository",
    "UserExerciseRepository",
    "UserRepository",
    "WorkoutRepository",
]

"""Data models for balance-lift."""

from .user import User
from .workout import (
    DEFAULT_SETS,
    PLACEHOLDER_EXERCISE_NAME,
    CatalogExercise,
    ExerciseInSession,
    PlannedWorkout,
    RepsOrSeconds,
    StrengthTest,
    UserExercise,
    Workout,
)

__all__ = [
    "CatalogExercise",
    "DEFAULT_SETS",
    "ExerciseInSession",
    "PLACEHOLDER_EXERCISE_NAME",
    "PlannedWorkout",
    "RepsOrSeconds",
    "StrengthTest",
    "User",
    "UserExercise",
    "Workout",
]

"""Workout store clients."""

from .base import StoreError, WorkoutStore
from .local import LocalWorkoutStore

__all__ = ["LocalWorkoutStore", "StoreError", "WorkoutStore"]

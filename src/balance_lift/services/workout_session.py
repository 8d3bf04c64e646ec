"""Workout session state machine.

A session loads the user's next pending workout, tracks which sets have
been done, mirrors that progress into the local snapshot slot after every
change, and writes completion back to the store when the user submits
from the review step.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable

from ..clients.base import StoreError, WorkoutStore
from ..clients.local import LocalWorkoutStore
from ..db.engine import get_local_storage_path
from ..models.workout import ExerciseInSession, Workout
from ..storage.snapshots import SnapshotStore, SqliteKeyValueStore
from .completion import (
    CompletionState,
    completed_exercise_ids,
    completed_set_count,
    first_incomplete_index,
    is_all_complete,
    is_exercise_complete,
    reconcile_completion,
)

logger = logging.getLogger(__name__)

TRAINING_HOME = "/training"

LOAD_ERROR_MESSAGE = "Failed to load workout."
SUBMIT_SUCCESS_MESSAGE = "Workout complete!"
SUBMIT_ERROR_MESSAGE = "Failed to save workout. Please try again."
CONFIRM_MESSAGE = "Not every exercise is finished. Submit the workout anyway?"


class SessionStatus(str, Enum):
    """Lifecycle state of a workout session."""

    LOADING = "loading"
    READY = "ready"
    ERROR = "error"
    REDIRECT = "redirect"
    SUBMITTED = "submitted"


class RedirectReason(str, Enum):
    """Why loading left the workout page instead of showing it."""

    UNAUTHENTICATED = "unauthenticated"
    NO_TEST = "no_test"
    NO_WORKOUTS = "no_workouts"
    ALL_COMPLETE = "all_complete"
    NO_EXERCISES = "no_exercises"


class SubmitStatus(str, Enum):
    """Outcome of a submit attempt."""

    NEEDS_CONFIRMATION = "needs_confirmation"
    SUBMITTED = "submitted"
    FAILED = "failed"


class SessionStateError(Exception):
    """Raised when an operation is not valid in the session's current state."""


@dataclass
class SessionContext:
    """The authenticated user a session acts for."""

    user_id: str | None = None
    email: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)


@dataclass
class SubmitResult:
    """What happened when the user pressed submit."""

    status: SubmitStatus
    message: str
    completed_exercise_ids: list[str] = field(default_factory=list)
    redirect_to: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "status": self.status.value,
            "message": self.message,
            "completed_exercise_ids": self.completed_exercise_ids,
            "redirect_to": self.redirect_to,
        }


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class WorkoutSession:
    """Lifecycle of one in-progress workout.

    The cursor ``current_step_index`` ranges over ``[0, exercise_count]``:
    values below ``exercise_count`` point at an exercise, and
    ``exercise_count`` itself is the review step.
    """

    def __init__(
        self,
        store: WorkoutStore,
        snapshots: SnapshotStore,
        context: SessionContext,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.store = store
        self.snapshots = snapshots
        self.context = context
        self.clock = clock

        self.status = SessionStatus.LOADING
        self.redirect_reason: RedirectReason | None = None
        self.error: str | None = None

        self.workout: Workout | None = None
        self.exercises: list[ExerciseInSession] = []
        self.completion: CompletionState = {}
        self.current_step_index = 0

        self.confirmation_pending = False
        self.is_submitting = False

    # Loading

    async def load(self) -> SessionStatus:
        """Load the first unfinished workout of the user's latest test."""
        if self.status != SessionStatus.LOADING:
            raise SessionStateError(f"Session already loaded (status: {self.status.value})")

        if not self.context.is_authenticated:
            return self._redirect(RedirectReason.UNAUTHENTICATED)

        user_id = self.context.user_id
        try:
            test = await self.store.get_latest_test(user_id)
            if test is None:
                return self._redirect(RedirectReason.NO_TEST)

            workouts = await self.store.list_workouts(test.id)
            if not workouts:
                return self._redirect(RedirectReason.NO_WORKOUTS)

            workout = next((w for w in workouts if not w.is_complete), None)
            if workout is None:
                return self._redirect(RedirectReason.ALL_COMPLETE)

            user_exercises = await self.store.list_user_exercises(workout.id)
            if not user_exercises:
                return self._redirect(RedirectReason.NO_EXERCISES)

            # One batched lookup for all distinct catalog ids
            exercise_ids = list(
                dict.fromkeys(ue.exercise_id for ue in user_exercises if ue.exercise_id)
            )
            catalog = await self.store.get_exercises(exercise_ids) if exercise_ids else []
        except Exception:
            logger.exception("Failed to load workout for user %s", user_id)
            self.status = SessionStatus.ERROR
            self.error = LOAD_ERROR_MESSAGE
            return self.status

        catalog_by_id = {exercise.id: exercise for exercise in catalog}
        self.workout = workout
        self.exercises = [
            ExerciseInSession.from_records(ue, catalog_by_id.get(ue.exercise_id))
            for ue in user_exercises
        ]

        stored = self.snapshots.load(user_id, workout.id)
        self.completion = reconcile_completion(stored, self.exercises)
        self.current_step_index = first_incomplete_index(self.completion, self.exercises)

        self.status = SessionStatus.READY
        logger.debug(
            "Loaded workout %s with %d exercise(s), resuming at %d",
            workout.id,
            len(self.exercises),
            self.current_step_index,
        )
        return self.status

    def _redirect(self, reason: RedirectReason) -> SessionStatus:
        logger.debug("Leaving workout page: %s", reason.value)
        self.status = SessionStatus.REDIRECT
        self.redirect_reason = reason
        return self.status

    @property
    def redirect_to(self) -> str | None:
        return TRAINING_HOME if self.status == SessionStatus.REDIRECT else None

    # Mutations

    def _require_ready(self) -> None:
        if self.status != SessionStatus.READY:
            raise SessionStateError(f"Session is not ready (status: {self.status.value})")

    def toggle_set(self, user_exercise_id: str, set_index: int) -> bool:
        """Flip one set's done flag and persist the whole state.

        Returns:
            The new value of the flag
        """
        self._require_ready()
        flags = self.completion[user_exercise_id]
        flags[set_index] = not flags[set_index]
        self._persist()
        return flags[set_index]

    def go_prev(self) -> None:
        self._require_ready()
        self.current_step_index = max(self.current_step_index - 1, 0)

    def go_next(self) -> None:
        self._require_ready()
        if self.current_step_index < self.exercise_count:
            self.current_step_index += 1

    def jump_to(self, index: int) -> bool:
        """Move the cursor straight to an exercise.

        Out-of-range indices are ignored.

        Returns:
            True if the cursor moved to ``index``
        """
        self._require_ready()
        if not 0 <= index < self.exercise_count:
            logger.debug("Ignoring jump to out-of-range index %d", index)
            return False
        self.current_step_index = index
        return True

    def _persist(self) -> None:
        self.snapshots.save(self.context.user_id, self.workout.id, self.completion)

    # Submission

    async def submit(self, confirmed: bool = False) -> SubmitResult:
        """Write completion back to the store.

        When some exercise is unfinished and ``confirmed`` is False nothing
        is written; the result asks for confirmation instead. Exercises are
        only marked complete when every one of their sets is done, while
        the workout itself is always marked complete.
        """
        self._require_ready()
        if not self.is_review:
            raise SessionStateError("Submit is only available from the review step")
        if self.is_submitting:
            raise SessionStateError("A submit is already in progress")

        if not self.all_complete and not confirmed:
            self.confirmation_pending = True
            return SubmitResult(SubmitStatus.NEEDS_CONFIRMATION, CONFIRM_MESSAGE)

        self.confirmation_pending = False
        done_ids = completed_exercise_ids(self.completion, self.exercises)
        completed_at = self.clock()

        self.is_submitting = True
        try:
            if done_ids:
                await self.store.mark_user_exercises_complete(done_ids, completed_at)
            await self.store.mark_workout_complete(self.workout.id, completed_at)
        except StoreError as e:
            logger.error("Failed to submit workout %s: %s", self.workout.id, e)
            return SubmitResult(SubmitStatus.FAILED, SUBMIT_ERROR_MESSAGE, done_ids)
        finally:
            self.is_submitting = False

        self.snapshots.clear(self.context.user_id, self.workout.id)
        self.status = SessionStatus.SUBMITTED
        logger.info("Workout %s submitted (%d exercise(s) complete)", self.workout.id, len(done_ids))
        return SubmitResult(
            SubmitStatus.SUBMITTED, SUBMIT_SUCCESS_MESSAGE, done_ids, TRAINING_HOME
        )

    def cancel_submit(self) -> None:
        """Dismiss the incomplete-workout confirmation."""
        self._require_ready()
        self.confirmation_pending = False

    # Derived values

    @property
    def exercise_count(self) -> int:
        return len(self.exercises)

    @property
    def is_review(self) -> bool:
        return self.status == SessionStatus.READY and self.current_step_index == self.exercise_count

    @property
    def current_exercise(self) -> ExerciseInSession | None:
        if self.current_step_index < self.exercise_count:
            return self.exercises[self.current_step_index]
        return None

    @property
    def all_complete(self) -> bool:
        return is_all_complete(self.completion, self.exercises)

    @property
    def forward_is_primary(self) -> bool:
        """Whether the forward button should be emphasized."""
        exercise = self.current_exercise
        return exercise is not None and is_exercise_complete(
            self.completion, exercise.user_exercise_id
        )

    def is_exercise_complete(self, user_exercise_id: str) -> bool:
        return is_exercise_complete(self.completion, user_exercise_id)

    def review_rows(self) -> list[dict]:
        """Per-exercise summary shown on the review step."""
        return [
            {
                "index": index,
                "user_exercise_id": exercise.user_exercise_id,
                "name": exercise.name,
                "sets": exercise.sets,
                "completed_sets": completed_set_count(self.completion, exercise.user_exercise_id),
                "complete": self.is_exercise_complete(exercise.user_exercise_id),
            }
            for index, exercise in enumerate(self.exercises)
        ]

    def to_dict(self) -> dict:
        """Serializable view of the session for the web and CLI layers."""
        data = {
            "status": self.status.value,
            "redirect_reason": self.redirect_reason.value if self.redirect_reason else None,
            "redirect_to": self.redirect_to,
            "error": self.error,
        }
        if self.workout is None:
            return data

        data.update(
            {
                "workout": self.workout.to_dict(),
                "exercises": [e.to_dict() for e in self.exercises],
                "completion": self.completion,
                "current_step_index": self.current_step_index,
                "is_review": self.is_review,
                "all_complete": self.all_complete,
                "forward_is_primary": self.forward_is_primary,
                "confirmation_pending": self.confirmation_pending,
                "review": self.review_rows(),
            }
        )
        return data


def open_local_session(
    context: SessionContext,
    db_path: Path | None = None,
    local_storage_path: Path | None = None,
) -> WorkoutSession:
    """Build a session wired to the local SQLite store and snapshot slot."""
    snapshots = SnapshotStore(SqliteKeyValueStore(local_storage_path or get_local_storage_path()))
    return WorkoutSession(LocalWorkoutStore(db_path), snapshots, context)

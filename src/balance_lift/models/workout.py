"""Training plan data models."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from ..utils.video import get_embed_url

# Applied when a catalog exercise has no usable set count
DEFAULT_SETS = 3

# Shown when a join-record points at a missing catalog exercise
PLACEHOLDER_EXERCISE_NAME = "Exercise"


class RepsOrSeconds(str, Enum):
    """How an exercise's work is measured."""

    REPS = "reps"
    SECONDS = "seconds"


@dataclass
class StrengthTest:
    """A dated record of a user's strength measurements."""

    id: str
    user_id: str
    test_date: date
    created_at: datetime | None = None


@dataclass
class Workout:
    """One scheduled training session belonging to a test."""

    id: str
    test_id: str
    week: int | None = None
    day: int | None = None
    completed_at: datetime | None = None

    @property
    def is_complete(self) -> bool:
        return self.completed_at is not None

    def get_position_display(self) -> str:
        """Get a human-readable position string."""
        week = self.week if self.week is not None else "?"
        day = self.day if self.day is not None else "?"
        return f"Week {week}, Day {day}"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "test_id": self.test_id,
            "week": self.week,
            "day": self.day,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }


@dataclass
class PlannedWorkout:
    """A workout to be created, with its exercises in order."""

    week: int | None = None
    day: int | None = None
    exercise_ids: list[str | None] = field(default_factory=list)


@dataclass
class UserExercise:
    """Association between a workout and a catalog exercise."""

    id: str
    workout_id: str
    exercise_id: str | None = None
    order: int | None = None
    completed_at: datetime | None = None


@dataclass
class CatalogExercise:
    """Reusable definition of an exercise."""

    id: str
    name: str
    sets: int | None = None
    reps_seconds: RepsOrSeconds | None = None
    duration: float | None = None
    video_link: str | None = None
    equipment: str | None = None
    setup: str | None = None
    cues: str | None = None

    @classmethod
    def from_dict(cls, data: dict, id: str | None = None) -> "CatalogExercise":
        """Create from dictionary."""
        reps_seconds = data.get("reps_seconds")
        return cls(
            id=id or data["id"],
            name=data["name"],
            sets=data.get("sets"),
            reps_seconds=RepsOrSeconds(reps_seconds) if reps_seconds else None,
            duration=data.get("duration"),
            video_link=data.get("video_link"),
            equipment=data.get("equipment"),
            setup=data.get("setup"),
            cues=data.get("cues"),
        )


@dataclass(frozen=True)
class ExerciseInSession:
    """An exercise as performed in a workout session.

    Display attributes are copied from the catalog when the session loads
    and do not change afterwards.
    """

    user_exercise_id: str
    exercise_id: str | None
    name: str
    sets: int
    reps_or_seconds: RepsOrSeconds | None = None
    duration: float | None = None
    video_link: str | None = None
    equipment: str | None = None
    setup: str | None = None
    cues: str | None = None

    @classmethod
    def from_records(
        cls, user_exercise: UserExercise, catalog: CatalogExercise | None
    ) -> "ExerciseInSession":
        """Left-join a join-record with its catalog row.

        A missing catalog row (or a missing field on it) falls back to the
        placeholder name and the default set count.
        """
        if catalog is None:
            return cls(
                user_exercise_id=user_exercise.id,
                exercise_id=user_exercise.exercise_id,
                name=PLACEHOLDER_EXERCISE_NAME,
                sets=DEFAULT_SETS,
            )

        sets = catalog.sets
        if not isinstance(sets, int) or isinstance(sets, bool) or sets <= 0:
            sets = DEFAULT_SETS

        return cls(
            user_exercise_id=user_exercise.id,
            exercise_id=user_exercise.exercise_id,
            name=catalog.name or PLACEHOLDER_EXERCISE_NAME,
            sets=sets,
            reps_or_seconds=catalog.reps_seconds,
            duration=catalog.duration,
            video_link=catalog.video_link,
            equipment=catalog.equipment,
            setup=catalog.setup,
            cues=catalog.cues,
        )

    @property
    def embed_url(self) -> str | None:
        return get_embed_url(self.video_link)

    def get_target_display(self) -> str:
        """Get a human-readable sets/reps target."""
        if self.reps_or_seconds == RepsOrSeconds.SECONDS and self.duration:
            return f"{self.sets} x {self.duration:g}s"
        if self.reps_or_seconds == RepsOrSeconds.REPS and self.duration:
            return f"{self.sets} x {self.duration:g} reps"
        return f"{self.sets} sets"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "user_exercise_id": self.user_exercise_id,
            "exercise_id": self.exercise_id,
            "name": self.name,
            "sets": self.sets,
            "reps_or_seconds": self.reps_or_seconds.value if self.reps_or_seconds else None,
            "duration": self.duration,
            "video_link": self.video_link,
            "embed_url": self.embed_url,
            "equipment": self.equipment,
            "setup": self.setup,
            "cues": self.cues,
        }

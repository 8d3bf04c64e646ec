"""Import a generated training plan into the store."""

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

import aiosqlite

from ..db.engine import get_db_path
from ..db.repositories import ExerciseRepository, TestRepository
from ..models.workout import CatalogExercise, PlannedWorkout
from ..utils.exercise_utils import find_matching_exercise

logger = logging.getLogger(__name__)


class PlanImportError(Exception):
    """Raised when a plan document cannot be imported."""


@dataclass
class ImportedPlan:
    """Summary of what an import created."""

    test_id: str
    workout_ids: list[str] = field(default_factory=list)
    exercise_count: int = 0
    unmatched: list[str] = field(default_factory=list)


def _parse_date(value) -> date:
    if not value:
        return date.today()
    try:
        return date.fromisoformat(str(value))
    except ValueError as e:
        raise PlanImportError(f"Invalid test_date {value!r}") from e


def _validate(document) -> list[dict]:
    if not isinstance(document, dict):
        raise PlanImportError("Plan must be a JSON object")

    workouts = document.get("workouts")
    if not isinstance(workouts, list) or not workouts:
        raise PlanImportError("Plan must contain a non-empty 'workouts' list")

    for i, workout in enumerate(workouts, start=1):
        if not isinstance(workout, dict):
            raise PlanImportError(f"Workout {i} must be an object")
        for key in ("week", "day"):
            value = workout.get(key)
            if value is not None and (not isinstance(value, int) or isinstance(value, bool)):
                raise PlanImportError(f"Workout {i}: '{key}' must be a whole number")

        exercises = workout.get("exercises")
        if not isinstance(exercises, list) or not exercises:
            raise PlanImportError(f"Workout {i} must list at least one exercise")
        for entry in exercises:
            if isinstance(entry, str) and entry.strip():
                continue
            if not isinstance(entry, dict):
                raise PlanImportError(f"Workout {i}: exercises must be names or objects")
            name = entry.get("name")
            exercise_id = entry.get("exercise_id")
            if not name and not exercise_id:
                raise PlanImportError(
                    f"Workout {i}: each exercise needs a 'name' or 'exercise_id'"
                )
            if (name is not None and not isinstance(name, str)) or (
                exercise_id is not None and not isinstance(exercise_id, str)
            ):
                raise PlanImportError(
                    f"Workout {i}: 'name' and 'exercise_id' must be strings"
                )

    return workouts


class PlanImportService:
    """Creates a test with its workouts and join-records from a plan document.

    Exercise names are resolved against the catalog; names that match
    nothing are still imported, pointing at no catalog row. The document
    is fully validated and resolved before anything is written, and the
    writes happen in a single transaction.
    """

    def __init__(self, db_path: Path | None = None, match_threshold: float = 0.8):
        self.db_path = db_path or get_db_path()
        self.match_threshold = match_threshold

    async def import_file(self, path: Path, user_id: str) -> ImportedPlan:
        """Import a plan from a JSON file."""
        try:
            with open(path) as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            raise PlanImportError(f"Invalid JSON in {path}: {e}") from e
        return await self.import_plan(document, user_id)

    async def import_plan(self, document: dict, user_id: str) -> ImportedPlan:
        """Import a plan document for a user."""
        workouts = _validate(document)
        test_date = _parse_date(document.get("test_date"))

        catalog = await ExerciseRepository(self.db_path).list_all()
        unmatched: list[str] = []
        planned = [
            PlannedWorkout(
                week=workout.get("week"),
                day=workout.get("day"),
                exercise_ids=[
                    self._resolve(entry, catalog, unmatched) for entry in workout["exercises"]
                ],
            )
            for workout in workouts
        ]

        try:
            test_id, workout_ids = await TestRepository(self.db_path).create_with_workouts(
                user_id, test_date, planned
            )
        except aiosqlite.Error as e:
            raise PlanImportError(f"Failed to store plan: {e}") from e

        return ImportedPlan(
            test_id=test_id,
            workout_ids=workout_ids,
            exercise_count=sum(len(p.exercise_ids) for p in planned),
            unmatched=unmatched,
        )

    def _resolve(
        self, entry: str | dict, catalog: list[CatalogExercise], unmatched: list[str]
    ) -> str | None:
        """Catalog id for one plan entry; unknown entries are noted in ``unmatched``."""
        if isinstance(entry, str):
            entry = {"name": entry}

        exercise_id = entry.get("exercise_id")
        if exercise_id:
            if not any(exercise.id == exercise_id for exercise in catalog):
                logger.warning("Plan references unknown exercise id %s", exercise_id)
                unmatched.append(exercise_id)
            return exercise_id

        match = find_matching_exercise(entry["name"], catalog, threshold=self.match_threshold)
        if match is None:
            logger.warning("No catalog match for %r", entry["name"])
            unmatched.append(entry["name"])
            return None
        return match.id

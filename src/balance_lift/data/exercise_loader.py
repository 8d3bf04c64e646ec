"""Exercise catalog loader from JSON."""

import json
import logging
from pathlib import Path

from ..db.engine import get_db_path
from ..db.repositories import ExerciseRepository
from ..models.workout import CatalogExercise

logger = logging.getLogger(__name__)


def get_catalog_json_path() -> Path:
    """Get the path to the bundled exercise catalog."""
    return Path(__file__).parent / "catalog.json"


def load_catalog_exercises(json_path: Path | None = None) -> list[CatalogExercise]:
    """Load catalog exercises from a JSON file.

    Returns:
        List of CatalogExercise objects; invalid entries are skipped
    """
    json_path = json_path or get_catalog_json_path()
    if not json_path.exists():
        return []

    with open(json_path) as f:
        data = json.load(f)

    exercises = []
    for ex_data in data.get("exercises", []):
        try:
            exercises.append(CatalogExercise.from_dict(ex_data))
        except (ValueError, KeyError) as e:
            logger.warning(
                "Skipping invalid exercise %s: %s", ex_data.get("name", "unknown"), e
            )

    return exercises


async def seed_exercises_from_json(
    db_path: Path | None = None, json_path: Path | None = None
) -> int:
    """Seed the catalog from the JSON file.

    Existing rows with the same id are replaced.

    Returns:
        Number of exercises seeded
    """
    repo = ExerciseRepository(db_path or get_db_path())

    count = 0
    for exercise in load_catalog_exercises(json_path):
        await repo.upsert(exercise)
        count += 1

    return count

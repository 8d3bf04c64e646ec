"""Pytest configuration and fixtures."""

import asyncio
import json
import tempfile
from pathlib import Path

import pytest

from balance_lift.data.exercise_loader import seed_exercises_from_json
from balance_lift.db import UserRepository, init_db
from balance_lift.models.user import User
from balance_lift.services.plan_import import PlanImportService
from fakes import RecordingKeyValueStore, build_store, make_session


@pytest.fixture
def kv():
    """Recording key-value store."""
    return RecordingKeyValueStore()


@pytest.fixture
def two_exercise_store():
    """Workout with exercise A (3 sets) and exercise B (2 sets)."""
    return build_store({"A": 3, "B": 2})


@pytest.fixture
def ready_session(two_exercise_store, kv):
    """Loaded session over the two-exercise workout."""
    session = make_session(two_exercise_store, kv)
    asyncio.run(session.load())
    return session


@pytest.fixture
def temp_data_dir():
    """Create a temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_db_path(temp_data_dir):
    """Temporary database path."""
    return temp_data_dir / "test.db"


@pytest.fixture
def sample_plan():
    """Plan document using catalog exercise names."""
    return {
        "test_date": "2026-10-01",
        "workouts": [
            {"week": 1, "day": 1, "exercises": ["Goblet Squat", "Nordic Hamstring Curl"]},
            {"week": 1, "day": 2, "exercises": ["Hip Thrust", "Copenhagen Side Plank"]},
        ],
    }


@pytest.fixture
def seeded_db(temp_db_path, sample_plan):
    """Database with the catalog, one user and an imported plan.

    Returns:
        (db_path, user_id)
    """

    async def setup():
        await init_db(temp_db_path)
        await seed_exercises_from_json(temp_db_path)
        user_id = await UserRepository(temp_db_path).create(
            User(id="user-1", email="lifter@example.com", first_name="Sam")
        )
        await PlanImportService(temp_db_path).import_plan(sample_plan, user_id)
        return user_id

    user_id = asyncio.run(setup())
    return temp_db_path, user_id


@pytest.fixture
def plan_file(temp_data_dir, sample_plan):
    """Plan document written to disk."""
    path = temp_data_dir / "plan.json"
    path.write_text(json.dumps(sample_plan))
    return path

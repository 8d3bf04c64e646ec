"""Tests for the web routes."""

import sqlite3

import pytest
from fastapi.testclient import TestClient

from balance_lift.clients.base import StoreError
from balance_lift.clients.local import LocalWorkoutStore
from balance_lift.storage.snapshots import SnapshotStore, SqliteKeyValueStore
from balance_lift.web import create_app


@pytest.fixture
def client(seeded_db, temp_data_dir):
    """Client signed in as the seeded user."""
    db_path, user_id = seeded_db
    app = create_app(db_path=db_path, local_storage_path=temp_data_dir / "local_storage.db")
    with TestClient(app) as client:
        client.headers["X-User-Id"] = user_id
        yield client


@pytest.fixture
def anonymous_client(seeded_db, temp_data_dir):
    db_path, _ = seeded_db
    app = create_app(db_path=db_path, local_storage_path=temp_data_dir / "local_storage.db")
    with TestClient(app) as client:
        yield client


def exercise_ids(client):
    state = client.get("/workout/state").json()
    return [e["user_exercise_id"] for e in state["exercises"]]


def finish_all_sets(client):
    state = client.get("/workout/state").json()
    for exercise in state["exercises"]:
        for set_index in range(exercise["sets"]):
            client.post(
                "/workout/toggle",
                data={"user_exercise_id": exercise["user_exercise_id"], "set_index": set_index},
            )


def finish_all_sets_of_first_exercise(client):
    first = exercise_ids(client)[0]
    for set_index in range(3):
        client.post("/workout/toggle", data={"user_exercise_id": first, "set_index": set_index})


def open_review(client):
    state = client.get("/workout/state").json()
    while not state["is_review"]:
        state = client.post("/workout/next").json()
    return state


class TestAppRoutes:
    """Tests for application level routes."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root_redirects_to_training(self, client):
        response = client.get("/", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "/training"

    def test_training_home_lists_workouts(self, client):
        response = client.get("/training")
        assert response.status_code == 200
        assert "Welcome back, Sam" in response.text
        assert "Week 1, Day 1" in response.text

    def test_training_home_shows_notice(self, anonymous_client):
        response = anonymous_client.get("/training?reason=unauthenticated")
        assert "Sign in to start your workout." in response.text

    def test_training_home_store_failure(self, client, monkeypatch):
        """Test a failing store renders the page with a notice instead of crashing."""

        async def failing_get_latest_test(self, user_id):
            raise StoreError("database is locked")

        monkeypatch.setattr(LocalWorkoutStore, "get_latest_test", failing_get_latest_test)

        response = client.get("/training")
        assert response.status_code == 503
        assert "Could not load your training plan." in response.text
        assert "Welcome back, Sam" in response.text
        assert "Week 1, Day 1" not in response.text


class TestWorkoutPage:
    """Tests for the workout page."""

    def test_anonymous_user_is_redirected(self, anonymous_client):
        response = anonymous_client.get("/workout", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "/training?reason=unauthenticated"

    def test_user_without_plan_is_redirected(self, client):
        client.headers["X-User-Id"] = "someone-else"
        response = client.get("/workout", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "/training?reason=no_test"

    def test_renders_first_exercise(self, client):
        response = client.get("/workout")
        assert response.status_code == 200
        assert "Goblet Squat" in response.text
        assert "No video available" in response.text

    def test_cookie_identifies_user(self, anonymous_client, seeded_db):
        _, user_id = seeded_db
        anonymous_client.cookies.set("user_id", user_id)
        response = anonymous_client.get("/workout", follow_redirects=False)
        assert response.status_code == 200

    def test_page_load_picks_up_catalog_changes(self, client, seeded_db):
        """Test each visit reloads the session instead of reusing the cached one."""
        db_path, _ = seeded_db
        client.get("/workout")
        assert client.get("/workout/state").json()["exercises"][0]["sets"] == 3

        with sqlite3.connect(db_path) as conn:
            conn.execute("UPDATE exercises SET sets = 5 WHERE id = 'goblet-squat'")

        client.get("/workout")
        state = client.get("/workout/state").json()
        assert state["exercises"][0]["sets"] == 5
        assert len(list(state["completion"].values())[0]) == 5

    def test_page_load_picks_up_progress_saved_elsewhere(self, client, seeded_db, temp_data_dir):
        """Test a reload shows sets ticked off by another writer and keeps them."""
        _, user_id = seeded_db
        client.get("/workout")
        state = client.get("/workout/state").json()
        first, second = [e["user_exercise_id"] for e in state["exercises"]]

        snapshots = SnapshotStore(SqliteKeyValueStore(temp_data_dir / "local_storage.db"))
        snapshots.save(
            user_id,
            state["workout"]["id"],
            {first: [True, False, False], second: [False, False]},
        )

        client.get("/workout")
        state = client.post(
            "/workout/toggle", data={"user_exercise_id": second, "set_index": 0}
        ).json()
        assert state["completion"][first] == [True, False, False]
        assert state["completion"][second][0] is True


class TestWorkoutApi:
    """Tests for the JSON workout endpoints."""

    def test_state(self, client):
        state = client.get("/workout/state").json()

        assert state["status"] == "ready"
        assert state["workout"]["week"] == 1
        assert [e["name"] for e in state["exercises"]] == ["Goblet Squat", "Nordic Hamstring Curl"]
        assert state["current_step_index"] == 0
        assert list(state["completion"].values()) == [[False] * 3, [False] * 2]

    def test_anonymous_api_call(self, anonymous_client):
        assert anonymous_client.get("/workout/state").status_code == 401

    def test_toggle(self, client):
        first = exercise_ids(client)[0]
        state = client.post(
            "/workout/toggle", data={"user_exercise_id": first, "set_index": 2}
        ).json()
        assert state["completion"][first] == [False, False, True]

    def test_toggle_invalid_set(self, client):
        first = exercise_ids(client)[0]
        response = client.post("/workout/toggle", data={"user_exercise_id": first, "set_index": 3})
        assert response.status_code == 400

    def test_toggle_unknown_exercise(self, client):
        response = client.post("/workout/toggle", data={"user_exercise_id": "nope", "set_index": 0})
        assert response.status_code == 400

    def test_navigation(self, client):
        assert client.post("/workout/prev").json()["current_step_index"] == 0
        assert client.post("/workout/next").json()["current_step_index"] == 1
        assert client.post("/workout/jump", data={"index": 0}).json()["current_step_index"] == 0
        assert client.post("/workout/jump", data={"index": 5}).status_code == 400

    def test_progress_survives_restart(self, seeded_db, temp_data_dir):
        """Test a new app instance resumes from the saved snapshot."""
        db_path, user_id = seeded_db
        local_storage_path = temp_data_dir / "local_storage.db"
        headers = {"X-User-Id": user_id}

        with TestClient(create_app(db_path, local_storage_path)) as first:
            first.headers.update(headers)
            finish_all_sets_of_first_exercise(first)

        with TestClient(create_app(db_path, local_storage_path)) as second:
            second.headers.update(headers)
            state = second.get("/workout/state").json()

        assert state["current_step_index"] == 1
        assert list(state["completion"].values())[0] == [True, True, True]

    def test_submit_outside_review(self, client):
        assert client.post("/workout/submit").status_code == 409

    def test_submit_incomplete_needs_confirmation(self, client):
        open_review(client)

        body = client.post("/workout/submit").json()
        assert body["result"]["status"] == "needs_confirmation"
        assert body["session"]["confirmation_pending"] is True

        state = client.post("/workout/submit/cancel").json()
        assert state["confirmation_pending"] is False
        assert state["is_review"] is True

    def test_submit_confirmed_moves_to_next_workout(self, client):
        first_workout = client.get("/workout/state").json()["workout"]["id"]
        open_review(client)

        body = client.post("/workout/submit", data={"confirmed": "true"}).json()
        assert body["result"]["status"] == "submitted"
        assert body["result"]["redirect_to"] == "/training"
        assert body["result"]["completed_exercise_ids"] == []

        state = client.get("/workout/state").json()
        assert state["workout"]["id"] != first_workout
        assert state["workout"]["day"] == 2

    def test_submit_complete_workout(self, client):
        finish_all_sets(client)
        open_review(client)

        body = client.post("/workout/submit").json()
        assert body["result"]["status"] == "submitted"
        assert len(body["result"]["completed_exercise_ids"]) == 2

    def test_all_workouts_done(self, client):
        """Test the page leaves once every workout is submitted."""
        for _ in range(2):
            open_review(client)
            client.post("/workout/submit", data={"confirmed": "true"})

        response = client.get("/workout", follow_redirects=False)
        assert response.headers["location"] == "/training?reason=all_complete"
        assert client.get("/workout/state").status_code == 409

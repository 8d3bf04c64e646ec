"""Local durable slot for in-progress workout completion."""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

SNAPSHOT_NAMESPACE = "workout-progress"


@runtime_checkable
class KeyValueStore(Protocol):
    """Synchronous string key-value storage."""

    def get_item(self, key: str) -> str | None:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


class SqliteKeyValueStore:
    """Key-value store persisted to a small SQLite file.

    Plays the role of browser local storage: synchronous, string values,
    one row per key.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._ensure_table()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.path))

    def _ensure_table(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS local_storage (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )

    def get_item(self, key: str) -> str | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM local_storage WHERE key = ?", (key,)
            ).fetchone()
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO local_storage (key, value) VALUES (?, ?)",
                (key, value),
            )

    def remove_item(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM local_storage WHERE key = ?", (key,))


class SnapshotStore:
    """Reads and writes completion snapshots keyed by user and workout.

    Reads never raise: a missing, unreadable or corrupt entry is reported
    as None. Writes and deletes are best-effort; failures are logged and
    swallowed so the in-memory session keeps working.
    """

    def __init__(self, storage: KeyValueStore, namespace: str = SNAPSHOT_NAMESPACE):
        self.storage = storage
        self.namespace = namespace

    def key(self, user_id: str, workout_id: str) -> str:
        return f"{self.namespace}-{user_id}-{workout_id}"

    def load(self, user_id: str, workout_id: str) -> dict | None:
        """Load the saved completion mapping, or None if there is none."""
        key = self.key(user_id, workout_id)
        try:
            raw = self.storage.get_item(key)
        except Exception as e:
            logger.warning("Could not read snapshot %s: %s", key, e)
            return None

        if raw is None:
            return None

        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring corrupt snapshot %s: %s", key, e)
            return None

        if not isinstance(data, dict) or not isinstance(data.get("completion"), dict):
            logger.warning("Ignoring snapshot %s with unexpected shape", key)
            return None

        return data["completion"]

    def save(self, user_id: str, workout_id: str, completion: dict[str, list[bool]]) -> None:
        """Overwrite the snapshot with the full completion mapping."""
        key = self.key(user_id, workout_id)
        try:
            self.storage.set_item(key, json.dumps({"completion": completion}))
        except Exception as e:
            logger.warning("Could not write snapshot %s: %s", key, e)

    def clear(self, user_id: str, workout_id: str) -> None:
        """Erase the snapshot."""
        key = self.key(user_id, workout_id)
        try:
            self.storage.remove_item(key)
        except Exception as e:
            logger.warning("Could not erase snapshot %s: %s", key, e)

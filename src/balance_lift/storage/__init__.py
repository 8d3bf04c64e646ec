"""Client-side storage."""

from .snapshots import KeyValueStore, SnapshotStore, SqliteKeyValueStore

__all__ = ["KeyValueStore", "SnapshotStore", "SqliteKeyValueStore"]

"""SQLite storage adapter.

Implements the core KeyValueStorePort using a simple SQLite database.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime, timezone
from typing import Any

LOGGER = logging.getLogger(__name__)


class SQLiteKeyValueStore:
    """Thin SQLite wrapper that satisfies the KeyValueStorePort contract."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create the kv table if it does not exist.

        Fields:
        - key: well-known storage key (PRIMARY KEY)
        - value: JSON-encoded value
        - updated_at: timestamp of the last save, for debugging
        """

        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                )
                """
            )

    def load(self, key: str, default: Any) -> Any:
        """Return the decoded value for a key, or default if absent."""

        with self._connect() as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        if row is None:
            return default
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError:
            LOGGER.warning("Stored value for %s is not valid JSON; using default", key)
            return default

    def save(self, key: str, value: Any) -> None:
        """Upsert the JSON-encoded value for a key."""

        payload = json.dumps(value, ensure_ascii=False)
        now = datetime.now(timezone.utc)
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO kv (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, payload, now.isoformat()),
            )

"""SQLite-backed storage for the single API key credential."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from .config import API_KEY_STORAGE_KEY


class CredentialStore:
    """Key/value table holding the API key. No key means unauthenticated."""

    def __init__(self, db_path: Path):
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(db_path))
        self.conn.row_factory = sqlite3.Row
        self._migrate()

    def _migrate(self):
        self.conn.executescript("""
            CREATE TABLE IF NOT EXISTS credentials (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );
        """)
        self.conn.commit()

    def get_api_key(self) -> str | None:
        row = self.conn.execute(
            "SELECT value FROM credentials WHERE key = ?", (API_KEY_STORAGE_KEY,)
        ).fetchone()
        return row["value"] if row else None

    def set_api_key(self, api_key: str | None):
        """Store the key, or remove it when api_key is empty or None."""
        if api_key:
            self.conn.execute(
                """INSERT INTO credentials (key, value, updated_at) VALUES (?, ?, ?)
                   ON CONFLICT(key) DO UPDATE SET
                       value = excluded.value, updated_at = excluded.updated_at""",
                (API_KEY_STORAGE_KEY, api_key, datetime.now(timezone.utc).isoformat()),
            )
        else:
            self.conn.execute(
                "DELETE FROM credentials WHERE key = ?", (API_KEY_STORAGE_KEY,)
            )
        self.conn.commit()

    def is_authenticated(self) -> bool:
        return self.get_api_key() is not None

    def close(self):
        self.conn.close()

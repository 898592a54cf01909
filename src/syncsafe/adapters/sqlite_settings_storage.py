from __future__ import annotations

import json
import sqlite3
from typing import Any

from syncsafe.ports.settings_storage_port import SettingsStoragePort


class SQLiteSettingsStorage(SettingsStoragePort):
    def __init__(self, sqlite_path: str) -> None:
        self._sqlite_path = sqlite_path
        self._ensure_schema()

    def load_settings(self) -> dict[str, Any]:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    """
                    SELECT name, value_json
                    FROM settings
                    ORDER BY name
                    """
                ).fetchall()
        except sqlite3.Error as exc:
            raise RuntimeError("Failed to load settings") from exc
        values: dict[str, Any] = {}
        for name, value_json in rows:
            try:
                values[name] = json.loads(value_json)
            except json.JSONDecodeError as exc:
                raise RuntimeError(f"Stored setting is not valid JSON: {name}") from exc
        return values

    def save_settings(self, values: dict[str, Any]) -> None:
        try:
            with self._connect() as conn:
                conn.executemany(
                    """
                    INSERT INTO settings(name, value_json)
                    VALUES (?, ?)
                    ON CONFLICT(name) DO UPDATE SET value_json = excluded.value_json
                    """,
                    [
                        (name, json.dumps(value, ensure_ascii=False))
                        for name, value in values.items()
                    ],
                )
        except sqlite3.Error as exc:
            raise RuntimeError("Failed to save settings") from exc

    def _ensure_schema(self) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS settings(
                        name TEXT PRIMARY KEY,
                        value_json TEXT NOT NULL
                    )
                    """
                )
        except sqlite3.Error as exc:
            raise RuntimeError("Failed to initialize settings schema") from exc

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self._sqlite_path)

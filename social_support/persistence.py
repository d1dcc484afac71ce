# social_support/persistence.py
"""
Durable snapshot of the in-progress application.

One JSON text row under a fixed key in a SQLite file. The in-memory store is
always the source of truth: every failure here is logged and reported through
the return value, never raised.
"""
from __future__ import annotations
import json
import logging
import sqlite3
from contextlib import closing
from pathlib import Path

from .exceptions import SnapshotFormatError
from .record import FormData, form_data_from_dict, form_data_to_dict
from .schema import STORAGE_KEY

logger = logging.getLogger(__name__)

class SnapshotStore:
    def __init__(self, db_path: Path, key: str = STORAGE_KEY) -> None:
        self.db_path = Path(db_path)
        self.key = key
        self.setup_database()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path, check_same_thread=False)

    def setup_database(self) -> None:
        logger.info(f"Setting up snapshot storage at: {self.db_path}")
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with closing(self._connect()) as conn, conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS snapshots (
                        key TEXT PRIMARY KEY,
                        payload TEXT NOT NULL
                    );
                """)
        except (sqlite3.Error, OSError) as e:
            # Later saves fail soft and keep reporting it.
            logger.error(f"Snapshot storage setup failed: {e}")

    def save(self, form_data: FormData) -> bool:
        """Overwrites the stored snapshot. Returns False if it could not be written."""
        try:
            payload = json.dumps(form_data_to_dict(form_data))
            with closing(self._connect()) as conn, conn:
                conn.execute(
                    "INSERT INTO snapshots (key, payload) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET payload = excluded.payload",
                    (self.key, payload),
                )
        except (TypeError, ValueError, ArithmeticError) as e:
            logger.warning(f"Could not serialize snapshot '{self.key}': {e}")
            return False
        except sqlite3.Error as e:
            logger.warning(f"Failed to save snapshot '{self.key}': {e}")
            return False
        logger.info(f"Saved snapshot '{self.key}' (step {form_data.current_step}).")
        return True

    def load(self) -> FormData | None:
        """Returns the stored snapshot, or None if it is missing or unreadable."""
        try:
            with closing(self._connect()) as conn:
                row = conn.execute("SELECT payload FROM snapshots WHERE key = ?", (self.key,)).fetchone()
        except sqlite3.Error as e:
            logger.warning(f"Failed to read snapshot '{self.key}': {e}")
            return None
        if row is None:
            return None

        try:
            return form_data_from_dict(json.loads(row[0]))
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring corrupt snapshot '{self.key}': {e}")
        except SnapshotFormatError as e:
            logger.warning(f"Ignoring snapshot '{self.key}' with unexpected shape: {e}")
        return None

    def clear(self) -> None:
        try:
            with closing(self._connect()) as conn, conn:
                conn.execute("DELETE FROM snapshots WHERE key = ?", (self.key,))
        except sqlite3.Error as e:
            logger.warning(f"Failed to clear snapshot '{self.key}': {e}")

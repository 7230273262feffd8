"""
Durable per-principal spreadsheet bindings.

A binding maps a signed-in user to the spreadsheet created for them. Bindings
are stored in a small SQLite key-value table under the application data
directory and survive sign-out. There is no delete path.
"""

import logging
import pathlib
import sqlite3
from typing import Optional, Union

TABLE = 'bindings'
KEY_PREFIX = 'spreadsheet_'


def binding_key(user_id: str) -> str:
    """Return the storage key for a user's spreadsheet binding."""
    return f'{KEY_PREFIX}{user_id}'


class BindingStore:
    """Get/set access to the binding table.

    Args:
        db_path: Path of the SQLite file. Defaults to the configured ``bindings.db``.
    """

    def __init__(self, db_path: Optional[Union[str, pathlib.Path]] = None) -> None:
        if db_path is None:
            from ..settings import lib
            db_path = lib.settings.db_path
        self.db_path = pathlib.Path(db_path)
        self._initialize_schema_if_needed()

    def connection(self) -> sqlite3.Connection:
        """Return a new connection to the binding database."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path), timeout=2.0)
        conn.set_progress_handler(lambda: logging.debug('Waiting on DB lock…'), 1000)
        return conn

    def _initialize_schema_if_needed(self) -> None:
        conn = self.connection()
        try:
            conn.execute(f'CREATE TABLE IF NOT EXISTS {TABLE} (key TEXT PRIMARY KEY, value TEXT NOT NULL)')
            conn.commit()
        finally:
            conn.close()

    def get(self, key: str) -> Optional[str]:
        """Return the stored value for key, or None."""
        conn = self.connection()
        try:
            row = conn.execute(f'SELECT value FROM {TABLE} WHERE key=?', (key,)).fetchone()
        finally:
            conn.close()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        """Insert or replace the value stored under key."""
        conn = self.connection()
        try:
            conn.execute(
                f'INSERT INTO {TABLE} (key, value) VALUES (?, ?) '
                'ON CONFLICT(key) DO UPDATE SET value=excluded.value',
                (key, value)
            )
            conn.commit()
        finally:
            conn.close()
        logging.debug(f'Stored binding "{key}" -> "{value}".')

    def get_spreadsheet_id(self, user_id: str) -> Optional[str]:
        return self.get(binding_key(user_id))

    def set_spreadsheet_id(self, user_id: str, spreadsheet_id: str) -> None:
        self.set(binding_key(user_id), spreadsheet_id)

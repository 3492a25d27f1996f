"""
Client Storage
==============

Durable key/value storage for the console, the desktop counterpart of the
browser's localStorage. Values survive process restarts; the auth token
lives here under a single fixed key.
"""

from datetime import datetime

from .config import Config
from .database import Database


class TokenStorage:
    """Key/value store backed by a small SQLite table."""

    def __init__(self, db_path=None, table=None):
        self.db_path = db_path or Config.TOKEN_DB
        self.table = table or Config.STORAGE_TABLE
        self._initialized = False

    def _ensure_table(self):
        if self._initialized:
            return
        Database.execute(self.db_path, f'''
            CREATE TABLE IF NOT EXISTS {self.table} (
                key TEXT PRIMARY KEY,
                value TEXT,
                updated_at TEXT
            )
        ''')
        self._initialized = True

    def get(self, key, default=None):
        """Get a stored value, or default when the key is absent"""
        self._ensure_table()
        row = Database.fetch_one(
            self.db_path,
            f'SELECT value FROM {self.table} WHERE key = ?',
            (key,)
        )
        if row is None or row[0] is None:
            return default
        return row[0]

    def set(self, key, value):
        """Insert or replace a value"""
        self._ensure_table()
        Database.execute(self.db_path, f'''
            INSERT INTO {self.table} (key, value, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
        ''', (key, value, datetime.now().isoformat()))

    def remove(self, key):
        """Delete a key. Returns True if something was removed."""
        self._ensure_table()
        return Database.execute(
            self.db_path,
            f'DELETE FROM {self.table} WHERE key = ?',
            (key,)
        ) > 0

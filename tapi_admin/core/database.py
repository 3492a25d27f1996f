import os
import sqlite3
import threading


class Database:
    # Token storage and the activity log can be touched from the transport worker thread
    _lock = threading.Lock()

    @staticmethod
    def connect(path):
        db_dir = os.path.dirname(path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
        return sqlite3.connect(path)

    @classmethod
    def execute(cls, path, sql, params=()):
        """
        Run a single write statement under the class lock and commit.

        Returns the cursor rowcount.
        """
        with cls._lock:
            with cls.connect(path) as conn:
                cursor = conn.cursor()
                cursor.execute(sql, params)
                conn.commit()
                return cursor.rowcount

    @classmethod
    def fetch_one(cls, path, sql, params=()):
        with cls._lock:
            with cls.connect(path) as conn:
                cursor = conn.cursor()
                cursor.execute(sql, params)
                return cursor.fetchone()

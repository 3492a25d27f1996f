"""
Centralized logging service for the TAPI admin console.
Records console activity (API calls, user actions, failures) in SQLite when
LOG_DB is configured, and always mirrors it to the stdlib logger.
"""

import json
import logging
from datetime import datetime, timedelta

from .config import Config
from .database import Database

_stdlib_logger = logging.getLogger('tapi_admin')


class LoggingService:
    """Centralized logging service for console-wide activity logging"""

    _tables_ready = set()

    @staticmethod
    def _db_path():
        return Config.LOG_DB

    @staticmethod
    def _ensure_logs_table(db_path):
        """Ensure the app_logs table exists"""
        if db_path in LoggingService._tables_ready:
            return
        Database.execute(db_path, f"""
            CREATE TABLE IF NOT EXISTS {Config.LOGS_TABLE} (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                timestamp TEXT NOT NULL,
                level TEXT NOT NULL,
                source TEXT NOT NULL,
                message TEXT NOT NULL,
                details TEXT,
                user_id TEXT
            )
        """)
        Database.execute(db_path, f"""
            CREATE INDEX IF NOT EXISTS idx_logs_timestamp
            ON {Config.LOGS_TABLE}(timestamp DESC)
        """)
        LoggingService._tables_ready.add(db_path)

    @staticmethod
    def log(level, source, message, details=None, user_id=None):
        """
        Log a message to the stdlib logger and, if configured, the log database

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (auth, products, team, blogs, etc.)
            message (str): Main log message
            details (str/dict): Additional details (will be JSON-encoded if dict)
            user_id (str): Optional user identifier
        """
        level = level.upper()
        if isinstance(details, dict):
            details = json.dumps(details, indent=2, default=str)

        _stdlib_logger.log(
            getattr(logging, level, logging.INFO),
            "[%s] %s%s", source, message, f" | {details}" if details else ""
        )

        db_path = LoggingService._db_path()
        if not db_path:
            return

        try:
            LoggingService._ensure_logs_table(db_path)
            Database.execute(db_path, f"""
                INSERT INTO {Config.LOGS_TABLE}
                (timestamp, level, source, message, details, user_id)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (datetime.now().isoformat(), level, source, message, details, user_id))
        except Exception as e:
            # The stdlib logger already has the entry
            _stdlib_logger.warning("Logging service error: %s", e)

    @staticmethod
    def debug(source, message, details=None, user_id=None):
        """Log debug message"""
        LoggingService.log('DEBUG', source, message, details, user_id)

    @staticmethod
    def info(source, message, details=None, user_id=None):
        """Log info message"""
        LoggingService.log('INFO', source, message, details, user_id)

    @staticmethod
    def warning(source, message, details=None, user_id=None):
        """Log warning message"""
        LoggingService.log('WARNING', source, message, details, user_id)

    @staticmethod
    def error(source, message, details=None, user_id=None):
        """Log error message"""
        LoggingService.log('ERROR', source, message, details, user_id)

    @staticmethod
    def log_user_action(source, action, user_id=None, details=None):
        """Log user actions (login, signup, logout, submit, etc.)"""
        LoggingService.info(source, f"User action: {action}", details, user_id)

    @staticmethod
    def log_api_call(source, endpoint, method='GET', status_code=200, details=None):
        """Log API calls. status_code None means no response was received."""
        if status_code is None:
            LoggingService.log('ERROR', source, f"API {method} {endpoint} - No response", details)
            return
        message = f"API {method} {endpoint} - Status: {status_code}"
        level = 'INFO' if 200 <= status_code < 400 else 'WARNING' if status_code < 500 else 'ERROR'
        LoggingService.log(level, source, message, details)

    @staticmethod
    def log_error_with_traceback(source, error, details=None):
        """Log error with full traceback"""
        import traceback
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': ''.join(traceback.format_exception(type(error), error, error.__traceback__))
        }
        if details:
            error_details['additional_details'] = details

        LoggingService.error(source, f"Exception occurred: {type(error).__name__}", error_details)

    @staticmethod
    def cleanup_old_logs(days_to_keep=30):
        """Clean up old log entries"""
        db_path = LoggingService._db_path()
        if not db_path:
            return 0

        try:
            LoggingService._ensure_logs_table(db_path)
            cutoff_iso = (datetime.now() - timedelta(days=days_to_keep)).isoformat()
            deleted_count = Database.execute(db_path, f"""
                DELETE FROM {Config.LOGS_TABLE}
                WHERE timestamp < ?
            """, (cutoff_iso,))

            LoggingService.info('system', f"Cleaned up {deleted_count} old log entries")
            return deleted_count

        except Exception as e:
            LoggingService.error('system', f"Failed to cleanup old logs: {e}")
            return 0


# Convenience instance for easy importing
logger = LoggingService()

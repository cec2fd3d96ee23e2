"""
Centralized logging service for the Atelier site.
Provides structured logging with database storage and easy integration.
"""

import json
import traceback
from datetime import datetime
from flask import current_app, request, has_app_context, has_request_context
from .database import Database


class LoggingService:
    """Centralized logging service for application-wide logging"""

    @staticmethod
    def _get_logs_db():
        """Logs database of the current app, or None outside an app context"""
        if not has_app_context():
            return None
        return current_app.config.get('LOGS_DB')

    @staticmethod
    def _ensure_logs_table(logs_db):
        """Ensure the app_logs table exists"""
        Database.ensure_parent_dir(logs_db)
        with Database.connect(logs_db) as conn:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS app_logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL,
                    level TEXT NOT NULL,
                    source TEXT NOT NULL,
                    message TEXT NOT NULL,
                    details TEXT,
                    ip_address TEXT,
                    user_agent TEXT,
                    request_path TEXT
                )
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_logs_timestamp
                ON app_logs(timestamp DESC)
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_logs_source
                ON app_logs(source)
            """)
            conn.commit()

    @staticmethod
    def _get_request_context():
        """Extract request context information"""
        if not has_request_context():
            return None, None, None

        ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
        if ip_address and ',' in ip_address:
            ip_address = ip_address.split(',')[0].strip()

        return ip_address, request.headers.get('User-Agent', ''), request.path

    @staticmethod
    def _print(timestamp, level, source, message, details):
        print(f"[{timestamp}] [{level}] [{source}] {message}")
        if details:
            print(f"Details: {details}")

    @staticmethod
    def log(level, source, message, details=None):
        """
        Log a message to the logs database

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (projects, storage, rpc, etc.)
            message (str): Main log message
            details (str/dict): Additional details (JSON-encoded if dict)
        """
        level = level.upper()
        timestamp = datetime.now().isoformat()
        if isinstance(details, dict):
            details = json.dumps(details, indent=2, default=str)

        logs_db = LoggingService._get_logs_db()
        if not logs_db:
            # Outside an application context logs go to the console
            LoggingService._print(timestamp, level, source, message, details)
            return

        try:
            LoggingService._ensure_logs_table(logs_db)
            ip_address, user_agent, request_path = LoggingService._get_request_context()

            with Database.connect(logs_db) as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO app_logs
                    (timestamp, level, source, message, details, ip_address, user_agent, request_path)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    timestamp, level, source, message, details,
                    ip_address, user_agent, request_path
                ))
                conn.commit()

        except Exception as e:
            # Fallback to console logging if database fails
            LoggingService._print(timestamp, level, source, message, details)
            print(f"Logging service error: {e}")

    @staticmethod
    def debug(source, message, details=None):
        """Log debug message"""
        LoggingService.log('DEBUG', source, message, details)

    @staticmethod
    def info(source, message, details=None):
        """Log info message"""
        LoggingService.log('INFO', source, message, details)

    @staticmethod
    def warning(source, message, details=None):
        """Log warning message"""
        LoggingService.log('WARNING', source, message, details)

    @staticmethod
    def error(source, message, details=None):
        """Log error message"""
        LoggingService.log('ERROR', source, message, details)

    @staticmethod
    def log_api_call(source, endpoint, method='GET', status_code=200, details=None):
        """Log calls to external APIs and RPC procedures"""
        message = f"API {method} {endpoint} - Status: {status_code}"
        level = 'INFO' if 200 <= status_code < 400 else 'WARNING' if status_code < 500 else 'ERROR'
        LoggingService.log(level, source, message, details)

    @staticmethod
    def log_error_with_traceback(source, error, details=None):
        """Log error with full traceback"""
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': traceback.format_exc()
        }
        if details:
            error_details['additional_details'] = details

        LoggingService.error(source, f"Exception occurred: {type(error).__name__}", error_details)


# Convenience instance for easy importing
logger = LoggingService()

"""
MongoDB Logging Handler for storing application logs in MongoDB.

Records are written as ``ServerLog`` documents so they can be inspected
remotely alongside the rest of the application data.
"""

import asyncio
import logging
from datetime import UTC, datetime
from typing import Any

from db.models import ServerLog


class MongoDBHandler(logging.Handler):
    """Custom logging handler that writes log records to MongoDB."""

    def __init__(self, level: int = logging.INFO):
        super().__init__(level)
        self._pending: set[asyncio.Task] = set()

    def emit(self, record: logging.LogRecord) -> None:
        """
        Emit a log record to MongoDB.

        emit() is synchronous, so the insert is scheduled on the running
        event loop. Records logged outside a loop are dropped.

        Args:
            record: The log record to store
        """
        # Avoid feedback loops from the driver logging its own inserts.
        if record.name.startswith(("pymongo", "motor")):
            return

        try:
            entry = self._format_log_entry(record)
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        except Exception:
            self.handleError(record)
            return

        task = loop.create_task(self._async_emit(entry))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _async_emit(self, log_entry: dict[str, Any]) -> None:
        """
        Asynchronously insert log entry into MongoDB.

        Args:
            log_entry: The formatted log entry to insert
        """
        try:
            await ServerLog(**log_entry).insert()
        except Exception as e:
            # Logging here would recurse back into this handler.
            print(f"Warning: Could not store log record: {e}")

    async def flush_pending(self) -> None:
        """Wait for scheduled inserts to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _format_log_entry(self, record: logging.LogRecord) -> dict[str, Any]:
        """
        Format a log record into a dictionary for MongoDB storage.

        Args:
            record: The log record to format

        Returns:
            Dictionary containing formatted log data
        """
        log_entry = {
            "timestamp": datetime.now(UTC),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            formatter = self.formatter or logging.Formatter()
            log_entry["exception"] = formatter.formatException(record.exc_info)

        if isinstance(getattr(record, "extra", None), dict):
            log_entry["extra"] = record.extra

        return log_entry

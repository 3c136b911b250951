"""
Centralized logging configuration for the tool tracker.

Modules log through ``logging.getLogger(__name__)`` and attach structured
data as ``extra={"context": {...}}``. setup_logging() decides how that data
is rendered:

- JSON lines (LOG_JSON=true, and always for log files)
- coloured console lines with the context appended as JSON
- optional rotating files under ``logs/``
- optional per-statement SQL timing (SQL_ECHO=true)
"""

import copy
import json
import logging
import logging.handlers
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from sqlalchemy import event
from sqlalchemy.engine import Engine

APP_LOGGER_NAME = "tool_tracker"
LOG_FILE_NAME = "tool_tracker.log"
ERROR_LOG_FILE_NAME = "tool_tracker_errors.log"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5

_query_timing_registered = False


class JSONFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, message, context."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        context = getattr(record, "context", None)
        if context:
            payload["context"] = context
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable lines for development, level name coloured by severity."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # Other handlers see the same record; colour a copy
        record = copy.copy(record)
        color = self.LEVEL_COLORS.get(record.levelname, "")
        record.levelname = f"{color}{record.levelname:8}{self.RESET}"

        line = super().format(record)
        context = getattr(record, "context", None)
        if context:
            line = f"{line} | {json.dumps(context, default=str)}"
        return line


def _level_from(value: Union[int, str]) -> int:
    if isinstance(value, int):
        return value
    return getattr(logging, str(value).upper(), logging.INFO)


def _console_handler(level: int, use_json_format: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if use_json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            ConsoleFormatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    return handler


def _rotating_handler(path: Path, level: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(
    log_level: Union[int, str] = "INFO",
    enable_sql_echo: bool = False,
    log_to_file: bool = False,
    use_json_format: bool = False,
    log_dir: Optional[Path] = None,
) -> None:
    """
    Configure the root logger for the process.

    Replaces any handlers already on the root logger, so it is safe to
    call more than once (e.g. once per CLI invocation).

    Args:
        log_level: Level name ("DEBUG", "INFO", ...) or logging constant
        enable_sql_echo: Log every SQL statement with its duration
        log_to_file: Also write JSON lines to rotating files in log_dir
        use_json_format: Render console output as JSON lines
        log_dir: Directory for log files (defaults to ./logs)
    """
    level = _level_from(log_level)

    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)

    root.addHandler(_console_handler(level, use_json_format))

    if log_to_file:
        target = log_dir or Path.cwd() / "logs"
        try:
            target.mkdir(parents=True, exist_ok=True)
            root.addHandler(_rotating_handler(target / LOG_FILE_NAME, level))
            root.addHandler(_rotating_handler(target / ERROR_LOG_FILE_NAME, logging.ERROR))
        except OSError as e:
            root.warning(
                f"Cannot write logs to {target}: {e}. Logging to console only.",
                extra={"context": {"component": "logging_setup"}},
            )

    if enable_sql_echo:
        register_query_timing()

    logging.getLogger(APP_LOGGER_NAME).setLevel(level)
    logging.getLogger(APP_LOGGER_NAME).info(
        "Logging configured",
        extra={
            "context": {
                "level": logging.getLevelName(level),
                "sql_echo": enable_sql_echo,
                "log_to_file": log_to_file,
                "json": use_json_format,
            }
        },
    )


def register_query_timing() -> None:
    """Log each SQL statement with its duration on every engine (idempotent)."""
    global _query_timing_registered
    if _query_timing_registered:
        return

    sql_logger = logging.getLogger(f"{APP_LOGGER_NAME}.sql")

    @event.listens_for(Engine, "before_cursor_execute")
    def _start_timer(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault("tool_tracker_query_start", []).append(time.perf_counter())

    @event.listens_for(Engine, "after_cursor_execute")
    def _log_duration(conn, cursor, statement, parameters, context, executemany):
        started = conn.info["tool_tracker_query_start"].pop()
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        sql_logger.info(
            f"Query executed in {elapsed_ms}ms",
            extra={"context": {"sql": statement[:500], "duration_ms": elapsed_ms}},
        )

    _query_timing_registered = True

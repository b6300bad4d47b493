"""
Structured logging for the clinic application.

Every module logs through the standard `logging` package and attaches
machine-readable details under `extra={"context": {...}}`:

    logger = get_logger(__name__)
    logger.info("Dentist created", extra={"context": {"dentist_id": 7}})

`setup_logging()` is called once from `create_app()`. It installs a console
handler (JSON in production, coloured text in development), optional
rotating JSON files under `logs/`, and per-request start/finish lines.
"""

import copy
import json
import logging
import logging.handlers
import sys
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from flask import Flask, g, request
from flask_login import current_user

LOG_DIR = Path(__file__).resolve().parent.parent.parent / "logs"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = ("werkzeug", "urllib3", "passlib", "sqlalchemy.engine")


class JSONFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message, context."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        context = getattr(record, "context", None)
        if context is not None:
            entry["context"] = context
        return json.dumps(entry, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """Coloured level names for local development."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # Other handlers share the record; colour a copy
        colored = copy.copy(record)
        color = self.COLORS.get(record.levelname, self.RESET)
        colored.levelname = f"{color}{record.levelname:8}{self.RESET}"
        return super().format(colored)


def _resolve_level(log_level: Union[int, str]) -> int:
    if isinstance(log_level, int):
        return log_level
    return getattr(logging, str(log_level).upper(), logging.INFO)


def _file_handler(filename: str, level: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        LOG_DIR / filename,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def _attach_file_handlers(root: logging.Logger, level: int) -> List[str]:
    """Add the rotating files; return warnings for the ones that failed."""
    problems = []
    try:
        LOG_DIR.mkdir(exist_ok=True)
    except OSError as e:
        return [f"Cannot create {LOG_DIR}: {e}. Logging to console only."]

    for filename, file_level in (("odonto.log", level), ("odonto_errors.log", logging.ERROR)):
        try:
            root.addHandler(_file_handler(filename, file_level))
        except OSError as e:
            problems.append(f"Cannot open {filename}: {e}. Skipping this file.")
    return problems


def _register_request_hooks(app: Flask) -> None:
    request_logger = logging.getLogger("odonto.request")

    @app.before_request
    def log_request_start():
        g.request_start_time = time.perf_counter()
        g.user_id = getattr(current_user, "id", None) if current_user.is_authenticated else None
        request_logger.debug(
            f"{request.method} {request.path}",
            extra={
                "context": {
                    "method": request.method,
                    "path": request.path,
                    "endpoint": request.endpoint,
                    "user_id": g.user_id,
                    "remote_addr": request.remote_addr,
                }
            },
        )

    @app.after_request
    def log_request_end(response):
        started = g.get("request_start_time")
        if started is not None:
            duration_ms = (time.perf_counter() - started) * 1000
            request_logger.info(
                f"{request.method} {request.path} {response.status_code} in {duration_ms:.2f}ms",
                extra={
                    "context": {
                        "method": request.method,
                        "path": request.path,
                        "status_code": response.status_code,
                        "duration_ms": round(duration_ms, 2),
                        "user_id": g.get("user_id"),
                    }
                },
            )
        return response


def setup_logging(
    app: Optional[Flask] = None,
    log_level: Union[int, str] = "INFO",
    enable_sql_echo: bool = False,
    log_to_file: bool = True,
    use_json_format: bool = False,
) -> None:
    """
    Configure the root logger for the application.

    Args:
        app: Flask application; when given, every request is logged with its duration
        log_level: Level as an int (logging.INFO) or a name ("INFO")
        enable_sql_echo: Log every SQL statement issued by SQLAlchemy
        log_to_file: Also write JSON logs to rotating files under logs/
        use_json_format: JSON console output instead of coloured text
    """
    level = _resolve_level(log_level)

    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(
        JSONFormatter()
        if use_json_format
        else ConsoleFormatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(console)

    if log_to_file:
        for problem in _attach_file_handlers(root, level):
            root.warning(problem, extra={"context": {"component": "logging_setup"}})

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if enable_sql_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    if app is not None:
        _register_request_hooks(app)

    logging.getLogger("odonto").setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for `name` (usually the module's __name__)."""
    return logging.getLogger(name)


def log_performance(operation: str, duration_ms: float, **context) -> None:
    """Log how long `operation` took, with any extra context given."""
    details = {"operation": operation, "duration_ms": round(duration_ms, 2)}
    details.update(context)
    get_logger("odonto.performance").info(
        f"{operation} completed in {duration_ms:.2f}ms",
        extra={"context": details},
    )


@contextmanager
def timed(operation: str, **context) -> Iterator[None]:
    """Time the enclosed block and report it through log_performance()."""
    started = time.perf_counter()
    try:
        yield
    finally:
        log_performance(operation, (time.perf_counter() - started) * 1000, **context)

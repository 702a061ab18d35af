"""
Logging configuration for the expense tracker backend.

Uses structlog on top of the standard logging module:
- Console output (always)
- Optional file output with weekly rotation and gzip compression
- JSON rendering with ISO timestamps, logger name and level
- Per-request context (request_id, method, path) bound by the HTTP middleware
- Credential fields (passwords, tokens, Authorization) masked before rendering

Log rotation: weekly, 52 weeks retention.
"""
import gzip
import logging
import logging.handlers
import shutil
import sys
import uuid
from pathlib import Path
from typing import Any

import structlog
from structlog.types import EventDict

LOG_FILE_NAME = "expense_tracker.log"

SENSITIVE_KEYS = frozenset({"password", "new_password", "password_hash", "token", "authorization"})
REDACTED = "***"


def get_log_directory() -> Path:
    """Get or create the log directory."""
    log_dir = Path(__file__).parent.parent.parent / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def add_log_level(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add upper-cased log level to the event dict."""
    if method_name == "warn":
        method_name = "warning"
    event_dict["level"] = method_name.upper()
    return event_dict


def redact_secrets(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask credential values passed as log fields."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def bind_request_context(method: str, path: str) -> str:
    """
    Start a fresh log context for an HTTP request.

    Every log line emitted while the request is handled carries request_id,
    method and path.

    Returns:
        The generated request id (also sent back as X-Request-ID)
    """
    request_id = uuid.uuid4().hex[:12]
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, method=method, path=path)
    return request_id


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def _get_rotated_filename(default_name: str) -> str:
    """Rotated files get a .gz suffix (expense_tracker.log.2025-11-28.gz)."""
    return default_name + ".gz"


def _compress_rotated_file(source: str, dest: str) -> None:
    """
    Compress a rotated log file with gzip and remove the original.

    Args:
        source: Rotated log file path
        dest: Destination path (with .gz extension)
    """
    with open(source, 'rb') as f_in:
        with gzip.open(dest, 'wb') as f_out:
            shutil.copyfileobj(f_in, f_out)

    Path(source).unlink()


def _build_file_handler(level: int) -> logging.Handler:
    log_file = get_log_directory() / LOG_FILE_NAME

    # W0 = rotate every Monday at midnight (UTC), keep one year of history
    file_handler = logging.handlers.TimedRotatingFileHandler(
        filename=str(log_file),
        when="W0",
        interval=1,
        backupCount=52,
        encoding="utf-8",
        utc=True,
        )
    file_handler.setLevel(level)
    file_handler.rotator = _compress_rotated_file
    file_handler.namer = _get_rotated_filename
    return file_handler


def configure_logging(log_level: str = "INFO", enable_file_logging: bool = True) -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_file_logging: Whether to also write to the rotating log file
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    handlers: list[logging.Handler] = [console_handler]

    if enable_file_logging:
        handlers.append(_build_file_handler(numeric_level))

    logging.basicConfig(
        format="%(message)s",
        handlers=handlers,
        level=numeric_level,
        force=True,
        )

    # SQLAlchemy echoes through its own loggers; keep them quiet unless debugging
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if numeric_level <= logging.DEBUG else logging.WARNING
        )

    processors = [
        structlog.contextvars.merge_contextvars,
        redact_secrets,
        structlog.stdlib.add_logger_name,
        add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
        )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Usage:
        logger = get_logger(__name__)
        logger.info("message", key="value")
    """
    return structlog.get_logger(name)

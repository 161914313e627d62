"""
Structured logging for the distribution job, publish attempts and audit events.

Every module logs through ``get_logger(__name__)``; keyword arguments become
structured context (``key=value`` on the console, merged fields in the JSON
file). ``bind()`` returns a child logger that repeats fixed context, e.g. the
campaign id for every line written while one campaign is processed.
"""
import logging
import logging.config
import json
import sys
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from pathlib import Path

LOGGER_NAMESPACE = "promojour"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def _context_of(record: logging.LogRecord) -> Dict[str, Any]:
    return getattr(record, "extra_data", None) or {}


class JSONFormatter(logging.Formatter):
    """One JSON object per line; structured context is merged at top level."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
            "thread": record.threadName,
        }
        entry.update(_context_of(record))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class ContextFormatter(logging.Formatter):
    """Console formatter appending ``key=value`` context after the message."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _context_of(record)
        if context:
            line += " | " + " ".join(f"{k}={v}" for k, v in context.items())
        return line


class StructuredLogger:
    """
    Standard logger accepting keyword context:
    ``logger.info("Campaign selection", campaign_id=cid, selected=ids)``.
    ``None`` values are dropped so optional identifiers can be passed as-is.
    """

    def __init__(self, name: str, context: Optional[Dict[str, Any]] = None):
        self.logger = logging.getLogger(name)
        self.context: Dict[str, Any] = dict(context or {})

    def bind(self, **context: Any) -> "StructuredLogger":
        return StructuredLogger(self.logger.name, {**self.context, **context})

    def log(self, level: int, message: str, *, exc_info: bool = False, **kwargs: Any) -> None:
        if not self.logger.isEnabledFor(level):
            return
        merged = {k: v for k, v in {**self.context, **kwargs}.items() if v is not None}
        self.logger.log(level, message, exc_info=exc_info, extra={"extra_data": merged})

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log(logging.ERROR, message, **kwargs)


def _handler_configs(log_level: str, log_file: Optional[str], enable_console: bool) -> Dict[str, Dict[str, Any]]:
    handlers: Dict[str, Dict[str, Any]] = {}
    if enable_console:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "stream": sys.stdout,
            "formatter": "console",
            "level": log_level,
        }
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_file,
            "maxBytes": MAX_LOG_BYTES,
            "backupCount": LOG_BACKUPS,
            "formatter": "json",
            "level": log_level,
        }
    return handlers


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    enable_console: bool = True
) -> None:
    """
    Configure the ``promojour`` logger tree, uvicorn and SQLAlchemy.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_file: Optional path of the rotating JSON log
        enable_console: Whether to log to stdout
    """
    handlers = _handler_configs(log_level, log_file, enable_console)
    names = list(handlers)
    # Per-logger levels; every logger writes to the same handlers
    levels = {LOGGER_NAMESPACE: log_level, "uvicorn": "INFO", "sqlalchemy.engine": "WARNING"}

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": JSONFormatter},
            "console": {
                "()": ContextFormatter,
                "format": "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": handlers,
        "loggers": {
            name: {"level": level, "handlers": names, "propagate": False}
            for name, level in levels.items()
        },
        "root": {"level": log_level, "handlers": names},
    })


def get_logger(name: str) -> StructuredLogger:
    """Structured logger under the ``promojour`` namespace (typically ``__name__``)."""
    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return StructuredLogger(name)
    return StructuredLogger(f"{LOGGER_NAMESPACE}.{name}")


def log_business_event(
    event_type: str,
    details: Dict[str, Any],
    request_id: Optional[str] = None
) -> None:
    """
    Audit trail entry, e.g. ``distribution_completed`` or ``promotion_published``.
    """
    get_logger("audit").info(
        f"Business event: {event_type}",
        event_type=event_type,
        request_id=request_id,
        **details
    )


def log_performance(
    operation: str,
    duration_ms: float,
    additional_data: Optional[Dict[str, Any]] = None
) -> None:
    """Duration of an operation in milliseconds, plus optional counters."""
    get_logger("performance").info(
        f"Performance: {operation}",
        operation=operation,
        duration_ms=round(duration_ms, 2),
        **(additional_data or {})
    )

"""
DocSeal Structured Logging Configuration.

Provides consistent logging across DocSeal components with:
- Structured JSON output for production
- Human-readable output for development
- Request ID correlation
- Sensitive data filtering

Usage:
    from docseal.logging import get_logger, configure_logging

    # At application startup
    configure_logging(level="INFO", json_format=True)

    # In modules
    logger = get_logger(__name__)
    logger.debug("Encrypted document", extra={"leaf_count": 12})
"""

import contextvars
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

ROOT_LOGGER_NAME = "docseal"

# Field names whose values never reach a log line
SENSITIVE_PATTERNS = frozenset(
    {
        "password",
        "secret",
        "token",
        "key",
        "plaintext",
        "cleartext",
        "credential",
        "auth",
    }
)

_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "message",
        "taskName",
    }
)


# Per thread and per task; each LogContext block sets and restores it
_log_context: contextvars.ContextVar[Optional[Dict[str, Any]]] = contextvars.ContextVar("docseal_log_context", default=None)


def _is_sensitive_key(key: str) -> bool:
    """Check if a key name suggests sensitive data."""
    key_lower = key.lower()
    return any(pattern in key_lower for pattern in SENSITIVE_PATTERNS)


def _filter_sensitive(data: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively filter sensitive values from a dictionary."""
    if not isinstance(data, dict):
        return data

    filtered = {}
    for key, value in data.items():
        if _is_sensitive_key(key):
            filtered[key] = "[REDACTED]"
        elif isinstance(value, dict):
            filtered[key] = _filter_sensitive(value)
        elif isinstance(value, list):
            filtered[key] = [_filter_sensitive(item) if isinstance(item, dict) else item for item in value]
        else:
            filtered[key] = value
    return filtered


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.pathname:
            log_data["location"] = {
                "file": record.pathname.split("/")[-1],
                "line": record.lineno,
                "function": record.funcName,
            }

        extra_fields = dict(LogContext.get_current())
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS:
                continue
            extra_fields[key] = value

        if extra_fields:
            log_data["extra"] = _filter_sensitive(extra_fields)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Human-readable formatter for development."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "") if self.use_color else ""
        reset = self.RESET if color else ""

        timestamp = datetime.now(timezone.utc).strftime("%H:%M:%S.%f")[:-3]
        level = f"{color}{record.levelname:8}{reset}"
        name = record.name.split(".")[-1][:15].ljust(15)
        message = record.getMessage()

        request_id = getattr(record, "request_id", None) or LogContext.get_current().get("request_id")
        if request_id:
            message = f"[{request_id[:8]}] {message}"

        formatted = f"{timestamp} {level} {name} {message}"

        if record.exc_info:
            formatted += "\n" + self.formatException(record.exc_info)

        return formatted


def configure_logging(
    level: Optional[str] = None,
    json_format: Optional[bool] = None,
    stream: Any = None,
) -> None:
    """
    Configure logging for DocSeal components.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Default: DS_LOG_LEVEL
        json_format: Use JSON output. Default: True when DS_ENVIRONMENT is production
        stream: Output stream. Default: sys.stderr
    """
    if level is None or json_format is None:
        from .utils.config import get_settings

        settings = get_settings()
        if level is None:
            level = settings.LOG_LEVEL
        if json_format is None:
            json_format = settings.is_production()

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    if json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(DevelopmentFormatter(use_color=stream is None))

    root_logger.addHandler(handler)
    root_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a DocSeal module.

    Usage:
        logger = get_logger(__name__)
        logger.info("Message", extra={"request_id": "123"})
    """
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


class LogContext:
    """
    Context manager for adding correlation IDs to logs.

    Usage:
        with LogContext(request_id="abc123"):
            logger.info("Processing")  # Automatically includes request_id
    """

    def __init__(self, **kwargs: Any):
        self.context = kwargs
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> "LogContext":
        self._token = _log_context.set(self.context)
        return self

    def __exit__(self, *args: Any) -> None:
        _log_context.reset(self._token)

    @classmethod
    def get_current(cls) -> Dict[str, Any]:
        """Get the current logging context."""
        return dict(_log_context.get() or {})


__all__ = [
    "configure_logging",
    "get_logger",
    "LogContext",
    "StructuredFormatter",
    "DevelopmentFormatter",
]

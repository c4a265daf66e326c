"""Structured logging and audit events for the credential cache."""

import inspect
import logging
import os
import sys
import threading
import uuid
from contextlib import suppress
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.types import EventDict

LOG_FILE_NAME = "credential-cache.log"
SENSITIVE_KEYS = {"password", "token", "id_token", "secret", "credential", "api_key"}

# Global instances
_LOGGER_INSTANCE: structlog.stdlib.BoundLogger | None = None
_logger_lock = threading.Lock()


def get_log_dir(base_dir: str | Path | None = None) -> Path:
    """Get normalized log directory path.

    Args:
        base_dir: Base directory for logs. If None, uses ~/.local/log

    Returns:
        Resolved Path object for log directory
    """
    if base_dir is None:
        base_dir = Path.home() / ".local" / "log"
    return Path(base_dir).resolve()


def create_secure_handler(
    log_path: Path, max_bytes: int, backup_count: int
) -> RotatingFileHandler:
    """Create a RotatingFileHandler readable only by owner and group.

    Args:
        log_path: Path to the log file
        max_bytes: Maximum size of each log file
        backup_count: Number of backup files to keep

    Returns:
        Configured RotatingFileHandler instance
    """
    os.makedirs(log_path.parent, mode=0o750, exist_ok=True)

    # Ensure file exists since some platforms need it for permissions
    if not log_path.exists():
        log_path.touch(mode=0o640)
    os.chmod(log_path, 0o640)

    handler = RotatingFileHandler(
        str(log_path), maxBytes=max_bytes, backupCount=backup_count
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def add_timestamp(
    _: structlog.BoundLogger, __: str, event_dict: EventDict
) -> EventDict:
    """Add ISO 8601 timestamp."""
    event_dict["timestamp"] = datetime.now(UTC).isoformat()
    return event_dict


def add_thread_info(
    _: structlog.BoundLogger, __: str, event_dict: EventDict
) -> EventDict:
    """Add thread information.

    Credential operations run on connection threads, so the thread is
    needed to correlate lines from concurrent logins.
    """
    thread = threading.current_thread()
    event_dict["thread"] = {"id": thread.ident, "name": thread.name}
    return event_dict


def add_caller(
    _: structlog.BoundLogger, __: str, event_dict: EventDict
) -> EventDict:
    """Add the first caller frame outside of logging code.

    Stack inspection is limited to 10 frames.
    """
    logging_paths = ("structlog", "logging", "logger.py")
    frames = inspect.stack(context=0)[:10]
    try:
        for frame in frames[1:]:
            if any(p in frame.filename for p in logging_paths):
                continue
            event_dict["caller"] = {
                "file": os.path.basename(frame.filename),
                "line": frame.lineno,
                "function": frame.function,
            }
            break
    finally:
        # Drop frame references to avoid reference cycles
        del frames
    return event_dict


def sanitize_keys(
    event_dict: dict[str, Any], sensitive_keys: set[str]
) -> dict[str, Any]:
    """Redact sensitive keys, case-insensitively and through nested structures.

    Args:
        event_dict: Dictionary to sanitize
        sensitive_keys: Set of keys to redact

    Returns:
        Sanitized copy of the dictionary
    """
    lowered = {k.lower() for k in sensitive_keys}

    def _sanitize_value(key: str, value: Any) -> Any:
        if key.lower() in lowered:
            return "***"
        if isinstance(value, dict):
            return sanitize_keys(value, sensitive_keys)
        if isinstance(value, list):
            return [_sanitize_value("", item) for item in value]
        return value

    return {k: _sanitize_value(str(k), v) for k, v in event_dict.items()}


def sanitize_event_dict(
    _: structlog.BoundLogger, __: str, event_dict: EventDict
) -> EventDict:
    """Mask token-like values anywhere in a log record."""
    return sanitize_keys(dict(event_dict), SENSITIVE_KEYS)


def configure_logger(
    log_level: str = "INFO",
    correlation_id: str | None = None,
    max_log_size: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
    base_dir: str | Path | None = None,
) -> structlog.stdlib.BoundLogger:
    """Configure structlog and the stdlib handlers, and return a bound logger.

    For normal usage, prefer setup_logging() which also records the global
    instance.

    Args:
        log_level: Log level (default: INFO)
        correlation_id: Optional correlation ID for request tracing
        max_log_size: Maximum size of a log file before rotation
        backup_count: Number of backup files to keep
        base_dir: Optional base directory for log files

    Returns:
        A configured structlog BoundLogger
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            add_timestamp,
            add_thread_info,
            add_caller,
            sanitize_event_dict,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    log_file = get_log_dir(base_dir) / LOG_FILE_NAME
    file_handler = create_secure_handler(log_file, max_log_size, backup_count)

    # Warnings and above also go to stderr
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    return structlog.get_logger("credential_cache").bind(
        correlation_id=correlation_id or str(uuid.uuid4())
    )


def setup_logging(
    *,
    log_level: str = "INFO",
    correlation_id: str | None = None,
    max_log_size: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
    base_dir: str | Path | None = None,
) -> structlog.stdlib.BoundLogger:
    """Setup structured logging and store the global logger instance.

    Args:
        log_level: Log level (default: INFO)
        correlation_id: Optional correlation ID for request tracing
        max_log_size: Maximum size of a log file before rotation
        backup_count: Number of backup files to keep
        base_dir: Optional base directory for log files

    Returns:
        The configured logger instance.
    """
    global _LOGGER_INSTANCE

    reset_logger()
    new_logger = configure_logger(
        log_level=log_level,
        correlation_id=correlation_id,
        max_log_size=max_log_size,
        backup_count=backup_count,
        base_dir=base_dir,
    )
    with _logger_lock:
        _LOGGER_INSTANCE = new_logger
    return new_logger


def get_logger() -> structlog.stdlib.BoundLogger:
    """Get configured logger instance.

    Returns the cached logger so context like correlation_id is preserved
    across calls. If no logger has been configured yet, configures one with
    default settings.
    """
    global _LOGGER_INSTANCE

    # Quick check first without lock
    instance = _LOGGER_INSTANCE
    if instance is not None:
        return instance

    with _logger_lock:
        if _LOGGER_INSTANCE is None:
            _LOGGER_INSTANCE = configure_logger()
        return _LOGGER_INSTANCE


def reset_logger() -> None:
    """Close root handlers, reset structlog and clear the global instance.

    Idempotent; errors while closing handlers do not stop the reset.
    """
    global _LOGGER_INSTANCE
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        with suppress(OSError, ValueError):
            handler.close()
        root_logger.removeHandler(handler)

    structlog.reset_defaults()

    with _logger_lock:
        _LOGGER_INSTANCE = None


def audit_event(
    *,
    event_type: str,
    user: str,
    success: bool,
    details: dict[str, Any] | None = None,
    error: Exception | None = None,
) -> None:
    """Log an audit event.

    Args:
        event_type: Type of event (e.g., "credential.read")
        user: User the operation acted for
        success: Whether the operation succeeded
        details: Optional event details; sensitive keys are redacted
        error: Optional exception if operation failed
    """
    event: dict[str, Any] = {
        "event_type": str(getattr(event_type, "value", event_type)),
        "user": user,
        "success": success,
    }
    if details:
        event["details"] = sanitize_keys(details, SENSITIVE_KEYS)
    if error:
        event["error"] = {"type": type(error).__name__, "message": str(error)}

    logger = get_logger().bind(**event)
    if success:
        logger.info("audit_event")
    else:
        logger.error("audit_event")

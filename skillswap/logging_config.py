"""
SkillSwap admin client - Logging Configuration
Plain text for terminals, JSON lines when json_logs is enabled
"""

import logging
import sys
import json
import traceback
from datetime import datetime, timezone
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional
from contextvars import ContextVar

from skillswap.config import ClientConfig


# Endpoint currently being fetched/mutated, attached to every record
endpoint_var: ContextVar[str] = ContextVar('endpoint', default='')


def get_endpoint() -> str:
    """Get current endpoint from context"""
    return endpoint_var.get() or ''


def set_endpoint(endpoint: str) -> None:
    """Set current endpoint in context"""
    endpoint_var.set(endpoint)


_STANDARD_ATTRS = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'stack_info', 'exc_info', 'exc_text', 'thread', 'threadName',
    'message', 'taskName', 'endpoint',
}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for piping into log tooling"""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        endpoint = get_endpoint()
        if endpoint:
            log_data["endpoint"] = endpoint

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info) if record.exc_info[0] else None
            }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith('_'):
                log_data[key] = value

        return json.dumps(log_data, default=str)


class ContextualFormatter(logging.Formatter):
    """Readable formatter that includes the current endpoint"""

    def format(self, record: logging.LogRecord) -> str:
        record.endpoint = get_endpoint() or '-'
        return super().format(record)


class SkillSwapLogger(logging.Logger):
    """
    Logger with convenience methods for structured logging
    """

    def log_request(self, method: str, path: str, status_code: int,
                    duration_ms: float, **kwargs) -> None:
        """Log HTTP request details"""
        level = logging.DEBUG if 200 <= status_code < 300 else logging.WARNING
        self.log(
            level,
            f"HTTP {method} {path} - {status_code} ({duration_ms:.2f}ms)",
            extra={
                "event_type": "http_request",
                "http_method": method,
                "http_path": path,
                "http_status": status_code,
                "duration_ms": duration_ms,
                **kwargs
            }
        )

    def log_error_with_context(self, error: Exception, context: Optional[str] = None,
                               **kwargs) -> None:
        """Log error with its context, without a traceback for expected client errors"""
        self.error(
            f"Error in {context}: {type(error).__name__}: {str(error)}",
            extra={
                "event_type": "error",
                "error_type": type(error).__name__,
                "error_message": str(error),
                "error_context": context,
                **kwargs
            }
        )


def _base_logger() -> SkillSwapLogger:
    base = logging.getLogger("skillswap")
    base.__class__ = SkillSwapLogger  # ensure our class even if created earlier
    if not base.handlers:
        base.addHandler(logging.NullHandler())
    return base  # type: ignore[return-value]


def setup_logging(config: Optional[ClientConfig] = None) -> SkillSwapLogger:
    """Attach handlers to the skillswap logger according to config"""
    config = config or ClientConfig()

    base = _base_logger()
    base.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))
    base.handlers.clear()

    if config.json_logs:
        console_formatter: logging.Formatter = JSONFormatter()
        file_formatter: logging.Formatter = console_formatter
    else:
        detailed_format = (
            "%(asctime)s | %(levelname)-8s | [%(endpoint)s] | "
            "%(funcName)s:%(lineno)d | %(message)s"
        )
        simple_format = "%(levelname)-8s | %(message)s"
        console_formatter = ContextualFormatter(simple_format)
        file_formatter = ContextualFormatter(detailed_format)

    # stderr keeps stdout clean for --output-format json
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if config.verbose else logging.WARNING)
    console_handler.setFormatter(console_formatter)
    base.addHandler(console_handler)

    if config.log_file:
        log_file = Path(config.log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=5242880,  # 5MB
            backupCount=3
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_formatter)
        base.addHandler(file_handler)

    # Suppress noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    base.debug(
        "Logging initialized",
        extra={"log_level": config.log_level, "json_logging": config.json_logs}
    )

    return base


logger: SkillSwapLogger = _base_logger()


__all__ = [
    'logger',
    'setup_logging',
    'get_endpoint',
    'set_endpoint',
    'JSONFormatter',
    'ContextualFormatter',
    'SkillSwapLogger',
]

"""
Structured logging configuration for the studio backend.

Console output is colourised for development or JSON when `JSON_LOGS=true`;
the optional log file is always JSON. Every record carries the request and
job correlation IDs of the code that emitted it.

Two kinds of value never reach a log line: anything stored under a
credential-looking key (the API key in particular) and raw media bytes
(narration PCM, images, video), which are replaced by their size.
"""

import json
import logging
import os
import sys
import time
from contextvars import ContextVar
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

SENSITIVE_KEY_TOKENS = ("api_key", "apikey", "key=", "secret", "token", "password", "authorization", "credential")

REDACTED = "***REDACTED***"

# Loggers that are chatty at INFO while a pipeline runs
QUIET_LOGGERS = ("urllib3", "httpx", "httpcore", "asyncio", "websockets", "google_genai")

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
job_id_var: ContextVar[Optional[str]] = ContextVar("job_id", default=None)

_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def correlation_context() -> Dict[str, str]:
    """Correlation IDs set for the current task, omitting unset ones."""
    context = {}
    request_id = request_id_var.get()
    if request_id:
        context["request_id"] = request_id
    job_id = job_id_var.get()
    if job_id:
        context["job_id"] = job_id
    return context


def _is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return any(token in lowered for token in SENSITIVE_KEY_TOKENS)


def sanitize_for_logging(value: Any, key: str = "") -> Any:
    """Redact credential fields and collapse raw bytes, recursively."""
    if key and _is_sensitive_key(key):
        return REDACTED
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"<{len(value)} bytes>"
    if isinstance(value, dict):
        return {k: sanitize_for_logging(v, str(k)) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(sanitize_for_logging(item) for item in value)
    return value


def _record_extra(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RESERVED_ATTRS and key not in ("request_id", "job_id") and not key.startswith("_")
    }


class StructuredFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
            **correlation_context(),
        }

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": self.formatException(record.exc_info),
            }

        extra = _record_extra(record)
        if extra:
            entry["extra"] = sanitize_for_logging(extra)

        return json.dumps(entry, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Colourised single-line output with shortened correlation IDs."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]

        context = correlation_context()
        tags = [f"{name.split('_')[0][:3]}:{value[:8]}" for name, value in context.items()]
        tag_text = f" [{', '.join(tags)}]" if tags else ""

        line = f"{color}{clock} {record.levelname:<8}{self.RESET} {record.name}{tag_text} {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class LoggerAdapter(logging.LoggerAdapter):
    """Merges bound fields and correlation IDs into each call's `extra`.

    Call-site `extra` wins over bound fields.
    """

    def process(self, msg: str, kwargs: Any) -> tuple:
        merged = {**(self.extra or {}), **correlation_context(), **(kwargs.get("extra") or {})}
        kwargs["extra"] = merged
        return msg, kwargs


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    use_json: bool = False,
) -> None:
    """
    Configure the root logger; safe to call again (handlers are replaced).

    Args:
        level: Logging level name
        log_file: Optional rotating JSON log file
        use_json: JSON instead of colourised console output
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    root = logging.getLogger()
    root.setLevel(numeric_level)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(StructuredFormatter() if use_json else DevelopmentFormatter())
    root.addHandler(console)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=int(os.getenv("LOG_MAX_BYTES", str(20 * 1024 * 1024))),
            backupCount=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            encoding="utf-8",
        )
        file_handler.setFormatter(StructuredFormatter())
        root.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def get_logger(name: str, **extra: Any) -> LoggerAdapter:
    """
    Logger with fields bound to every record.

    Example:
        logger = get_logger(__name__, component="video_stage")
        logger.info("Polling video job", extra={"attempt": 3})
    """
    return LoggerAdapter(logging.getLogger(name), extra)


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def set_job_id(job_id: Optional[str]) -> None:
    job_id_var.set(job_id)


def clear_context() -> None:
    request_id_var.set(None)
    job_id_var.set(None)


class LogTimer:
    """Logs the start, end and duration of a pipeline stage."""

    def __init__(self, logger: logging.LoggerAdapter, operation: str, level: int = logging.INFO):
        self.logger = logger
        self.operation = operation
        self.level = level
        self.duration: Optional[float] = None
        self._started: Optional[float] = None

    def __enter__(self) -> "LogTimer":
        self._started = time.perf_counter()
        self.logger.log(self.level, f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb) -> None:
        self.duration = round(time.perf_counter() - self._started, 3)
        if exc_type is None:
            self.logger.log(self.level, f"Completed: {self.operation}", extra={"duration_seconds": self.duration})
        else:
            self.logger.error(
                f"Failed: {self.operation}",
                extra={"duration_seconds": self.duration, "error": str(exc_val)},
            )

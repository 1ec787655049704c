"""
Logging Configuration for Movie Discovery

Structured logging with JSON output for deployed proxies, readable
console output for development, and per-request tracing.
"""

import inspect
import json
import logging
import sys
import time
import traceback
from contextvars import ContextVar
from datetime import datetime, timezone
from functools import wraps
from typing import Optional

import structlog


# Context variables for request tracing
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
route_var: ContextVar[Optional[str]] = ContextVar("route", default=None)


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        request_id = request_id_var.get()
        if request_id:
            log_data["request_id"] = request_id

        route = route_var.get()
        if route:
            log_data["route"] = route

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info)
            }

        if hasattr(record, "duration_ms"):
            log_data["duration_ms"] = record.duration_ms

        return json.dumps(log_data)


class PrettyFormatter(logging.Formatter):
    """Pretty formatter for development."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        msg = f"{color}{timestamp} | {record.levelname:8} | {record.name} | {record.getMessage()}{self.RESET}"

        request_id = request_id_var.get()
        if request_id:
            msg = f"[{request_id[:8]}] {msg}"

        if record.exc_info:
            msg += "\n" + "".join(traceback.format_exception(*record.exc_info))

        return msg


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None
):
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Use JSON format for logs
        log_file: Optional file path for log output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Clear existing handlers
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    if json_output:
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler.setFormatter(PrettyFormatter())
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(JSONFormatter())  # Always JSON for files
        root_logger.addHandler(file_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.render_to_log_kwargs,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.info(f"Logging configured: level={level}, json={json_output}")


def log_execution_time(logger: Optional[logging.Logger] = None):
    """Decorator to log execution time of a coroutine function."""
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            _logger = logger or logging.getLogger(func.__module__)

            start_time = time.time()
            try:
                result = await func(*args, **kwargs)
                elapsed = time.time() - start_time
                _logger.debug(
                    f"{func.__name__} completed",
                    extra={"duration_ms": elapsed * 1000}
                )
                return result
            except Exception as e:
                elapsed = time.time() - start_time
                _logger.error(
                    f"{func.__name__} failed: {e}",
                    extra={"duration_ms": elapsed * 1000}
                )
                raise

        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"log_execution_time expects a coroutine function, got {func!r}")
        return wrapper
    return decorator


class RequestLogger:
    """Context manager for request logging."""

    def __init__(
        self,
        request_id: str,
        route: Optional[str] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.request_id = request_id
        self.route = route
        self.logger = logger or logging.getLogger(__name__)
        self.start_time = None
        self._request_id_token = None
        self._route_token = None

    def __enter__(self):
        self._request_id_token = request_id_var.set(self.request_id)
        if self.route:
            self._route_token = route_var.set(self.route)

        self.start_time = time.time()
        self.logger.debug("Request started")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = time.time() - self.start_time

        if exc_type:
            self.logger.error(
                f"Request failed: {exc_val}",
                extra={"duration_ms": elapsed * 1000}
            )
        else:
            self.logger.info(
                "Request completed",
                extra={"duration_ms": elapsed * 1000}
            )

        request_id_var.reset(self._request_id_token)
        if self._route_token:
            route_var.reset(self._route_token)

        return False  # Don't suppress exceptions

    @property
    def elapsed(self) -> float:
        return time.time() - self.start_time if self.start_time else 0.0

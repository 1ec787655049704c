"""Utilities module for Movie Discovery."""

from .cache import (
    CacheConfig,
    CacheEntry,
    QueryCache,
    QueryState,
    QueryStatus,
    StalePolicy
)

from .logging_config import (
    setup_logging,
    log_execution_time,
    RequestLogger,
    JSONFormatter,
    PrettyFormatter
)

__all__ = [
    # Cache
    "CacheConfig",
    "CacheEntry",
    "QueryCache",
    "QueryState",
    "QueryStatus",
    "StalePolicy",
    # Logging
    "setup_logging",
    "log_execution_time",
    "RequestLogger",
    "JSONFormatter",
    "PrettyFormatter"
]

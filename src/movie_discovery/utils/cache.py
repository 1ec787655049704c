"""
Query Cache for the Client Data Layer

In-memory keyed store with a freshness window and in-flight request
deduplication. Entries are replaced whole; concurrent reads of the same
key share a single fetch.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Hashable, List, Optional

from ..config import STALE_TIME_SECONDS

logger = logging.getLogger(__name__)


class StalePolicy(str, Enum):
    """What a read does with an entry older than the freshness window."""
    BLOCKING = "blocking"
    STALE_WHILE_REVALIDATE = "stale_while_revalidate"


class QueryStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"
    SUCCESS = "success"


@dataclass
class CacheConfig:
    """Cache configuration."""
    stale_time: float = STALE_TIME_SECONDS
    max_size: Optional[int] = None  # None keeps every entry
    stale_policy: StalePolicy = StalePolicy.BLOCKING


@dataclass(frozen=True)
class CacheEntry:
    data: Any
    fetched_at: float


@dataclass(frozen=True)
class QueryState:
    """Snapshot of one cache key as seen by presentation code."""
    status: QueryStatus
    data: Any = None
    error: Optional[BaseException] = None
    fetched_at: Optional[float] = None
    is_fetching: bool = False
    is_stale: bool = False

    @property
    def is_loading(self) -> bool:
        return self.status is QueryStatus.LOADING

    @property
    def is_error(self) -> bool:
        return self.status is QueryStatus.ERROR

    @property
    def is_success(self) -> bool:
        return self.status is QueryStatus.SUCCESS


IDLE_STATE = QueryState(status=QueryStatus.IDLE)


class QueryCache:
    """
    Process-wide query cache.

    Must be used from a single event loop. Correctness rests on key
    isolation: each key has at most one entry and at most one fetch in
    flight.
    """

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.config = config or CacheConfig()
        self.clock = clock
        self._entries: Dict[Hashable, CacheEntry] = {}
        self._access_order: List[Hashable] = []
        self._in_flight: Dict[Hashable, asyncio.Task] = {}
        self._errors: Dict[Hashable, BaseException] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    async def fetch(self, key: Hashable, fn: Callable[[], Awaitable[Any]]) -> Any:
        """
        Return data for ``key``, calling ``fn`` only when needed.

        A fresh entry is returned as is. A fetch already in flight for the
        same key is awaited instead of starting another. Failures propagate
        to every waiter and leave any previous entry untouched.
        """
        entry = self.get_entry(key)

        if entry is not None and self._is_fresh(entry):
            logger.debug(f"Cache hit: {key}")
            return entry.data

        if entry is not None and self.config.stale_policy is StalePolicy.STALE_WHILE_REVALIDATE:
            logger.debug(f"Serving stale entry while revalidating: {key}")
            self._start(key, fn)
            return entry.data

        task = self._start(key, fn)
        return await asyncio.shield(task)

    def get_entry(self, key: Hashable) -> Optional[CacheEntry]:
        """Get the stored entry for ``key``, fresh or not."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        # Update access order
        if key in self._access_order:
            self._access_order.remove(key)
        self._access_order.append(key)

        return entry

    def is_fresh(self, key: Hashable) -> bool:
        entry = self._entries.get(key)
        return entry is not None and self._is_fresh(entry)

    def state(self, key: Hashable) -> QueryState:
        """Synchronous snapshot of ``key`` without touching access order."""
        entry = self._entries.get(key)
        task = self._in_flight.get(key)
        fetching = task is not None and not task.done()
        error = self._errors.get(key)

        if entry is None and fetching:
            return QueryState(status=QueryStatus.LOADING, is_fetching=True)

        if error is not None and not fetching:
            return QueryState(
                status=QueryStatus.ERROR,
                data=entry.data if entry else None,
                error=error,
                fetched_at=entry.fetched_at if entry else None,
                is_stale=entry is not None and not self._is_fresh(entry)
            )

        if entry is not None:
            return QueryState(
                status=QueryStatus.SUCCESS,
                data=entry.data,
                fetched_at=entry.fetched_at,
                is_fetching=fetching,
                is_stale=not self._is_fresh(entry)
            )

        return IDLE_STATE

    def invalidate(self, key: Hashable):
        """Drop the entry for ``key``; a fetch in flight is left to finish."""
        self._entries.pop(key, None)
        self._errors.pop(key, None)
        if key in self._access_order:
            self._access_order.remove(key)

    def clear(self):
        """Clear all entries."""
        self._entries.clear()
        self._errors.clear()
        self._access_order.clear()

    def _is_fresh(self, entry: CacheEntry) -> bool:
        return self.clock() - entry.fetched_at < self.config.stale_time

    def _start(self, key: Hashable, fn: Callable[[], Awaitable[Any]]) -> asyncio.Task:
        task = self._in_flight.get(key)
        if task is not None and not task.done():
            logger.debug(f"Joining in-flight fetch: {key}")
            return task

        logger.debug(f"Cache miss, fetching: {key}")
        task = asyncio.ensure_future(self._run(key, fn))
        self._in_flight[key] = task
        task.add_done_callback(lambda t: self._finish(key, t))
        return task

    async def _run(self, key: Hashable, fn: Callable[[], Awaitable[Any]]) -> Any:
        try:
            data = await fn()
        except Exception as e:
            self._errors[key] = e
            raise
        self._store(key, data)
        self._errors.pop(key, None)
        return data

    def _finish(self, key: Hashable, task: asyncio.Task):
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        # Retrieve the exception so background refetches do not warn
        if not task.cancelled() and task.exception() is not None:
            logger.debug(f"Fetch failed for {key}: {task.exception()}")

    def _store(self, key: Hashable, data: Any):
        max_size = self.config.max_size
        if max_size is not None and key not in self._entries:
            # Evict if at capacity
            while len(self._entries) >= max_size and self._access_order:
                oldest_key = self._access_order.pop(0)
                self._entries.pop(oldest_key, None)

        self._entries[key] = CacheEntry(data=data, fetched_at=self.clock())
        if key in self._access_order:
            self._access_order.remove(key)
        self._access_order.append(key)

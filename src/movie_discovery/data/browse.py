"""
Browse Session

Listing state behind the discovery page: category, debounced search,
pagination, and the rule that results for a superseded key are dropped.
"""

import logging
from typing import Callable, List, Optional, Tuple

from ..config import DEFAULT_CATEGORY, SEARCH_DEBOUNCE_SECONDS
from ..utils.cache import QueryState
from .debounce import Debouncer
from .models import Movie
from .queries import MovieQueries

logger = logging.getLogger(__name__)

BrowseKey = Tuple[str, str, int]


class BrowseSession:
    """
    One user's browsing state.

    ``type_search`` only touches the input; the active query follows it
    after ``debounce_seconds`` of inactivity, resetting to page 1.
    """

    def __init__(
        self,
        queries: MovieQueries,
        debounce_seconds: float = SEARCH_DEBOUNCE_SECONDS,
        on_query_change: Optional[Callable[[str], None]] = None
    ):
        self.queries = queries
        self.category = DEFAULT_CATEGORY
        self.search_input = ""
        self.query = ""
        self.page = 1
        self.total_pages: Optional[int] = None
        self.result: Optional[QueryState] = None
        self.on_query_change = on_query_change
        self._debouncer: Debouncer[str] = Debouncer(debounce_seconds, self._commit_search)

    @property
    def active_key(self) -> BrowseKey:
        return (self.category, self.query, self.page)

    @property
    def active_category(self) -> Optional[str]:
        """Highlighted category; none while a search is active."""
        return None if self.query else self.category

    @property
    def movies(self) -> List[Movie]:
        if self.result is None or self.result.data is None:
            return []
        return list(self.result.data.results)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.total_pages is not None and self.page < self.total_pages

    def type_search(self, text: str):
        self.search_input = text
        self._debouncer.push(text)

    def flush_search(self) -> bool:
        return self._debouncer.flush()

    def select_category(self, category: str):
        self._debouncer.cancel()
        self.category = category
        self.search_input = ""
        self._set_query("")
        self.page = 1

    def next_page(self) -> bool:
        if not self.has_next:
            return False
        self.page += 1
        return True

    def previous_page(self) -> bool:
        if not self.has_previous:
            return False
        self.page -= 1
        return True

    async def load(self) -> bool:
        """
        Fetch the listing for the active key.

        Returns False, leaving state untouched, when the key changed while
        the request was in flight.
        """
        key = self.active_key
        state = await self.queries.movies(*key)

        if key != self.active_key:
            logger.debug(f"Discarding result for superseded key {key}")
            return False

        self.result = state
        if state.data is not None:
            self.total_pages = state.data.total_pages
        return True

    def _commit_search(self, value: str):
        self._set_query(value)
        self.page = 1

    def _set_query(self, value: str):
        changed = value != self.query
        self.query = value
        self.total_pages = None
        if changed and self.on_query_change is not None:
            self.on_query_change(value)

"""
Cached Movie Queries

Listing and detail queries keyed by their exact parameter tuple, in
separate namespaces of a shared QueryCache.
"""

from typing import Hashable, Optional, Tuple

from ..config import DEFAULT_CATEGORY
from ..exceptions import FetchError
from ..utils.cache import IDLE_STATE, QueryCache, QueryState
from .client import ProxyClient
from .models import Movie
from .reconcile import DetailView, reconcile_detail


def movies_key(category: str, query: str, page: int) -> Tuple[Hashable, ...]:
    return ("movies", category, query, page)


def movie_key(movie_id: str) -> Tuple[Hashable, ...]:
    return ("movie", movie_id)


class MovieQueries:
    """
    Query functions bound to a cache handle and a proxy client.

    Both methods return a QueryState; a FetchError is recorded in the
    state rather than raised.
    """

    def __init__(self, cache: QueryCache, client: ProxyClient):
        self.cache = cache
        self.client = client

    async def movies(
        self,
        category: str = DEFAULT_CATEGORY,
        query: str = "",
        page: int = 1
    ) -> QueryState:
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")

        key = movies_key(category, query, page)
        try:
            await self.cache.fetch(key, lambda: self.client.fetch_movies(category, query, page))
        except FetchError:
            pass  # recorded by the cache, surfaced through state()
        return self.cache.state(key)

    async def movie(self, movie_id: Optional[str]) -> QueryState:
        """Fetch movie details; an empty or missing id makes no request."""
        if not movie_id:
            return IDLE_STATE

        key = movie_key(movie_id)
        try:
            await self.cache.fetch(key, lambda: self.client.fetch_movie(movie_id))
        except FetchError:
            pass
        return self.cache.state(key)

    async def movie_view(self, movie_id: Optional[str], fallback: Optional[Movie] = None) -> DetailView:
        """Fetch details and reconcile them with a list-form movie carried from navigation."""
        state = await self.movie(movie_id)
        return reconcile_detail(state, fallback)

    def movies_state(
        self,
        category: str = DEFAULT_CATEGORY,
        query: str = "",
        page: int = 1
    ) -> QueryState:
        return self.cache.state(movies_key(category, query, page))

    def movie_state(self, movie_id: Optional[str]) -> QueryState:
        if not movie_id:
            return IDLE_STATE
        return self.cache.state(movie_key(movie_id))

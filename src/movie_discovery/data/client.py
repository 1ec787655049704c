"""
Proxy Client

Async HTTP calls from the client data layer to the movie proxy. Every
transport, status or decode failure becomes a FetchError carrying a
static message.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from ..config import ClientConfig
from ..exceptions import FAILED_TO_FETCH_MOVIE_DETAILS, FAILED_TO_FETCH_MOVIES, FetchError
from .models import MoviePage
from .reconcile import DetailFetchResult, classify_detail

logger = logging.getLogger(__name__)


class ProxyClient:
    """Fetches listings and movie details through the proxy endpoint."""

    def __init__(self, config: ClientConfig, http: Optional[httpx.AsyncClient] = None):
        self.config = config
        self._http = http or httpx.AsyncClient(timeout=config.timeout_seconds)
        self._owns_http = http is None

    async def __aenter__(self) -> "ProxyClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        if self._owns_http:
            await self._http.aclose()

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.client_key}",
            **self.config.extra_headers
        }

    async def _get_json(self, params: Dict[str, str], message: str) -> Any:
        try:
            response = await self._http.get(
                self.config.base_url,
                params=params,
                headers=self._headers()
            )
        except httpx.HTTPError as e:
            logger.warning(f"Fetch failed: {type(e).__name__}: {e}")
            raise FetchError(message) from e

        if not response.is_success:
            logger.warning(f"Fetch failed: {response.status_code} {response.reason_phrase}")
            raise FetchError(message)

        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"Fetch returned a non-JSON body: {e}")
            raise FetchError(message) from e

    async def fetch_movies(self, category: str, query: str = "", page: int = 1) -> MoviePage:
        """Fetch one page of a category listing, or of a search when ``query`` is set."""
        params = {"category": category, "page": str(page)}
        if query:
            params["query"] = query

        payload = await self._get_json(params, FAILED_TO_FETCH_MOVIES)
        try:
            return MoviePage.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"Listing payload did not match the expected shape: {e.error_count()} errors")
            raise FetchError(FAILED_TO_FETCH_MOVIES) from e

    async def fetch_movie(self, movie_id: str) -> DetailFetchResult:
        payload = await self._get_json({"movieId": movie_id}, FAILED_TO_FETCH_MOVIE_DETAILS)
        result = classify_detail(payload)
        logger.debug(f"Movie {movie_id} detail classified as {type(result).__name__}")
        return result

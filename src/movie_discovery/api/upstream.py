"""
Upstream Mapping for the Movie Proxy

Maps a category/query/page (or movieId) selection onto exactly one
request against the movie metadata provider and relays its JSON body.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from ..config import DEFAULT_CATEGORY, TMDB_BASE_URL
from ..exceptions import (
    ConfigurationError,
    INVALID_MOVIE_ID,
    InvalidRequestError,
    MISSING_API_KEY,
    UpstreamError
)
from ..utils.logging_config import log_execution_time

logger = logging.getLogger(__name__)

DETAIL_APPENDS = "credits,videos,similar"


@dataclass(frozen=True)
class UpstreamRequest:
    """A single resolved upstream call, without the credential."""
    endpoint: str
    path: str
    params: Dict[str, str] = field(default_factory=dict)

    def url(self, base_url: str = TMDB_BASE_URL) -> str:
        return f"{base_url.rstrip('/')}{self.path}"


def resolve_upstream(
    category: Optional[str] = None,
    query: Optional[str] = None,
    page: Optional[str] = None,
    movie_id: Optional[str] = None,
) -> UpstreamRequest:
    """
    Select the upstream endpoint for a proxy request.

    Priority: movieId, then a non-empty text query, then the trending and
    top-rated categories. Anything else, unknown categories included, pages
    through the popular listing. The page value is forwarded as received.
    A movieId must be a decimal id; anything else is rejected before any
    upstream call so the path cannot leave the detail endpoint.
    """
    category = category or DEFAULT_CATEGORY
    query = query or ""
    page = page or "1"

    if movie_id:
        if not (movie_id.isascii() and movie_id.isdigit()):
            raise InvalidRequestError(INVALID_MOVIE_ID)
        return UpstreamRequest(
            endpoint="detail",
            path=f"/movie/{movie_id}",
            params={"append_to_response": DETAIL_APPENDS},
        )
    if query:
        return UpstreamRequest(
            endpoint="search",
            path="/search/movie",
            params={"query": query, "page": page},
        )
    if category == "trending":
        return UpstreamRequest(endpoint="trending", path="/trending/movie/week", params={"page": page})
    if category == "top_rated":
        return UpstreamRequest(endpoint="top_rated", path="/movie/top_rated", params={"page": page})
    return UpstreamRequest(endpoint="popular", path="/movie/popular", params={"page": page})


class TMDBUpstream:
    """
    Relay to the metadata provider.

    Holds the server-side credential; the credential is attached to the
    outgoing request only and never logged or returned.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: Optional[str],
        base_url: str = TMDB_BASE_URL,
    ):
        self.client = client
        self.api_key = api_key
        self.base_url = base_url

    @log_execution_time(logger)
    async def fetch(self, request: UpstreamRequest) -> Any:
        """Perform the upstream call and return its decoded JSON body."""
        if not self.api_key:
            logger.error("Rejecting proxy request: upstream credential missing")
            raise ConfigurationError(MISSING_API_KEY)

        logger.info(f"Upstream {request.endpoint} {request.path} params={request.params}")

        params = {"api_key": self.api_key, **request.params}
        try:
            response = await self.client.get(request.url(self.base_url), params=params)
        except httpx.HTTPError as e:
            # httpx messages can embed the request URL, which carries the key
            raise UpstreamError(self._redact(str(e) or type(e).__name__)) from e

        if response.is_error:
            # Body is still relayed with 200
            logger.warning(
                f"Upstream {request.endpoint} returned status {response.status_code}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"Upstream returned a non-JSON body: {e}") from e

    def _redact(self, message: str) -> str:
        if self.api_key:
            message = message.replace(self.api_key, "***")
        return message

"""Error types shared by the proxy service and the client data layer."""


class MovieDiscoveryError(Exception):
    status_code: int = 500
    detail: str = "An unexpected error occurred"

    def __init__(self, detail: str = None):
        if detail:
            self.detail = detail
        super().__init__(self.detail)


class ConfigurationError(MovieDiscoveryError):
    """A required credential or endpoint setting is missing."""
    detail = "Configuration error"


class UpstreamError(MovieDiscoveryError):
    """The metadata provider could not be reached or returned a non-JSON body."""
    detail = "Upstream request failed"


class InvalidRequestError(MovieDiscoveryError):
    """A proxy request parameter cannot be mapped onto an upstream call."""
    detail = "Invalid request"


class FetchError(MovieDiscoveryError):
    """A client-side fetch against the proxy failed."""
    detail = "Failed to fetch"


MISSING_API_KEY = "TMDB API key not configured"
FAILED_TO_FETCH_MOVIES = "Failed to fetch movies"
FAILED_TO_FETCH_MOVIE_DETAILS = "Failed to fetch movie details"
INVALID_MOVIE_ID = "Invalid movie id"

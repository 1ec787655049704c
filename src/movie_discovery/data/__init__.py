"""Client data layer for Movie Discovery."""

from .browse import BrowseSession
from .client import ProxyClient
from .debounce import Debouncer
from .models import (
    CastMember,
    Credits,
    Genre,
    Movie,
    MovieDetail,
    MoviePage,
    SimilarMovies,
    Video,
    Videos
)
from .queries import MovieQueries, movie_key, movies_key
from .reconcile import (
    DetailFetchResult,
    DetailStatus,
    DetailView,
    Invalid,
    Valid,
    classify_detail,
    reconcile_detail
)

__all__ = [
    # Models
    "Movie",
    "MoviePage",
    "MovieDetail",
    "Genre",
    "CastMember",
    "Credits",
    "SimilarMovies",
    "Video",
    "Videos",
    # Fetching
    "ProxyClient",
    "MovieQueries",
    "movies_key",
    "movie_key",
    # Detail reconciliation
    "DetailFetchResult",
    "Valid",
    "Invalid",
    "classify_detail",
    "DetailStatus",
    "DetailView",
    "reconcile_detail",
    # Browsing
    "BrowseSession",
    "Debouncer",
]

"""
Detail Reconciliation

Decides once, at the data-layer boundary, whether a fetched detail
payload is usable, and combines it with a list-form movie carried from
navigation to produce what the detail view should show.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from pydantic import ValidationError

from ..utils.cache import QueryState
from .models import Movie, MovieDetail


@dataclass(frozen=True)
class Valid:
    movie: MovieDetail


@dataclass(frozen=True)
class Invalid:
    reason: str


DetailFetchResult = Union[Valid, Invalid]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def classify_detail(payload: Any) -> DetailFetchResult:
    """Tag a proxied detail payload as Valid(MovieDetail) or Invalid(reason)."""
    if not isinstance(payload, dict):
        return Invalid("payload is not an object")
    if not _is_number(payload.get("vote_average")):
        return Invalid("missing vote_average")
    if not payload.get("title"):
        return Invalid("missing title")

    try:
        return Valid(MovieDetail.model_validate(payload))
    except ValidationError as e:
        return Invalid(f"malformed detail payload: {e.error_count()} errors")


class DetailStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class DetailView:
    """
    What the detail page renders.

    ``movie`` is a MovieDetail when the fetch was valid, otherwise the
    list-form fallback with ``is_partial`` set. Absent detail fields on a
    partial movie are unknown, not empty.
    """
    status: DetailStatus
    movie: Optional[Movie] = None
    is_partial: bool = False

    @property
    def show_back_action(self) -> bool:
        return self.status is DetailStatus.FAILED

    @property
    def detail(self) -> Optional[MovieDetail]:
        return self.movie if isinstance(self.movie, MovieDetail) else None


def reconcile_detail(state: QueryState, fallback: Optional[Movie] = None) -> DetailView:
    """
    Combine a detail query state with the navigation fallback.

    Valid fetched data wins outright. Otherwise the fallback is shown as
    partial data; with no fallback either, the view fails (or keeps
    loading while the fetch is still running).
    """
    fetched = state.data
    if isinstance(fetched, Valid):
        movie: Optional[Movie] = fetched.movie
        is_partial = False
    else:
        movie = fallback
        is_partial = True

    if state.is_loading and movie is None:
        return DetailView(status=DetailStatus.LOADING)

    if movie is None:
        return DetailView(status=DetailStatus.FAILED)

    return DetailView(status=DetailStatus.READY, movie=movie, is_partial=is_partial)

"""
Movie Data Models

List-form and detail-form movie shapes as returned through the proxy.
Detail-only fields default to None, meaning "unknown", never "empty".
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config import IMG_BASE_ORIGINAL, IMG_BASE_POSTER, YOUTUBE_WATCH_URL


class Movie(BaseModel):
    """List-form movie."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    title: str
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    vote_average: Optional[float] = None
    release_date: str = ""
    overview: str = ""

    @field_validator("title", "release_date", "overview", mode="before")
    @classmethod
    def null_as_empty(cls, value):
        return "" if value is None else value

    @property
    def poster_url(self) -> Optional[str]:
        return f"{IMG_BASE_POSTER}{self.poster_path}" if self.poster_path else None

    @property
    def backdrop_url(self) -> Optional[str]:
        return f"{IMG_BASE_ORIGINAL}{self.backdrop_path}" if self.backdrop_path else None

    @property
    def release_year(self) -> Optional[str]:
        year = (self.release_date or "").split("-")[0]
        return year or None


class MoviePage(BaseModel):
    """One page of a listing or search."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    results: List[Movie] = Field(default_factory=list)
    total_pages: int = 0
    page: int = 1


class Genre(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class CastMember(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    name: str
    character: str = ""
    profile_path: Optional[str] = None

    @property
    def profile_url(self) -> Optional[str]:
        return f"{IMG_BASE_POSTER}{self.profile_path}" if self.profile_path else None


class Credits(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    cast: List[CastMember] = Field(default_factory=list)


class SimilarMovies(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    results: List[Movie] = Field(default_factory=list)


class Video(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    key: str
    site: str
    type: str


class Videos(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    results: List[Video] = Field(default_factory=list)


class MovieDetail(Movie):
    """Detail-form movie: list form plus runtime, genres, cast, similar titles and videos."""
    vote_average: float
    runtime: Optional[int] = None
    tagline: Optional[str] = None
    genres: Optional[List[Genre]] = None
    credits: Optional[Credits] = None
    similar: Optional[SimilarMovies] = None
    videos: Optional[Videos] = None

    @property
    def trailer(self) -> Optional[Video]:
        """First YouTube trailer or teaser, if any."""
        if self.videos is None:
            return None
        for video in self.videos.results:
            if video.site == "YouTube" and video.type in ("Trailer", "Teaser"):
                return video
        return None

    @property
    def trailer_url(self) -> Optional[str]:
        trailer = self.trailer
        return f"{YOUTUBE_WATCH_URL}{trailer.key}" if trailer else None

    def top_cast(self, n: int = 6) -> Optional[List[CastMember]]:
        if self.credits is None:
            return None
        return self.credits.cast[:n]

    def similar_movies(self, n: int = 5) -> Optional[List[Movie]]:
        if self.similar is None:
            return None
        return self.similar.results[:n]

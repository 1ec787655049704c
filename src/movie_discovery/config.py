"""
Configuration for Movie Discovery

Dataclass configs for the proxy service and the client data layer,
populated from environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from .exceptions import ConfigurationError


STALE_TIME_SECONDS = 5 * 60
SEARCH_DEBOUNCE_SECONDS = 0.5

DEFAULT_CATEGORY = "popular"

TMDB_BASE_URL = "https://api.themoviedb.org/3"
PROXY_PATH = "/functions/v1/tmdb-proxy"

IMG_BASE_POSTER = "https://image.tmdb.org/t/p/w500"
IMG_BASE_ORIGINAL = "https://image.tmdb.org/t/p/original"
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v="

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    """Read an environment variable as a non-negative float, falling back to default."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return max(0.0, float(raw))
    except ValueError:
        return default


@dataclass
class ProxyConfig:
    """Proxy service configuration."""
    tmdb_api_key: Optional[str] = None
    tmdb_base_url: str = TMDB_BASE_URL
    timeout_seconds: float = 10.0
    log_level: str = "INFO"
    json_logs: bool = False

    @property
    def credential_configured(self) -> bool:
        return bool(self.tmdb_api_key)

    @classmethod
    def from_env(cls) -> "ProxyConfig":
        return cls(
            tmdb_api_key=os.environ.get("TMDB_API_KEY") or None,
            tmdb_base_url=os.environ.get("TMDB_BASE_URL", TMDB_BASE_URL).rstrip("/"),
            timeout_seconds=_env_float("TMDB_TIMEOUT", 10.0),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
            json_logs=_env_flag("LOG_JSON"),
        )


@dataclass
class ClientConfig:
    """
    Client data layer configuration.

    Both the proxy endpoint and the public client key are required; a
    missing value is a fatal configuration error.
    """
    base_url: str
    client_key: str
    stale_time: float = STALE_TIME_SECONDS
    debounce_seconds: float = SEARCH_DEBOUNCE_SECONDS
    timeout_seconds: float = 10.0
    extra_headers: dict = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "ClientConfig":
        base_url = os.environ.get("MOVIE_PROXY_URL")
        if not base_url:
            project_id = os.environ.get("SUPABASE_PROJECT_ID")
            if project_id:
                base_url = f"https://{project_id}.supabase.co{PROXY_PATH}"

        client_key = (
            os.environ.get("MOVIE_PROXY_KEY")
            or os.environ.get("SUPABASE_PUBLISHABLE_KEY")
        )

        if not base_url:
            raise ConfigurationError("Movie proxy URL not configured")
        if not client_key:
            raise ConfigurationError("Movie proxy client key not configured")

        return cls(
            base_url=base_url,
            client_key=client_key,
            stale_time=_env_float("MOVIE_STALE_TIME", STALE_TIME_SECONDS),
            debounce_seconds=_env_float("MOVIE_SEARCH_DEBOUNCE", SEARCH_DEBOUNCE_SECONDS),
            timeout_seconds=_env_float("MOVIE_PROXY_TIMEOUT", 10.0),
        )

"""
Pytest Configuration and Fixtures

Shared fixtures for all tests.
"""

import sys
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from movie_discovery.config import ClientConfig, ProxyConfig
from movie_discovery.data import ProxyClient


PROXY_URL = "https://proxy.test/functions/v1/tmdb-proxy"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class Recorder:
    """httpx.MockTransport handler that records requests and replies from a callable."""

    def __init__(self, reply):
        self.reply = reply
        self.requests = []

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        return self.reply(request)

    @property
    def count(self) -> int:
        return len(self.requests)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def movie_payload(movie_id: int = 550, title: str = "Fight Club", **overrides):
    payload = {
        "id": movie_id,
        "title": title,
        "poster_path": f"/poster{movie_id}.jpg",
        "backdrop_path": f"/backdrop{movie_id}.jpg",
        "vote_average": 8.4,
        "release_date": "1999-10-15",
        "overview": "An insomniac office worker...",
    }
    payload.update(overrides)
    return payload


def page_payload(page: int = 1, total_pages: int = 3, n: int = 4):
    return {
        "page": page,
        "total_pages": total_pages,
        "total_results": total_pages * n,
        "results": [movie_payload(movie_id=page * 100 + i, title=f"Movie {page}-{i}") for i in range(n)],
    }


def detail_payload(movie_id: int = 550, **overrides):
    payload = movie_payload(movie_id)
    payload.update({
        "runtime": 139,
        "tagline": "Mischief. Mayhem. Soap.",
        "genres": [{"id": 18, "name": "Drama"}, {"id": 53, "name": "Thriller"}],
        "credits": {
            "cast": [
                {"id": i, "name": f"Actor {i}", "character": f"Role {i}", "profile_path": None if i % 2 else f"/p{i}.jpg"}
                for i in range(10)
            ]
        },
        "similar": {"results": [movie_payload(movie_id=900 + i, title=f"Similar {i}") for i in range(8)]},
        "videos": {
            "results": [
                {"key": "vimeo1", "site": "Vimeo", "type": "Trailer"},
                {"key": "clip1", "site": "YouTube", "type": "Clip"},
                {"key": "yt-teaser", "site": "YouTube", "type": "Teaser"},
                {"key": "yt-trailer", "site": "YouTube", "type": "Trailer"},
            ]
        },
    })
    payload.update(overrides)
    return payload


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def proxy_config():
    return ProxyConfig(tmdb_api_key="test-key")


@pytest.fixture
def client_config():
    return ClientConfig(base_url=PROXY_URL, client_key="anon-key")


@pytest.fixture
def listing_upstream():
    """Upstream that answers every listing with page 1 of 3."""
    return Recorder(lambda request: httpx.Response(200, json=page_payload()))


@pytest_asyncio.fixture
async def proxy_client_factory(client_config):
    """Builds ProxyClients over a MockTransport and closes their HTTP clients afterwards."""
    opened = []

    def factory(recorder: Recorder) -> ProxyClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
        opened.append(http)
        return ProxyClient(client_config, http=http)

    yield factory
    for http in opened:
        await http.aclose()


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests that wire the proxy and client together"
    )

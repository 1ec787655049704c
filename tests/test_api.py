"""
API Tests

Tests for the FastAPI proxy endpoint.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import Recorder, detail_payload, page_payload
from movie_discovery.api.main import create_app
from movie_discovery.config import CORS_HEADERS, PROXY_PATH, ProxyConfig


def make_client(config: ProxyConfig, recorder: Recorder) -> TestClient:
    app = create_app(config, transport=httpx.MockTransport(recorder))
    return TestClient(app)


@pytest.fixture
def upstream():
    return Recorder(lambda request: httpx.Response(200, json=page_payload()))


@pytest.fixture
def client(proxy_config, upstream):
    with make_client(proxy_config, upstream) as test_client:
        yield test_client


def assert_cors(response):
    for name, value in CORS_HEADERS.items():
        assert response.headers[name] == value


class TestProxyMapping:
    """Tests for category/query/page routing to the upstream API."""

    def test_trending_page_two(self, client, upstream):
        """Trending with an empty query goes to the weekly trending listing."""
        response = client.get(PROXY_PATH, params={"category": "trending", "page": "2", "query": ""})

        assert response.status_code == 200
        assert upstream.count == 1
        assert upstream.last.url.path == "/3/trending/movie/week"
        assert upstream.last.url.params["page"] == "2"

    def test_query_overrides_category(self, client, upstream):
        response = client.get(PROXY_PATH, params={"query": "batman", "category": "top_rated"})

        assert response.status_code == 200
        assert upstream.last.url.path == "/3/search/movie"
        assert upstream.last.url.params["query"] == "batman"
        assert upstream.last.url.params["page"] == "1"

    def test_top_rated(self, client, upstream):
        client.get(PROXY_PATH, params={"category": "top_rated", "page": "5"})

        assert upstream.last.url.path == "/3/movie/top_rated"
        assert upstream.last.url.params["page"] == "5"

    @pytest.mark.parametrize("category", [None, "", "popular", "upcoming", "TRENDING", "top-rated"])
    def test_other_categories_fall_back_to_popular(self, client, upstream, category):
        params = {"page": "3"}
        if category is not None:
            params["category"] = category

        response = client.get(PROXY_PATH, params=params)

        assert response.status_code == 200
        assert upstream.last.url.path == "/3/movie/popular"
        assert upstream.last.url.params["page"] == "3"

    @pytest.mark.parametrize("page", ["1", "7", "500", "0", "abc"])
    def test_page_forwarded_unchanged(self, client, upstream, page):
        client.get(PROXY_PATH, params={"category": "trending", "page": page})

        assert upstream.last.url.params["page"] == page

    def test_defaults_when_no_parameters(self, client, upstream):
        client.get("/")

        assert upstream.last.url.path == "/3/movie/popular"
        assert upstream.last.url.params["page"] == "1"

    def test_movie_id_maps_to_detail_with_appends(self, client, upstream):
        client.get(PROXY_PATH, params={"movieId": "550", "query": "ignored"})

        assert upstream.last.url.path == "/3/movie/550"
        assert upstream.last.url.params["append_to_response"] == "credits,videos,similar"

    @pytest.mark.parametrize(
        "movie_id",
        ["../account", "../account/123/rated/movies", "550/reviews", "550?x=1", "-1", "\u00b2"]
    )
    def test_non_numeric_movie_id_rejected(self, client, upstream, movie_id):
        """A movieId that is not a decimal id never reaches the upstream."""
        response = client.get(PROXY_PATH, params={"movieId": movie_id})

        assert response.status_code == 500
        assert response.json() == {"error": "Invalid movie id"}
        assert_cors(response)
        assert upstream.count == 0

    def test_credential_sent_upstream_only(self, client, upstream):
        response = client.get(PROXY_PATH, params={"category": "popular"})

        assert upstream.last.url.params["api_key"] == "test-key"
        assert "test-key" not in response.text


class TestProxyResponses:
    """Tests for relayed bodies, status codes and CORS headers."""

    def test_relays_body_verbatim(self, client):
        response = client.get(PROXY_PATH)

        assert response.json() == page_payload()
        assert_cors(response)

    def test_upstream_error_status_relayed_as_200(self, proxy_config):
        body = {"success": False, "status_code": 34, "status_message": "The resource could not be found."}
        upstream = Recorder(lambda request: httpx.Response(404, json=body))

        with make_client(proxy_config, upstream) as client:
            response = client.get(PROXY_PATH, params={"movieId": "0"})

        assert response.status_code == 200
        assert response.json() == body

    def test_detail_payload_relayed(self, proxy_config):
        upstream = Recorder(lambda request: httpx.Response(200, json=detail_payload()))

        with make_client(proxy_config, upstream) as client:
            response = client.get(PROXY_PATH, params={"movieId": "550"})

        assert response.json()["credits"]["cast"][0]["name"] == "Actor 0"

    def test_preflight(self, client, upstream):
        response = client.options(PROXY_PATH)

        assert response.status_code == 200
        assert response.content == b""
        assert_cors(response)
        assert upstream.count == 0


class TestProxyErrors:
    """Tests for configuration and upstream failures."""

    def test_missing_credential(self, upstream):
        with make_client(ProxyConfig(tmdb_api_key=None), upstream) as client:
            response = client.get(PROXY_PATH, params={"category": "trending"})

        assert response.status_code == 500
        assert response.json() == {"error": "TMDB API key not configured"}
        assert_cors(response)
        assert upstream.count == 0

    def test_network_failure(self, proxy_config):
        def fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        with make_client(proxy_config, Recorder(fail)) as client:
            response = client.get(PROXY_PATH)

        assert response.status_code == 500
        assert response.json() == {"error": "connection refused"}
        assert_cors(response)

    def test_network_failure_message_redacts_credential(self, proxy_config):
        def fail(request):
            raise httpx.ConnectError(f"cannot reach {request.url}", request=request)

        with make_client(proxy_config, Recorder(fail)) as client:
            response = client.get(PROXY_PATH)

        assert response.status_code == 500
        assert "test-key" not in response.json()["error"]

    def test_non_json_body(self, proxy_config):
        upstream = Recorder(lambda request: httpx.Response(502, text="<html>Bad gateway</html>"))

        with make_client(proxy_config, upstream) as client:
            response = client.get(PROXY_PATH)

        assert response.status_code == 500
        assert "error" in response.json()
        assert_cors(response)

    def test_unhandled_exception(self, proxy_config):
        """Errors outside the relay still answer 500 {error} with CORS headers."""
        def fail(request):
            raise RuntimeError("relay exploded")

        app = create_app(proxy_config, transport=httpx.MockTransport(Recorder(fail)))
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get(PROXY_PATH)

        assert response.status_code == 500
        assert response.json() == {"error": "relay exploded"}
        assert_cors(response)


class TestServiceEndpoints:
    """Tests for health and metrics endpoints."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["credential_configured"] is True
        assert data["uptime_seconds"] >= 0

    def test_health_without_credential(self, upstream):
        with make_client(ProxyConfig(), upstream) as client:
            data = client.get("/health").json()

        assert data["status"] == "degraded"
        assert data["credential_configured"] is False

    def test_metrics_count_requests(self, client):
        client.get(PROXY_PATH, params={"category": "top_rated"})
        response = client.get("/metrics")

        assert response.status_code == 200
        assert 'proxy_requests_total{route="top_rated",status="success"}' in response.text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

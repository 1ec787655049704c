"""
FastAPI Application for the Movie Proxy

Stateless endpoint that hides the metadata provider credential and maps
category/search/page (or movieId) selections onto one upstream call.
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import structlog
from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from pydantic import BaseModel
from starlette.responses import Response

from .. import __version__
from ..config import CORS_HEADERS, PROXY_PATH, ProxyConfig
from ..exceptions import MovieDiscoveryError
from ..utils.logging_config import RequestLogger
from .upstream import TMDBUpstream, resolve_upstream

logger = structlog.get_logger()

REQUEST_COUNT = Counter(
    "proxy_requests_total",
    "Total proxy requests",
    ["route", "status"]
)
REQUEST_LATENCY = Histogram(
    "proxy_request_latency_seconds",
    "Proxy request latency in seconds",
    ["route"]
)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    credential_configured: bool
    uptime_seconds: float


class AppState:
    """Application state container."""

    def __init__(
        self,
        config: ProxyConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.config = config
        self.transport = transport
        self.client: Optional[httpx.AsyncClient] = None
        self.start_time = time.time()

    def open(self) -> httpx.AsyncClient:
        if self.client is None:
            self.client = httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                transport=self.transport
            )
        return self.client

    async def close(self):
        if self.client is not None:
            await self.client.aclose()
            self.client = None

    def get_uptime(self) -> float:
        return time.time() - self.start_time


def get_state(request: Request) -> AppState:
    return request.app.state.proxy


def get_upstream(state: AppState = Depends(get_state)) -> TMDBUpstream:
    """Upstream relay bound to the shared HTTP client."""
    return TMDBUpstream(
        client=state.open(),
        api_key=state.config.tmdb_api_key,
        base_url=state.config.tmdb_base_url
    )


async def preflight():
    """CORS preflight: empty body, headers added by middleware."""
    return Response(status_code=200)


async def proxy(
    category: Optional[str] = Query(default=None),
    query: Optional[str] = Query(default=None),
    page: Optional[str] = Query(default=None),
    movie_id: Optional[str] = Query(default=None, alias="movieId"),
    upstream: TMDBUpstream = Depends(get_upstream)
):
    """
    Relay one upstream call and return its JSON body with status 200.

    The upstream status code is not propagated. Missing credentials and
    transport or decode failures answer 500 with {"error": message}.
    """
    upstream_request = resolve_upstream(category, query, page, movie_id)
    route = upstream_request.endpoint

    with RequestLogger(request_id=uuid.uuid4().hex, route=route) as request_log:
        try:
            data = await upstream.fetch(upstream_request)
        except MovieDiscoveryError:
            REQUEST_COUNT.labels(route=route, status="error").inc()
            raise
        REQUEST_COUNT.labels(route=route, status="success").inc()
        REQUEST_LATENCY.labels(route=route).observe(request_log.elapsed)

    return JSONResponse(content=data)


def create_app(
    config: Optional[ProxyConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> FastAPI:
    """Build the proxy application."""
    state = AppState(config or ProxyConfig.from_env(), transport=transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        state.open()
        if not state.config.credential_configured:
            logger.warning("TMDB_API_KEY is not set; proxy requests will fail with 500")
        yield
        logger.info("Shutting down...")
        await state.close()

    app = FastAPI(
        title="Movie Discovery Proxy",
        description="Credential-hiding proxy for the movie metadata API",
        version=__version__,
        lifespan=lifespan
    )
    app.state.proxy = state

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    @app.exception_handler(MovieDiscoveryError)
    async def movie_discovery_error_handler(request: Request, exc: MovieDiscoveryError):
        logger.warning(f"{exc.status_code} Error: {exc.detail}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        # Runs outside the middleware stack, so headers are set here
        logger.error(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": str(exc) or "Internal server error"},
            headers=CORS_HEADERS
        )

    for path in (PROXY_PATH, "/"):
        app.add_api_route(path, proxy, methods=["GET"])
        app.add_api_route(path, preflight, methods=["OPTIONS"], include_in_schema=False)

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint."""
        return HealthResponse(
            status="healthy" if state.config.credential_configured else "degraded",
            version=__version__,
            credential_configured=state.config.credential_configured,
            uptime_seconds=state.get_uptime()
        )

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app


app = create_app()

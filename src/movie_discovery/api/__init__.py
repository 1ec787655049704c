"""Proxy service for Movie Discovery."""

from .main import app, create_app
from .upstream import TMDBUpstream, UpstreamRequest, resolve_upstream

__all__ = ["app", "create_app", "TMDBUpstream", "UpstreamRequest", "resolve_upstream"]

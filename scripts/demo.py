#!/usr/bin/env python3
"""
Quick Start Demo - Movie Discovery

Browses a listing, runs a debounced search and opens a detail view
through a running proxy. Requires MOVIE_PROXY_URL and MOVIE_PROXY_KEY
(or SUPABASE_PROJECT_ID and SUPABASE_PUBLISHABLE_KEY).

Usage:
    python scripts/demo.py [search text]
"""

import asyncio
import sys

from movie_discovery.config import ClientConfig
from movie_discovery.data import BrowseSession, DetailStatus, MovieQueries, ProxyClient
from movie_discovery.exceptions import ConfigurationError
from movie_discovery.utils.cache import CacheConfig, QueryCache
from movie_discovery.utils.logging_config import setup_logging


def print_header(text):
    print("\n" + "="*60)
    print(f" {text}")
    print("="*60)

def print_success(text):
    print(f"✅ {text}")

def print_info(text):
    print(f"ℹ️  {text}")

def print_warning(text):
    print(f"⚠️  {text}")


async def run(config: ClientConfig, search: str):
    cache = QueryCache(CacheConfig(stale_time=config.stale_time))

    async with ProxyClient(config) as client:
        queries = MovieQueries(cache, client)
        session = BrowseSession(queries, debounce_seconds=config.debounce_seconds)

        # ========================================
        # 1. Category listing
        # ========================================
        print_header("1. Popular movies")
        await session.load()
        if session.result.is_error:
            print_warning("Failed to load movies. Please try again.")
            return
        for movie in session.movies[:5]:
            print_info(f"{movie.title} ({movie.release_year or 'N/A'}) ★ {movie.vote_average or 0:.1f}")
        print_success(f"Page {session.page} of {session.total_pages}")

        # ========================================
        # 2. Debounced search
        # ========================================
        print_header(f"2. Search: {search!r}")
        for i in range(1, len(search) + 1):
            session.type_search(search[:i])
        await asyncio.sleep(config.debounce_seconds * 2)
        await session.load()
        if not session.movies:
            print_warning("No movies found.")
            return
        for movie in session.movies[:5]:
            print_info(movie.title)

        # ========================================
        # 3. Detail view with list-form fallback
        # ========================================
        first = session.movies[0]
        print_header(f"3. Details: {first.title}")
        view = await queries.movie_view(str(first.id), fallback=first)
        if view.status is DetailStatus.FAILED:
            print_warning("Failed to load movie details.")
            return
        if view.is_partial:
            print_warning("Limited details available.")
        detail = view.detail
        if detail is not None:
            print_info(f"Runtime: {detail.runtime or '?'} min")
            print_info(f"Genres: {', '.join(g.name for g in detail.genres or [])}")
            print_info(f"Cast: {', '.join(c.name for c in detail.top_cast() or [])}")
            if detail.trailer_url:
                print_success(f"Trailer: {detail.trailer_url}")


def main():
    setup_logging(level="WARNING")
    search = " ".join(sys.argv[1:]) or "blade runner"

    try:
        config = ClientConfig.from_env()
    except ConfigurationError as e:
        print_warning(str(e))
        sys.exit(1)

    asyncio.run(run(config, search))


if __name__ == "__main__":
    main()

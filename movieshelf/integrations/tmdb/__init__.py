"""
TMDb integration clients.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from movieshelf.integrations.tmdb.catalog import (
        FetchResult,
        fetch_configuration,
        fetch_movie_by_id,
        fetch_movie_genres,
        fetch_movie_trailer,
        fetch_movies_by_genre,
        fetch_popular_movies,
        fetch_popular_tv,
        fetch_top_rated_movies,
        fetch_top_rated_tv,
        fetch_trending_movies,
        fetch_trending_tv,
        fetch_tv_by_genre,
        fetch_tv_genres,
        select_trailer,
        youtube_watch_url,
    )
    from movieshelf.integrations.tmdb.client import TmdbClientError, resolve_api_key

_CLIENT_NAMES = {"TmdbClientError", "resolve_api_key"}

__all__ = [
    "FetchResult",
    "TmdbClientError",
    "fetch_configuration",
    "fetch_movie_by_id",
    "fetch_movie_genres",
    "fetch_movie_trailer",
    "fetch_movies_by_genre",
    "fetch_popular_movies",
    "fetch_popular_tv",
    "fetch_top_rated_movies",
    "fetch_top_rated_tv",
    "fetch_trending_movies",
    "fetch_trending_tv",
    "fetch_tv_by_genre",
    "fetch_tv_genres",
    "resolve_api_key",
    "select_trailer",
    "youtube_watch_url",
]


def __getattr__(name: str):
    if name in _CLIENT_NAMES:
        from movieshelf.integrations.tmdb import client

        return getattr(client, name)
    if name in __all__:
        from movieshelf.integrations.tmdb import catalog

        return getattr(catalog, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

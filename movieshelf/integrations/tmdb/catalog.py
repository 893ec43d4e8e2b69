"""
Named catalog queries against TMDb.

Each function issues one GET, projects the payload, and returns a `FetchResult`.
Fetch failures never raise: they are logged and returned in `FetchResult.error`
next to an empty value (`[]`, `{}` or `None`). A missing API key is a
configuration error and still raises `RuntimeError`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, Mapping, TypeVar
from urllib.parse import quote

import requests

from movieshelf.integrations.tmdb.client import DEFAULT_TIMEOUT_SECONDS, TmdbClientError, _require_api_key, get_json
from movieshelf.models.display import DisplayRecord, MediaType, project_results

logger = logging.getLogger(__name__)

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v="

T = TypeVar("T")


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    data: T
    error: TmdbClientError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _fetch(
    context: str,
    path: str,
    *,
    empty: T,
    transform: Callable[[dict[str, Any]], T],
    params: Mapping[str, Any] | None = None,
    api_key: str | None = None,
    session: requests.Session | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> FetchResult[T]:
    api_key = _require_api_key(api_key)
    try:
        payload = get_json(path, params=params, api_key=api_key, session=session, timeout_seconds=timeout_seconds)
    except TmdbClientError as exc:
        logger.warning(f"Error fetching {context}: {exc}")
        return FetchResult(data=empty, error=exc)
    return FetchResult(data=transform(payload))


def _records(media_type: MediaType) -> Callable[[dict[str, Any]], list[DisplayRecord]]:
    return lambda payload: project_results(payload, media_type)


def _path_segment(value: str | int) -> str:
    # Ids are interpolated into the URL path; "/" and "?" must not change the resource.
    return quote(str(value).strip(), safe="")


def _genres(payload: dict[str, Any]) -> list[dict[str, Any]]:
    genres = payload.get("genres")
    return genres if isinstance(genres, list) else []


def fetch_configuration(
    *,
    api_key: str | None = None,
    session: requests.Session | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> FetchResult[dict[str, Any]]:
    """Fetch the raw `/configuration` payload (image base URLs, sizes)."""
    return _fetch(
        "TMDb configuration",
        "/configuration",
        empty={},
        transform=dict,
        api_key=api_key,
        session=session,
        timeout_seconds=timeout_seconds,
    )


# --- Movies ---


def fetch_popular_movies(
    *,
    api_key: str | None = None,
    session: requests.Session | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> FetchResult[list[DisplayRecord]]:
    return _fetch(
        "popular movies",
        "/movie/popular",
        empty=[],
        transform=_records("movie"),
        api_key=api_key,
        session=session,
        timeout_seconds=timeout_seconds,
    )


def fetch_trending_movies(
    *,
    api_key: str | None = None,
    session: requests.Session | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> FetchResult[list[DisplayRecord]]:
    return _fetch(
        "trending movies",
        "/trending/movie/week",
        empty=[],
        transform=_records("movie"),
        api_key=api_key,
        session=session,
        timeout_seconds=timeout_seconds,
    )


def fetch_top_rated_movies(
    *,
    api_key: str | None = None,
    session: requests.Session | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> FetchResult[list[DisplayRecord]]:
    return _fetch(
        "top rated movies",
        "/movie/top_rated",
        empty=[],
        transform=_records("movie"),
        api_key=api_key,
        session=session,
        timeout_seconds=timeout_seconds,
    )


def fetch_movie_genres(
    *,
    api_key: str | None = None,
    session: requests.Session | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> FetchResult[list[dict[str, Any]]]:
    """Return the upstream `genres` array (`[{"id": ..., "name": ...}]`) as-is."""
    return _fetch(
        "movie genres",
        "/genre/movie/list",
        empty=[],
        transform=_genres,
        api_key=api_key,
        session=session,
        timeout_seconds=timeout_seconds,
    )


def fetch_movies_by_genre(
    genre_id: str | int,
    *,
    api_key: str | None = None,
    session: requests.Session | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> FetchResult[list[DisplayRecord]]:
    """First page of `/discover/movie` filtered by one genre id."""
    return _fetch(
        "movies by genre",
        "/discover/movie",
        empty=[],
        transform=_records("movie"),
        params={"with_genres": str(genre_id), "page": 1},
        api_key=api_key,
        session=session,
        timeout_seconds=timeout_seconds,
    )


def fetch_movie_by_id(
    movie_id: str | int,
    *,
    api_key: str | None = None,
    session: requests.Session | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> FetchResult[dict[str, Any] | None]:
    """
    Fetch the full `/movie/{id}` payload.

    `data` is None when the movie cannot be fetched (404 included).
    """

    return _fetch(
        f"movie {movie_id}",
        f"/movie/{_path_segment(movie_id)}",
        empty=None,
        transform=dict,
        params={"language": "en-US"},
        api_key=api_key,
        session=session,
        timeout_seconds=timeout_seconds,
    )


def select_trailer(videos: Any) -> dict[str, Any] | None:
    """Pick the first YouTube video of type `Trailer`, or None."""
    if not isinstance(videos, list):
        return None
    for video in videos:
        if isinstance(video, Mapping) and video.get("site") == "YouTube" and video.get("type") == "Trailer":
            return dict(video)
    return None


def youtube_watch_url(trailer: Mapping[str, Any] | None) -> str | None:
    if not trailer:
        return None
    key = trailer.get("key")
    if not isinstance(key, str) or not key:
        return None
    return f"{YOUTUBE_WATCH_URL}{key}"


def fetch_movie_trailer(
    movie_id: str | int,
    *,
    api_key: str | None = None,
    session: requests.Session | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> FetchResult[dict[str, Any] | None]:
    return _fetch(
        f"trailer for movie {movie_id}",
        f"/movie/{_path_segment(movie_id)}/videos",
        empty=None,
        transform=lambda payload: select_trailer(payload.get("results")),
        params={"language": "en-US"},
        api_key=api_key,
        session=session,
        timeout_seconds=timeout_seconds,
    )


# --- TV ---


def fetch_popular_tv(
    *,
    api_key: str | None = None,
    session: requests.Session | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> FetchResult[list[DisplayRecord]]:
    return _fetch(
        "popular TV shows",
        "/tv/popular",
        empty=[],
        transform=_records("tv"),
        api_key=api_key,
        session=session,
        timeout_seconds=timeout_seconds,
    )


def fetch_trending_tv(
    *,
    api_key: str | None = None,
    session: requests.Session | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> FetchResult[list[DisplayRecord]]:
    return _fetch(
        "trending TV shows",
        "/trending/tv/week",
        empty=[],
        transform=_records("tv"),
        api_key=api_key,
        session=session,
        timeout_seconds=timeout_seconds,
    )


def fetch_top_rated_tv(
    *,
    api_key: str | None = None,
    session: requests.Session | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> FetchResult[list[DisplayRecord]]:
    return _fetch(
        "top rated TV shows",
        "/tv/top_rated",
        empty=[],
        transform=_records("tv"),
        api_key=api_key,
        session=session,
        timeout_seconds=timeout_seconds,
    )


def fetch_tv_genres(
    *,
    api_key: str | None = None,
    session: requests.Session | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> FetchResult[list[dict[str, Any]]]:
    return _fetch(
        "TV genres",
        "/genre/tv/list",
        empty=[],
        transform=_genres,
        api_key=api_key,
        session=session,
        timeout_seconds=timeout_seconds,
    )


def fetch_tv_by_genre(
    genre_id: str | int,
    *,
    api_key: str | None = None,
    session: requests.Session | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> FetchResult[list[DisplayRecord]]:
    return _fetch(
        "TV shows by genre",
        "/discover/tv",
        empty=[],
        transform=_records("tv"),
        params={"with_genres": str(genre_id), "page": 1},
        api_key=api_key,
        session=session,
        timeout_seconds=timeout_seconds,
    )

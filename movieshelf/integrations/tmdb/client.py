from __future__ import annotations

import os
from typing import Any, Mapping

import requests

from movieshelf.utils.env import load_env

TMDB_API_BASE_URL = "https://api.themoviedb.org/3"
DEFAULT_TIMEOUT_SECONDS = 20.0


class TmdbClientError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None, body_snippet: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body_snippet = body_snippet


def _require_api_key(api_key: str | None) -> str:
    resolved = resolve_api_key(api_key)
    if not resolved:
        raise RuntimeError("TMDB_API_KEY is not set.")
    return resolved


def resolve_api_key(api_key: str | None = None) -> str | None:
    """
    Best-effort API key resolution for callers that want to continue when the key is missing.

    An explicit key wins; otherwise `TMDB_API_KEY` is read after loading `.env`.
    """

    if api_key and api_key.strip():
        return api_key.strip()
    load_env()
    resolved = (os.getenv("TMDB_API_KEY") or "").strip()
    return resolved or None


def _request_json(
    session: requests.Session,
    url: str,
    *,
    params: Mapping[str, Any] | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> dict[str, Any]:
    """
    Issue a single GET and decode the JSON object body.

    Transport failures, non-200 responses and non-object bodies all raise `TmdbClientError`.
    """

    headers = {"accept": "application/json"}
    try:
        resp = session.get(url, params=params, headers=headers, timeout=timeout_seconds)
    except requests.RequestException as exc:
        raise TmdbClientError(f"TMDb request failed: {exc}") from exc

    if resp.status_code != 200:
        raise TmdbClientError(
            f"TMDb request failed with HTTP {resp.status_code}.",
            status_code=resp.status_code,
            body_snippet=(resp.text or "")[:400],
        )

    try:
        payload = resp.json()
    except ValueError as exc:
        raise TmdbClientError(
            "TMDb returned non-JSON response.",
            status_code=resp.status_code,
            body_snippet=(resp.text or "")[:400],
        ) from exc

    if not isinstance(payload, dict):
        raise TmdbClientError("TMDb returned unexpected JSON shape (not an object).")
    return payload


def get_json(
    path: str,
    *,
    params: Mapping[str, Any] | None = None,
    api_key: str | None = None,
    session: requests.Session | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> dict[str, Any]:
    """
    GET `{TMDB_API_BASE_URL}{path}` with the API key added to the query string.
    """

    api_key = _require_api_key(api_key)
    session = session or requests.Session()
    url = f"{TMDB_API_BASE_URL}{path}"
    return _request_json(
        session,
        url,
        params={"api_key": api_key, **(params or {})},
        timeout_seconds=timeout_seconds,
    )

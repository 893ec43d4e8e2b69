from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from movieshelf.integrations.tmdb import client


class _FakeResponse:
    def __init__(self, *, status_code: int = 200, payload=None, text: str = "") -> None:  # noqa: ANN001
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):  # noqa: ANN201
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


def test_get_json_sends_api_key_and_params() -> None:
    session = MagicMock()
    session.get.return_value = _FakeResponse(payload={"results": []})

    payload = client.get_json("/discover/movie", params={"with_genres": "28", "page": 1}, api_key="k", session=session)

    assert payload == {"results": []}
    args, kwargs = session.get.call_args
    assert args == ("https://api.themoviedb.org/3/discover/movie",)
    assert kwargs["params"] == {"api_key": "k", "with_genres": "28", "page": 1}
    assert kwargs["headers"]["accept"] == "application/json"
    assert kwargs["timeout"] == client.DEFAULT_TIMEOUT_SECONDS


def test_request_json_wraps_transport_errors() -> None:
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("boom")

    with pytest.raises(client.TmdbClientError, match="boom"):
        client._request_json(session, "https://example.test")
    assert session.get.call_count == 1


def test_request_json_raises_on_non_200_with_snippet() -> None:
    session = MagicMock()
    session.get.return_value = _FakeResponse(status_code=401, text="Invalid API key")

    with pytest.raises(client.TmdbClientError) as excinfo:
        client._request_json(session, "https://example.test")
    assert excinfo.value.status_code == 401
    assert excinfo.value.body_snippet == "Invalid API key"


def test_request_json_raises_on_non_json_body() -> None:
    session = MagicMock()
    session.get.return_value = _FakeResponse(payload=ValueError("no json"), text="<html>")

    with pytest.raises(client.TmdbClientError, match="non-JSON"):
        client._request_json(session, "https://example.test")


def test_request_json_rejects_non_object_payload() -> None:
    session = MagicMock()
    session.get.return_value = _FakeResponse(payload=[1, 2, 3])

    with pytest.raises(client.TmdbClientError, match="not an object"):
        client._request_json(session, "https://example.test")


def test_resolve_api_key_prefers_argument(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(client, "load_env", lambda **kwargs: None)
    monkeypatch.setenv("TMDB_API_KEY", "from-env")
    assert client.resolve_api_key(" explicit ") == "explicit"
    assert client.resolve_api_key() == "from-env"


def test_missing_api_key_raises_before_request(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(client, "load_env", lambda **kwargs: None)
    monkeypatch.delenv("TMDB_API_KEY", raising=False)
    session = MagicMock()

    assert client.resolve_api_key() is None
    with pytest.raises(RuntimeError, match="TMDB_API_KEY"):
        client.get_json("/configuration", session=session)
    assert session.get.call_count == 0

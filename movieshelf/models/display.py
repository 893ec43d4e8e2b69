from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping

TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p/w500"

MediaType = Literal["movie", "tv"]


@dataclass(frozen=True)
class DisplayRecord:
    """
    UI-ready projection of a TMDb movie or TV result.

    Movies serialize their label under `title`, TV shows under `name`, matching
    the upstream payloads so stored watchlists stay readable by either shape.
    """

    id: int
    title: str
    image: str
    poster_path: str | None = None
    media_type: MediaType = "movie"

    @property
    def label_key(self) -> str:
        return "name" if self.media_type == "tv" else "title"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            self.label_key: self.title,
            "image": self.image,
            "poster_path": self.poster_path,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> DisplayRecord:
        """
        Rebuild a record from its serialized form.

        Raises `ValueError` when the payload is not a usable record.
        """

        if not isinstance(payload, Mapping):
            raise ValueError(f"Expected an object, got {type(payload).__name__}.")

        record_id = payload.get("id")
        if not is_record_id(record_id):
            raise ValueError(f"Record id must be an integer: {record_id!r}")

        if "name" in payload and "title" not in payload:
            media_type: MediaType = "tv"
            label = payload.get("name")
        else:
            media_type = "movie"
            label = payload.get("title")

        poster_path = payload.get("poster_path")
        return cls(
            id=record_id,
            title=str(label) if label is not None else "",
            image=str(payload.get("image") or ""),
            poster_path=poster_path if isinstance(poster_path, str) else None,
            media_type=media_type,
        )


def is_record_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def build_image_url(path: str | None) -> str:
    # Missing paths yield the bare prefix; no placeholder substitution.
    return f"{TMDB_IMAGE_BASE_URL}{path or ''}"


def project_result(item: Mapping[str, Any], media_type: MediaType) -> DisplayRecord:
    """
    Project one element of an upstream `results` array.

    Raises `ValueError` when the item has no integer `id`.
    """

    record_id = item.get("id")
    if not is_record_id(record_id):
        raise ValueError(f"TMDb result has no integer id: {record_id!r}")
    label = item.get("name") if media_type == "tv" else item.get("title")
    backdrop_path = item.get("backdrop_path")
    return DisplayRecord(
        id=record_id,
        title=label if isinstance(label, str) else "",
        image=build_image_url(backdrop_path),
        poster_path=backdrop_path,
        media_type=media_type,
    )


def project_results(payload: Mapping[str, Any], media_type: MediaType) -> list[DisplayRecord]:
    results = payload.get("results")
    if not isinstance(results, list):
        return []
    # Items without an integer id cannot be stored or deduplicated; skip them.
    return [
        project_result(item, media_type)
        for item in results
        if isinstance(item, Mapping) and is_record_id(item.get("id"))
    ]

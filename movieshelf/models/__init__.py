"""
Domain models shared across the gateway and the watchlist store.
"""

from movieshelf.models.display import DisplayRecord, build_image_url, is_record_id, project_result, project_results

__all__ = [
    "DisplayRecord",
    "build_image_url",
    "is_record_id",
    "project_result",
    "project_results",
]

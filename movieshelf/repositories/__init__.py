"""
Repository layer for persisted client state.
"""

from movieshelf.repositories.watchlist import (
    WATCHLIST_KEY,
    WatchlistCorruptError,
    WatchlistRepository,
    deserialize_watchlist,
    serialize_watchlist,
)

__all__ = [
    "WATCHLIST_KEY",
    "WatchlistCorruptError",
    "WatchlistRepository",
    "deserialize_watchlist",
    "serialize_watchlist",
]

"""
Persistence backends for client-side state.
"""

from movieshelf.storage.kv import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
    RedisStore,
    StoreError,
    get_store,
    reset_store,
)

__all__ = [
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "RedisStore",
    "StoreError",
    "get_store",
    "reset_store",
]

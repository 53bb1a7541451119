"""Durable stores and the persistent cell bound to them."""

from pyhooks.storage.cell import (
    ApplyUpdate,
    JsonCodec,
    PersistentCell,
    SetValue,
    StateAction,
    StorageEntry,
)
from pyhooks.storage.stores import JsonFileStore, KeyValueStore, MemoryStore, open_store

__all__ = [
    "ApplyUpdate",
    "JsonCodec",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "PersistentCell",
    "SetValue",
    "StateAction",
    "StorageEntry",
    "open_store",
]

"""Durable string key-value stores backing :class:`PersistentCell`."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Protocol

from pyhooks.config import HooksConfig
from pyhooks.exceptions import PersistenceWriteError

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Synchronous string-keyed get/set/remove, like browser local storage.

    ``set_item`` raises :class:`PersistenceWriteError` (or ``OSError``) when
    the write cannot be stored.
    """

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStore:
    """Process-local store with an optional size quota.

    The quota counts characters of keys plus values, mirroring how browsers
    account local-storage usage.
    """

    def __init__(self, *, quota: int | None = None) -> None:
        self._items: dict[str, str] = {}
        self._quota = quota

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    @property
    def used(self) -> int:
        return sum(len(k) + len(v) for k, v in self._items.items())

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self._quota is not None:
            existing = self._items.get(key)
            freed = len(key) + len(existing) if existing is not None else 0
            needed = self.used - freed + len(key) + len(value)
            if needed > self._quota:
                raise PersistenceWriteError(
                    f"Quota exceeded writing {key!r} ({needed} > {self._quota})",
                    key=key,
                )
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()


class JsonFileStore:
    """Store persisted as one JSON object of string values on disk.

    The file is read once on construction; a missing or corrupt file
    starts empty. Every mutation rewrites the file through a temporary
    sibling that replaces it.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self._items: dict[str, str] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError):
            _logger.debug("Could not load store file %s; starting empty", self._path, exc_info=True)
            return {}
        if not isinstance(data, dict):
            _logger.debug("Store file %s does not hold an object; starting empty", self._path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _save(self, items: dict[str, str], key: str) -> None:
        tmp_path = self._path.with_name(f"{self._path.name}.tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as f:
                json.dump(items, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self._path)
        except OSError as exc:
            raise PersistenceWriteError(f"Could not write {self._path}: {exc}", key=key) from exc

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        items = dict(self._items)
        items[key] = value
        self._save(items, key)
        self._items = items

    def remove_item(self, key: str) -> None:
        if key not in self._items:
            return
        items = dict(self._items)
        del items[key]
        self._save(items, key)
        self._items = items


def open_store(config: HooksConfig | None = None) -> KeyValueStore:
    """File-backed store when ``config.storage_path`` is set, memory otherwise."""
    config = config or HooksConfig()
    if config.storage_path:
        return JsonFileStore(config.storage_path)
    return MemoryStore()

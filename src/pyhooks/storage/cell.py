"""Observable value bound to a durable key-value store."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter

from pyhooks._observable import Observable
from pyhooks.exceptions import PersistenceWriteError, SerializationError
from pyhooks.storage.stores import KeyValueStore

_logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNSET: Any = object()


@dataclass(frozen=True, slots=True)
class SetValue(Generic[T]):
    """Write action replacing the value outright."""

    value: T


@dataclass(frozen=True, slots=True)
class ApplyUpdate(Generic[T]):
    """Write action computing the next value from the current one."""

    fn: Callable[[T], T]


StateAction = SetValue[T] | ApplyUpdate[T]


@dataclass(frozen=True, slots=True)
class StorageEntry(Generic[T]):
    key: str
    live_value: T
    serialized_form: str | None


class JsonCodec(Generic[T]):
    """Compact JSON encoding, optionally validated through a pydantic ``TypeAdapter``.

    All failures surface as :class:`SerializationError`.
    """

    def __init__(self, value_type: type[T] | None = None) -> None:
        self._adapter: TypeAdapter[T] | None = TypeAdapter(value_type) if value_type is not None else None

    def dumps(self, value: T) -> str:
        try:
            if self._adapter is not None:
                return self._adapter.dump_json(value).decode("utf-8")
            return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"Cannot serialize {type(value).__name__}: {exc}") from exc

    def loads(self, text: str) -> T:
        try:
            if self._adapter is not None:
                return self._adapter.validate_json(text)
            return json.loads(text)
        except ValueError as exc:
            raise SerializationError(f"Malformed stored content: {text[:64]!r}") from exc


class PersistentCell(Observable[T]):
    """A live value mirrored into a :class:`KeyValueStore` under ``key``.

    Reading falls back to ``default`` when the key is absent (and seeds the
    store with it) or when the stored content cannot be decoded (leaving
    that content untouched). Writes always update the live value; store
    failures are logged and absorbed.
    """

    def __init__(
        self,
        key: str,
        default: T,
        *,
        store: KeyValueStore,
        value_type: type[T] | None = None,
    ) -> None:
        super().__init__()
        self._store = store
        self._codec: JsonCodec[T] = JsonCodec(value_type)
        self._key = key
        self._default = default
        self._serialized: str | None = None
        self._value = self._read(key, default)

    def __enter__(self) -> PersistentCell[T]:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    @property
    def key(self) -> str:
        return self._key

    @property
    def value(self) -> T:
        return self._value

    @property
    def entry(self) -> StorageEntry[T]:
        return StorageEntry(key=self._key, live_value=self._value, serialized_form=self._serialized)

    def pair(self) -> tuple[T, Callable[[StateAction[T]], T]]:
        """``(value, setter)``, the familiar state-hook shape.

        The setter takes a tagged action, so plain values (``SetValue``) and
        updater functions (``ApplyUpdate``) both go through it.
        """
        return self._value, self.dispatch

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _read(self, key: str, default: T) -> T:
        raw = self._store.get_item(key)
        if raw is None:
            self._persist(key, default)
            return default
        try:
            value = self._codec.loads(raw)
        except SerializationError:
            _logger.debug("Malformed content under key=%s; using default", key, exc_info=True)
            self._serialized = None
            return default
        self._serialized = raw
        return value

    def rebind(self, key: str, default: T = _UNSET) -> None:
        """Re-read under *key*; a no-op when the key is unchanged."""
        if key == self._key:
            return
        if default is not _UNSET:
            self._default = default
        self._key = key
        self._value = self._read(key, self._default)
        self._notify(self._value)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _persist(self, key: str, value: T) -> bool:
        try:
            serialized = self._codec.dumps(value)
            self._store.set_item(key, serialized)
        except (SerializationError, PersistenceWriteError, OSError):
            _logger.debug("Persisting key=%s failed; keeping in-memory value", key, exc_info=True)
            self._serialized = None
            return False
        self._serialized = serialized
        return True

    def dispatch(self, action: StateAction[T]) -> T:
        """Apply a write action and return the new live value."""
        if self.closed:
            _logger.debug("dispatch() on closed PersistentCell key=%s ignored", self._key)
            return self._value
        if isinstance(action, ApplyUpdate):
            next_value = action.fn(self._value)
        else:
            next_value = action.value
        self._persist(self._key, next_value)
        self._value = next_value
        self._notify(next_value)
        return next_value

    def set(self, value: T) -> T:
        return self.dispatch(SetValue(value))

    def update(self, fn: Callable[[T], T]) -> T:
        return self.dispatch(ApplyUpdate(fn))

    def reset(self) -> None:
        """Remove the stored entry and fall back to the default value."""
        try:
            self._store.remove_item(self._key)
        except (PersistenceWriteError, OSError):
            _logger.debug("Removing key=%s failed", self._key, exc_info=True)
        self._serialized = None
        self._value = self._default
        self._notify(self._value)

    def close(self) -> None:
        self._close_listeners()

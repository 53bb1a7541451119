"""Previous-value tracker."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pyhooks._observable import Observable

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class HistoryPair(Generic[T]):
    current: T | None
    previous: T | None


class HistoryCell(Observable[HistoryPair[T]]):
    """Remember the value seen on the previous update cycle.

    :meth:`observe` returns what was current one cycle ago, then records the
    new value, so the tracker is always one step behind. Values are kept by
    reference; compare with ``is`` to detect a new object.
    """

    def __init__(self) -> None:
        super().__init__()
        self._current: T | None = None
        self._previous: T | None = None
        self._cycles = 0

    def __enter__(self) -> HistoryCell[T]:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    @property
    def previous(self) -> T | None:
        return self._previous

    @property
    def has_previous(self) -> bool:
        """False until a value from an earlier cycle exists (``None`` may be a tracked value)."""
        return self._cycles > 1

    @property
    def pair(self) -> HistoryPair[T]:
        return HistoryPair(current=self._current, previous=self._previous)

    def observe(self, value: T) -> T | None:
        """Start a new cycle with *value* and return the previous cycle's value."""
        previous = self._current if self._cycles else None
        self._previous = previous
        self._current = value
        self._cycles += 1
        self._notify(self.pair)
        return previous

    def close(self) -> None:
        self._close_listeners()

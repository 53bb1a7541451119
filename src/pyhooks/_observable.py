"""Subscription primitive shared by every reactive component."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

_logger = logging.getLogger(__name__)

S = TypeVar("S")

Listener = Callable[[S], None]


class Observable(Generic[S]):
    """Holds listeners and fans out state snapshots to them.

    Listeners are invoked synchronously, in subscription order. A failing
    listener is logged and skipped; it never breaks the component or the
    listeners after it.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener[S]] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: Listener[S]) -> Callable[[], None]:
        """Register *listener* and return a callable that removes it."""
        if self._closed:
            _logger.debug("subscribe() on closed %s ignored", type(self).__name__)
            return lambda: None
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return _unsubscribe

    def _notify(self, snapshot: S) -> None:
        if self._closed:
            return
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                _logger.debug("%s listener failed", type(self).__name__, exc_info=True)

    def _close_listeners(self) -> None:
        self._closed = True
        self._listeners.clear()

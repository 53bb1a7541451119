"""Timer boundary and cancellation tokens."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Single-shot deferred callbacks.

    ``asyncio.AbstractEventLoop`` satisfies this protocol, so the running
    loop is the production scheduler; tests pass a manual clock.
    """

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...

    def time(self) -> float: ...


def resolve_scheduler(scheduler: Scheduler | None) -> Scheduler:
    """Return *scheduler* or the running event loop."""
    if scheduler is not None:
        return scheduler
    return asyncio.get_running_loop()


class CancellationToken:
    """Flag checked before every state mutation of an async operation.

    Invalidated synchronously when the operation is superseded or its
    owner is closed.
    """

    __slots__ = ("_cancelled",)

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self._cancelled})"

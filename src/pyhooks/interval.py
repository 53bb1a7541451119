"""Repeating timer that always invokes the latest callback."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pyhooks._scheduling import CancellationToken, Scheduler, TimerHandle, resolve_scheduler

_logger = logging.getLogger(__name__)


class IntervalTicker:
    """Call ``callback`` every ``delay`` seconds until closed.

    Swapping the callback keeps the running timer. Changing the delay
    restarts it; a delay of ``None`` pauses the ticker.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        delay: float | None,
        *,
        scheduler: Scheduler | None = None,
    ) -> None:
        self._callback = callback
        self._scheduler = scheduler
        self._delay: float | None = None
        self._deadline = 0.0
        self._handle: TimerHandle | None = None
        self._token: CancellationToken | None = None
        self._closed = False
        self.set_delay(delay)

    def __enter__(self) -> IntervalTicker:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    @property
    def delay(self) -> float | None:
        return self._delay

    @property
    def running(self) -> bool:
        return self._handle is not None

    def set_callback(self, callback: Callable[[], None]) -> None:
        self._callback = callback

    def set_delay(self, delay: float | None) -> None:
        if delay is not None and delay < 0:
            raise ValueError(f"delay must be non-negative or None, got {delay!r}")
        self._stop()
        self._delay = delay
        if delay is None or self._closed:
            return
        self._token = CancellationToken()
        self._deadline = resolve_scheduler(self._scheduler).time() + delay
        self._arm(self._token)

    def close(self) -> None:
        self._stop()
        self._closed = True

    def _stop(self) -> None:
        if self._token is not None:
            self._token.cancel()
            self._token = None
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _arm(self, token: CancellationToken) -> None:
        scheduler = resolve_scheduler(self._scheduler)
        # Deadlines advance from the scheduled time, not from when the callback returned.
        delay = max(0.0, self._deadline - scheduler.time())
        self._handle = scheduler.call_later(delay, self._tick, token)

    def _tick(self, token: CancellationToken) -> None:
        if token.cancelled:
            return
        try:
            self._callback()
        except Exception:
            _logger.debug("IntervalTicker callback failed", exc_info=True)
        # The callback may have paused or closed the ticker.
        if not token.cancelled:
            assert self._delay is not None  # noqa: S101
            self._deadline += self._delay
            self._arm(token)

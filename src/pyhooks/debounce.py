"""Value debouncer: commit only the last value after a quiet interval."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pyhooks._observable import Observable
from pyhooks._scheduling import CancellationToken, Scheduler, TimerHandle, resolve_scheduler
from pyhooks.config import HooksConfig

_logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True)
class DebounceState(Generic[T]):
    """Snapshot of a debouncer.

    ``deadline`` is the scheduler time at which ``pending_value`` will be
    committed, or ``None`` when nothing is pending.
    """

    pending_value: T
    committed_value: T
    deadline: float | None = None


def _check_interval(interval: float) -> float:
    if interval < 0:
        raise ValueError(f"interval must be non-negative, got {interval!r}")
    return float(interval)


class Debouncer(Observable[T]):
    """Expose the latest value only once updates have stopped for ``interval`` seconds.

    Each :meth:`update` cancels the pending commit and schedules a new one,
    so intermediate values are dropped. Subscribers receive the committed
    value. The initial value counts as committed. Without an explicit
    ``interval`` the configured ``debounce_interval`` applies.
    """

    def __init__(
        self,
        initial: T,
        interval: float | None = None,
        *,
        scheduler: Scheduler | None = None,
        config: HooksConfig | None = None,
    ) -> None:
        super().__init__()
        if interval is None:
            interval = (config or HooksConfig()).debounce_interval
        self._interval = _check_interval(interval)
        self._scheduler = scheduler
        self._state: DebounceState[T] = DebounceState(pending_value=initial, committed_value=initial)
        self._handle: TimerHandle | None = None
        self._token: CancellationToken | None = None

    def __enter__(self) -> Debouncer[T]:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    @property
    def value(self) -> T:
        """The committed value."""
        return self._state.committed_value

    @property
    def pending(self) -> bool:
        return self._state.deadline is not None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def state(self) -> DebounceState[T]:
        return DebounceState(
            pending_value=self._state.pending_value,
            committed_value=self._state.committed_value,
            deadline=self._state.deadline,
        )

    def update(self, value: T) -> None:
        """Feed a new value and restart the quiet interval."""
        if self.closed:
            _logger.debug("update() on closed Debouncer ignored")
            return
        self._state.pending_value = value
        self._schedule()

    def set_interval(self, interval: float) -> None:
        """Change the quiet interval; a pending commit is rescheduled with it."""
        self._interval = _check_interval(interval)
        if self.pending and not self.closed:
            self._schedule()

    def cancel(self) -> None:
        """Drop the pending commit, if any, keeping the committed value."""
        if self._token is not None:
            self._token.cancel()
            self._token = None
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._state.deadline = None

    def close(self) -> None:
        """Tear down; a pending commit never fires after this."""
        if self.closed:
            return
        self.cancel()
        self._close_listeners()

    def _schedule(self) -> None:
        self.cancel()
        scheduler = resolve_scheduler(self._scheduler)
        token = CancellationToken()
        self._token = token
        self._state.deadline = scheduler.time() + self._interval
        self._handle = scheduler.call_later(self._interval, self._commit, token)

    def _commit(self, token: CancellationToken) -> None:
        if token.cancelled or self.closed:
            return
        self._handle = None
        self._token = None
        self._state.deadline = None
        self._state.committed_value = self._state.pending_value
        _logger.debug("Debouncer committed after %.3fs quiet interval", self._interval)
        self._notify(self._state.committed_value)

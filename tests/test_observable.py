from __future__ import annotations

from typing import Any

from pyhooks.debounce import Debouncer


def test_failing_listener_does_not_block_others(clock: Any) -> None:
    debouncer = Debouncer(0, 1.0, scheduler=clock)
    received: list[int] = []

    def _broken(_value: int) -> None:
        raise RuntimeError("listener bug")

    debouncer.subscribe(_broken)
    debouncer.subscribe(received.append)

    debouncer.update(1)
    clock.advance(1.0)

    assert received == [1]
    assert debouncer.value == 1


def test_unsubscribe_stops_notifications(clock: Any) -> None:
    debouncer = Debouncer(0, 1.0, scheduler=clock)
    received: list[int] = []
    unsubscribe = debouncer.subscribe(received.append)

    debouncer.update(1)
    clock.advance(1.0)
    unsubscribe()
    unsubscribe()
    debouncer.update(2)
    clock.advance(1.0)

    assert received == [1]


def test_subscribe_after_close_is_inert(clock: Any) -> None:
    debouncer = Debouncer(0, 1.0, scheduler=clock)
    debouncer.close()

    unsubscribe = debouncer.subscribe(lambda _v: None)
    unsubscribe()
    assert debouncer.closed

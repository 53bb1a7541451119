from __future__ import annotations

from pyhooks.history import HistoryCell, HistoryPair


def test_previous_lags_one_cycle() -> None:
    cell: HistoryCell[int] = HistoryCell()

    assert [cell.observe(v) for v in (1, 2, 3)] == [None, 1, 2]
    assert cell.previous == 2


def test_has_previous_distinguishes_tracked_none() -> None:
    cell: HistoryCell[int | None] = HistoryCell()

    cell.observe(None)
    assert cell.has_previous is False

    assert cell.observe(1) is None
    assert cell.has_previous is True


def test_same_value_still_advances() -> None:
    cell: HistoryCell[int] = HistoryCell()
    cell.observe(2)
    assert cell.observe(2) == 2


def test_previous_keeps_object_identity() -> None:
    cell: HistoryCell[dict[str, int]] = HistoryCell()
    first = {"a": 1}
    second = {"a": 1}

    cell.observe(first)
    previous = cell.observe(second)

    assert previous is first
    assert previous is not second


def test_subscribers_receive_pairs() -> None:
    pairs: list[HistoryPair[str]] = []
    with HistoryCell() as cell:
        cell.subscribe(pairs.append)
        cell.observe("a")
        cell.observe("b")

    cell.observe("c")
    assert pairs == [
        HistoryPair(current="a", previous=None),
        HistoryPair(current="b", previous="a"),
    ]

from __future__ import annotations

import json

from pydantic import BaseModel

from pyhooks.storage import ApplyUpdate, MemoryStore, PersistentCell, SetValue


class _Prefs(BaseModel):
    theme: str = "light"
    font_size: int = 14


def test_absent_key_seeds_store_with_default() -> None:
    store = MemoryStore()
    cell = PersistentCell("counter", 0, store=store)

    assert cell.value == 0
    assert store.get_item("counter") == "0"


def test_existing_value_is_read() -> None:
    store = MemoryStore()
    store.set_item("theme", json.dumps("dark"))

    cell = PersistentCell("theme", "light", store=store)
    assert cell.value == "dark"
    assert cell.entry.serialized_form == '"dark"'


def test_set_updates_value_and_persists() -> None:
    store = MemoryStore()
    cell = PersistentCell("name", "", store=store)
    seen: list[str] = []
    cell.subscribe(seen.append)

    value, set_name = cell.pair()
    assert value == ""
    set_name(SetValue("Alice"))

    assert cell.value == "Alice"
    assert store.get_item("name") == json.dumps("Alice")
    assert seen == ["Alice"]


def test_update_applies_function_to_current_value() -> None:
    store = MemoryStore()
    cell = PersistentCell("n", 1, store=store)

    assert cell.update(lambda prev: prev + 1) == 2
    assert cell.value == 2
    assert store.get_item("n") == "2"


def test_pair_setter_applies_updater_functions() -> None:
    store = MemoryStore()
    cell = PersistentCell("n", 1, store=store)

    _, set_n = cell.pair()
    assert set_n(ApplyUpdate(lambda prev: prev + 1)) == 2

    assert cell.value == 2
    assert store.get_item("n") == "2"
    assert cell.entry.serialized_form == "2"


def test_dispatch_accepts_tagged_actions() -> None:
    store = MemoryStore()
    cell = PersistentCell("cart", [], store=store)

    cell.dispatch(SetValue(["apple"]))
    cell.dispatch(ApplyUpdate(lambda items: [*items, "pear"]))

    assert cell.value == ["apple", "pear"]
    assert store.get_item("cart") == '["apple","pear"]'


def test_callable_values_are_stored_via_set_not_applied() -> None:
    store = MemoryStore()
    cell = PersistentCell("fn", None, store=store)

    cell.dispatch(SetValue(len))
    assert cell.value is len
    # Not JSON-serializable: kept in memory only.
    assert store.get_item("fn") == "null"
    assert cell.entry.serialized_form is None


def test_round_trip_across_cells() -> None:
    store = MemoryStore()
    PersistentCell("k", 0, store=store).set(42)

    assert PersistentCell("k", 0, store=store).value == 42


def test_malformed_content_falls_back_without_repair() -> None:
    store = MemoryStore()
    store.set_item("broken", "{not-json")

    cell = PersistentCell("broken", 5, store=store)

    assert cell.value == 5
    assert store.get_item("broken") == "{not-json"
    assert cell.entry.serialized_form is None


def test_quota_failure_still_updates_live_value() -> None:
    store = MemoryStore(quota=10)
    cell = PersistentCell("big", "", store=store)
    assert store.get_item("big") == '""'

    cell.set("x" * 100)

    assert cell.value == "x" * 100
    assert store.get_item("big") == '""'


def test_rebind_reads_under_new_key() -> None:
    store = MemoryStore()
    store.set_item("b", "7")
    cell = PersistentCell("a", 1, store=store)
    seen: list[int] = []
    cell.subscribe(seen.append)

    cell.rebind("b")
    assert cell.key == "b"
    assert cell.value == 7
    assert seen == [7]

    cell.set(8)
    assert store.get_item("b") == "8"
    assert store.get_item("a") == "1"


def test_rebind_to_absent_key_uses_new_default() -> None:
    store = MemoryStore()
    cell = PersistentCell("a", 1, store=store)

    cell.rebind("c", default=3)
    assert cell.value == 3
    assert store.get_item("c") == "3"

    cell.rebind("c", default=99)
    assert cell.value == 3


def test_value_type_validates_stored_content() -> None:
    store = MemoryStore()
    store.set_item("n", '"abc"')

    cell = PersistentCell("n", 0, store=store, value_type=int)
    assert cell.value == 0


def test_value_type_round_trips_models() -> None:
    store = MemoryStore()
    cell = PersistentCell("prefs", _Prefs(), store=store, value_type=_Prefs)
    cell.set(_Prefs(theme="dark", font_size=16))

    assert json.loads(store.get_item("prefs") or "") == {"theme": "dark", "font_size": 16}
    assert PersistentCell("prefs", _Prefs(), store=store, value_type=_Prefs).value == _Prefs(
        theme="dark", font_size=16
    )


def test_reset_removes_entry_and_restores_default() -> None:
    store = MemoryStore()
    cell = PersistentCell("n", 1, store=store)
    cell.set(5)

    cell.reset()
    assert cell.value == 1
    assert "n" not in store


def test_writes_after_close_are_ignored() -> None:
    store = MemoryStore()
    with PersistentCell("n", 1, store=store) as cell:
        cell.set(2)

    cell.set(3)
    assert cell.value == 2
    assert store.get_item("n") == "2"

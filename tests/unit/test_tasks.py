import dataclasses
from datetime import UTC, datetime

import pytest

from tally.core.models import Priority
from tally.lib.ids import CounterIds
from tally.tasks import TaskStore

FIXED_NOW = datetime(2026, 10, 19, 9, 0, tzinfo=UTC)


@pytest.fixture
def store():
    return TaskStore(new_id=CounterIds("t"), now=lambda: FIXED_NOW)


def test_add_task_prepends_new_pending_task(store):
    first = store.add_task("first")
    second = store.add_task("second", "high")

    assert len(store) == 2
    assert store.items == (second, first)
    assert second.completed is False
    assert second.priority is Priority.HIGH
    assert second.created_at == FIXED_NOW


@pytest.mark.parametrize("text", ["", "   ", "\t\n"])
def test_add_task_blank_text_is_noop(store, text):
    seen = []
    store.subscribe(seen.append)

    assert store.add_task(text) is None
    assert len(store) == 0
    assert seen == []


def test_add_task_trims_text(store):
    task = store.add_task("  Buy milk  ")
    assert task.text == "Buy milk"


def test_add_task_unknown_priority_falls_back_to_medium(store):
    task = store.add_task("x", "urgent")
    assert task.priority is Priority.MEDIUM


def test_ids_unique_within_same_clock_tick(store):
    tasks = [store.add_task(f"task {i}") for i in range(5)]
    assert len({t.id for t in tasks}) == 5


def test_toggle_twice_restores_task(store):
    original = store.add_task("read")
    store.add_task("other")

    toggled = store.toggle_task(original.id)
    assert toggled.completed is True
    assert dataclasses.replace(toggled, completed=False) == original

    store.toggle_task(original.id)
    assert store.get(original.id) == original


def test_toggle_unknown_id_is_noop(store):
    store.add_task("a")
    before = store.items
    assert store.toggle_task("missing") is None
    assert store.items is before


def test_delete_unknown_id_leaves_collection_unchanged(store):
    store.add_task("a")
    store.add_task("b")
    before = store.items

    assert store.delete_task("missing") is False
    assert store.items == before
    assert store.items is before


def test_rename_replaces_text_even_when_empty(store):
    task = store.add_task("draft")
    renamed = store.rename_task(task.id, "")
    assert renamed.text == ""
    assert renamed.id == task.id
    assert renamed.priority == task.priority


def test_mutation_replaces_snapshot_without_editing_old_one(store):
    task = store.add_task("a")
    old = store.items
    store.toggle_task(task.id)

    assert old[0].completed is False
    assert store.items[0].completed is True
    assert store.items is not old


def test_listeners_receive_each_snapshot_and_can_unsubscribe(store):
    seen = []
    unsubscribe = store.subscribe(seen.append)

    task = store.add_task("a")
    store.toggle_task(task.id)
    unsubscribe()
    store.delete_task(task.id)

    assert len(seen) == 2
    assert seen[-1][0].completed is True
    assert len(store) == 0


def test_buy_milk_scenario(store):
    task = store.add_task("Buy milk", "medium")
    assert [(t.text, t.completed, t.priority) for t in store] == [
        ("Buy milk", False, Priority.MEDIUM)
    ]

    store.toggle_task(task.id)
    assert store.get(task.id).completed is True

    store.delete_task(task.id)
    assert store.items == ()

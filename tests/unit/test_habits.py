from datetime import UTC, datetime

import pytest

from tally.core.models import Habit
from tally.habits import HabitStore, coerce_target
from tally.lib.ids import CounterIds


@pytest.fixture
def store(day):
    return HabitStore(new_id=CounterIds("h"), today=day)


def _assert_today_invariant(store, day):
    for habit in store:
        assert habit.completed_today == (day() in habit.completed_dates)
        assert habit.streak >= 0


def test_exercise_scenario(store, day):
    habit = store.add_habit("Exercise", "", 1)
    assert (habit.streak, habit.completed_today) == (0, False)

    marked = store.toggle_habit_today(habit.id)
    assert (marked.streak, marked.completed_today) == (1, True)
    assert marked.completed_dates == frozenset({day()})

    unmarked = store.toggle_habit_today(habit.id)
    assert (unmarked.streak, unmarked.completed_today) == (0, False)


def test_add_habit_defaults_and_trimming(store):
    habit = store.add_habit("  Read  ", "  ten pages ")
    assert habit.name == "Read"
    assert habit.description == "ten pages"
    assert habit.completed_dates == frozenset()
    assert habit.target == 1


@pytest.mark.parametrize("name", ["", "  "])
def test_add_habit_blank_name_is_noop(store, name):
    assert store.add_habit(name, "desc", 3) is None
    assert len(store) == 0


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(3, 3), ("4", 4), ("abc", 1), (0, 1), (-2, 1), (None, 1), ("", 1)],
)
def test_coerce_target(raw, expected):
    assert coerce_target(raw) == expected


def test_add_habit_newest_first(store):
    a = store.add_habit("a")
    b = store.add_habit("b")
    assert store.items == (b, a)


def test_toggle_on_then_off_restores_exact_prior_state(store, day):
    habit = store.add_habit("Meditate")
    store.toggle_habit_today(habit.id)
    day.value = "2026-10-20"
    store.refresh_today()
    before = store.get(habit.id)

    store.toggle_habit_today(habit.id)
    store.toggle_habit_today(habit.id)

    after = store.get(habit.id)
    assert after.streak == before.streak == 1
    assert after.completed_dates == before.completed_dates
    assert after == before


def test_streak_counts_toggles_not_contiguous_days(store, day):
    habit = store.add_habit("Journal")
    for key in ["2026-10-01", "2026-10-05", "2026-10-19"]:
        day.value = key
        store.refresh_today()
        store.toggle_habit_today(habit.id)

    updated = store.get(habit.id)
    assert updated.streak == 3
    assert updated.completed_dates == frozenset({"2026-10-01", "2026-10-05", "2026-10-19"})


def test_streak_never_negative(day):
    odd = Habit(
        id="h-x",
        name="odd",
        created_at=datetime(2026, 1, 1, tzinfo=UTC),
        streak=0,
        completed_today=True,
        completed_dates=frozenset({day()}),
    )
    store = HabitStore([odd], today=day)

    updated = store.toggle_habit_today("h-x")
    assert updated.streak == 0
    assert updated.completed_today is False
    assert updated.completed_dates == frozenset()


def test_invariant_holds_across_operations(store, day):
    a = store.add_habit("a")
    b = store.add_habit("b")
    _assert_today_invariant(store, day)

    store.toggle_habit_today(a.id)
    _assert_today_invariant(store, day)
    store.rename_habit(a.id, name="aa")
    _assert_today_invariant(store, day)
    store.toggle_habit_today(b.id)
    store.reset_habit(b.id)
    _assert_today_invariant(store, day)
    store.delete_habit(a.id)
    _assert_today_invariant(store, day)


def test_reset_clears_everything(store, day):
    habit = store.add_habit("Stretch")
    store.toggle_habit_today(habit.id)
    day.value = "2026-10-20"
    store.refresh_today()
    store.toggle_habit_today(habit.id)

    reset = store.reset_habit(habit.id)
    assert reset.streak == 0
    assert reset.completed_today is False
    assert reset.completed_dates == frozenset()
    assert reset.name == "Stretch"


def test_rename_merges_only_given_fields(store):
    habit = store.add_habit("Walk", "after lunch")

    renamed = store.rename_habit(habit.id, name="Long walk")
    assert (renamed.name, renamed.description) == ("Long walk", "after lunch")

    described = store.rename_habit(habit.id, description="")
    assert (described.name, described.description) == ("Long walk", "")

    both = store.rename_habit(habit.id, name="", description="x")
    assert (both.name, both.description) == ("", "x")


def test_unknown_ids_are_noops(store):
    store.add_habit("a")
    before = store.items
    assert store.toggle_habit_today("nope") is None
    assert store.rename_habit("nope", name="x") is None
    assert store.reset_habit("nope") is None
    assert store.delete_habit("nope") is False
    assert store.items is before


def test_refresh_today_rolls_over_without_touching_streak(store, day):
    habit = store.add_habit("Water")
    store.toggle_habit_today(habit.id)
    seen = []
    store.subscribe(seen.append)

    assert store.refresh_today() == 0
    assert seen == []

    day.value = "2026-10-20"
    assert store.refresh_today() == 1
    rolled = store.get(habit.id)
    assert rolled.completed_today is False
    assert rolled.streak == 1
    assert rolled.completed_dates == frozenset({"2026-10-19"})
    assert len(seen) == 1


def test_next_day_toggle_keeps_previous_dates(store, day):
    day.value = "2026-10-18"
    habit = store.add_habit("Floss")
    store.toggle_habit_today(habit.id)

    day.value = "2026-10-19"
    store.refresh_today()
    updated = store.toggle_habit_today(habit.id)

    assert updated.completed_dates == frozenset({"2026-10-18", "2026-10-19"})
    assert updated.streak == 2

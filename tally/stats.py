import dataclasses
import json as _json
from collections.abc import Sequence

from fncli import cli

from .core.models import Habit, Stats, Task
from .lib.errors import echo

__all__ = [
    "build_stats",
    "completion_pct",
    "habits_completed_today_count",
    "habits_total_count",
    "max_streak",
    "tasks_completed_count",
    "tasks_pending_count",
    "tasks_total_count",
]


# ── domain ───────────────────────────────────────────────────────────────────


def tasks_completed_count(tasks: Sequence[Task]) -> int:
    return sum(1 for t in tasks if t.completed)


def tasks_total_count(tasks: Sequence[Task]) -> int:
    return len(tasks)


def tasks_pending_count(tasks: Sequence[Task]) -> int:
    return tasks_total_count(tasks) - tasks_completed_count(tasks)


def habits_completed_today_count(habits: Sequence[Habit]) -> int:
    return sum(1 for h in habits if h.completed_today)


def habits_total_count(habits: Sequence[Habit]) -> int:
    return len(habits)


def max_streak(habits: Sequence[Habit]) -> int:
    return max((h.streak for h in habits), default=0)


def completion_pct(done: int, total: int) -> float:
    """Share of done over total as a 0-100 percentage; 0.0 for an empty list."""
    if total <= 0:
        return 0.0
    return done / total * 100


def build_stats(tasks: Sequence[Task], habits: Sequence[Habit]) -> Stats:
    tasks_done = tasks_completed_count(tasks)
    tasks_total = tasks_total_count(tasks)
    habits_done = habits_completed_today_count(habits)
    habits_total = habits_total_count(habits)
    return Stats(
        tasks_completed=tasks_done,
        tasks_total=tasks_total,
        tasks_pending=tasks_total - tasks_done,
        habits_completed_today=habits_done,
        habits_total=habits_total,
        max_streak=max_streak(habits),
        tasks_pct=completion_pct(tasks_done, tasks_total),
        habits_pct=completion_pct(habits_done, habits_total),
    )


# ── cli ──────────────────────────────────────────────────────────────────────


@cli("tally")
def stats(json: bool = False) -> None:
    """Completion counts and best streak"""
    from .lib.render import render_stats
    from .state import load_app

    app = load_app()
    snapshot = build_stats(app.tasks.items, app.habits.items)
    if json:
        echo(_json.dumps(dataclasses.asdict(snapshot)))
        return
    echo(render_stats(snapshot))

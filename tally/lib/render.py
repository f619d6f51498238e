from collections.abc import Sequence

from tally.core.models import Habit, Stats, Task

from . import ansi
from .format import format_habit, format_task, progress_bar

__all__ = ["render_dashboard", "render_habit_list", "render_stats", "render_task_list"]


def render_task_list(tasks: Sequence[Task]) -> str:
    if not tasks:
        return "No tasks yet."
    return "\n".join(format_task(t, show_id=True) for t in tasks)


def render_habit_list(habits: Sequence[Habit]) -> str:
    if not habits:
        return "No habits yet."
    return "\n".join(format_habit(h, show_id=True) for h in habits)


def render_stats(stats: Stats) -> str:
    lines = [
        f"tasks   {stats.tasks_completed}/{stats.tasks_total}  {progress_bar(stats.tasks_pct)}",
        f"habits  {stats.habits_completed_today}/{stats.habits_total} today  "
        f"{progress_bar(stats.habits_pct)}",
        f"streak  {ansi.purple(str(stats.max_streak))} best",
        f"pending {ansi.orange(str(stats.tasks_pending))}",
    ]
    return "\n".join(lines)


def render_dashboard(tasks: Sequence[Task], habits: Sequence[Habit], stats: Stats) -> str:
    lines = [render_stats(stats), ""]
    lines.append(ansi.bold("TASKS"))
    lines.append(render_task_list(tasks))
    lines.append("")
    lines.append(ansi.bold("HABITS"))
    lines.append(render_habit_list(habits))
    return "\n".join(lines)

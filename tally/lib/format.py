from tally.core.models import Habit, Priority, Task

from . import ansi

__all__ = [
    "format_habit",
    "format_priority",
    "format_status",
    "format_task",
    "progress_bar",
]

_PRIORITY_COLOR = {
    Priority.HIGH: ansi.red,
    Priority.MEDIUM: ansi.yellow,
    Priority.LOW: ansi.green,
}


def format_priority(priority: Priority) -> str:
    return _PRIORITY_COLOR[priority](priority.value)


def format_task(task: Task, show_id: bool = False) -> str:
    """Format a task for display. Returns: [✓|□] text priority [id]"""
    parts = []
    if task.completed:
        parts.append(ansi.green("✓"))
        parts.append(ansi.muted(task.text))
    else:
        parts.append("□")
        parts.append(task.text)

    parts.append(format_priority(task.priority))

    if show_id:
        parts.append(ansi.muted(f"[{task.id[:8]}]"))

    return " ".join(parts)


def format_habit(habit: Habit, show_id: bool = False) -> str:
    """Format a habit for display. Returns: [✓|□] name streak [target] [id] [description]"""
    parts = []
    parts.append(ansi.muted("✓") if habit.completed_today else "□")
    parts.append(habit.name)
    parts.append(ansi.orange(f"🔥{habit.streak}d"))

    if habit.target > 1:
        parts.append(ansi.muted(f"x{habit.target}/day"))

    if show_id:
        parts.append(ansi.muted(f"[{habit.id[:8]}]"))

    line = " ".join(parts)
    if habit.description:
        line += f"\n    {ansi.dim(habit.description)}"
    return line


def format_status(symbol: str, content: str, item_id: str | None = None) -> str:
    """Format status message for action confirmations."""
    if item_id:
        return f"{symbol} {content} {ansi.muted(f'[{item_id[:8]}]')}"
    return f"{symbol} {content}"


def progress_bar(pct: float, width: int = 20) -> str:
    filled = round(max(0.0, min(100.0, pct)) / 100 * width)
    return ansi.green("█" * filled) + ansi.muted("░" * (width - filled))

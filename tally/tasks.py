import dataclasses
import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from fncli import UsageError, cli

from . import config
from .core.errors import ValidationError
from .core.models import Priority, Task
from .core.store import SnapshotStore
from .lib import clock, ids
from .lib.errors import echo, exit_error
from .lib.format import format_status
from .lib.render import render_task_list
from .lib.resolve import resolve_task

__all__ = ["TaskStore"]

logger = logging.getLogger(__name__)


# ── domain ───────────────────────────────────────────────────────────────────


class TaskStore(SnapshotStore[Task]):
    """Newest-first task list. Every operation is total: bad input is a no-op."""

    def __init__(
        self,
        tasks: Iterable[Task] = (),
        *,
        new_id: ids.IdFactory = ids.new_id,
        now: Callable[[], datetime] = clock.now,
    ) -> None:
        super().__init__(tasks)
        self._new_id = new_id
        self._now = now

    def add_task(self, text: str, priority: Priority | str = Priority.MEDIUM) -> Task | None:
        content = text.strip() if text else ""
        if not content:
            return None
        task = Task(
            id=self._new_id(),
            text=content,
            completed=False,
            created_at=self._now(),
            priority=Priority.parse(priority),
        )
        logger.debug("task added id=%s priority=%s", task.id, task.priority)
        return self._prepend(task)

    def toggle_task(self, task_id: str) -> Task | None:
        return self._update(task_id, lambda t: dataclasses.replace(t, completed=not t.completed))

    def delete_task(self, task_id: str) -> bool:
        return self._remove(task_id)

    def rename_task(self, task_id: str, new_text: str) -> Task | None:
        return self._update(task_id, lambda t: dataclasses.replace(t, text=new_text))


def _check_priority(raw: str) -> str:
    if raw.strip().lower() not in {p.value for p in Priority}:
        raise UsageError(f"unknown priority: {raw} (low, medium, high)")
    return raw


# ── cli ──────────────────────────────────────────────────────────────────────


@cli("tally task", name="add", flags={"priority": ["-p", "--priority"]})
def add(text: list[str], priority: str | None = None) -> None:
    """Add a task"""
    from .state import load_app

    content = " ".join(text).strip() if text else ""
    if not content:
        exit_error("Usage: tally task add <text>")
    chosen = _check_priority(priority or config.get_default_priority())
    task = load_app().tasks.add_task(content, chosen)
    if task:
        echo(format_status("□", task.text, task.id))


@cli("tally task", name="ls", default=True)
def ls() -> None:
    """List tasks"""
    from .state import load_app

    echo(render_task_list(load_app().tasks.items))


@cli("tally task")
def done(ref: str) -> None:
    """Toggle a task done/undone"""
    from .state import load_app

    app = load_app()
    task = resolve_task(app, ref)
    updated = app.tasks.toggle_task(task.id)
    if updated:
        symbol = "✓" if updated.completed else "□"
        echo(format_status(symbol, updated.text, updated.id))


@cli("tally task")
def rm(ref: str) -> None:
    """Delete a task"""
    from .state import load_app

    app = load_app()
    task = resolve_task(app, ref, exact=True)
    app.tasks.delete_task(task.id)
    echo(f"removed: {task.text}")


@cli("tally task")
def rename(ref: str, text: list[str]) -> None:
    """Rename a task"""
    from .state import load_app

    content = " ".join(text).strip() if text else ""
    if not content:
        raise ValidationError("task text cannot be empty")
    app = load_app()
    task = resolve_task(app, ref)
    if task.text == content:
        raise ValidationError(f"cannot rename '{task.text}' to itself")
    app.tasks.rename_task(task.id, content)
    echo(f"→ {content}")

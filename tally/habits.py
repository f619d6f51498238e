import dataclasses
import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from fncli import UsageError, cli

from .core.errors import ValidationError
from .core.models import Habit
from .core.store import SnapshotStore
from .lib import clock, ids
from .lib.errors import echo, exit_error
from .lib.format import format_status
from .lib.render import render_habit_list
from .lib.resolve import resolve_habit

__all__ = ["UNSET", "HabitStore", "coerce_target"]

logger = logging.getLogger(__name__)


# ── domain ───────────────────────────────────────────────────────────────────

UNSET: object = object()


def coerce_target(raw: object) -> int:
    """Daily target as a positive int; junk and values below 1 become 1."""
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return 1
    return value if value >= 1 else 1


def _mark(habit: Habit, today: str) -> Habit:
    return dataclasses.replace(
        habit,
        completed_dates=habit.completed_dates | {today},
        streak=habit.streak + 1,
        completed_today=True,
    )


def _unmark(habit: Habit, today: str) -> Habit:
    return dataclasses.replace(
        habit,
        completed_dates=habit.completed_dates - {today},
        streak=max(0, habit.streak - 1),
        completed_today=False,
    )


class HabitStore(SnapshotStore[Habit]):
    """
    Newest-first habit list with a per-day completion toggle.

    The streak is a counter moved by one per toggle. It is not recomputed
    from completed_dates, so gaps between marked days do not break it.
    """

    def __init__(
        self,
        habits: Iterable[Habit] = (),
        *,
        new_id: ids.IdFactory = ids.new_id,
        now: Callable[[], datetime] = clock.now,
        today: Callable[[], str] = clock.today_key,
    ) -> None:
        super().__init__(habits)
        self._new_id = new_id
        self._now = now
        self._today = today

    def add_habit(self, name: str, description: str = "", target: object = 1) -> Habit | None:
        content = name.strip() if name else ""
        if not content:
            return None
        habit = Habit(
            id=self._new_id(),
            name=content,
            description=(description or "").strip(),
            created_at=self._now(),
            target=coerce_target(target),
        )
        logger.debug("habit added id=%s target=%s", habit.id, habit.target)
        return self._prepend(habit)

    def toggle_habit_today(self, habit_id: str) -> Habit | None:
        today = self._today()

        def _toggle(habit: Habit) -> Habit:
            if habit.completed_today:
                return _unmark(habit, today)
            return _mark(habit, today)

        return self._update(habit_id, _toggle)

    def delete_habit(self, habit_id: str) -> bool:
        return self._remove(habit_id)

    def rename_habit(
        self, habit_id: str, name: object = UNSET, description: object = UNSET
    ) -> Habit | None:
        changes: dict[str, object] = {}
        if name is not UNSET:
            changes["name"] = name
        if description is not UNSET:
            changes["description"] = description
        return self._update(habit_id, lambda h: dataclasses.replace(h, **changes))

    def reset_habit(self, habit_id: str) -> Habit | None:
        return self._update(
            habit_id,
            lambda h: dataclasses.replace(
                h, streak=0, completed_today=False, completed_dates=frozenset()
            ),
        )

    def refresh_today(self) -> int:
        """Re-derive completed_today for the current date. Returns how many flipped."""
        today = self._today()
        refreshed = [
            dataclasses.replace(h, completed_today=today in h.completed_dates) for h in self.items
        ]
        changed = sum(
            1 for old, new in zip(self.items, refreshed, strict=True)
            if old.completed_today != new.completed_today
        )
        if changed:
            logger.info("day rollover: %d habit(s) refreshed for %s", changed, today)
            self._commit(refreshed)
        return changed


# ── cli ──────────────────────────────────────────────────────────────────────


@cli(
    "tally habit",
    name="add",
    flags={"description": ["-d", "--description"], "target": ["-t", "--target"]},
)
def add(name: list[str], description: str | None = None, target: int = 1) -> None:
    """Add a habit"""
    from .state import load_app

    content = " ".join(name).strip() if name else ""
    if not content:
        exit_error("Usage: tally habit add <name>")
    if target < 1:
        raise UsageError("--target must be at least 1")
    habit = load_app().habits.add_habit(content, description or "", target)
    if habit:
        echo(format_status("□", habit.name, habit.id))


@cli("tally habit", name="ls", default=True)
def ls() -> None:
    """List habits"""
    from .state import load_app

    echo(render_habit_list(load_app().habits.items))


@cli("tally habit")
def check(ref: str) -> None:
    """Mark or unmark a habit for today"""
    from .state import load_app

    app = load_app()
    habit = resolve_habit(app, ref)
    updated = app.habits.toggle_habit_today(habit.id)
    if updated:
        symbol = "✓" if updated.completed_today else "□"
        echo(f"{format_status(symbol, updated.name, updated.id)}  streak {updated.streak}")


@cli("tally habit")
def rm(ref: str) -> None:
    """Delete a habit"""
    from .state import load_app

    app = load_app()
    habit = resolve_habit(app, ref, exact=True)
    app.habits.delete_habit(habit.id)
    echo(f"removed: {habit.name}")


@cli("tally habit", flags={"description": ["-d", "--description"]})
def rename(ref: str, name: str | None = None, description: str | None = None) -> None:
    """Rename a habit or change its description"""
    from .state import load_app

    if name is None and description is None:
        raise UsageError("nothing to change: pass --name and/or --description")
    if name is not None and not name.strip():
        raise ValidationError("habit name cannot be empty")
    app = load_app()
    habit = resolve_habit(app, ref)
    updated = app.habits.rename_habit(
        habit.id,
        name=name.strip() if name is not None else UNSET,
        description=description.strip() if description is not None else UNSET,
    )
    if updated:
        echo(f"→ {updated.name}")


@cli("tally habit")
def reset(ref: str) -> None:
    """Reset a habit's streak and history"""
    from .state import load_app

    app = load_app()
    habit = resolve_habit(app, ref, exact=True)
    app.habits.reset_habit(habit.id)
    echo(format_status("↺", habit.name, habit.id))

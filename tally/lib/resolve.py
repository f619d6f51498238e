from typing import TYPE_CHECKING

from tally.core.errors import NotFoundError
from tally.core.models import Habit, Task

from .fuzzy import find_in_pool, find_in_pool_exact

if TYPE_CHECKING:
    from tally.state import AppState

__all__ = ["resolve_habit", "resolve_task"]


def resolve_task(app: "AppState", ref: str, exact: bool = False) -> Task:
    """Look a task up by id prefix, then text. exact=True skips fuzzy matching."""
    find = find_in_pool_exact if exact else find_in_pool
    task = find(ref, app.tasks.items)
    if not task:
        raise NotFoundError(f"No task found: '{ref}'")
    return task


def resolve_habit(app: "AppState", ref: str, exact: bool = False) -> Habit:
    """Look a habit up by id prefix, then name. exact=True skips fuzzy matching."""
    find = find_in_pool_exact if exact else find_in_pool
    habit = find(ref, app.habits.items)
    if not habit:
        raise NotFoundError(f"No habit found: '{ref}'")
    return habit

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

from dateutil import parser as dateutil_parser
from dateutil.parser import ParserError

from tally.core.models import Habit, Priority, Task

__all__ = [
    "dict_to_habit",
    "dict_to_task",
    "habit_to_dict",
    "normalize_date_key",
    "task_to_dict",
]

_PARSE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def _parse_datetime(val: Any) -> datetime:
    """Revive a stored timestamp. Accepts ISO strings (trailing Z included) and epoch numbers."""
    if isinstance(val, bool):
        raise TypeError(f"not a timestamp: {val!r}")
    if isinstance(val, (int, float)):
        try:
            parsed = datetime.fromtimestamp(val / 1000 if val > 1e11 else val)
        except (OverflowError, OSError) as e:
            raise ValueError(f"timestamp out of range: {val!r}") from e
    elif isinstance(val, str) and val:
        try:
            parsed = datetime.fromisoformat(val)
        except ValueError:
            parsed = dateutil_parser.isoparse(val)
    else:
        raise TypeError(f"not a timestamp: {val!r}")
    # naive values are local wall-clock time
    return parsed if parsed.tzinfo else parsed.astimezone()


def normalize_date_key(raw: str) -> str:
    """
    Map a stored completion date to the YYYY-MM-DD key.

    Older data wrote keys like "Mon Oct 19 2026"; those are parsed with dateutil.
    Anything unparseable, or missing its year, month or day, is kept verbatim.
    """
    try:
        return date.fromisoformat(raw).isoformat()
    except ValueError:
        pass
    try:
        # fields dateutil had to fill in differ between the two defaults
        first, second = (dateutil_parser.parse(raw, default=d).date() for d in _PARSE_DEFAULTS)
    except (ParserError, ValueError, OverflowError):
        return raw
    return first.isoformat() if first == second else raw


def _require_str(row: Mapping[str, Any], key: str) -> str:
    val = row[key]
    if not isinstance(val, str):
        raise TypeError(f"{key} must be a string, got {type(val).__name__}")
    return val


def _require_bool(row: Mapping[str, Any], key: str) -> bool:
    val = row.get(key, False)
    if not isinstance(val, bool):
        raise TypeError(f"{key} must be a boolean, got {type(val).__name__}")
    return val


def task_to_dict(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "text": task.text,
        "completed": task.completed,
        "createdAt": task.created_at.isoformat(),
        "priority": task.priority.value,
    }


def dict_to_task(row: Mapping[str, Any]) -> Task:
    """
    Converts a stored task object into a Task.
    Raises KeyError/TypeError/ValueError on a malformed row.
    """
    return Task(
        id=str(row["id"]),
        text=_require_str(row, "text"),
        completed=_require_bool(row, "completed"),
        created_at=_parse_datetime(row["createdAt"]),
        priority=Priority.parse(row.get("priority")),
    )


def habit_to_dict(habit: Habit) -> dict[str, Any]:
    return {
        "id": habit.id,
        "name": habit.name,
        "description": habit.description,
        "streak": habit.streak,
        "completedToday": habit.completed_today,
        "completedDates": sorted(habit.completed_dates),
        "createdAt": habit.created_at.isoformat(),
        "target": habit.target,
    }


def _date_keys(val: Any) -> frozenset[str]:
    if not isinstance(val, Iterable) or isinstance(val, (str, bytes, Mapping)):
        raise TypeError("completedDates must be a list")
    return frozenset(normalize_date_key(_as_str(d)) for d in val)


def _as_str(val: Any) -> str:
    if not isinstance(val, str):
        raise TypeError(f"date key must be a string, got {type(val).__name__}")
    return val


def dict_to_habit(row: Mapping[str, Any]) -> Habit:
    """
    Converts a stored habit object into a Habit.
    Raises KeyError/TypeError/ValueError on a malformed row.
    """
    return Habit(
        id=str(row["id"]),
        name=_require_str(row, "name"),
        description=str(row.get("description") or ""),
        streak=max(0, int(row.get("streak", 0))),
        completed_today=_require_bool(row, "completedToday"),
        completed_dates=_date_keys(row.get("completedDates", [])),
        created_at=_parse_datetime(row["createdAt"]),
        target=max(1, int(row.get("target", 1))),
    )

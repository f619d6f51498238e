import dataclasses
from datetime import datetime
from enum import StrEnum


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: "str | Priority | None") -> "Priority":
        """Coerce user or stored input; anything unknown is medium."""
        if not raw:
            return cls.MEDIUM
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.MEDIUM


@dataclasses.dataclass(frozen=True)
class Task:
    id: str
    text: str
    completed: bool
    created_at: datetime
    priority: Priority = Priority.MEDIUM


@dataclasses.dataclass(frozen=True)
class Habit:
    id: str
    name: str
    created_at: datetime
    description: str = ""
    streak: int = 0
    completed_today: bool = False
    completed_dates: frozenset[str] = frozenset()
    target: int = 1


@dataclasses.dataclass(frozen=True)
class Stats:
    tasks_completed: int = 0
    tasks_total: int = 0
    tasks_pending: int = 0
    habits_completed_today: int = 0
    habits_total: int = 0
    max_streak: int = 0
    tasks_pct: float = 0.0
    habits_pct: float = 0.0

import dataclasses
import json
import logging
import os
import shutil
import tempfile
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any, Protocol, TypeVar

from .core.errors import StorageError
from .core.models import Habit, Task

T = TypeVar("T", Task, Habit)
from .lib import ids
from .lib.converters import dict_to_habit, dict_to_task, habit_to_dict, task_to_dict

__all__ = [
    "HABITS_KEY",
    "TASKS_KEY",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "PersistenceAdapter",
]

logger = logging.getLogger(__name__)

TASKS_KEY = "tasks"
HABITS_KEY = "habits"


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Dict-backed key-value store."""

    def __init__(self, data: Mapping[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """
    Key-value slots kept in one JSON object file.

    - missing file: empty store
    - malformed file: copied aside to <name>.corrupt, then treated as empty
    - every set() rewrites the whole file via a temp file + os.replace
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()
        self._data: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._data is not None:
            return self._data
        self._data = {}
        if not self.path.exists():
            return self._data
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError, RecursionError) as e:
            self._quarantine(f"unreadable store: {e}")
            return self._data
        if not isinstance(raw, dict):
            self._quarantine(f"store root is {type(raw).__name__}, expected object")
            return self._data
        self._data = {str(k): v for k, v in raw.items() if isinstance(v, str)}
        return self._data

    def _quarantine(self, reason: str) -> None:
        corrupt = self.path.with_name(self.path.name + ".corrupt")
        logger.warning("%s: %s; starting empty, copy kept at %s", self.path, reason, corrupt)
        try:
            shutil.copy2(self.path, corrupt)
        except OSError:
            logger.exception("could not copy %s aside", self.path)

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
                os.replace(tmp, self.path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"failed to write {self.path}: {e}") from e


def _load_slot(
    kv: KeyValueStore,
    key: str,
    convert: Callable[[Mapping[str, Any]], T],
    new_id: ids.IdFactory,
) -> list[T]:
    raw = kv.get(key)
    if raw is None:
        return []
    try:
        rows = json.loads(raw)
        if not isinstance(rows, list):
            raise TypeError(f"expected a list, got {type(rows).__name__}")
        items = [convert(row) for row in rows]
    except (KeyError, TypeError, ValueError, OverflowError, OSError, RecursionError) as e:
        logger.warning("malformed %r slot, loading empty: %s", key, e)
        return []
    return _dedupe_ids(items, key, new_id)


def _dedupe_ids(items: list[T], key: str, new_id: ids.IdFactory) -> list[T]:
    """Keep every row; later rows repeating an earlier id get a fresh one."""
    seen: set[str] = set()
    unique: list[T] = []
    for item in items:
        if item.id in seen:
            fresh = new_id()
            logger.warning("duplicate id %s in %r slot, reassigned to %s", item.id, key, fresh)
            item = dataclasses.replace(item, id=fresh)
        seen.add(item.id)
        unique.append(item)
    return unique


class PersistenceAdapter:
    """Loads both collections once and rewrites a slot whenever its store changes."""

    def __init__(self, kv: KeyValueStore, *, new_id: ids.IdFactory = ids.new_id) -> None:
        self.kv = kv
        self._new_id = new_id

    def load_tasks(self) -> list[Task]:
        return _load_slot(self.kv, TASKS_KEY, dict_to_task, self._new_id)

    def load_habits(self) -> list[Habit]:
        return _load_slot(self.kv, HABITS_KEY, dict_to_habit, self._new_id)

    def save_tasks(self, tasks: Iterable[Task]) -> None:
        self.kv.set(TASKS_KEY, json.dumps([task_to_dict(t) for t in tasks], ensure_ascii=False))

    def save_habits(self, habits: Iterable[Habit]) -> None:
        self.kv.set(HABITS_KEY, json.dumps([habit_to_dict(h) for h in habits], ensure_ascii=False))

    def attach(self, tasks, habits) -> None:
        tasks.subscribe(self.save_tasks)
        habits.subscribe(self.save_habits)

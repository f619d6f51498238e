import dataclasses
import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from . import config
from .habits import HabitStore
from .lib import clock, ids
from .storage import JsonFileStore, KeyValueStore, PersistenceAdapter
from .tasks import TaskStore

__all__ = ["AppState", "build_app", "load_app"]

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class AppState:
    """Everything one session mutates: both stores and the adapter persisting them."""

    tasks: TaskStore
    habits: HabitStore
    persistence: PersistenceAdapter


def build_app(
    kv: KeyValueStore,
    *,
    new_id: ids.IdFactory = ids.new_id,
    now: Callable[[], datetime] = clock.now,
    today: Callable[[], str] = clock.today_key,
) -> AppState:
    adapter = PersistenceAdapter(kv, new_id=new_id)
    tasks = TaskStore(adapter.load_tasks(), new_id=new_id, now=now)
    habits = HabitStore(adapter.load_habits(), new_id=new_id, now=now, today=today)
    adapter.attach(tasks, habits)
    habits.refresh_today()
    logger.debug("app loaded tasks=%d habits=%d", len(tasks), len(habits))
    return AppState(tasks=tasks, habits=habits, persistence=adapter)


def load_app(store_path: Path | None = None) -> AppState:
    path = store_path if store_path else config.get_store_path()
    return build_app(JsonFileStore(path))

import logging
from collections.abc import Callable, Iterable, Iterator
from typing import Generic, TypeAlias, TypeVar

from .models import Habit, Task

__all__ = ["Listener", "SnapshotStore"]

logger = logging.getLogger(__name__)

T = TypeVar("T", Task, Habit)

Listener: TypeAlias = Callable[[tuple[T, ...]], None]


class SnapshotStore(Generic[T]):
    """
    Owns one collection as an immutable tuple.

    Mutations never edit the tuple in place: they build a new one, swap it in,
    then call every listener with the new snapshot before returning.
    Operations that change nothing do not notify.
    """

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: tuple[T, ...] = tuple(items)
        self._listeners: list[Listener[T]] = []

    @property
    def items(self) -> tuple[T, ...]:
        return self._items

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def get(self, item_id: str) -> T | None:
        return next((item for item in self._items if item.id == item_id), None)

    def subscribe(self, listener: Listener[T]) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ---- mutation helpers ----

    def _commit(self, items: Iterable[T]) -> None:
        """
        Swap in the new snapshot and notify every listener.

        The snapshot stays committed when a listener raises. The remaining
        listeners still run, then the first error is re-raised.
        """
        self._items = tuple(items)
        failure: Exception | None = None
        for listener in list(self._listeners):
            try:
                listener(self._items)
            except Exception as e:
                logger.error("%s: listener %r failed: %s", type(self).__name__, listener, e)
                if failure is None:
                    failure = e
        if failure is not None:
            raise failure

    def _prepend(self, item: T) -> T:
        self._commit((item, *self._items))
        return item

    def _update(self, item_id: str, change: Callable[[T], T]) -> T | None:
        current = self.get(item_id)
        if current is None:
            logger.debug("%s: no item %s", type(self).__name__, item_id)
            return None
        updated = change(current)
        self._commit(updated if item.id == item_id else item for item in self._items)
        return updated

    def _remove(self, item_id: str) -> bool:
        if self.get(item_id) is None:
            logger.debug("%s: no item %s", type(self).__name__, item_id)
            return False
        self._commit(item for item in self._items if item.id != item_id)
        return True

import itertools
import uuid
from collections.abc import Callable

__all__ = ["CounterIds", "IdFactory", "new_id"]

IdFactory = Callable[[], str]


def new_id() -> str:
    return str(uuid.uuid4())


class CounterIds:
    """Monotonic ids: prefix-1, prefix-2, ... Never repeats within one instance."""

    def __init__(self, prefix: str = "id", start: int = 1) -> None:
        self.prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"

from collections.abc import Sequence
from difflib import get_close_matches
from typing import TypeVar

from tally.core.errors import AmbiguousError
from tally.core.models import Habit, Task

T = TypeVar("T", Task, Habit)

__all__ = ["find_in_pool", "find_in_pool_exact", "label"]

FUZZY_MATCH_CUTOFF = 0.8


def label(item: Task | Habit) -> str:
    return item.text if isinstance(item, Task) else item.name


def _match_id_prefix(ref: str, pool: Sequence[T]) -> T | None:
    exact = next((item for item in pool if item.id == ref), None)
    if exact:
        return exact
    ref_lower = ref.lower()
    matches = [item for item in pool if item.id.lower().startswith(ref_lower)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        sample = [item.id[:8] for item in matches[:3]]
        raise AmbiguousError(ref, count=len(matches), sample=sample)
    return None


def _match_substring(ref: str, pool: Sequence[T]) -> T | None:
    ref_lower = ref.lower()
    exact = next((item for item in pool if label(item).lower() == ref_lower), None)
    if exact:
        return exact
    matches = [item for item in pool if ref_lower in label(item).lower()]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        sample = [label(item) for item in matches[:3]]
        raise AmbiguousError(ref, count=len(matches), sample=sample)
    return None


def _match_fuzzy(ref: str, pool: Sequence[T]) -> T | None:
    ref_lower = ref.lower()
    labels = [label(item).lower() for item in pool]
    matches = get_close_matches(ref_lower, labels, n=1, cutoff=FUZZY_MATCH_CUTOFF)
    if matches:
        return pool[labels.index(matches[0])]
    return None


def find_in_pool(ref: str, pool: Sequence[T]) -> T | None:
    if not pool or not ref.strip():
        return None
    return _match_id_prefix(ref, pool) or _match_substring(ref, pool) or _match_fuzzy(ref, pool)


def find_in_pool_exact(ref: str, pool: Sequence[T]) -> T | None:
    if not pool or not ref.strip():
        return None
    return _match_id_prefix(ref, pool) or _match_substring(ref, pool)

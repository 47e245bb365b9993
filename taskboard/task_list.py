"""
TaskList: ordered collection of top-level TaskItems.

Each top-level item owns its subtask tree. Every operation returns a new
list. replace_for_file() is the unit of incremental re-parse: when one
note changes, its records are swapped out and every other note's records
are left untouched.
"""
from functools import reduce
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Set, Tuple, Union

from .schema import TaskItem


class TaskList:
    """Immutable sequence of top-level tasks."""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[TaskItem] = ()):
        self._items: Tuple[TaskItem, ...] = tuple(items)

    @classmethod
    def empty(cls) -> "TaskList":
        return cls()

    @classmethod
    def from_items(cls, items: Iterable[TaskItem]) -> "TaskList":
        return cls(items)

    @classmethod
    def concat(cls, lists: Sequence["TaskList"]) -> "TaskList":
        return concat(lists)

    # ── Sequence protocol ────────────────────────────────────

    @property
    def items(self) -> Tuple[TaskItem, ...]:
        return self._items

    def __iter__(self) -> Iterator[TaskItem]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other) -> bool:
        if not isinstance(other, TaskList):
            return NotImplemented
        return self._items == other._items

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        return f"TaskList({len(self._items)} items)"

    # ── Combining ────────────────────────────────────────────

    def append(self, other: "TaskList") -> "TaskList":
        """This list followed by other."""
        return TaskList(self._items + tuple(other))

    def filter(self, predicate: Callable[[TaskItem], bool]) -> "TaskList":
        """Top-level items matching predicate. Subtasks are not searched."""
        return TaskList(t for t in self._items if predicate(t))

    def map(self, fn: Callable[[TaskItem], TaskItem]) -> "TaskList":
        """Apply fn to every top-level item."""
        return TaskList(fn(t) for t in self._items)

    # ── Per-file operations ──────────────────────────────────

    def tasks_for_file(self, source_path: str) -> "TaskList":
        return self.filter(lambda t: t.source_path == source_path)

    def remove_for_file(self, source_path: str) -> "TaskList":
        return self.filter(lambda t: t.source_path != source_path)

    def replace_for_file(
        self, source_path: str, new_items: Union["TaskList", Iterable[TaskItem]]
    ) -> "TaskList":
        """Drop every record from source_path, then append new_items.

        Calling it again for the same path discards the previous
        replacement, so repeated re-parses never duplicate records.
        """
        if not isinstance(new_items, TaskList):
            new_items = TaskList(new_items)
        return self.remove_for_file(source_path).append(new_items)

    def source_paths(self) -> List[str]:
        """Distinct source paths in first-seen order."""
        seen = {}
        for t in self._items:
            seen.setdefault(t.source_path, None)
        return list(seen)

    # ── Lookups ──────────────────────────────────────────────

    def all_tasks(self) -> List[TaskItem]:
        """Every record, each top-level item followed by its subtree."""
        return [t for top in self._items for t in top.walk()]

    def find(self, task_id: str) -> Optional[TaskItem]:
        """Search top-level and nested records. None when absent."""
        for t in self.all_tasks():
            if t.id == task_id:
                return t
        return None

    def tags(self) -> Set[str]:
        return {tag for t in self.all_tasks() for tag in t.tags}


def concat(lists: Sequence[TaskList]) -> TaskList:
    """Join lists in order (a right fold of append)."""
    return reduce(lambda acc, tl: tl.append(acc), reversed(list(lists)), TaskList())

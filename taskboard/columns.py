"""
Board columns and the sort orders shared by every board engine.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Tuple

from .schema import TaskItem

# Undated items sort as if due on this ordinal, ahead of any real date.
UNDATED_ORDINAL = 0


@dataclass(frozen=True)
class Column:
    """A labelled, already sorted run of tasks."""
    label: str
    tasks: Tuple[TaskItem, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "tasks", tuple(self.tasks))

    def __len__(self) -> int:
        return len(self.tasks)

    @property
    def is_empty(self) -> bool:
        return not self.tasks


def title_key(task: TaskItem) -> str:
    return task.title.casefold()


def by_title(tasks: Iterable[TaskItem]) -> List[TaskItem]:
    return sorted(tasks, key=title_key)


def by_due_then_title(tasks: Iterable[TaskItem]) -> List[TaskItem]:
    return sorted(
        tasks,
        key=lambda t: (t.due if t.due is not None else UNDATED_ORDINAL, title_key(t)),
    )


def by_completion(tasks: Iterable[TaskItem]) -> List[TaskItem]:
    """Most recently completed first; untimed last; ties by title."""
    ordered = by_title(tasks)
    # stable: equal timestamps keep title order
    return sorted(ordered, key=lambda t: t.completed_at or datetime.min, reverse=True)

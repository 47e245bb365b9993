"""
Tag board: one column per configured tag, plus optional catch-alls.

Column order:
    [Untagged?, Others?, <tag columns in configured order>..., Completed?]

A task carrying several configured tags shows up in each of their columns,
with that column's tag taken off its displayed title. Duplicate tags in
the configuration are resolved first-occurrence-wins.
"""
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from .columns import Column, by_completion, by_due_then_title
from .schema import TaskItem
from .task_list import TaskList

OTHERS = "Others"
UNTAGGED = "Untagged"
COMPLETED = "Completed"


@dataclass(frozen=True)
class TagColumn:
    """Configured (tag, column title) pair."""
    tag: str
    display_title: str

    def __post_init__(self):
        object.__setattr__(self, "tag", self.tag.strip().lstrip("#"))


@dataclass(frozen=True)
class TagBoardConfig:
    columns: Tuple[TagColumn, ...] = ()
    include_others: bool = False
    include_untagged: bool = False
    completed_count: int = 0
    title: str = "Tag Board"

    def __post_init__(self):
        object.__setattr__(self, "columns", tuple(self.columns))

    def unique_columns(self) -> List[TagColumn]:
        """Configured columns with repeated tags dropped (first wins)."""
        seen = set()
        unique = []
        for col in self.columns:
            if col.tag in seen:
                continue
            seen.add(col.tag)
            unique.append(col)
        return unique

    def tags(self) -> List[str]:
        return [c.tag for c in self.unique_columns()]


class TagBoard:
    """Builds the columns of one tag board."""

    def __init__(self, config: TagBoardConfig):
        self.config = config

    def columns(self, task_list: TaskList) -> List[Column]:
        configured = self.config.unique_columns()
        tags = [c.tag for c in configured]

        result = [Column(c.display_title, self.tagged(c.tag, task_list)) for c in configured]
        if self.config.include_others:
            result.insert(0, Column(OTHERS, self.others(tags, task_list)))
        if self.config.include_untagged:
            result.insert(0, Column(UNTAGGED, self.untagged(task_list)))
        if self.config.completed_count > 0:
            result.append(Column(COMPLETED, self.completed(tags, task_list)))
        return result

    # ── Buckets ──────────────────────────────────────────────

    @staticmethod
    def _open(task_list: TaskList) -> List[TaskItem]:
        return [t for t in task_list if not t.completed]

    def tagged(self, tag: str, task_list: TaskList) -> List[TaskItem]:
        return by_due_then_title(
            t.remove_tag(tag) for t in self._open(task_list) if t.has_tag(tag)
        )

    def others(self, tags: Iterable[str], task_list: TaskList) -> List[TaskItem]:
        tags = list(tags)
        return by_due_then_title(
            t for t in self._open(task_list) if t.has_tags and not t.has_any_tag(tags)
        )

    def untagged(self, task_list: TaskList) -> List[TaskItem]:
        return by_due_then_title(t for t in self._open(task_list) if not t.has_tags)

    def completed(self, tags: Iterable[str], task_list: TaskList) -> List[TaskItem]:
        # completed_count is a display limit; the full list is returned here
        tags = list(tags)
        return by_completion(t for t in task_list if t.completed and t.has_any_tag(tags))

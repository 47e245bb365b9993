"""
Date board: buckets top-level tasks by due date relative to "today".

Columns, in order:
    Undated    (optional) incomplete, no due date          title asc
    Today      incomplete, due today or overdue            due asc, title asc
    Tomorrow   incomplete, due tomorrow                    title asc
    Future     incomplete, due after tomorrow              due asc, title asc
    Completed  (optional) every completed item             completed_at desc, title asc

"Today" deliberately includes overdue tasks. The caller resolves "today"
in the user's zone; nothing here reads the clock.
"""
from dataclasses import dataclass
from typing import List

from .columns import Column, by_completion, by_due_then_title, by_title
from .schema import DateLike, TaskItem, to_day_ordinal
from .task_list import TaskList

UNDATED = "Undated"
TODAY = "Today"
TOMORROW = "Tomorrow"
FUTURE = "Future"
COMPLETED = "Completed"


@dataclass(frozen=True)
class DateBoardConfig:
    include_undated: bool = True
    include_completed: bool = True
    title: str = "Date Board"


class DateBoard:
    """Builds the columns of one date board."""

    def __init__(self, config: DateBoardConfig):
        self.config = config

    def columns(self, today: DateLike, task_list: TaskList) -> List[Column]:
        day = to_day_ordinal(today)
        result: List[Column] = []
        if self.config.include_undated:
            result.append(Column(UNDATED, self.undated(task_list)))
        result.append(Column(TODAY, self.due_today(day, task_list)))
        result.append(Column(TOMORROW, self.due_tomorrow(day, task_list)))
        result.append(Column(FUTURE, self.due_later(day, task_list)))
        if self.config.include_completed:
            result.append(Column(COMPLETED, self.completed(task_list)))
        return result

    # ── Buckets ──────────────────────────────────────────────

    @staticmethod
    def _open(task_list: TaskList) -> List[TaskItem]:
        return [t for t in task_list if not t.completed]

    def undated(self, task_list: TaskList) -> List[TaskItem]:
        return by_title(t for t in self._open(task_list) if t.due is None)

    def due_today(self, day: int, task_list: TaskList) -> List[TaskItem]:
        return by_due_then_title(
            t for t in self._open(task_list) if t.due is not None and t.due <= day
        )

    def due_tomorrow(self, day: int, task_list: TaskList) -> List[TaskItem]:
        return by_title(t for t in self._open(task_list) if t.due == day + 1)

    def due_later(self, day: int, task_list: TaskList) -> List[TaskItem]:
        return by_due_then_title(
            t for t in self._open(task_list) if t.due is not None and t.due > day + 1
        )

    def completed(self, task_list: TaskList) -> List[TaskItem]:
        return by_completion(t for t in task_list if t.completed)

"""
Board set: several configured boards over one TaskList, one of them active.

A board configuration is exactly one of DateBoardConfig or TagBoardConfig;
board_columns() and board_title() dispatch on the variant. The BoardSet
keeps the configurations in a BoundedSelector, so switching tabs only
moves the selection and never touches task content.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .columns import Column
from .date_board import DateBoard, DateBoardConfig
from .schema import DateLike, TaskItem
from .selector import BoundedSelector
from .tag_board import TagBoard, TagBoardConfig
from .task_list import TaskList

BoardConfig = Union[DateBoardConfig, TagBoardConfig]


def board_title(config: BoardConfig) -> str:
    if isinstance(config, DateBoardConfig):
        return config.title
    if isinstance(config, TagBoardConfig):
        return config.title
    raise TypeError(f"Unknown board configuration: {type(config).__name__}")


def board_columns(config: BoardConfig, today: DateLike, task_list: TaskList) -> List[Column]:
    if isinstance(config, DateBoardConfig):
        return DateBoard(config).columns(today, task_list)
    if isinstance(config, TagBoardConfig):
        return TagBoard(config).columns(task_list)
    raise TypeError(f"Unknown board configuration: {type(config).__name__}")


@dataclass(frozen=True)
class Board:
    """A rendered board: its title and columns."""
    title: str
    columns: Tuple[Column, ...]


@dataclass(frozen=True)
class Card:
    """One task as placed on a board.

    id is "<board>:<column>:<task id>", unique even when the same task
    sits in two tag columns.
    """
    id: str
    column: str
    task: TaskItem


class BoardSet:
    """Configured boards, the active one, and the tasks they show."""

    def __init__(self, configs: BoundedSelector, task_list: Optional[TaskList] = None):
        self.configs: BoundedSelector = configs
        self.task_list: TaskList = task_list if task_list is not None else TaskList()

    @classmethod
    def from_configs(
        cls,
        configs: Iterable[BoardConfig],
        task_list: Optional[TaskList] = None,
        selected: int = 0,
    ) -> "BoardSet":
        return cls(BoundedSelector.at_index(selected, configs), task_list)

    # ── Rendering ────────────────────────────────────────────

    def _render(self, config: BoardConfig, today: DateLike) -> Board:
        return Board(
            title=board_title(config),
            columns=tuple(board_columns(config, today, self.task_list)),
        )

    def boards(self, today: DateLike) -> BoundedSelector:
        """Every board's title and columns, selection preserved."""
        def render(config: BoardConfig) -> Board:
            return self._render(config, today)
        return self.configs.map_selected_and_rest(render, render)

    def selected_board(self, today: DateLike) -> Optional[Board]:
        """Only the selected board, rendered (None if there are no boards)."""
        config = self.configs.current
        if config is None:
            return None
        return self._render(config, today)

    def titles(self) -> List[str]:
        return [board_title(c) for c in self.configs]

    def columns(self, today: DateLike) -> List[Column]:
        """Columns of the selected board (empty if there are no boards)."""
        config = self.configs.current
        if config is None:
            return []
        return board_columns(config, today, self.task_list)

    def cards(self, today: DateLike) -> List[Card]:
        """Every task across the selected board's columns, in column order."""
        board_index = self.selected_index()
        cards = []
        for col_index, column in enumerate(self.columns(today)):
            for task in column.tasks:
                cards.append(Card(
                    id=f"{board_index}:{col_index}:{task.id}",
                    column=column.label,
                    task=task,
                ))
        return cards

    # ── Navigation ───────────────────────────────────────────

    def board_count(self) -> int:
        return len(self.configs)

    def selected_index(self) -> Optional[int]:
        return self.configs.selected_index

    def select(self, index: int) -> "BoardSet":
        return BoardSet(self.configs.select(index), self.task_list)

    # ── Task updates ─────────────────────────────────────────

    def with_task_list(self, task_list: TaskList) -> "BoardSet":
        return BoardSet(self.configs, task_list)

    def replace_for_file(self, source_path: str, items: Union[TaskList, Sequence[TaskItem]]) -> "BoardSet":
        return self.with_task_list(self.task_list.replace_for_file(source_path, items))

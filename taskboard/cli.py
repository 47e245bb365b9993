#!/usr/bin/env python3
"""
Task board: command line entry point

Parses the markdown notes in a vault and prints one board's columns.

Usage:
    taskboard                                  # default config, first board
    taskboard --vault ~/notes --board 1        # second configured board
    taskboard --today 2024-05-01               # pin "today"
    taskboard --list-boards                    # show configured boards
    taskboard --json                           # machine-readable output
    taskboard --watch                          # re-print on every note change
"""

import argparse
import json
import logging
import sys
from datetime import date
from typing import List, Optional

from .boards import Board, BoardSet
from .config import Config, ConfigError
from .parser import parse_date
from .schema import TaskItem
from .task_list import TaskList
from .vault import load_vault
from .watcher import VaultWatcher

logger = logging.getLogger(__name__)


# ── Text rendering ─────────────────────────────────────────────────────────

def render_task(task: TaskItem, depth: int = 0) -> List[str]:
    box = "[x]" if task.completed else "[ ]"
    line = f"{'  ' * depth}- {box} {task.display_title}"
    if task.due_date:
        line += f"  (due {task.due_date.isoformat()})"
    if task.completed_at:
        line += f"  (done {task.completed_at.isoformat(sep=' ', timespec='minutes')})"
    lines = [line]
    for sub in task.subtasks:
        lines.extend(render_task(sub, depth + 1))
    return lines


def render_board(board: Board) -> str:
    out = [f"== {board.title} =="]
    for column in board.columns:
        out.append("")
        out.append(f"{column.label} ({len(column)})")
        if column.is_empty:
            out.append("  (empty)")
        for task in column.tasks:
            out.extend("  " + line for line in render_task(task))
    return "\n".join(out)


def board_as_dict(board: Board) -> dict:
    return {
        "title": board.title,
        "columns": [
            {"label": c.label, "tasks": [t.to_dict() for t in c.tasks]}
            for c in board.columns
        ],
    }


def show(board_set: BoardSet, today: date, as_json: bool = False) -> None:
    board = board_set.selected_board(today)
    if board is None:
        print("No boards configured.")
        return
    if as_json:
        print(json.dumps(board_as_dict(board), indent=2, ensure_ascii=False))
    else:
        print(render_board(board))


def list_boards(board_set: BoardSet) -> None:
    selected = board_set.selected_index()
    for i, title in enumerate(board_set.titles()):
        marker = "*" if i == selected else " "
        print(f"{marker} {i}: {title}")


# ── Main ───────────────────────────────────────────────────────────────────

def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        description="Markdown checklists → date and tag boards"
    )
    ap.add_argument("--config", default=None, help="Path to taskboard.yaml")
    ap.add_argument("--vault", default=None, help="Notes directory (overrides config)")
    ap.add_argument("--board", type=int, default=None, help="Index of the board to show")
    ap.add_argument("--today", default=None, help="Date to treat as today (YYYY-MM-DD)")
    ap.add_argument("--list-boards", action="store_true", help="List configured boards and exit")
    ap.add_argument("--json", action="store_true", help="Print the board as JSON")
    ap.add_argument("--watch", action="store_true", help="Re-print whenever a note changes")
    args = ap.parse_args(argv)

    try:
        cfg = Config.load(args.config)
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2

    if args.vault:
        cfg.vault_dir = args.vault
        cfg.resolve_paths()

    logging.basicConfig(
        level=getattr(logging, cfg.log_level.upper(), logging.INFO),
        format="%(asctime)s [taskboard] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    pinned = None
    if args.today:
        pinned = parse_date(args.today)
        if pinned is None:
            print(f"Invalid --today value: {args.today!r} (expected YYYY-MM-DD)", file=sys.stderr)
            return 2

    selected = args.board if args.board is not None else cfg.selected_board
    board_set = BoardSet.from_configs(cfg.boards, TaskList(), selected=selected)

    if args.list_boards:
        list_boards(board_set)
        return 0

    board_set = board_set.with_task_list(load_vault(cfg))
    show(board_set, pinned or date.today(), args.json)

    if args.watch:
        def on_change(task_list: TaskList) -> None:
            nonlocal board_set
            board_set = board_set.with_task_list(task_list)
            print()
            # an unpinned "today" follows the clock across midnight
            show(board_set, pinned or date.today(), args.json)

        VaultWatcher(cfg, board_set.task_list, on_change).run_forever()
    return 0


if __name__ == "__main__":
    sys.exit(main())

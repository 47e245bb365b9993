"""
Markdown checklist parser.

Turns the raw text of one note into a TaskList. At each line the parser
first tries to read a task (the checklist line plus its deeper-indented
block, parsed recursively as subtasks); if that fails the line is skipped
as plain text. Every iteration consumes at least one line, and there is
no failure path: a note without checklists gives an empty TaskList.

Line syntax:
    - [ ] Buy milk #shopping @due(2024-05-01)
    * [x] Pay bills #home @completed(2024-05-02T18:30:00)
    + [ ] Water plants 📅 2024-05-03
    - [x] Call Alice ✅ 2024-05-02

Recognized tokens are removed from the title:
    #tag                        tag (needs at least one non-digit)
    @due(YYYY-MM-DD)            due date
    📅 YYYY-MM-DD               due date
    @completed(<iso datetime>)  completion timestamp (date-only = midnight)
    ✅ YYYY-MM-DD               completion timestamp

Malformed metadata never drops a line. Per field:
    bad due token        -> kept in the title as text, due falls back
                            to the fallback date (or undated)
    bad completion token -> kept in the title as text, no timestamp
    completion on an unchecked line -> stripped and ignored
    repeated valid tokens -> first one wins, the rest are stripped
"""
import logging
import re
from datetime import date, datetime
from typing import List, Optional, Sequence, Tuple

from .schema import TaskItem, normalize_timestamp
from .task_list import TaskList

logger = logging.getLogger(__name__)

TAB_WIDTH = 4

# Deeper nesting is flattened into this level to bound recursion.
MAX_NESTING = 64

CHECKBOX_PATTERN = re.compile(
    r"^(?P<indent>[ \t]*)[-*+][ \t]+\[(?P<state>[ xX])\][ \t]+(?P<body>\S.*)$"
)

META_PATTERN = re.compile(
    r"@due\((?P<due>[^)]*)\)"
    r"|\U0001F4C5[ \t]*(?P<due_emoji>\S+)"
    r"|@completed\((?P<completed>[^)]*)\)"
    r"|\u2705[ \t]*(?P<completed_emoji>\S+)"
    r"|(?:(?<=\s)|^)#(?P<tag>[\w/-]+)"
)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIMESTAMP_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}(:\d{2}(\.\d{3}(\d{3})?)?)?(Z|[+-]\d{2}:\d{2})?$"
)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Value parsing
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse YYYY-MM-DD. Returns None for anything else."""
    if not value:
        return None
    value = value.strip()
    if not DATE_PATTERN.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO date or date-time. Returns None when malformed."""
    if not value:
        return None
    value = value.strip()
    day = parse_date(value)
    if day is not None:
        return datetime(day.year, day.month, day.day)
    if not TIMESTAMP_PATTERN.match(value):
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return normalize_timestamp(datetime.fromisoformat(value))
    except ValueError:
        return None


def indent_width(whitespace: str) -> int:
    return sum(TAB_WIDTH if ch == "\t" else 1 for ch in whitespace)


def _line_indent(line: str) -> int:
    return indent_width(line[: len(line) - len(line.lstrip(" \t"))])


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Line body
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def _read_body(
    body: str, completed: bool, fallback_due: Optional[int], where: str
) -> Tuple[str, List[str], Optional[int], Optional[datetime]]:
    """Split a checklist body into title, tags, due and completion time."""
    tags: List[str] = []
    due: Optional[int] = None
    completed_at: Optional[datetime] = None
    kept: List[str] = []
    pos = 0

    for match in META_PATTERN.finditer(body):
        kind = match.lastgroup
        value = match.group(kind)
        strip = True

        if kind == "tag":
            if value.isdigit():
                strip = False
            else:
                tags.append(value)
        elif kind in ("due", "due_emoji"):
            parsed = parse_date(value)
            if parsed is None:
                logger.debug(f"{where}: unreadable due date {value!r}, kept as text")
                strip = False
            elif due is None:
                due = parsed.toordinal()
        else:
            stamp = parse_timestamp(value)
            if stamp is None:
                logger.debug(f"{where}: unreadable completion time {value!r}, kept as text")
                strip = False
            elif completed and completed_at is None:
                completed_at = stamp

        if strip:
            kept.append(body[pos:match.start()])
            pos = match.end()

    kept.append(body[pos:])
    title = " ".join("".join(kept).split())

    if due is None:
        due = fallback_due
    return title, tags, due, completed_at


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Recursive descent over lines
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def _block_end(lines: Sequence[str], start: int, end: int, depth: int) -> int:
    """Index of the first non-blank line at or shallower than depth."""
    pos = start
    while pos < end:
        line = lines[pos]
        if line.strip() and _line_indent(line) <= depth:
            break
        pos += 1
    return pos


def _parse_task(
    lines: Sequence[str],
    pos: int,
    end: int,
    source_path: str,
    fallback_due: Optional[int],
    level: int,
) -> Optional[Tuple[TaskItem, int]]:
    """Try to read one task at pos. Returns (task, next position) or None."""
    match = CHECKBOX_PATTERN.match(lines[pos])
    if match is None:
        return None

    line_number = pos + 1
    task_id = f"{source_path}:{line_number}"
    completed = match.group("state") in "xX"
    title, tags, due, completed_at = _read_body(
        match.group("body"), completed, fallback_due, task_id
    )

    if level >= MAX_NESTING:
        block_end = pos + 1
        subtasks: List[TaskItem] = []
    else:
        depth = indent_width(match.group("indent"))
        block_end = _block_end(lines, pos + 1, end, depth)
        subtasks = _parse_block(lines, pos + 1, block_end, source_path, fallback_due, level + 1)

    item = TaskItem(
        id=task_id,
        source_path=source_path,
        line_number=line_number,
        title=title,
        tags=tuple(tags),
        due=due,
        completed=completed,
        completed_at=completed_at,
        subtasks=tuple(subtasks),
    )
    return item, block_end


def _parse_block(
    lines: Sequence[str],
    start: int,
    end: int,
    source_path: str,
    fallback_due: Optional[int],
    level: int,
) -> List[TaskItem]:
    items: List[TaskItem] = []
    pos = start
    while pos < end:
        attempt = _parse_task(lines, pos, end, source_path, fallback_due, level)
        if attempt is None:
            pos += 1  # plain text
            continue
        item, pos = attempt
        items.append(item)
    return items


def parse(text: str, source_path: str, fallback_due: Optional[str] = None) -> TaskList:
    """
    Parse a note into a TaskList.

    Args:
        text: raw note contents
        source_path: identifier of the note, used in every task id
        fallback_due: ISO date applied to tasks without a due token
            (e.g. the date of a daily note); ignored if unparseable
    """
    fallback_date = parse_date(fallback_due)
    if fallback_due and fallback_date is None:
        logger.debug(f"{source_path}: ignoring unparseable fallback date {fallback_due!r}")
    fallback = fallback_date.toordinal() if fallback_date else None

    # only \n ends a line, so line numbers match what an editor shows
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    items = _parse_block(lines, 0, len(lines), source_path, fallback, 0)
    return TaskList(items)

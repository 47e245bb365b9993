"""
Task record schema.

A TaskItem is one markdown checklist line together with the checklist lines
nested under it. Records are immutable: every transform returns a copy.

Due dates are day-ordinals (``date.toordinal()``) so that bucketing and
sorting are plain integer comparisons.
"""
from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from typing import Optional, Tuple, Dict, Any, Iterator, Iterable, Union

DateLike = Union[date, datetime, int]


def to_day_ordinal(value: DateLike) -> int:
    """Resolve a date, datetime or day-ordinal to a day-ordinal."""
    if isinstance(value, bool):
        raise TypeError("bool is not a date")
    if isinstance(value, int):
        return value
    # datetime is a date subclass, check it first
    if isinstance(value, datetime):
        return value.date().toordinal()
    if isinstance(value, date):
        return value.toordinal()
    raise TypeError(f"Cannot resolve {value!r} to a day-ordinal")


def from_day_ordinal(ordinal: int) -> date:
    return date.fromordinal(ordinal)


def normalize_timestamp(value: datetime) -> datetime:
    """Aware timestamps become naive UTC so every completion time compares."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def normalize_tags(tags: Iterable[str]) -> Tuple[str, ...]:
    """Tags are a set: unique, without '#', held in sorted order."""
    cleaned = {t.lstrip("#") for t in tags}
    cleaned.discard("")
    return tuple(sorted(cleaned))


@dataclass(frozen=True)
class TaskItem:
    """One checklist line and its nested sub-items."""

    # Identity
    id: str                          # "<source_path>:<line_number>"
    source_path: str
    line_number: int = 0

    # Content
    title: str = ""                  # tags and metadata stripped
    tags: Tuple[str, ...] = ()

    # Dates
    due: Optional[int] = None        # day-ordinal, None = undated

    # State
    completed: bool = False
    completed_at: Optional[datetime] = None

    subtasks: Tuple["TaskItem", ...] = ()

    def __post_init__(self):
        if self.completed_at is not None and not self.completed:
            raise ValueError(f"{self.id}: completed_at set on an incomplete task")
        if self.completed_at is not None:
            object.__setattr__(self, "completed_at", normalize_timestamp(self.completed_at))
        object.__setattr__(self, "tags", normalize_tags(self.tags))
        object.__setattr__(self, "subtasks", tuple(self.subtasks))

    # ── Queries ──────────────────────────────────────────────

    @property
    def due_date(self) -> Optional[date]:
        return from_day_ordinal(self.due) if self.due is not None else None

    @property
    def is_dated(self) -> bool:
        return self.due is not None

    @property
    def has_tags(self) -> bool:
        return bool(self.tags)

    def has_tag(self, tag: str) -> bool:
        return tag.lstrip("#") in self.tags

    def has_any_tag(self, tags: Iterable[str]) -> bool:
        return any(self.has_tag(t) for t in tags)

    @property
    def display_title(self) -> str:
        """Title with its tags written back after it."""
        parts = [self.title] if self.title else []
        parts.extend(f"#{t}" for t in self.tags)
        return " ".join(parts)

    def walk(self) -> Iterator["TaskItem"]:
        """This item, then its whole subtask tree, depth-first."""
        yield self
        for sub in self.subtasks:
            yield from sub.walk()

    # ── Transforms ───────────────────────────────────────────

    def remove_tag(self, tag: str) -> "TaskItem":
        tag = tag.lstrip("#")
        if tag not in self.tags:
            return self
        return replace(self, tags=tuple(t for t in self.tags if t != tag))

    # ── Serialization ────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source_path": self.source_path,
            "line_number": self.line_number,
            "title": self.title,
            "tags": list(self.tags),
            "due": self.due_date.isoformat() if self.due is not None else None,
            "completed": self.completed,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "subtasks": [s.to_dict() for s in self.subtasks],
        }

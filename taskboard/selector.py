"""
BoundedSelector: an ordered sequence with at most one selected position.

The selection is absent only when the sequence is empty; otherwise it is
always a valid index. Operations that move the selection clamp it back
into range, so no sequence of calls can leave it dangling.
"""
from typing import Callable, Generic, Iterable, Iterator, Optional, Tuple, TypeVar

T = TypeVar("T")
U = TypeVar("U")


def _clamp(index: int, length: int) -> Optional[int]:
    if length == 0:
        return None
    return max(0, min(index, length - 1))


class BoundedSelector(Generic[T]):
    """Immutable sequence plus a validated selected index."""

    __slots__ = ("_items", "_selected")

    def __init__(self, items: Iterable[T] = (), selected: Optional[int] = None):
        items = tuple(items)
        if items and selected is None:
            raise IndexError("a non-empty selector needs a selected index")
        if selected is not None and not 0 <= selected < len(items):
            raise IndexError(f"selected index {selected} out of range for {len(items)} items")
        self._items: Tuple[T, ...] = items
        self._selected = selected

    # ── Construction ─────────────────────────────────────────

    @classmethod
    def empty(cls) -> "BoundedSelector[T]":
        return cls()

    @classmethod
    def first(cls, items: Iterable[T]) -> "BoundedSelector[T]":
        """Select the first element (nothing if items is empty)."""
        return cls.at_index(0, items)

    @classmethod
    def at_index(cls, index: int, items: Iterable[T]) -> "BoundedSelector[T]":
        """Select index, clamped into range."""
        items = tuple(items)
        return cls(items, _clamp(index, len(items)))

    # ── Queries ──────────────────────────────────────────────

    @property
    def items(self) -> Tuple[T, ...]:
        return self._items

    @property
    def selected_index(self) -> Optional[int]:
        return self._selected

    @property
    def current(self) -> Optional[T]:
        if self._selected is None:
            return None
        return self._items[self._selected]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __eq__(self, other) -> bool:
        if not isinstance(other, BoundedSelector):
            return NotImplemented
        return self._items == other._items and self._selected == other._selected

    def __hash__(self) -> int:
        return hash((self._items, self._selected))

    def __repr__(self) -> str:
        return f"BoundedSelector({list(self._items)!r}, selected={self._selected})"

    # ── Transforms ───────────────────────────────────────────

    def select(self, index: int) -> "BoundedSelector[T]":
        return BoundedSelector(self._items, _clamp(index, len(self._items)))

    def map_selected_and_rest(
        self, selected_fn: Callable[[T], U], rest_fn: Callable[[T], U]
    ) -> "BoundedSelector[U]":
        """Apply selected_fn to the selected element and rest_fn to the others.

        Positions and the selected index are preserved.
        """
        mapped = tuple(
            selected_fn(item) if i == self._selected else rest_fn(item)
            for i, item in enumerate(self._items)
        )
        return BoundedSelector(mapped, self._selected)

    def map(self, fn: Callable[[T], U]) -> "BoundedSelector[U]":
        return self.map_selected_and_rest(fn, fn)

    def update_current(self, fn: Callable[[T], T]) -> "BoundedSelector[T]":
        return self.map_selected_and_rest(fn, lambda item: item)

    def append(self, item: T) -> "BoundedSelector[T]":
        """Add item at the end. An empty selector selects it."""
        selected = 0 if self._selected is None else self._selected
        return BoundedSelector(self._items + (item,), selected)

    def delete_current(self) -> "BoundedSelector[T]":
        """Remove the selected element; the selection moves to its predecessor."""
        if self._selected is None:
            return self
        items = self._items[: self._selected] + self._items[self._selected + 1:]
        return BoundedSelector(items, _clamp(self._selected - 1, len(items)))

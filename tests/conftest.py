"""Shared fixtures for task board tests."""

import sys
from datetime import date
from pathlib import Path

import pytest

# Make the package importable without installing it
sys.path.insert(0, str(Path(__file__).parent.parent))

from taskboard.schema import TaskItem


TODAY = date(2024, 5, 10)


@pytest.fixture()
def today() -> date:
    return TODAY


@pytest.fixture()
def make_task():
    """Factory for TaskItems with sensible defaults."""
    counter = {"n": 0}

    def _make(title, tags=(), due=None, completed=False, completed_at=None,
              source_path="notes.md", subtasks=(), line_number=None):
        counter["n"] += 1
        line = line_number if line_number is not None else counter["n"]
        if isinstance(due, date):
            due = due.toordinal()
        return TaskItem(
            id=f"{source_path}:{line}",
            source_path=source_path,
            line_number=line,
            title=title,
            tags=tuple(tags),
            due=due,
            completed=completed,
            completed_at=completed_at,
            subtasks=tuple(subtasks),
        )

    return _make


@pytest.fixture()
def vault(tmp_path: Path) -> Path:
    """A small notes directory with a daily note."""
    root = tmp_path / "vault"
    (root / "journal").mkdir(parents=True)
    (root / "projects.md").write_text(
        "# Projects\n"
        "- [ ] Write report #work @due(2024-05-10)\n"
        "    - [ ] Gather numbers\n"
        "    - [x] Draft outline\n"
        "Some prose that is not a task.\n"
        "- [x] Pay bills #home @completed(2024-05-09T18:00:00)\n",
        encoding="utf-8",
    )
    (root / "journal" / "2024-05-11.md").write_text(
        "- [ ] Buy milk #shopping\n",
        encoding="utf-8",
    )
    (root / ".scratch.md").write_text("- [ ] hidden\n", encoding="utf-8")
    return root

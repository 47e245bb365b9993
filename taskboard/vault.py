# Task board: vault loader
#
# Reads every markdown note under the vault directory and parses it into
# one TaskList. Notes in the daily-notes folder get their file name's date
# as the fallback due date. Unreadable files contribute nothing.

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from .config import Config
from .parser import parse
from .task_list import TaskList, concat

logger = logging.getLogger(__name__)


def _safe_read(path: Path, max_bytes: int = 2_000_000) -> Optional[str]:
    """Read a file without ever raising. Returns None on any failure."""
    try:
        if path.stat().st_size > max_bytes:
            logger.warning(f"Skipping {path}: larger than {max_bytes} bytes")
            return None
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning(f"Cannot read {path}: {e}")
        return None


def is_temp_file(path: Path) -> bool:
    """Ignore editor temp/swap files."""
    return path.name.startswith(".") or path.suffix in {".swp", ".tmp", ".bak"}


def source_id(path: Path, vault_dir: Path) -> str:
    """Vault-relative POSIX path used as the source identifier."""
    try:
        return path.resolve().relative_to(vault_dir.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def fallback_due_for(source: str, cfg: Config) -> Optional[str]:
    """ISO date of a daily note, taken from its file name."""
    if not cfg.daily_notes_dir:
        return None
    rel = Path(source)
    folder = Path(cfg.daily_notes_dir.strip("/"))
    if rel.parent != folder:
        return None
    try:
        return datetime.strptime(rel.stem, cfg.daily_note_format).date().isoformat()
    except ValueError:
        return None


def note_paths(cfg: Config) -> List[Path]:
    """Markdown notes under the vault, sorted, temp files excluded."""
    root = Path(cfg.vault_dir)
    found = set()
    for pattern in cfg.include_globs:
        for p in root.glob(pattern):
            if p.is_file() and not is_temp_file(p):
                found.add(p)
    return sorted(found)


def parse_note(path: Path, cfg: Config) -> TaskList:
    source = source_id(path, Path(cfg.vault_dir))
    text = _safe_read(path)
    if text is None:
        return TaskList()
    return parse(text, source, fallback_due_for(source, cfg))


def load_vault(cfg: Config, paths: Optional[Iterable[Path]] = None) -> TaskList:
    """Parse every note into a single TaskList."""
    paths = list(paths) if paths is not None else note_paths(cfg)
    task_list = concat([parse_note(p, cfg) for p in paths])
    logger.info(
        f"Loaded {len(task_list)} tasks ({len(task_list.all_tasks())} with subtasks) "
        f"from {len(paths)} notes in {cfg.vault_dir}"
    )
    return task_list


def reparse(task_list: TaskList, path: Path, cfg: Config) -> TaskList:
    """Swap one note's tasks for a fresh parse. A missing note clears them."""
    source = source_id(path, Path(cfg.vault_dir))
    fresh = parse_note(path, cfg) if path.exists() else TaskList()
    return task_list.replace_for_file(source, fresh)

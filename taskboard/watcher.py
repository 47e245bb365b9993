# Task board: vault watcher
#
# Re-parses a note whenever it is created, modified, moved or deleted and
# hands the updated TaskList to a callback. Only the changed note's tasks
# are replaced; every other note's tasks are kept as they are.

import logging
import threading
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .config import Config
from .task_list import TaskList
from .vault import is_temp_file, reparse, source_id

logger = logging.getLogger(__name__)

OnChange = Callable[[TaskList], None]


class VaultHandler(FileSystemEventHandler):
    """Routes filesystem events for markdown notes to reparse().

    Modifications are debounced on the trailing edge: each event for a
    path restarts that path's timer, and the note is re-parsed once the
    writes have been quiet for debounce_ms. The last write always wins.
    """

    def __init__(self, cfg: Config, task_list: TaskList, on_change: Optional[OnChange] = None):
        self.cfg = cfg
        self.task_list = task_list
        self.on_change = on_change
        self.vault = Path(cfg.vault_dir).resolve()
        self._pending: Dict[str, threading.Timer] = {}
        self._pending_lock = threading.Lock()
        self._reparse_lock = threading.Lock()

    def _is_note(self, path: Path) -> bool:
        return path.suffix == ".md" and not is_temp_file(path)

    def on_any_event(self, fs_event):
        if fs_event.is_directory:
            return
        if fs_event.event_type not in ("created", "modified", "deleted", "moved"):
            return
        self.refresh(Path(fs_event.src_path), debounce=fs_event.event_type == "modified")
        dest = getattr(fs_event, "dest_path", "")
        if fs_event.event_type == "moved" and dest:
            self.refresh(Path(dest), debounce=False)

    def refresh(self, path: Path, debounce: bool = False) -> None:
        if not self._is_note(path):
            return
        if debounce and self.cfg.debounce_ms > 0:
            self._schedule(path)
            return
        with self._reparse_lock:
            self.task_list = reparse(self.task_list, path, self.cfg)
            logger.info(f"Re-parsed {source_id(path, self.vault)} ({len(self.task_list)} tasks total)")
            if self.on_change:
                self.on_change(self.task_list)

    # ── Debounce timers ──────────────────────────────────────

    def _schedule(self, path: Path) -> None:
        key = str(path)
        timer = threading.Timer(self.cfg.debounce_ms / 1000, self._fire, args=(path,))
        timer.daemon = True
        with self._pending_lock:
            previous = self._pending.get(key)
            if previous is not None:
                previous.cancel()
            self._pending[key] = timer
        timer.start()

    def _fire(self, path: Path) -> None:
        with self._pending_lock:
            # a newer event may have replaced this timer
            if self._pending.get(str(path)) is not threading.current_thread():
                return
            del self._pending[str(path)]
        self.refresh(path)

    def pending(self) -> List[str]:
        """Paths with a re-parse still waiting for the debounce window."""
        with self._pending_lock:
            return sorted(self._pending)

    def _take_pending(self) -> List[Path]:
        with self._pending_lock:
            timers = list(self._pending.items())
            self._pending.clear()
        for _, timer in timers:
            timer.cancel()
        return [Path(key) for key, _ in timers]

    def flush(self) -> None:
        """Re-parse every pending path now instead of waiting."""
        for path in self._take_pending():
            self.refresh(path)

    def cancel(self) -> None:
        """Drop pending re-parses without running them."""
        self._take_pending()


class VaultWatcher:
    """watchdog observer over the vault directory."""

    def __init__(self, cfg: Config, task_list: TaskList, on_change: Optional[OnChange] = None):
        self.handler = VaultHandler(cfg, task_list, on_change)
        self.observer = Observer()
        self.vault = Path(cfg.vault_dir)

    @property
    def task_list(self) -> TaskList:
        return self.handler.task_list

    def start(self) -> None:
        self.observer.schedule(self.handler, str(self.vault), recursive=True)
        self.observer.start()
        logger.info(f"Watching {self.vault}")

    def stop(self) -> None:
        self.observer.stop()
        self.observer.join()
        self.handler.cancel()

    def run_forever(self) -> None:
        """Block until Ctrl+C."""
        self.start()
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            logger.info("Stopping...")
        finally:
            self.stop()

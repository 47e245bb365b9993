# Task board: configuration
# Vault paths and board layout come from a YAML file; TASKBOARD_* environment
# variables override the vault location and log level.
#
# Example (see taskboard.example.yaml):
#
#   vault_dir: ~/notes
#   daily_notes_dir: journal
#   boards:
#     - type: date
#       title: Upcoming
#     - type: tag
#       title: Chores
#       include_untagged: true
#       columns:
#         - {tag: shopping, title: Shopping}

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .boards import BoardConfig
from .date_board import DateBoardConfig
from .tag_board import TagBoardConfig, TagColumn

logger = logging.getLogger(__name__)

CONFIG_PATH = Path("taskboard.yaml")

ENV_VAULT = "TASKBOARD_VAULT"
ENV_LOG_LEVEL = "TASKBOARD_LOG_LEVEL"


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""
    pass


def _default_boards() -> List[BoardConfig]:
    return [DateBoardConfig()]


@dataclass
class Config:
    """Runtime configuration for the task board."""

    # Notes
    vault_dir: str = "."
    daily_notes_dir: str = ""            # "" = no daily-note due dates
    daily_note_format: str = "%Y-%m-%d"  # strptime format of daily note names
    include_globs: List[str] = field(default_factory=lambda: ["**/*.md"])

    # Behavior
    debounce_ms: int = 300
    log_level: str = "INFO"

    # Boards
    selected_board: int = 0
    boards: List[BoardConfig] = field(default_factory=_default_boards)

    def resolve_paths(self):
        """Expand ~ in the vault path."""
        self.vault_dir = str(Path(self.vault_dir).expanduser())

    def apply_env(self):
        vault = os.environ.get(ENV_VAULT)
        if vault:
            self.vault_dir = vault
        level = os.environ.get(ENV_LOG_LEVEL)
        if level:
            self.log_level = level.upper()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        if not isinstance(data, dict):
            raise ConfigError(f"Config must be a mapping, got {type(data).__name__}")

        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known and k != "boards"}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")

        for key in ("debounce_ms", "selected_board"):
            if key in values:
                try:
                    values[key] = int(values[key])
                except (TypeError, ValueError):
                    raise ConfigError(f"{key} must be an integer, got: {values[key]!r}")

        if "include_globs" in values and isinstance(values["include_globs"], str):
            values["include_globs"] = [values["include_globs"]]

        cfg = cls(**values)
        if "boards" in data:
            raw_boards = data["boards"] or []
            if not isinstance(raw_boards, list):
                raise ConfigError("boards must be a list")
            cfg.boards = [board_from_dict(raw, i) for i, raw in enumerate(raw_boards)]
        return cfg

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """Load config from YAML, falling back to defaults when no file exists.

        An explicitly given path must exist.
        """
        cfg_path = Path(path).expanduser() if path else CONFIG_PATH
        if cfg_path.exists():
            try:
                with open(cfg_path, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(f"Cannot read config {cfg_path}: {e}") from e
            cfg = cls.from_dict(data)
            logger.debug(f"Loaded config from {cfg_path}")
        elif path:
            raise ConfigError(f"Config file not found: {cfg_path}")
        else:
            cfg = cls()
        cfg.apply_env()
        cfg.resolve_paths()
        return cfg


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Board entries
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def _flag(raw: Dict[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y", "on"}
    return bool(value)


def _tag_column(raw: Any, where: str) -> TagColumn:
    if isinstance(raw, str):
        return TagColumn(tag=raw, display_title=raw.lstrip("#"))
    if isinstance(raw, dict) and raw.get("tag"):
        tag = str(raw["tag"])
        return TagColumn(tag=tag, display_title=str(raw.get("title") or tag.lstrip("#")))
    raise ConfigError(f"{where}: column needs a tag, got {raw!r}")


def board_from_dict(raw: Any, index: int) -> BoardConfig:
    """Build one board configuration from its YAML mapping."""
    where = f"Board #{index}"
    if not isinstance(raw, dict):
        raise ConfigError(f"{where} must be a mapping, got {type(raw).__name__}")

    kind = str(raw.get("type", "")).strip().lower()

    if kind == "date":
        return DateBoardConfig(
            include_undated=_flag(raw, "include_undated", True),
            include_completed=_flag(raw, "include_completed", True),
            title=str(raw.get("title") or "Date Board"),
        )

    if kind == "tag":
        columns = raw.get("columns") or []
        if not isinstance(columns, list):
            raise ConfigError(f"{where}: columns must be a list")
        try:
            completed_count = int(raw.get("completed_count", 0))
        except (TypeError, ValueError):
            raise ConfigError(
                f"{where}: completed_count must be an integer, got: {raw.get('completed_count')!r}"
            )
        return TagBoardConfig(
            columns=tuple(_tag_column(c, where) for c in columns),
            include_others=_flag(raw, "include_others", False),
            include_untagged=_flag(raw, "include_untagged", False),
            completed_count=max(0, completed_count),
            title=str(raw.get("title") or "Tag Board"),
        )

    raise ConfigError(f"{where}: unknown type {kind!r} (expected 'date' or 'tag')")

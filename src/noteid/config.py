"""NoteIDConfig: per-vault settings for note ID assignment.

Layout (relative to the vault root):

    .noteid/
        settings.json     # persisted settings, rewritten on every change

settings.json example:

    {
      "id_key": "id",
      "ignore_file_regex": "^templates/\\n\\\\.excalidraw\\\\.md$"
    }

id_key             front matter key that holds the note ID (default "id")
ignore_file_regex  regular expressions, one per line; matching notes get no ID

A missing or unreadable settings file is not an error: the defaults apply.
"""

from __future__ import annotations

import fcntl
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from noteid.filters import parse_patterns

logger = logging.getLogger("noteid.config")

SETTINGS_DIRNAME = ".noteid"
_SETTINGS_FILENAME = "settings.json"

DEFAULT_ID_KEY = "id"
DEFAULT_IGNORE_FILE_REGEX = ""


@dataclass
class NoteIDConfig:
    """Resolved settings for a vault."""

    root: Path                              # vault root (contains .noteid/)
    id_key: str = DEFAULT_ID_KEY
    ignore_file_regex: str = DEFAULT_IGNORE_FILE_REGEX
    extra: dict[str, Any] = field(default_factory=dict)   # unknown keys, kept on save

    @property
    def settings_dir(self) -> Path:
        return self.root / SETTINGS_DIRNAME

    @property
    def settings_path(self) -> Path:
        return self.settings_dir / _SETTINGS_FILENAME

    @property
    def ignore_patterns(self) -> list[str]:
        return parse_patterns(self.ignore_file_regex)

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.extra,
            "id_key": self.id_key,
            "ignore_file_regex": self.ignore_file_regex,
        }


def _read_settings(path: Path) -> dict[str, Any]:
    """Read settings.json. Returns {} (and logs) if missing or unreadable."""
    if not path.exists():
        return {}
    try:
        with path.open(encoding="utf-8") as f:
            fcntl.flock(f, fcntl.LOCK_SH)
            raw = json.load(f)
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
        logger.warning("could not load settings from %s, using defaults: %s", path, exc)
        return {}
    if not isinstance(raw, dict):
        logger.warning("settings in %s are not a JSON object, using defaults", path)
        return {}
    return raw


def _str_setting(raw: dict[str, Any], key: str, default: str) -> str:
    value = raw.get(key, default)
    if not isinstance(value, str):
        logger.warning("setting %r must be a string, got %r; using %r", key, value, default)
        return default
    return value


def load_config(root: Path | str | None = None) -> NoteIDConfig:
    """Load settings for the vault at root (or search upward from cwd if None)."""
    root_path = Path(root).resolve() if root else _find_root(Path.cwd().resolve())
    cfg = NoteIDConfig(root=root_path)
    raw = _read_settings(cfg.settings_path)

    cfg.id_key = _str_setting(raw, "id_key", DEFAULT_ID_KEY)
    cfg.ignore_file_regex = _str_setting(raw, "ignore_file_regex", DEFAULT_IGNORE_FILE_REGEX)
    cfg.extra = {k: v for k, v in raw.items() if k not in ("id_key", "ignore_file_regex")}
    return cfg


def save_config(cfg: NoteIDConfig) -> Path:
    """Atomically write settings.json under exclusive flock."""
    path = cfg.settings_path
    path.parent.mkdir(parents=True, exist_ok=True)
    # Write to tmp then rename for atomicity
    tmp = path.with_suffix(".json.tmp")
    with tmp.open("w", encoding="utf-8") as f:
        fcntl.flock(f, fcntl.LOCK_EX)
        json.dump(cfg.to_dict(), f, indent=2)
        f.write("\n")
    tmp.replace(path)
    logger.info("settings saved: %s", path)
    return path


def _find_root(start: Path) -> Path:
    """Walk upward from start looking for a .noteid/ directory."""
    for directory in (start, *start.parents):
        if (directory / SETTINGS_DIRNAME).is_dir():
            return directory
    return start


def init_config(root: Path) -> Path:
    """Write default settings for the vault at root. Raises if they already exist."""
    cfg = NoteIDConfig(root=root.resolve())
    if cfg.settings_path.exists():
        msg = f"settings already exist at {cfg.settings_path}"
        raise FileExistsError(msg)
    return save_config(cfg)

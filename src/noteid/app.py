"""NoteIDApp: owns a vault and its settings, and is the only writer of settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from noteid.config import load_config, save_config
from noteid.engine import BatchReport, assign_all_notes, assign_if_missing, migrate_key
from noteid.filters import compile_patterns, parse_patterns
from noteid.vault import Vault

if TYPE_CHECKING:
    from collections.abc import Sequence

    from noteid.config import NoteIDConfig

logger = logging.getLogger("noteid.app")


class NoteIDApp:
    """Entry points for the watcher and the CLI."""

    def __init__(self, cfg: NoteIDConfig, vault: Vault | None = None) -> None:
        self.cfg = cfg
        self.vault = vault or Vault(cfg.root)

    @classmethod
    def load(cls, root: Path | str | None = None) -> NoteIDApp:
        return cls(load_config(root))

    def reload(self) -> None:
        self.cfg = load_config(self.cfg.root)
        logger.info("settings reloaded: id_key=%r", self.cfg.id_key)

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    def on_note_changed(self, path: Path | str) -> str | None:
        """Handle a change notification for one note.

        Paths that are not notes of this vault, and notes deleted before the
        handler ran, are skipped.
        """
        p = Path(path)
        if not self.vault.is_note_path(p if p.is_absolute() else self.vault.root / p):
            return None
        try:
            note = self.vault.note(p)
        except FileNotFoundError:
            return None
        return assign_if_missing(self.vault, note, self.cfg)

    def add_ids_to_all_notes(self) -> BatchReport:
        """Add an ID to all notes."""
        return assign_all_notes(self.vault, self.cfg)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def set_id_key(self, new_key: str) -> BatchReport:
        """Rename the ID key: migrate existing IDs, then persist the new key."""
        report = migrate_key(self.vault, self.cfg.id_key, new_key)
        self.cfg.id_key = new_key
        save_config(self.cfg)
        return report

    def set_ignore_patterns(self, patterns: str | Sequence[str]) -> None:
        """Persist the ignore patterns. Raises InvalidPatternError before saving a bad one."""
        text = patterns if isinstance(patterns, str) else "\n".join(patterns)
        compile_patterns(parse_patterns(text))
        self.cfg.ignore_file_regex = text
        save_config(self.cfg)

"""Assign note IDs and migrate them between front matter keys.

    assign_if_missing(vault, note, cfg)      one note; write errors propagate
    assign_all_notes(vault, cfg)             every note; failures are logged and reported
    migrate_key(vault, "id", "uid")          move existing IDs to a renamed key

A note gets an ID only if no ignore pattern matches its path and its front
matter has no truthy value under the configured key. Existing values are never
regenerated. Migration ignores the patterns: it moves whatever is there.

If an ignore pattern does not compile, the error is logged once and notes are
treated as ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from noteid.filters import IgnoreFilter, InvalidPatternError, compile_patterns
from noteid.models import new_note_id

if TYPE_CHECKING:
    from collections.abc import Iterable

    from noteid.config import NoteIDConfig
    from noteid.models import Note
    from noteid.vault import Vault

logger = logging.getLogger("noteid.engine")


@dataclass
class BatchReport:
    """Outcome of a bulk operation over the vault."""

    processed: int = 0
    changed: int = 0
    failures: list[tuple[str, str]] = field(default_factory=list)   # (note path, error)
    error: str | None = None        # set when the whole batch was skipped

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def ok(self) -> bool:
        return self.error is None and not self.failures


def _load_filter(cfg: NoteIDConfig) -> IgnoreFilter | None:
    """Compile the configured ignore patterns, or log and return None if one is bad."""
    try:
        return compile_patterns(cfg.ignore_patterns)
    except InvalidPatternError as exc:
        logger.error("%s; treating notes as ignored until it is fixed", exc)
        return None


def _assign(vault: Vault, note: Note, key: str, ignore: IgnoreFilter | None) -> str | None:
    if ignore is None or ignore.matches(note.path):
        return None

    fm = vault.read_front_matter(note) or {}
    if fm.get(key):
        return None

    new_id = new_note_id()
    written: list[str] = []

    def _set_id(data: dict[str, Any]) -> None:
        # Re-check under the lock: another writer may have assigned one already.
        if not data.get(key):
            data[key] = new_id
            written.append(new_id)

    vault.process_front_matter(note, _set_id)
    if written:
        logger.info("id assigned: %s %s=%s", note.path, key, new_id)
        return new_id
    return None


def assign_if_missing(vault: Vault, note: Note, cfg: NoteIDConfig) -> str | None:
    """Give note an ID under cfg.id_key unless it is ignored or already has one.

    Returns the new ID, or None if nothing was written.
    """
    return _assign(vault, note, cfg.id_key, _load_filter(cfg))


def assign_all_notes(
    vault: Vault,
    cfg: NoteIDConfig,
    notes: Iterable[Note] | None = None,
) -> BatchReport:
    """Run assign_if_missing over a snapshot of the vault (or the given notes)."""
    report = BatchReport()
    ignore = _load_filter(cfg)
    if ignore is None:
        report.error = "invalid ignore pattern; no notes were processed"
        return report

    snapshot = list(notes) if notes is not None else vault.list_notes()
    for note in snapshot:
        report.processed += 1
        try:
            if _assign(vault, note, cfg.id_key, ignore) is not None:
                report.changed += 1
        except Exception as exc:
            logger.exception("failed to assign id: %s", note.path)
            report.failures.append((note.path, str(exc)))

    logger.info(
        "assign-all: %d notes, %d assigned, %d failed",
        report.processed, report.changed, report.failed,
    )
    return report


def migrate_key(
    vault: Vault,
    old_key: str,
    new_key: str,
    notes: Iterable[Note] | None = None,
) -> BatchReport:
    """Move truthy values from old_key to new_key in every note that has one."""
    report = BatchReport()
    if old_key == new_key:
        return report

    moved: list[str] = []

    def _move(data: dict[str, Any]) -> None:
        # Re-check under the lock: the value may be gone since it was read.
        if data.get(old_key):
            data[new_key] = data.pop(old_key)
            moved.append(old_key)

    snapshot = list(notes) if notes is not None else vault.list_notes()
    for note in snapshot:
        report.processed += 1
        try:
            fm = vault.read_front_matter(note) or {}
            if not fm.get(old_key):
                continue
            moved.clear()
            vault.process_front_matter(note, _move)
            if not moved:
                continue
            report.changed += 1
            logger.info("id migrated: %s %s -> %s", note.path, old_key, new_key)
        except Exception as exc:
            logger.exception("failed to migrate id: %s", note.path)
            report.failures.append((note.path, str(exc)))

    logger.info(
        "migrate %r -> %r: %d notes, %d moved, %d failed",
        old_key, new_key, report.processed, report.changed, report.failed,
    )
    return report

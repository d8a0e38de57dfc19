"""Stable, time-sortable IDs in the YAML front matter of markdown notes.

Layout:
    <vault>/
        **/*.md               # notes; IDs live in their front matter
        .noteid/
            settings.json     # id_key, ignore_file_regex

A note gets an ID under `id_key` the first time it is seen without one,
unless its vault-relative path matches an ignore pattern. IDs are never
regenerated. Renaming `id_key` moves existing IDs to the new key.

Front matter writes are read-modify-write under flock(LOCK_EX) on the note.
"""

from noteid.app import NoteIDApp
from noteid.config import NoteIDConfig, init_config, load_config, save_config
from noteid.engine import BatchReport, assign_all_notes, assign_if_missing, migrate_key
from noteid.filters import InvalidPatternError, is_ignored
from noteid.models import Note, new_note_id
from noteid.vault import Vault

__all__ = [
    "BatchReport",
    "InvalidPatternError",
    "Note",
    "NoteIDApp",
    "NoteIDConfig",
    "Vault",
    "assign_all_notes",
    "assign_if_missing",
    "init_config",
    "is_ignored",
    "load_config",
    "migrate_key",
    "new_note_id",
    "save_config",
]

"""Vault: a directory tree of markdown notes.

Vault is the document store the ID engine works against:
    vault = Vault("/path/to/vault")
    for note in vault.list_notes():
        fm = vault.read_front_matter(note)
    vault.process_front_matter(note, lambda fm: fm.setdefault("id", new_note_id()))

Front matter writes are read-modify-write under flock(LOCK_EX) on the note
file, so concurrent writers to the same note are serialized. Reads take
LOCK_SH.
"""

from __future__ import annotations

import copy
import fcntl
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from noteid.frontmatter import parse_front_matter, read_front_matter, replace_front_matter, split_front_matter
from noteid.models import Note

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

logger = logging.getLogger("noteid.vault")

NOTE_SUFFIX = ".md"


class Vault:
    """Markdown notes under a root directory."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).resolve()

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def is_note_path(self, path: Path) -> bool:
        """True for *.md files inside the vault, outside hidden directories."""
        try:
            rel = path.resolve().relative_to(self.root)
        except ValueError:
            return False
        if any(part.startswith(".") for part in rel.parts):
            return False
        return path.suffix == NOTE_SUFFIX

    def iter_notes(self) -> Iterator[Note]:
        for path in self.root.rglob(f"*{NOTE_SUFFIX}"):
            if path.is_file() and self.is_note_path(path):
                yield self._note(path)

    def list_notes(self) -> list[Note]:
        """Snapshot of all notes, sorted by path."""
        return sorted(self.iter_notes(), key=lambda n: n.path)

    def note(self, path: Path | str) -> Note:
        """Resolve a note by vault-relative or absolute path."""
        p = Path(path)
        if not p.is_absolute():
            p = self.root / p
        if not self.is_note_path(p):
            msg = f"not a note in vault {self.root}: {path}"
            raise ValueError(msg)
        if not p.is_file():
            msg = f"note not found: {path}"
            raise FileNotFoundError(msg)
        return self._note(p)

    def _note(self, path: Path) -> Note:
        abs_path = path.resolve()
        return Note(path=abs_path.relative_to(self.root).as_posix(), abs_path=abs_path)

    # ------------------------------------------------------------------
    # Front matter
    # ------------------------------------------------------------------

    def read_front_matter(self, note: Note) -> dict[str, Any] | None:
        """Current front matter of note, or None if it has none."""
        with note.abs_path.open(encoding="utf-8", newline="") as f:
            fcntl.flock(f, fcntl.LOCK_SH)
            text = f.read()
        return read_front_matter(text)

    def process_front_matter(
        self,
        note: Note,
        fn: Callable[[dict[str, Any]], None],
    ) -> dict[str, Any]:
        """Read-modify-write the note's front matter under exclusive flock.

        fn edits the mapping in place. The note is rewritten only if the
        mapping changed; if fn raises, the note is left as it was. The lock
        is released on every exit path. Returns the resulting mapping.
        """
        with note.abs_path.open("r+", encoding="utf-8", newline="") as f:
            fcntl.flock(f, fcntl.LOCK_EX)
            text = f.read()
            source, _ = split_front_matter(text)
            data = parse_front_matter(source) if source is not None else {}
            before = copy.deepcopy(data)
            fn(data)
            if data == before:
                return data
            f.seek(0)
            f.write(replace_front_matter(text, data))
            f.truncate()
        logger.debug("front matter written: %s", note.path)
        return data

"""Data models for notes and their identifiers."""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path, PurePosixPath

# Crockford base32: no I, L, O, U. Sorts the same as the integers it encodes.
_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
_DECODE = {c: i for i, c in enumerate(_ALPHABET)}

_TIME_BITS = 48
_RANDOM_BITS = 128
_TIME_LEN = 10      # ceil(48 / 5)
_RANDOM_LEN = 26    # ceil(128 / 5)
NOTE_ID_LENGTH = _TIME_LEN + _RANDOM_LEN


def _encode(value: int, length: int) -> str:
    chars = []
    for _ in range(length):
        value, rem = divmod(value, 32)
        chars.append(_ALPHABET[rem])
    return "".join(reversed(chars))


def new_note_id() -> str:
    """Generate a time-sortable note ID: 48-bit ms timestamp + 128 random bits.

    Both parts are Crockford base32, fixed width, so IDs from a later
    millisecond always sort after IDs from an earlier one.
    """
    ms = time.time_ns() // 1_000_000
    ts = _encode(ms & ((1 << _TIME_BITS) - 1), _TIME_LEN)
    return ts + _encode(secrets.randbits(_RANDOM_BITS), _RANDOM_LEN)


def note_id_timestamp(note_id: str) -> datetime:
    """Decode the creation time embedded in a note ID."""
    if len(note_id) != NOTE_ID_LENGTH:
        msg = f"not a note ID (expected {NOTE_ID_LENGTH} chars): {note_id!r}"
        raise ValueError(msg)
    ms = 0
    for c in note_id[:_TIME_LEN].upper():
        if c not in _DECODE:
            msg = f"invalid character {c!r} in note ID: {note_id!r}"
            raise ValueError(msg)
        ms = ms * 32 + _DECODE[c]
    return datetime.fromtimestamp(ms / 1000, tz=UTC)


@dataclass(frozen=True)
class Note:
    """A markdown file in the vault."""

    path: str        # vault-relative, POSIX separators: "templates/foo.md"
    abs_path: Path

    @property
    def name(self) -> str:
        return PurePosixPath(self.path).name

"""YAML front matter: the metadata block at the head of a note.

    ---
    id: 01J9Z3K4T5...
    tags: [project]
    ---
    # Body starts here

The block must open on the first line. It closes at the next line that is
exactly ``---`` (or ``...``). Anything else is body and is kept verbatim.
"""

from __future__ import annotations

from typing import Any

import yaml

_BOM = "\ufeff"
_OPEN = "---"
_CLOSE = ("---", "...")


class FrontMatterError(ValueError):
    """Front matter is not valid YAML or not a mapping."""


def split_front_matter(text: str) -> tuple[str | None, str]:
    """Return (yaml_source, body). yaml_source is None when there is no block.

    A leading byte order mark is not part of either.
    """
    text = text.removeprefix(_BOM)
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip("\r\n") != _OPEN:
        return None, text
    for i in range(1, len(lines)):
        if lines[i].rstrip("\r\n") in _CLOSE:
            return "".join(lines[1:i]), "".join(lines[i + 1:])
    # Unterminated fence: not front matter.
    return None, text


def parse_front_matter(source: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(source)
    except yaml.YAMLError as exc:
        msg = f"invalid YAML in front matter: {exc}"
        raise FrontMatterError(msg) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"front matter must be a mapping, got {type(data).__name__}"
        raise FrontMatterError(msg)
    return data


def read_front_matter(text: str) -> dict[str, Any] | None:
    """Parse the front matter of a note's text. None if the note has none."""
    source, _ = split_front_matter(text)
    if source is None:
        return None
    return parse_front_matter(source)


def _newline(text: str) -> str:
    """Line ending of the first line of text; "\\n" if there is none."""
    end = text.find("\n")
    return "\r\n" if end > 0 and text[end - 1] == "\r" else "\n"


def dump_front_matter(data: dict[str, Any], newline: str = "\n") -> str:
    if not data:
        return f"{_OPEN}{newline}{_OPEN}{newline}"
    body = yaml.safe_dump(
        data, sort_keys=False, allow_unicode=True, default_flow_style=False, line_break=newline,
    )
    return f"{_OPEN}{newline}{body}{_OPEN}{newline}"


def replace_front_matter(text: str, data: dict[str, Any]) -> str:
    """Return text with its front matter block replaced (or inserted) by data.

    Keeps a leading byte order mark and the note's line ending.
    """
    bom = _BOM if text.startswith(_BOM) else ""
    _, body = split_front_matter(text)
    return bom + dump_front_matter(data, _newline(text)) + body

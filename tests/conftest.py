from __future__ import annotations

from pathlib import Path

import pytest

from noteid.config import NoteIDConfig
from noteid.vault import Vault


def write_note(root: Path, rel: str, text: str) -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def vault_root(tmp_path: Path) -> Path:
    root = tmp_path / "vault"
    root.mkdir()
    return root


@pytest.fixture
def vault(vault_root: Path) -> Vault:
    return Vault(vault_root)


@pytest.fixture
def cfg(vault_root: Path) -> NoteIDConfig:
    return NoteIDConfig(root=vault_root.resolve())

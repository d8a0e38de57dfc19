from __future__ import annotations

import pytest

from conftest import write_note
from noteid.app import NoteIDApp
from noteid.config import load_config
from noteid.filters import InvalidPatternError


@pytest.fixture
def app(vault_root):
    return NoteIDApp.load(vault_root)


def test_on_note_changed_assigns(app, vault_root):
    path = write_note(vault_root, "a.md", "x\n")
    new_id = app.on_note_changed(path)
    assert app.vault.read_front_matter(app.vault.note("a.md")) == {"id": new_id}
    assert app.on_note_changed("a.md") is None


def test_on_note_changed_skips_non_notes(app, vault_root):
    img = write_note(vault_root, "img.png", "png")
    hidden = write_note(vault_root, ".trash/old.md", "x\n")
    assert app.on_note_changed(img) is None
    assert app.on_note_changed(hidden) is None
    assert app.on_note_changed(vault_root / "deleted.md") is None
    assert hidden.read_text() == "x\n"


def test_add_ids_to_all_notes(app, vault_root):
    write_note(vault_root, "a.md", "x\n")
    write_note(vault_root, "b/c.md", "x\n")
    report = app.add_ids_to_all_notes()
    assert report.changed == 2


def test_set_id_key_migrates_then_persists(app, vault_root):
    write_note(vault_root, "a.md", "---\nid: X\n---\n")
    report = app.set_id_key("uid")
    assert report.changed == 1
    assert app.cfg.id_key == "uid"
    assert load_config(vault_root).id_key == "uid"
    assert app.vault.read_front_matter(app.vault.note("a.md")) == {"uid": "X"}


def test_set_id_key_unchanged_does_not_rewrite(app, vault_root):
    text = "---\nid: X\n---\n"
    path = write_note(vault_root, "a.md", text)
    report = app.set_id_key("id")
    assert report.processed == 0
    assert path.read_text() == text


def test_set_ignore_patterns(app, vault_root):
    text = "---\nid: X\n---\n"
    path = write_note(vault_root, "templates/t.md", text)
    app.set_ignore_patterns(["^templates/", "\\.png$"])
    assert load_config(vault_root).ignore_patterns == ["^templates/", "\\.png$"]
    # No side effects on notes.
    assert path.read_text() == text


def test_set_ignore_patterns_rejects_invalid(app, vault_root):
    app.set_ignore_patterns("^ok/")
    with pytest.raises(InvalidPatternError):
        app.set_ignore_patterns(["(bad"])
    assert load_config(vault_root).ignore_patterns == ["^ok/"]


def test_reload_picks_up_external_edits(app, vault_root):
    other = NoteIDApp.load(vault_root)
    other.set_id_key("uid")
    assert app.cfg.id_key == "id"
    app.reload()
    assert app.cfg.id_key == "uid"

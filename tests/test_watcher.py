from __future__ import annotations

import logging

import pytest

from conftest import write_note
from noteid import watcher
from noteid.app import NoteIDApp


@pytest.fixture
def app(vault_root):
    return NoteIDApp.load(vault_root)


def test_note_changed_logs_and_swallows_errors(app, vault_root, caplog):
    path = write_note(vault_root, "bad.md", "---\nid: [x\n---\n")
    with caplog.at_level(logging.ERROR, logger="noteid.watcher"):
        watcher._note_changed(app, path)
    assert "failed to assign id" in caplog.text


def test_watchable_dirs_skip_hidden(vault_root):
    (vault_root / "a" / "b").mkdir(parents=True)
    (vault_root / ".obsidian" / "plugins").mkdir(parents=True)
    dirs = watcher._watchable_dirs(vault_root)
    assert set(dirs) == {vault_root, vault_root / "a", vault_root / "a" / "b"}


def test_poll_assigns_changed_notes(app, vault_root, monkeypatch):
    existing = write_note(vault_root, "old.md", "x\n")
    sweeps = []

    def _sleep(_interval):
        sweeps.append(1)
        if len(sweeps) == 1:
            write_note(vault_root, "new.md", "x\n")
        else:
            watcher._reload_state[0] = True

    monkeypatch.setattr(watcher.time, "sleep", _sleep)
    try:
        with pytest.raises(watcher._ReloadRequestedError):
            watcher.watch_poll(app, interval=0)
    finally:
        watcher._reload_state[0] = False

    assert app.vault.read_front_matter(app.vault.note("new.md"))["id"]
    # The first sweep only records state.
    assert existing.read_text() == "x\n"


def test_run_falls_back_to_polling(app, monkeypatch):
    calls = []

    def _no_inotify(_app):
        raise ImportError("inotify_simple")

    monkeypatch.setattr(watcher, "watch_inotify", _no_inotify)
    monkeypatch.setattr(watcher, "watch_poll", lambda a: calls.append(a))
    watcher.run(app)
    assert calls == [app]


def test_run_initial_scan(app, vault_root, monkeypatch):
    write_note(vault_root, "a.md", "x\n")
    monkeypatch.setattr(watcher, "watch_poll", lambda a: None)
    watcher.run(app, initial_scan=True, poll=True)
    assert app.vault.read_front_matter(app.vault.note("a.md"))["id"]

"""inotify watcher: assigns IDs to notes as they are written.

Run in the foreground:
    noteid watch
    python -m noteid.watcher VAULT_ROOT

On IN_CLOSE_WRITE / IN_MOVED_TO for a *.md file:
    - assign an ID if the note is eligible and has none

New directories are watched as they appear. Writing an ID triggers one more
event for the same note, which is a no-op because the ID is now present.

Falls back to mtime polling if inotify is unavailable (macOS, Docker).
SIGHUP reloads settings.
"""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path

from noteid.app import NoteIDApp

logger = logging.getLogger("noteid.watcher")

_INOTIFY_TIMEOUT_MS = 5000
_POLL_INTERVAL = 1.0

# ---------------------------------------------------------------------------
# SIGHUP config reload
# ---------------------------------------------------------------------------

# Mutable container so the signal handler and loop can share state without globals.
_reload_state: list[bool] = [False]     # [0] = SIGHUP reload requested


class _ReloadRequestedError(Exception):
    """Raised from within a watcher loop to trigger a settings reload."""


def _handle_sighup(signum: int, frame: object) -> None:  # noqa: ARG001
    _reload_state[0] = True
    logger.info("SIGHUP received, settings reload requested")


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

def _note_changed(app: NoteIDApp, path: Path) -> None:
    try:
        app.on_note_changed(path)
    except Exception:
        logger.exception("failed to assign id: %s", path)


def _watchable_dirs(top: Path) -> list[Path]:
    """top and all of its non-hidden subdirectories."""
    dirs = [top]
    for sub in top.rglob("*"):
        if sub.is_dir() and not any(p.startswith(".") for p in sub.relative_to(top).parts):
            dirs.append(sub)
    return dirs


# ---------------------------------------------------------------------------
# inotify watcher
# ---------------------------------------------------------------------------

def watch_inotify(app: NoteIDApp) -> None:
    """Watch using inotify_simple (Linux). Blocks until a reload is requested."""
    import inotify_simple  # type: ignore[import]

    inotify = inotify_simple.INotify()
    flags = inotify_simple.flags  # type: ignore[attr-defined]
    mask = flags.CLOSE_WRITE | flags.MOVED_TO | flags.CREATE

    watched: dict[int, Path] = {}

    def _add(directory: Path) -> None:
        try:
            watched[inotify.add_watch(str(directory), mask)] = directory
        except OSError:
            logger.warning("cannot watch %s", directory)

    for directory in _watchable_dirs(app.vault.root):
        _add(directory)

    logger.info("inotify watching vault=%s dirs=%d", app.vault.root, len(watched))

    while True:
        for event in inotify.read(timeout=_INOTIFY_TIMEOUT_MS):
            if not event.name or event.wd not in watched:
                continue
            changed = watched[event.wd] / event.name
            if event.mask & flags.ISDIR:
                if not event.name.startswith("."):
                    # New subdirectory: watch it and pick up notes moved in with it
                    for sub in _watchable_dirs(changed):
                        _add(sub)
                    for sub in changed.rglob("*.md"):
                        if app.vault.is_note_path(sub):
                            _note_changed(app, sub)
                continue
            if event.mask & (flags.CLOSE_WRITE | flags.MOVED_TO) and app.vault.is_note_path(changed):
                _note_changed(app, changed)

        if _reload_state[0]:
            raise _ReloadRequestedError


# ---------------------------------------------------------------------------
# Polling fallback
# ---------------------------------------------------------------------------

def watch_poll(app: NoteIDApp, interval: float = _POLL_INTERVAL) -> None:
    """Polling fallback for macOS/Docker. Checks mtime every interval seconds."""
    seen: dict[Path, float] = {}
    first = True
    logger.info("polling vault=%s interval=%.1fs", app.vault.root, interval)

    while True:
        for note in app.vault.iter_notes():
            try:
                mtime = note.abs_path.stat().st_mtime
            except OSError:
                continue
            previous = seen.get(note.abs_path)
            seen[note.abs_path] = mtime
            # The first sweep only records state; existing notes are handled by `noteid add-ids`.
            if not first and (previous is None or previous < mtime):
                _note_changed(app, note.abs_path)
        first = False

        if _reload_state[0]:
            raise _ReloadRequestedError

        time.sleep(interval)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def _startup_scan(app: NoteIDApp) -> None:
    logger.info("startup: adding ids to all notes")
    report = app.add_ids_to_all_notes()
    logger.info("startup: %d assigned, %d failed", report.changed, report.failed)


def run(app: NoteIDApp, *, initial_scan: bool = False, poll: bool = False) -> None:
    if initial_scan:
        _startup_scan(app)
    if poll:
        watch_poll(app)
        return
    try:
        watch_inotify(app)
    except ImportError:
        logger.warning("inotify_simple not available, falling back to polling")
        watch_poll(app)


def run_from_config(
    vault_root: Path | None = None,
    *,
    initial_scan: bool = False,
    poll: bool = False,
) -> None:
    """Load settings and start the watcher. Handles SIGHUP for live settings reload."""
    import signal as _signal

    if hasattr(_signal, "SIGHUP"):
        _signal.signal(_signal.SIGHUP, _handle_sighup)

    app = NoteIDApp.load(vault_root)
    while True:
        _reload_state[0] = False
        try:
            run(app, initial_scan=initial_scan, poll=poll)
            break
        except _ReloadRequestedError:
            app.reload()
            initial_scan = False


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(message)s")
    root = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    run_from_config(root)

"""noteid CLI: stable IDs in the front matter of markdown notes.

Commands:
    noteid init                 create .noteid/settings.json with defaults
    noteid add-ids              add an ID to all notes
    noteid assign PATH          add an ID to one note
    noteid check PATH           show whether a note is ignored, and why
    noteid config               show settings
    noteid set-key KEY          rename the ID key (migrates existing IDs)
    noteid set-ignore PATTERN…  replace the ignore patterns
    noteid new-id               print a fresh ID
    noteid inspect ID           show when an ID was generated
    noteid watch                assign IDs as notes are written
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO

import click

from noteid.app import NoteIDApp
from noteid.config import init_config
from noteid.engine import BatchReport
from noteid.filters import InvalidPatternError, compile_patterns
from noteid.frontmatter import FrontMatterError
from noteid.models import new_note_id, note_id_timestamp

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_app(ctx: click.Context) -> NoteIDApp:
    try:
        return NoteIDApp.load(ctx.obj.get("vault"))
    except Exception as exc:
        raise click.ClickException(str(exc)) from exc


def _echo_report(report: BatchReport, verb: str) -> None:
    if report.error:
        raise click.ClickException(report.error)
    click.echo(f"{verb} {report.changed} of {report.processed} notes")
    for path, error in report.failures:
        click.echo(f"  failed: {path}: {error}", err=True)
    if report.failures:
        raise SystemExit(1)


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="noteid")
@click.option("--vault", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Vault root (default: nearest parent with .noteid/, else cwd)")
@click.option("-v", "--verbose", is_flag=True, help="Log each note written")
@click.pass_context
def cli(ctx: click.Context, vault: Path | None, verbose: bool) -> None:
    """noteid: stable IDs for markdown notes."""
    ctx.ensure_object(dict)
    ctx.obj["vault"] = vault
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(message)s",
    )


# ---------------------------------------------------------------------------
# noteid init / config
# ---------------------------------------------------------------------------


@cli.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Create .noteid/settings.json in the vault root."""
    root = (ctx.obj.get("vault") or Path.cwd()).resolve()
    try:
        path = init_config(root)
        click.echo(f"Created {path}")
    except FileExistsError:
        click.echo("settings already exist, skipping init")


@cli.command("config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Show the vault's settings."""
    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table

    app = _load_app(ctx)
    cfg = app.cfg
    table = Table(title=f"noteid: {escape(str(cfg.root))}", show_header=False)
    table.add_column("Setting", style="dim", no_wrap=True)
    table.add_column("Value")
    table.add_row("Settings", escape(str(cfg.settings_path)) + ("" if cfg.settings_path.exists() else " [dim](defaults)[/dim]"))
    table.add_row("ID key", escape(repr(cfg.id_key)))
    patterns = cfg.ignore_patterns
    if not patterns:
        table.add_row("Ignore", "[dim]none[/dim]")
    for i, pattern in enumerate(patterns):
        try:
            compile_patterns([pattern])
            table.add_row("Ignore" if i == 0 else "", escape(pattern))
        except InvalidPatternError as exc:
            table.add_row("Ignore" if i == 0 else "", f"[red]{escape(pattern)}  ✗ {escape(exc.reason)}[/red]")
    Console().print(table)


@cli.command("set-key")
@click.argument("key")
@click.pass_context
def set_key(ctx: click.Context, key: str) -> None:
    """Rename the front matter key used for IDs.

    Every note with an ID under the old key has it moved to KEY.
    """
    app = _load_app(ctx)
    old = app.cfg.id_key
    report = app.set_id_key(key)
    if old == key:
        click.echo(f"ID key unchanged: {key!r}")
        return
    click.echo(f"ID key: {old!r} -> {key!r}")
    _echo_report(report, "Migrated")


@cli.command("set-ignore")
@click.argument("patterns", nargs=-1)
@click.option("--file", "from_file", type=click.File("r"), default=None,
              help="Read patterns from a file, one per line ('-' for stdin)")
@click.pass_context
def set_ignore(ctx: click.Context, patterns: tuple[str, ...], from_file: IO[str] | None) -> None:
    """Replace the ignore patterns (regular expressions matched against note paths).

    With no PATTERNS and no --file, clears the list.
    """
    app = _load_app(ctx)
    lines = list(patterns)
    if from_file is not None:
        lines.extend(from_file.read().splitlines())
    try:
        app.set_ignore_patterns(lines)
    except InvalidPatternError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Saved {len(app.cfg.ignore_patterns)} ignore pattern(s)")


# ---------------------------------------------------------------------------
# noteid add-ids / assign / check
# ---------------------------------------------------------------------------


@cli.command("add-ids")
@click.pass_context
def add_ids(ctx: click.Context) -> None:
    """Add an ID to all notes."""
    app = _load_app(ctx)
    _echo_report(app.add_ids_to_all_notes(), "Added IDs to")


@cli.command()
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def assign(ctx: click.Context, path: Path) -> None:
    """Add an ID to one note, if it is eligible and has none."""
    app = _load_app(ctx)
    try:
        note = app.vault.note(path.resolve())
        new_id = app.on_note_changed(note.abs_path)
    except (OSError, ValueError, FrontMatterError) as exc:
        raise click.ClickException(str(exc)) from exc
    if new_id:
        click.echo(new_id)
    else:
        fm = app.vault.read_front_matter(note) or {}
        existing = fm.get(app.cfg.id_key)
        click.echo(f"unchanged: {existing}" if existing else "unchanged: ignored", err=True)


@cli.command()
@click.argument("path")
@click.pass_context
def check(ctx: click.Context, path: str) -> None:
    """Show whether PATH (vault-relative) is ignored, and by which pattern."""
    app = _load_app(ctx)
    p = Path(path)
    if p.is_absolute():
        try:
            path = p.resolve().relative_to(app.vault.root).as_posix()
        except ValueError as exc:
            raise click.ClickException(f"not in vault {app.vault.root}: {path}") from exc
    try:
        match = compile_patterns(app.cfg.ignore_patterns).first_match(path)
    except InvalidPatternError as exc:
        raise click.ClickException(str(exc)) from exc
    if match is None:
        click.echo(f"{path}: not ignored")
    else:
        click.echo(f"{path}: ignored by {match!r}")


# ---------------------------------------------------------------------------
# noteid new-id / inspect
# ---------------------------------------------------------------------------


@cli.command("new-id")
@click.option("-n", "--count", default=1, show_default=True, type=click.IntRange(min=1))
def new_id(count: int) -> None:
    """Print freshly generated IDs."""
    for _ in range(count):
        click.echo(new_note_id())


@cli.command()
@click.argument("note_id")
def inspect(note_id: str) -> None:
    """Show when NOTE_ID was generated."""
    try:
        ts = note_id_timestamp(note_id)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(ts.isoformat())


# ---------------------------------------------------------------------------
# noteid watch
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--initial-scan", is_flag=True, help="Add IDs to all notes before watching")
@click.option("--poll", is_flag=True, help="Poll mtimes instead of using inotify")
@click.pass_context
def watch(ctx: click.Context, initial_scan: bool, poll: bool) -> None:
    """Assign IDs to notes as they are written. Runs until interrupted."""
    from noteid.watcher import run_from_config

    logging.getLogger("noteid").setLevel(logging.INFO)
    try:
        run_from_config(ctx.obj.get("vault"), initial_scan=initial_scan, poll=poll)
    except KeyboardInterrupt:
        click.echo("stopped")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    cli(standalone_mode=True)


if __name__ == "__main__":
    main()

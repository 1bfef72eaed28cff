"""Command-line interface for ks.

``ks`` on its own opens the interactive menu. The command flags run one
operation and exit, drawing a screen only when both ends of the process are
attached to a terminal.
"""

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, NoReturn, Optional, Tuple

import typer
from loguru import logger

from ks.config import LOG_FILE, load_config, resolve_notes_directory
from ks.errors import InvalidFilenameError, NotesError
from ks.filenames import validate_filename
from ks.formatting import displayable, format_size, format_time
from ks.logging_config import configure_logging
from ks.models import SortMode, sort_notes
from ks.orchestrator import NoteShell
from ks.storage import NoteStore
from ks.themes import Theme, get_theme
from ks.tui import run_screen
from ks.tui.screens import ConfirmScreen, EditorScreen, NoteInputScreen

app = typer.Typer(
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
    help="ks - Keep Simple Notes.",
)

USAGE = {
    "write": (
        "Usage: ks -w <filename> <note>\n"
        '   or: echo "content" | ks -w <filename>\n'
        "   or: ks -w <filename> (interactive content)\n"
        "   or: ks -w (fully interactive)"
    ),
    "append": (
        "Usage: ks -a <filename> <note>\n"
        '   or: echo "content" | ks -a <filename>\n'
        "   or: ks -a <filename> (interactive content)\n"
        "   or: ks -a (fully interactive)"
    ),
    "read": "Usage: ks -r <filename>",
    "delete": "Usage: ks -d <filename> [--force]",
    "search": "Usage: ks -s <keyword>",
}


def is_interactive() -> bool:
    """True when both stdin and stdout are terminals."""
    return sys.stdin.isatty() and sys.stdout.isatty()


def stdin_is_piped() -> bool:
    return not sys.stdin.isatty()


def fail(message: str) -> NoReturn:
    typer.secho(f"✗ {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(1)


def success(message: str) -> None:
    typer.secho(f"✓ {message}", fg=typer.colors.GREEN)


def check_filename(name: str) -> None:
    """Exit with the reason and a suggested fix if ``name`` is not a valid note name."""
    try:
        validate_filename(name)
    except InvalidFilenameError as e:
        message = f"Invalid filename: {e.reason}"
        if e.suggestion:
            message += f"\nSuggestion: {e.suggestion}"
        fail(message)


@dataclass
class Session:
    """Everything a command needs, settled once at startup."""

    store: NoteStore
    config: Dict[str, Any]
    theme: Theme
    interactive: bool
    stdin_piped: bool
    launch: Callable[..., Any] = run_screen

    def confirm(self, question: str) -> bool:
        if self.interactive:
            return bool(self.launch(ConfirmScreen(self.theme, question), full_screen=False))
        try:
            return typer.confirm(question, default=False)
        except typer.Abort:
            return False

    def shell(self, sort_mode: Optional[SortMode] = None) -> NoteShell:
        shell = NoteShell(self.store, self.config, self.theme, launch=self.launch)
        if sort_mode is not None:
            shell.sort_mode = sort_mode
        return shell


def gather_note(session: Session, args: List[str], command: str) -> Tuple[str, str]:
    """
    Work out the filename and content for write/append.

    0 args asks for both on screen, 1 arg takes the content from piped stdin
    or from the content screen, 2 args are used as they are.
    """
    verb = "Write" if command == "write" else "Append"
    heading = "New Note" if command == "write" else "Append to"

    if len(args) == 2:
        return args[0], args[1]
    if len(args) == 1 and session.stdin_piped:
        return args[0], typer.get_text_stream("stdin").read()
    if len(args) > 2 or not session.interactive:
        fail(USAGE[command])

    if args:
        check_filename(args[0])
        draft = session.launch(NoteInputScreen(session.theme, filename=args[0], verb=heading))
    else:
        draft = session.launch(NoteInputScreen(session.theme, verb=heading))
    if draft is None:
        typer.echo(f"{verb} cancelled.")
        raise typer.Exit(1)
    return draft.filename, draft.content


def write_command(session: Session, args: List[str]) -> None:
    name, content = gather_note(session, args, "write")
    check_filename(name)
    path = session.store.write_note(name, content)
    success(f"Successfully wrote note to {path}")


def append_command(session: Session, args: List[str]) -> None:
    name, content = gather_note(session, args, "append")
    check_filename(name)
    if not session.store.append_note(name, content, confirm_create=session.confirm):
        typer.echo("Append cancelled.")
        return
    success(f"Successfully appended to {session.store.path_for(name)}")


def read_command(session: Session, args: List[str]) -> None:
    if len(args) != 1:
        fail(USAGE["read"])
    name = args[0]
    check_filename(name)
    content = session.store.read_note(name)

    if not session.interactive:
        typer.secho(f" {name} ", bold=True, reverse=True)
        typer.echo(displayable(content))
        return

    result = session.launch(EditorScreen(session.theme, name, content))
    if result.saved:
        session.store.write_note(name, result.content)
        success(f"Saved changes to {name}")


def delete_command(session: Session, args: List[str], force: bool) -> None:
    if len(args) != 1:
        fail(USAGE["delete"])
    name = args[0]
    check_filename(name)
    if not session.store.exists(name):
        fail(f"Note '{name}' not found.")
    if not force and not session.confirm(f"Delete '{name}'?"):
        typer.echo("Deletion cancelled.")
        return
    session.store.delete_note(name)
    success(f"Successfully deleted note: {name}")


def list_command(session: Session, sort_mode: SortMode) -> None:
    if session.interactive:
        message = session.shell(sort_mode).browse()
        if message:
            typer.echo(message)
        return

    notes = sort_notes(session.store.list_notes(), sort_mode)
    if not notes:
        typer.echo("No notes found.")
        return
    typer.secho("Notes:", bold=True)
    for note in notes:
        meta = f"{format_size(note.size_bytes):>8}  (modified: {format_time(note.modified_at)})"
        typer.echo(f"  • {note.name} {meta}")


def search_command(session: Session, args: List[str]) -> None:
    if len(args) != 1 or not args[0].strip():
        fail(USAGE["search"])
    keyword = args[0]

    if session.interactive:
        message = session.shell().search(keyword)
        if message:
            typer.echo(message)
        return

    matches = session.store.search(keyword)
    typer.echo(f"Searching for: {keyword}\n")
    if not matches:
        typer.secho("No matches found.", fg=typer.colors.YELLOW)
        return
    for match in matches:
        typer.echo(f"  • {match.note.name} (match in: {match.location.value})")
    typer.echo()
    success(f"Found {len(matches)} match(es)")


@app.command()
def main(
    ctx: typer.Context,
    args: Optional[List[str]] = typer.Argument(None, metavar="[ARGS]...", help="Filename, note text or keyword"),
    write: bool = typer.Option(False, "--write", "-w", help="Write a note"),
    append: bool = typer.Option(False, "--append", "-a", help="Append to a note"),
    read: bool = typer.Option(False, "--read", "-r", help="Read a note (edit it on a terminal)"),
    delete: bool = typer.Option(False, "--delete", "-d", help="Delete a note"),
    list_notes: bool = typer.Option(False, "--list", "-l", help="List notes"),
    search: bool = typer.Option(False, "--search", "-s", help="Search filenames and contents"),
    sort: Optional[SortMode] = typer.Option(None, "--sort", case_sensitive=False, help="Sort order for --list"),
    force: bool = typer.Option(False, "--force", "-f", help="Delete without asking"),
    notes_dir: Optional[Path] = typer.Option(None, "--notes-dir", help="Directory holding the notes"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """ks - Keep Simple Notes. Run without flags to open the interactive menu."""
    interactive = is_interactive()
    configure_logging(verbose=verbose, log_file=LOG_FILE if interactive else None)
    args = args or []

    if sum([write, append, read, delete, list_notes, search]) > 1:
        fail("Only one command flag can be used at a time")

    config = load_config()
    try:
        directory = resolve_notes_directory(notes_dir, config)
    except NotesError as e:
        fail(str(e))
    logger.debug("Notes directory: {}", directory)

    session = Session(
        store=NoteStore(directory),
        config=config,
        theme=get_theme(config.get("theme")),
        interactive=interactive,
        stdin_piped=stdin_is_piped(),
        launch=run_screen,
    )

    try:
        if write:
            write_command(session, args)
        elif append:
            append_command(session, args)
        elif read:
            read_command(session, args)
        elif delete:
            delete_command(session, args, force)
        elif list_notes:
            list_command(session, sort or SortMode.parse(config.get("sort")))
        elif search:
            search_command(session, args)
        elif interactive:
            session.shell().run()
            typer.secho("Goodbye!", fg=typer.colors.GREEN)
        else:
            typer.echo(ctx.get_help())
    except NotesError as e:
        logger.debug("Command failed: {!r}", e)
        fail(str(e))


def run() -> None:
    app()

"""Command-line interface for logbrowse."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from . import __version__
from .config_hide import (
    DEFAULT_HIDE_FILE,
    HideConfig,
    HideParseError,
    generate_sample_hide_file,
    parse_hide_file,
)
from .file_source import (
    DEFAULT_LOGS_DIRECTORY,
    LOGS_DIRECTORY_ENV,
    LogFileError,
    format_file_size,
    list_log_files,
    read_log_file,
    resolve_log_file,
)
from .filter_engine import LogSession
from .models import LogEntry, LogFilter, LogLevel, LogStats
from .parser_applog import LogParseError
from .sorting import SortField, sort_entries

app = typer.Typer(
    name="logbrowse",
    help="Browse, filter and inspect application log files.",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)

DATE_FORMATS = ["%Y-%m-%d"]

# Level to color mapping for rich output
LEVEL_COLORS = {
    LogLevel.ERROR: "red",
    LogLevel.WARN: "yellow",
    LogLevel.INFO: "blue",
    LogLevel.DEBUG: "dim",
    LogLevel.TRACE: "magenta",
}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"logbrowse {__version__}")
        raise typer.Exit()


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )
    if debug:
        logging.getLogger("logbrowse").setLevel(logging.DEBUG)


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            help="Log parsing and indexing details to stderr.",
        ),
    ] = False,
) -> None:
    """logbrowse - Browse application log files."""
    _configure_logging(debug)


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing hide file.",
        ),
    ] = False,
) -> None:
    """Create a sample .logbrowsehide file in the current directory."""
    hide_path = Path.cwd() / DEFAULT_HIDE_FILE

    if force and hide_path.exists():
        hide_path.unlink()

    if generate_sample_hide_file(hide_path):
        console.print(f"[green]Created:[/green] {DEFAULT_HIDE_FILE}")
    else:
        console.print(
            f"[yellow]Skipped (already exists):[/yellow] {DEFAULT_HIDE_FILE}"
        )
        console.print("[dim]Use --force to overwrite existing files.[/dim]")


@app.command()
def view(
    file: Annotated[
        str,
        typer.Argument(help="Log file to open (.log, .txt or .gz)."),
    ],
    root: Annotated[
        Optional[Path],
        typer.Option(
            "--root",
            "-r",
            help="Logs directory; FILE is then a name inside it.",
        ),
    ] = None,
    search: Annotated[
        str,
        typer.Option(
            "--search",
            "-s",
            help="Case-insensitive text to find in message, class, thread or level.",
        ),
    ] = "",
    level: Annotated[
        str,
        typer.Option(
            "--level",
            "-l",
            help="Only show this level (INFO, WARN, ERROR, DEBUG, TRACE or ALL).",
        ),
    ] = "",
    date_from: Annotated[
        Optional[datetime],
        typer.Option(
            "--from",
            formats=DATE_FORMATS,
            help="Only show entries on or after this day (UTC).",
        ),
    ] = None,
    date_to: Annotated[
        Optional[datetime],
        typer.Option(
            "--to",
            formats=DATE_FORMATS,
            help="Only show entries on or before this day (UTC).",
        ),
    ] = None,
    sort: Annotated[
        str,
        typer.Option(
            "--sort",
            help="Sort column: timestamp, level or class.",
        ),
    ] = SortField.TIMESTAMP.value,
    ascending: Annotated[
        bool,
        typer.Option(
            "--asc",
            help="Sort ascending (default: descending, newest first).",
        ),
    ] = False,
    limit: Annotated[
        Optional[int],
        typer.Option(
            "--limit",
            "-n",
            min=1,
            help="Show at most this many entries.",
        ),
    ] = None,
    expand: Annotated[
        bool,
        typer.Option(
            "--expand",
            "-e",
            help="Show full multi-line messages.",
        ),
    ] = False,
    raw: Annotated[
        bool,
        typer.Option(
            "--raw",
            help="Print the original text of each entry instead of a table.",
        ),
    ] = False,
    hide_file: Annotated[
        Path,
        typer.Option(
            "--hide-file",
            help="Path to .logbrowsehide file.",
        ),
    ] = Path(DEFAULT_HIDE_FILE),
    no_hide: Annotated[
        bool,
        typer.Option(
            "--no-hide",
            help="Show entries matched by the hide file.",
        ),
    ] = False,
    stats: Annotated[
        bool,
        typer.Option(
            "--stats",
            help="Show level counts of the displayed entries.",
        ),
    ] = False,
    color: Annotated[
        bool,
        typer.Option(
            "--color/--no-color",
            help="Enable/disable colored output.",
        ),
    ] = True,
) -> None:
    """Load a log file, filter and sort its entries, and print them."""
    try:
        level_filter = LogLevel.parse_filter(level)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--level")

    try:
        sort_field = SortField.from_str(sort)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--sort")

    hide_config = HideConfig() if no_hide else _load_hide_config(hide_file)
    session = _load_session(file, root)

    criteria = LogFilter(
        search=search,
        level=level_filter,
        date_from=date_from.date() if date_from else None,
        date_to=date_to.date() if date_to else None,
        exclude=hide_config.as_exclude(),
    )
    shown = session.filter(criteria)
    ordered = sort_entries(shown, field=sort_field, descending=not ascending)
    if limit is not None:
        ordered = ordered[:limit]

    if raw:
        for entry in ordered:
            _print_raw(entry, color=color)
    elif ordered:
        console.print(_entries_table(ordered, expand=expand, color=color))
    else:
        console.print("[dim]No entries match the current filters.[/dim]")

    footer = f"{len(ordered)} / {len(session.entries)} entries shown"
    hidden = session.hidden_count(hide_config.patterns)
    if hidden:
        footer += f" ({hidden} hidden by {hide_file})"
    err_console.print(f"[dim]{footer}[/dim]")

    if stats:
        err_console.print()
        err_console.print("[bold]Level Statistics:[/bold]")
        err_console.print(session.stats(shown).summary(), highlight=False)


@app.command("stats")
def stats_command(
    file: Annotated[
        str,
        typer.Argument(help="Log file to open (.log, .txt or .gz)."),
    ],
    root: Annotated[
        Optional[Path],
        typer.Option(
            "--root",
            "-r",
            help="Logs directory; FILE is then a name inside it.",
        ),
    ] = None,
    breakdown: Annotated[
        bool,
        typer.Option(
            "--breakdown",
            "-b",
            help="Also count entries per thread and per class.",
        ),
    ] = False,
) -> None:
    """Print entry counts per level for a log file."""
    session = _load_session(file, root)
    console.print(_stats_table(session.stats()))

    if breakdown and session.index is not None:
        index = session.index
        console.print(
            _count_table(
                "Thread",
                {name: len(index.for_thread(name)) for name in index.threads()},
            )
        )
        console.print(
            _count_table(
                "Class",
                {name: len(index.for_class_name(name)) for name in index.class_names()},
            )
        )


@app.command()
def files(
    root: Annotated[
        Path,
        typer.Option(
            "--root",
            "-r",
            envvar=LOGS_DIRECTORY_ENV,
            help="Logs directory to list.",
        ),
    ] = Path(DEFAULT_LOGS_DIRECTORY),
) -> None:
    """List the files of the logs directory, most recent first."""
    try:
        infos = list_log_files(root)
    except LogFileError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not infos:
        console.print(f"[dim]No files in {root}.[/dim]")
        return

    table = Table(title=str(root))
    table.add_column("Name")
    table.add_column("Size", justify="right")
    table.add_column("Modified")
    for info in infos:
        table.add_row(
            info.name,
            format_file_size(info.size),
            info.last_modified.strftime("%Y-%m-%d %H:%M:%S"),
        )
    console.print(table)


def _load_session(file: str, root: Path | None) -> LogSession:
    """Read and parse a log file, exiting on error."""
    try:
        path = resolve_log_file(root, file) if root is not None else Path(file)
        content = read_log_file(path)
        session = LogSession()
        session.load(content)
    except (LogFileError, LogParseError) as e:
        err_console.print(f"[red]Error loading {file}:[/red] {e}")
        raise typer.Exit(1)
    return session


def _load_hide_config(path: Path) -> HideConfig:
    """Load hide config from file, with fallback to empty config."""
    if not path.exists():
        # Hide file is optional, don't warn
        return HideConfig()

    try:
        return parse_hide_file(path)
    except HideParseError as e:
        err_console.print(f"[red]Error parsing {path}:[/red] {e}")
        raise typer.Exit(1)


def _format_timestamp(entry: LogEntry) -> str:
    return entry.timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]


def _level_text(level: LogLevel, color: bool) -> Text:
    style = LEVEL_COLORS.get(level, "") if color else ""
    return Text(level.value, style=style)


def _entries_table(entries: list[LogEntry], expand: bool, color: bool) -> Table:
    table = Table(show_lines=expand)
    table.add_column("Date/Time", no_wrap=True)
    table.add_column("Level")
    table.add_column("Thread")
    table.add_column("Class")
    table.add_column("Message")

    for entry in entries:
        if expand:
            message = entry.message
        else:
            message = entry.first_line + (" ..." if entry.is_multiline else "")
        table.add_row(
            _format_timestamp(entry),
            _level_text(entry.level, color),
            entry.thread,
            entry.class_name,
            Text(message),
        )
    return table


def _stats_table(stats: LogStats) -> Table:
    table = Table(title="Levels")
    table.add_column("Level")
    table.add_column("Count", justify="right")
    for level in LogLevel:
        table.add_row(_level_text(level, True), str(stats.count(level)))
    table.add_row("Total", str(stats.total), style="bold")
    return table


def _count_table(label: str, counts: dict[str, int]) -> Table:
    table = Table(title=f"Entries per {label.lower()}")
    table.add_column(label)
    table.add_column("Count", justify="right")
    for name, count in sorted(counts.items(), key=lambda x: x[1], reverse=True):
        table.add_row(name, str(count))
    return table


def _print_raw(entry: LogEntry, color: bool = True) -> None:
    """Print the original text of an entry."""
    if color and entry.level in LEVEL_COLORS:
        console.print(
            Text(entry.raw, style=LEVEL_COLORS[entry.level]),
            highlight=False,
            soft_wrap=True,
        )
    else:
        console.print(entry.raw, highlight=False, markup=False, soft_wrap=True)


if __name__ == "__main__":
    app()

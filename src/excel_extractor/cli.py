"""CLI entry point for excel-extractor."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table as RichTable

from excel_extractor import __version__
from excel_extractor.export import write_export
from excel_extractor.models import NormalizedTable, Stats
from excel_extractor.pipeline import (
    EMPTY_STATE_TEXT,
    display_headers,
    display_rows,
)
from excel_extractor.session import Session

app = typer.Typer(
    name="xlextract",
    help="excel-extractor — View spreadsheet sheets and export them as CSV or JSON.",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()


class ExportFormatOption(str, Enum):
    csv = "csv"
    json = "json"


def _noop(*_args: object, **_kwargs: object) -> None:
    return None


def _printer(quiet: bool) -> Callable[..., None]:
    return _noop if quiet else console.print


def _err(msg: str) -> None:
    console.print(f"[red]x[/red] {msg}")


# ── Helpers ──────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"excel-extractor v{__version__}")
        raise typer.Exit()


def _open_session(
    input_file: Path, sheet: str | None
) -> tuple[Session, NormalizedTable, Stats]:
    """Load *input_file* (and switch to *sheet*), exiting with code 2 on failure.

    Returns the session with its active table and stats.
    """
    try:
        data = input_file.read_bytes()
    except OSError as exc:
        _err(f"Cannot read {input_file}: {exc}")
        raise typer.Exit(code=2)

    session = Session()
    outcome = session.load_file(data, input_file.name)
    if not outcome.ok:
        _err(outcome.message)
        raise typer.Exit(code=2)

    if sheet is not None and sheet != session.active_sheet:
        outcome = session.switch_sheet(sheet)
        if not outcome.ok:
            _err(outcome.message)
            console.print(f"  Available sheets: {', '.join(session.sheet_names)}")
            raise typer.Exit(code=2)

    if session.table is None or session.stats is None:
        _err(f"No table loaded from {input_file.name}")
        raise typer.Exit(code=1)
    return session, session.table, session.stats


def _stats_table(stats: Stats) -> RichTable:
    tbl = RichTable(show_header=True, box=None, pad_edge=False)
    tbl.add_column("Total rows", justify="center", style="bold")
    tbl.add_column("Total columns", justify="center", style="bold")
    tbl.add_column("Total sheets", justify="center", style="bold")
    tbl.add_row(
        str(stats.total_rows),
        str(stats.total_columns),
        str(stats.total_sheets),
    )
    return tbl


def _data_table(table: NormalizedTable, title: str | None, limit: int | None) -> RichTable:
    tbl = RichTable(title=title, show_lines=False)
    for label in display_headers(table):
        tbl.add_column(label, overflow="fold")

    if not table.rows:
        if not tbl.columns:
            tbl.add_column("")
        tbl.add_row(f"[dim]{EMPTY_STATE_TEXT}[/dim]", *([""] * (len(tbl.columns) - 1)))
        return tbl

    for cells in display_rows(table, limit):
        tbl.add_row(*cells)
    return tbl


# ── Callbacks ────────────────────────────────────────────────────


@app.callback()
def main(
    version: bool | None = typer.Option(
        None, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """excel-extractor CLI."""


# ── show command ─────────────────────────────────────────────────


@app.command()
def show(
    input_file: Path = typer.Option(
        ..., "--input", "-i",
        help="Path to an .xlsx, .xls or .csv file.",
        exists=True, readable=True, dir_okay=False,
    ),
    sheet: str | None = typer.Option(
        None, "--sheet", "-s",
        help="Sheet to display (defaults to the first sheet).",
    ),
    limit: int | None = typer.Option(
        None, "--limit", "-n", min=0,
        help="Show at most this many data rows.",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Only print the table.",
    ),
) -> None:
    """Display a sheet as a table, with row / column / sheet counts."""
    echo = _printer(quiet)
    try:
        session, table, stats = _open_session(input_file, sheet)

        echo(Panel(
            f"[bold]excel-extractor[/bold] v{__version__}\n"
            f"File:  {input_file.name}\nSheet: {session.active_sheet}",
            title="Workbook", border_style="blue",
        ))
        echo(_stats_table(stats))
        if len(session.sheet_names) > 1:
            echo(f"  Sheets: {', '.join(session.sheet_names)}")

        console.print(_data_table(table, session.active_sheet, limit))
        if limit is not None and stats.total_rows > limit:
            echo(f"  [yellow]![/yellow] Showing {limit} of {stats.total_rows} rows")
    except typer.Exit:
        raise
    except Exception as exc:
        _err(f"Unexpected internal error: {exc}")
        raise typer.Exit(code=1)


# ── sheets command ───────────────────────────────────────────────


@app.command()
def sheets(
    input_file: Path = typer.Option(
        ..., "--input", "-i",
        help="Path to an .xlsx, .xls or .csv file.",
        exists=True, readable=True, dir_okay=False,
    ),
) -> None:
    """List the sheets of a workbook; the first one is loaded by default."""
    try:
        session, _table, _stats = _open_session(input_file, None)
        for name in session.sheet_names:
            marker = "*" if name == session.active_sheet else " "
            console.print(f"{marker} {name}")
    except typer.Exit:
        raise
    except Exception as exc:
        _err(f"Unexpected internal error: {exc}")
        raise typer.Exit(code=1)


# ── export command ───────────────────────────────────────────────


@app.command()
def export(
    input_file: Path = typer.Option(
        ..., "--input", "-i",
        help="Path to an .xlsx, .xls or .csv file.",
        exists=True, readable=True, dir_okay=False,
    ),
    fmt: ExportFormatOption = typer.Option(
        ..., "--format", "-f",
        help="Export format: csv or json.",
    ),
    sheet: str | None = typer.Option(
        None, "--sheet", "-s",
        help="Sheet to export (defaults to the first sheet).",
    ),
    out_dir: Path = typer.Option(
        Path("."), "--out-dir", "-o",
        help="Directory for the exported file.",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Suppress informational output.",
    ),
) -> None:
    """Export a sheet as <file>_<sheet>.csv or <file>_<sheet>.json."""
    echo = _printer(quiet)
    try:
        session, _table, stats = _open_session(input_file, sheet)
        echo(
            f"[blue]>[/blue] Exporting sheet {session.active_sheet!r} "
            f"({stats.total_rows} rows x {stats.total_columns} columns) …"
        )
        path = write_export(out_dir, session, fmt.value)
        echo(f"  {fmt.value.upper()} -> {path}")
    except typer.Exit:
        raise
    except Exception as exc:
        _err(f"Unexpected internal error: {exc}")
        raise typer.Exit(code=1)

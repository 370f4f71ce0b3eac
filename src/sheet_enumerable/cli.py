"""CLI entry point for sheet-enumerable."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import typer
from openpyxl.utils import get_column_letter
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table as RichTable

from sheet_enumerable import __version__
from sheet_enumerable.io import write_json
from sheet_enumerable.merged import MergedRegistry
from sheet_enumerable.models import MergedRegion
from sheet_enumerable.sheet import SheetEnumerable
from sheet_enumerable.source import WorkbookGridSource, open_grid_source

app = typer.Typer(
    name="sheetenum",
    help="sheet-enumerable — Query spreadsheet columns by header, merged-cell aware.",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()


def _noop(*_args: object, **_kwargs: object) -> None:
    return None


def _printer(quiet: bool) -> Callable[..., None]:
    return _noop if quiet else console.print


def _err(msg: str) -> None:
    console.print(f"[red]x[/red] {escape(msg)}")


# ── Helpers ──────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"sheet-enumerable v{__version__}")
        raise typer.Exit()


def _load_merge_profile(profile: Path | None) -> list[str]:
    """Return A1 range strings listed in a merges file, one per line."""
    if not profile:
        return []
    if not profile.exists():
        raise ValueError(f"Merges file not found: {profile} (expected lines like F19:F20)")
    if profile.is_dir():
        raise ValueError(f"Merges file is a directory, not a file: {profile}")
    try:
        text = profile.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"Cannot read merges file {profile}: {exc}") from exc

    lines: list[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        lines.append(stripped)
    return lines


def _parse_merges(raw: list[str]) -> list[MergedRegion]:
    regions: list[MergedRegion] = []
    for item in raw:
        for ref in item.split(","):
            if ref.strip():
                regions.append(MergedRegion.from_a1(ref))
    return regions


def _open_sheet(
    input_file: Path,
    *,
    sheet: str | None,
    delimiter: str | None,
    merges: list[str] | None,
    merges_file: Path | None,
    workbook_merges: bool,
) -> SheetEnumerable:
    regions = _parse_merges(_load_merge_profile(merges_file) + (merges or []))
    source = open_grid_source(input_file, sheet=sheet, delimiter=delimiter)
    if workbook_merges and isinstance(source, WorkbookGridSource):
        regions = source.merged_regions() + regions
    return SheetEnumerable(source, MergedRegistry(regions))


def _fail(exc: BaseException, code: int = 2) -> typer.Exit:
    _err(str(exc))
    return typer.Exit(code=code)


# Shared options
_INPUT = typer.Option(
    ..., "--input", "-i",
    help="Path to CSV or XLSX input file.",
    exists=True, readable=True,
)
_SHEET = typer.Option(None, "--sheet", "-s", help="Worksheet name (XLSX only).")
_DELIMITER = typer.Option(
    None, "--delimiter", "-d",
    help="CSV delimiter, or 'auto' to detect it (default: comma).",
)
_MERGES = typer.Option(
    None, "--merge", "-m",
    help="Merged region in A1 notation, e.g. --merge F19:F20 (repeatable).",
)
_MERGES_FILE = typer.Option(
    None, "--merges",
    help="File listing merged regions, one A1 range per line.",
)
_WORKBOOK_MERGES = typer.Option(
    True, "--workbook-merges/--no-workbook-merges",
    help="Also honour merged ranges stored in an XLSX workbook.",
)
_QUIET = typer.Option(False, "--quiet", "-q", help="Only print the essential result.")


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
    """sheet-enumerable CLI."""


# ── headers command ──────────────────────────────────────────────


@app.command()
def headers(
    input_file: Path = _INPUT,
    sheet: str | None = _SHEET,
    delimiter: str | None = _DELIMITER,
    merges: list[str] | None = _MERGES,
    merges_file: Path | None = _MERGES_FILE,
    workbook_merges: bool = _WORKBOOK_MERGES,
) -> None:
    """List every header found in the grid and where it resolves."""
    try:
        view = _open_sheet(
            input_file, sheet=sheet, delimiter=delimiter, merges=merges,
            merges_file=merges_file, workbook_merges=workbook_merges,
        )
    except (FileNotFoundError, ValueError, OSError) as exc:
        raise _fail(exc) from exc

    tbl = RichTable(title="Headers", show_lines=False)
    tbl.add_column("Header", style="bold")
    tbl.add_column("Column")
    tbl.add_column("Header row")
    for name in sorted(view.headers):
        resolved = view.resolve(name)
        header_row = str(resolved.header_row) if resolved else "-"
        col_idx = view.headers[name] + 1
        tbl.add_row(escape(name), f"{get_column_letter(col_idx)} ({col_idx})", header_row)
    console.print(tbl)


# ── cells command ────────────────────────────────────────────────


@app.command()
def cells(
    input_file: Path = _INPUT,
    sheet: str | None = _SHEET,
    delimiter: str | None = _DELIMITER,
    merges: list[str] | None = _MERGES,
    merges_file: Path | None = _MERGES_FILE,
    workbook_merges: bool = _WORKBOOK_MERGES,
    limit: int | None = typer.Option(None, "--limit", "-n", min=1, help="Stop after N cells."),
) -> None:
    """Walk the grid, skipping blanks and merged duplicates."""
    try:
        view = _open_sheet(
            input_file, sheet=sheet, delimiter=delimiter, merges=merges,
            merges_file=merges_file, workbook_merges=workbook_merges,
        )
    except (FileNotFoundError, ValueError, OSError) as exc:
        raise _fail(exc) from exc

    tbl = RichTable(title="Cells")
    tbl.add_column("Cell", style="bold")
    tbl.add_column("Row")
    tbl.add_column("Column")
    tbl.add_column("Value")
    for count, (value, row, col) in enumerate(view, start=1):
        tbl.add_row(f"{get_column_letter(col)}{row}", str(row), str(col), escape(value))
        if limit is not None and count >= limit:
            break
    console.print(tbl)


# ── column command ───────────────────────────────────────────────


@app.command()
def column(
    name: str = typer.Argument(..., help="Header name (case and spacing are ignored)."),
    input_file: Path = _INPUT,
    sheet: str | None = _SHEET,
    delimiter: str | None = _DELIMITER,
    merges: list[str] | None = _MERGES,
    merges_file: Path | None = _MERGES_FILE,
    workbook_merges: bool = _WORKBOOK_MERGES,
    ignore_totals: bool = typer.Option(
        False, "--ignore-totals",
        help="Hide rows mentioning total/subtotal from the value listing.",
    ),
    json_out: Path | None = typer.Option(
        None, "--json",
        help="Write a JSON summary of the column to this path.",
    ),
    quiet: bool = _QUIET,
) -> None:
    """Show a column's values with its sum and average."""
    echo = _printer(quiet)
    try:
        view = _open_sheet(
            input_file, sheet=sheet, delimiter=delimiter, merges=merges,
            merges_file=merges_file, workbook_merges=workbook_merges,
        )
    except (FileNotFoundError, ValueError, OSError) as exc:
        raise _fail(exc) from exc

    col = view.resolve(name)
    if col is None:
        _err(f"Header not found: {name!r}")
        raise typer.Exit(code=2)

    try:
        summary = col.summary()
        if not quiet:
            tbl = RichTable(title=f"{escape(summary.header)} ({get_column_letter(col.column)})")
            tbl.add_column("Offset")
            tbl.add_column("Value")
            for offset, value in enumerate(col.materialize(ignore_totals=ignore_totals), start=1):
                tbl.add_row(str(offset), escape(value))
            console.print(tbl)
        echo(Panel(
            f"Numeric cells: {summary.numeric_count}\n"
            f"Sum:     {summary.sum:.2f}\n"
            f"Average: {summary.average:.2f}",
            title="Aggregates", border_style="blue",
        ))
        if quiet:
            console.print(f"sum={summary.sum} average={summary.average}")
        if json_out is not None:
            path = write_json(json_out, summary.to_dict())
            echo(f"  Summary -> {escape(str(path))}")
    except typer.Exit:
        raise
    except OSError as exc:
        raise _fail(exc) from exc
    except Exception as exc:
        _err(f"Unexpected internal error: {exc}")
        raise typer.Exit(code=1) from exc


# ── find command ─────────────────────────────────────────────────


@app.command()
def find(
    name: str = typer.Argument(..., help="Header name of the column to search."),
    value: str = typer.Argument(..., help="Cell text to look for."),
    input_file: Path = _INPUT,
    sheet: str | None = _SHEET,
    delimiter: str | None = _DELIMITER,
) -> None:
    """Print the first row whose cell in NAME equals VALUE."""
    try:
        view = _open_sheet(
            input_file, sheet=sheet, delimiter=delimiter, merges=None,
            merges_file=None, workbook_merges=False,
        )
    except (FileNotFoundError, ValueError, OSError) as exc:
        raise _fail(exc) from exc

    col = view.resolve(name)
    if col is None:
        _err(f"Header not found: {name!r}")
        raise typer.Exit(code=2)
    row = col.find_row_by_value(value)
    if row is None:
        _err(f"No row with {name!r} = {value!r}")
        raise typer.Exit(code=2)
    console.print(" | ".join(row), markup=False, highlight=False)


# ── row command ──────────────────────────────────────────────────


@app.command("row")
def row_cmd(
    row_num: int = typer.Argument(..., min=1, help="1-based row number."),
    input_file: Path = _INPUT,
    sheet: str | None = _SHEET,
    delimiter: str | None = _DELIMITER,
) -> None:
    """Print a full row, padded to the grid's width."""
    try:
        view = _open_sheet(
            input_file, sheet=sheet, delimiter=delimiter, merges=None,
            merges_file=None, workbook_merges=False,
        )
    except (FileNotFoundError, ValueError, OSError) as exc:
        raise _fail(exc) from exc
    console.print(" | ".join(view.row(row_num)), markup=False, highlight=False)


# ── set command ──────────────────────────────────────────────────


@app.command("set")
def set_cmd(
    name: str = typer.Argument(..., help="Header name of the column to write."),
    offset: int = typer.Argument(..., help="Row offset below the header (1 = first data row)."),
    value: str = typer.Argument(..., help="New cell text."),
    input_file: Path = _INPUT,
    sheet: str | None = _SHEET,
    delimiter: str | None = _DELIMITER,
    quiet: bool = _QUIET,
) -> None:
    """Write one cell under a header and save the file."""
    echo = _printer(quiet)
    try:
        view = _open_sheet(
            input_file, sheet=sheet, delimiter=delimiter, merges=None,
            merges_file=None, workbook_merges=False,
        )
    except (FileNotFoundError, ValueError, OSError) as exc:
        raise _fail(exc) from exc

    col = view.resolve(name)
    if col is None:
        _err(f"Header not found: {name!r}")
        raise typer.Exit(code=2)
    try:
        previous = col.get(offset)
        col.set(offset, value)
    except (ValueError, OSError) as exc:
        raise _fail(exc) from exc

    cell = f"{get_column_letter(col.column)}{col.header_row + offset}"
    echo(
        f"[green]Saved[/green] {cell}: {escape(repr(previous))} -> {escape(repr(value))}  "
        f"({escape(str(input_file))})"
    )

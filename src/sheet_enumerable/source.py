"""Grid sources — the read/write/commit boundary the core talks to."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from openpyxl import load_workbook
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from sheet_enumerable.io import (
    CSV_SUFFIXES,
    EXCEL_SUFFIXES,
    load_rows,
    resolve_delimiter,
    save_rows,
)
from sheet_enumerable.models import MergedRegion
from sheet_enumerable.text import to_text


@runtime_checkable
class GridSource(Protocol):
    """Capabilities the core needs from a grid; all positions are 1-based."""

    def read_all_rows(self) -> list[list[str]]: ...

    def read_cell(self, row: int, col: int) -> str: ...

    def write_cell(self, row: int, col: int, value: Any) -> None: ...

    def commit(self) -> None: ...

    def row_count(self) -> int: ...

    def column_count(self) -> int: ...


def _check_position(row: int, col: int) -> None:
    if row < 1 or col < 1:
        raise ValueError(f"Cell positions are 1-based, got ({row}, {col})")


# ── In-memory ────────────────────────────────────────────────────


class InMemoryGridSource:
    """A grid held as lists of strings; commits are counted, not persisted."""

    def __init__(self, rows: Sequence[Sequence[Any]] | None = None) -> None:
        self._rows: list[list[str]] = [[to_text(cell) for cell in row] for row in rows or []]
        self.pending_writes = 0
        self.commits = 0

    def read_all_rows(self) -> list[list[str]]:
        return [list(row) for row in self._rows]

    def read_cell(self, row: int, col: int) -> str:
        _check_position(row, col)
        if row > len(self._rows):
            return ""
        cells = self._rows[row - 1]
        return cells[col - 1] if col <= len(cells) else ""

    def write_cell(self, row: int, col: int, value: Any) -> None:
        _check_position(row, col)
        while len(self._rows) < row:
            self._rows.append([])
        cells = self._rows[row - 1]
        if len(cells) < col:
            cells.extend([""] * (col - len(cells)))
        cells[col - 1] = to_text(value)
        self.pending_writes += 1

    def commit(self) -> None:
        self.pending_writes = 0
        self.commits += 1

    def row_count(self) -> int:
        return len(self._rows)

    def column_count(self) -> int:
        return max((len(row) for row in self._rows), default=0)


# ── CSV file ─────────────────────────────────────────────────────


class CsvGridSource(InMemoryGridSource):
    """A CSV file loaded into memory; ``commit`` rewrites the file."""

    def __init__(self, path: Path, delimiter: str | None = None) -> None:
        self.path = Path(path)
        # Kept resolved so commits write back with the delimiter that was read.
        self.delimiter = resolve_delimiter(self.path, delimiter)
        super().__init__(load_rows(self.path, delimiter=self.delimiter))

    def commit(self) -> None:
        save_rows(self.path, self._rows, delimiter=self.delimiter)
        super().commit()


# ── XLSX workbook ────────────────────────────────────────────────


class WorkbookGridSource:
    """One worksheet of an XLSX workbook, read and written through openpyxl."""

    def __init__(self, path: Path, sheet: str | None = None) -> None:
        self.path = Path(path)
        self.workbook: Workbook = load_workbook(self.path)
        if sheet is None:
            ws = self.workbook.active
        elif sheet in self.workbook.sheetnames:
            ws = self.workbook[sheet]
        else:
            available = ", ".join(self.workbook.sheetnames)
            raise ValueError(f"Sheet not found: {sheet!r} (available: {available})")
        if not isinstance(ws, Worksheet):
            raise ValueError(f"Not a worksheet: {sheet!r}")
        self.worksheet: Worksheet = ws

    def read_all_rows(self) -> list[list[str]]:
        ws = self.worksheet
        if ws.max_row == 1 and ws.max_column == 1 and ws.cell(row=1, column=1).value is None:
            return []
        rows: list[list[str]] = []
        for values in ws.iter_rows(
            min_row=1, max_row=ws.max_row, max_col=ws.max_column, values_only=True
        ):
            row = [to_text(value) for value in values]
            while row and row[-1] == "":
                row.pop()
            rows.append(row)
        return rows

    def read_cell(self, row: int, col: int) -> str:
        _check_position(row, col)
        return to_text(self.worksheet.cell(row=row, column=col).value)

    def write_cell(self, row: int, col: int, value: Any) -> None:
        _check_position(row, col)
        self.worksheet.cell(row=row, column=col).value = value

    def commit(self) -> None:
        self.workbook.save(self.path)

    def row_count(self) -> int:
        return len(self.read_all_rows())

    def column_count(self) -> int:
        return max((len(row) for row in self.read_all_rows()), default=0)

    def merged_regions(self) -> list[MergedRegion]:
        """Return the worksheet's own merged ranges."""
        return [
            MergedRegion(rng.min_row, rng.min_col, rng.max_row, rng.max_col)
            for rng in self.worksheet.merged_cells.ranges
        ]


def open_grid_source(
    path: Path, sheet: str | None = None, delimiter: str | None = None
) -> CsvGridSource | WorkbookGridSource:
    """Pick a grid source for *path* by its extension.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    ValueError
        If the extension is not supported.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    suffix = path.suffix.lower()
    if suffix in CSV_SUFFIXES:
        return CsvGridSource(path, delimiter=delimiter)
    if suffix in EXCEL_SUFFIXES:
        return WorkbookGridSource(path, sheet=sheet)
    raise ValueError(f"Unsupported file type: {suffix!r}. Use .csv or .xlsx")

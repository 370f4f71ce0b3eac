"""sheet-enumerable — Header-indexed, merged-cell-aware views over spreadsheet grids."""

__version__ = "0.2.0"

from sheet_enumerable.columns import Column, ColumnValues
from sheet_enumerable.merged import MergedRegistry
from sheet_enumerable.models import CellRef, ColumnSummary, MergedRegion
from sheet_enumerable.sheet import SheetEnumerable
from sheet_enumerable.source import (
    CsvGridSource,
    GridSource,
    InMemoryGridSource,
    WorkbookGridSource,
    open_grid_source,
)
from sheet_enumerable.text import TOTALS_PATTERN, normalize, parse_number

__all__ = [
    "TOTALS_PATTERN",
    "CellRef",
    "Column",
    "ColumnSummary",
    "ColumnValues",
    "CsvGridSource",
    "GridSource",
    "InMemoryGridSource",
    "MergedRegion",
    "MergedRegistry",
    "SheetEnumerable",
    "WorkbookGridSource",
    "__version__",
    "normalize",
    "open_grid_source",
    "parse_number",
]

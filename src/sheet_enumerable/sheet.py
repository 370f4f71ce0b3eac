"""Header index + grid walker over a grid source."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import Any

import pandas as pd

from sheet_enumerable.columns import Column
from sheet_enumerable.merged import MergedRegistry
from sheet_enumerable.models import CellRef, MergedRegion
from sheet_enumerable.source import GridSource
from sheet_enumerable.text import is_blank, normalize


def row_empty(row: Sequence[Any]) -> bool:
    return all(is_blank(cell) for cell in row)


def _build_header_map(rows: Iterable[Sequence[Any]]) -> dict[str, int]:
    # Every row contributes; the last occurrence of a header wins.
    headers: dict[str, int] = {}
    for row in rows:
        for col_idx, cell in enumerate(row):
            key = normalize(cell)
            if key:
                headers[key] = col_idx
    return headers


class SheetEnumerable:
    """Header-indexed, merged-cell-aware view of a grid.

    The header map is built once, at construction.  Everything else reads
    the grid source on demand, so call :meth:`reindex` (or build a new
    instance) after inserting or deleting header rows.

    Iterating the sheet yields :class:`CellRef` triples ``(value, row,
    column)`` in row-major order, skipping blank rows, blank cells and
    merged cells that are not the anchor of any region.
    """

    def __init__(
        self,
        source: GridSource,
        merged_regions: MergedRegistry | Iterable[MergedRegion] | None = None,
    ) -> None:
        self.source = source
        if isinstance(merged_regions, MergedRegistry):
            self.merged = merged_regions
        else:
            self.merged = MergedRegistry(merged_regions)
        self._headers = _build_header_map(source.read_all_rows())

    def __repr__(self) -> str:
        return f"SheetEnumerable(headers={len(self._headers)}, merged={len(self.merged)})"

    # ── Header index ─────────────────────────────────────────────

    @property
    def headers(self) -> Mapping[str, int]:
        """Normalised header text → 0-based column index."""
        return MappingProxyType(self._headers)

    def reindex(self) -> None:
        self._headers = _build_header_map(self.source.read_all_rows())

    def resolve(self, header: Any) -> Column | None:
        """Return a :class:`Column` for *header*, or ``None`` if it is unknown."""
        key = normalize(header)
        col_idx = self._headers.get(key)
        if col_idx is None:
            return None

        header_row: int | None = None
        for row_idx, row in enumerate(self.source.read_all_rows()):
            cell = row[col_idx] if col_idx < len(row) else ""
            if normalize(cell) == key:
                header_row = row_idx + 1
                break
        if header_row is None:
            return None

        return Column(self.source, col_idx + 1, header_row)

    __getitem__ = resolve

    def __contains__(self, header: object) -> bool:
        return normalize(header) in self._headers

    def bind(self, *headers: str) -> dict[str, Column | None]:
        """Resolve a fixed set of headers up front, keyed by the names given."""
        return {header: self.resolve(header) for header in headers}

    # ── Rows ─────────────────────────────────────────────────────

    def row(self, row_num: int) -> list[str]:
        """Full row *row_num* (1-based), padded to the grid's column count."""
        return [
            self.source.read_cell(row_num, col_num)
            for col_num in range(1, self.source.column_count() + 1)
        ]

    # ── Grid walker ──────────────────────────────────────────────

    def cells(self) -> Iterator[CellRef]:
        for row_num, row in enumerate(self.source.read_all_rows(), start=1):
            if row_empty(row):
                continue
            for col_num, value in enumerate(row, start=1):
                if str(value).strip() == "":
                    continue
                # An anchor lying inside another region's body is still yielded.
                covered = self.merged.is_covered(row_num, col_num)
                if covered and not self.merged.is_anchor(row_num, col_num):
                    continue
                yield CellRef(value, row_num, col_num)

    def __iter__(self) -> Iterator[CellRef]:
        return self.cells()

    def to_frame(self) -> pd.DataFrame:
        """Walked cells as a DataFrame with ``value``, ``row`` and ``column``."""
        records = [cell._asdict() for cell in self.cells()]
        return pd.DataFrame.from_records(records, columns=["value", "row", "column"])

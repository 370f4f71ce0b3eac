"""Column accessor — one header's column, read on demand from the grid source."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

import pandas as pd

from sheet_enumerable.models import ColumnSummary
from sheet_enumerable.text import is_totals_text, normalize, parse_number

if TYPE_CHECKING:
    from sheet_enumerable.source import GridSource

T = TypeVar("T")
A = TypeVar("A")


class ColumnValues(Sequence[str]):
    """Lazy, restartable view of a column's data cells.

    Every iteration re-reads the grid source, so two passes with no
    writes in between see the same values.
    """

    def __init__(
        self, source: GridSource, column: int, header_row: int, ignore_totals: bool
    ) -> None:
        self._source = source
        self._column = column
        self._header_row = header_row
        self._ignore_totals = ignore_totals

    def __iter__(self) -> Iterator[str]:
        rows = self._source.read_all_rows()
        idx = self._column - 1
        for row in rows[self._header_row:]:
            if self._ignore_totals and any(is_totals_text(cell) for cell in row):
                continue
            yield row[idx] if idx < len(row) else ""

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __getitem__(self, index: Any) -> Any:
        return list(self)[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (ColumnValues, list, tuple)):
            return list(self) == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"ColumnValues({list(self)!r})"


class Column:
    """View bound to one column (1-based) and the row its header sits on.

    Offsets passed to :meth:`get`/:meth:`set` are relative to the header
    row: offset ``0`` is the header cell, ``1`` the first data row.
    """

    def __init__(self, source: GridSource, column: int, header_row: int) -> None:
        self._source = source
        self.column = column
        self.header_row = header_row

    def __repr__(self) -> str:
        return f"Column(column={self.column}, header_row={self.header_row})"

    @property
    def header(self) -> str:
        return self._source.read_cell(self.header_row, self.column)

    # ── Cell access ──────────────────────────────────────────────

    def get(self, offset: int) -> str:
        return self._source.read_cell(self.header_row + offset, self.column)

    def set(self, offset: int, value: Any) -> None:
        """Write one cell and commit immediately."""
        self._source.write_cell(self.header_row + offset, self.column, value)
        self._source.commit()

    __getitem__ = get
    __setitem__ = set

    # ── Sequence views ───────────────────────────────────────────

    def materialize(self, ignore_totals: bool = False) -> ColumnValues:
        """Cells below the header row; optionally drop rows mentioning totals."""
        return ColumnValues(self._source, self.column, self.header_row, ignore_totals)

    def values(self) -> ColumnValues:
        return self.materialize()

    def filter(self, predicate: Callable[[str], bool]) -> list[str]:
        return [cell for cell in self.materialize() if predicate(cell)]

    def map(self, transform: Callable[[str], T]) -> list[T]:
        return [transform(cell) for cell in self.materialize()]

    def fold(self, initial: A, combiner: Callable[[A, str], A]) -> A:
        acc = initial
        for cell in self.materialize():
            acc = combiner(acc, cell)
        return acc

    def to_series(self, ignore_totals: bool = False) -> pd.Series:
        return pd.Series(
            list(self.materialize(ignore_totals=ignore_totals)),
            dtype="string",
            name=self.header,
        )

    # ── Aggregates ───────────────────────────────────────────────

    def _numbers(self) -> list[float]:
        parsed = (parse_number(cell) for cell in self.materialize(ignore_totals=True))
        return [value for value in parsed if value is not None]

    def sum(self) -> float:
        total = 0.0
        for value in self._numbers():
            total += value
        return total

    def average(self) -> float:
        numbers = self._numbers()
        if not numbers:
            return 0.0
        return sum(numbers) / len(numbers)

    def summary(self) -> ColumnSummary:
        numbers = self._numbers()
        total = sum(numbers, 0.0)
        return ColumnSummary(
            header=self.header,
            column=self.column,
            header_row=self.header_row,
            values=list(self.materialize()),
            numeric_count=len(numbers),
            sum=total,
            average=total / len(numbers) if numbers else 0.0,
        )

    # ── Lookup ───────────────────────────────────────────────────

    def find_row_by_value(self, value: Any) -> list[str] | None:
        """Return the first row whose cell in this column matches *value*.

        Only the very first physical row is skipped, whatever
        ``header_row`` is.
        """
        target = normalize(value)
        idx = self.column - 1
        for row in self._source.read_all_rows()[1:]:
            cell = row[idx] if idx < len(row) else ""
            if normalize(cell) == target:
                return list(row)
        return None

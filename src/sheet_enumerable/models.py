"""Data models shared across the package."""

from __future__ import annotations

from dataclasses import dataclass, field
from numbers import Integral
from typing import Any, NamedTuple

from openpyxl.utils.cell import get_column_letter, range_boundaries


def _to_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise TypeError(f"{field_name} must be an integer")
    result = int(value)
    if result < 1:
        raise ValueError(f"{field_name} must be >= 1")
    return result


@dataclass(frozen=True)
class MergedRegion:
    """A rectangular merged area, 1-based and inclusive on both ends.

    The top-left cell is the region's *anchor*; it is the only cell of
    the region that carries a value.
    """

    start_row: int
    start_col: int
    end_row: int
    end_col: int

    def __post_init__(self) -> None:
        for name in ("start_row", "start_col", "end_row", "end_col"):
            object.__setattr__(self, name, _to_positive_int(getattr(self, name), name))
        if self.start_row > self.end_row:
            raise ValueError("start_row must be <= end_row")
        if self.start_col > self.end_col:
            raise ValueError("start_col must be <= end_col")

    @classmethod
    def from_a1(cls, ref: str) -> MergedRegion:
        """Build a region from an A1 reference like ``"F19:F20"`` or ``"B2"``."""
        text = str(ref).strip().upper()
        if not text:
            raise ValueError("Empty merged range reference")
        try:
            min_col, min_row, max_col, max_row = range_boundaries(text)
        except (ValueError, TypeError) as exc:
            raise ValueError(f"Invalid merged range: {ref!r} (expected e.g. F19:F20)") from exc
        if None in (min_col, min_row, max_col, max_row):
            raise ValueError(f"Merged range must name whole cells: {ref!r}")
        return cls(int(min_row), int(min_col), int(max_row), int(max_col))  # type: ignore[arg-type]

    @property
    def anchor(self) -> tuple[int, int]:
        return (self.start_row, self.start_col)

    def contains(self, row: int, col: int) -> bool:
        return self.start_row <= row <= self.end_row and self.start_col <= col <= self.end_col

    def to_a1(self) -> str:
        start = f"{get_column_letter(self.start_col)}{self.start_row}"
        end = f"{get_column_letter(self.end_col)}{self.end_row}"
        return start if start == end else f"{start}:{end}"

    def to_dict(self) -> dict[str, int]:
        return {
            "start_row": self.start_row,
            "start_col": self.start_col,
            "end_row": self.end_row,
            "end_col": self.end_col,
        }


class CellRef(NamedTuple):
    """One cell yielded by the grid walker (1-based positions)."""

    value: str
    row: int
    column: int


@dataclass
class ColumnSummary:
    """Aggregates for one resolved column, as written by ``sheetenum column --json``."""

    header: str
    column: int
    header_row: int
    values: list[str] = field(default_factory=list)
    numeric_count: int = 0
    sum: float = 0.0
    average: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "header": self.header,
            "column": self.column,
            "column_letter": get_column_letter(self.column),
            "header_row": self.header_row,
            "values": list(self.values),
            "numeric_count": self.numeric_count,
            "sum": self.sum,
            "average": self.average,
        }

from __future__ import annotations

import pytest

from sheet_enumerable.source import InMemoryGridSource


@pytest.fixture
def budget_rows() -> list[list[str]]:
    """A small report: a title row, headers on row 2, a totals row at the end."""
    return [
        ["Quarterly report", "", ""],
        ["Name", "Score", "Region"],
        ["Ann", "10", "North"],
        ["Total", "total", ""],
        ["Bob", "20", "South"],
        ["Cid", "", "South"],
    ]


@pytest.fixture
def budget_source(budget_rows: list[list[str]]) -> InMemoryGridSource:
    return InMemoryGridSource(budget_rows)

"""Merged-region registry — anchor/covered queries over static regions."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from sheet_enumerable.models import MergedRegion


class MergedRegistry:
    """Immutable set of merged regions supplied at construction.

    Every region is checked independently, so overlapping regions are
    allowed: a cell that anchors one region but sits inside the body of
    another still counts as covered.
    """

    def __init__(self, regions: Iterable[MergedRegion] | None = None) -> None:
        items = tuple(regions or ())
        for region in items:
            if not isinstance(region, MergedRegion):
                raise TypeError("regions items must be MergedRegion instances")
        self._regions: tuple[MergedRegion, ...] = items

    @classmethod
    def from_a1(cls, refs: Iterable[str]) -> MergedRegistry:
        return cls(MergedRegion.from_a1(ref) for ref in refs)

    @property
    def regions(self) -> tuple[MergedRegion, ...]:
        return self._regions

    def __len__(self) -> int:
        return len(self._regions)

    def __iter__(self) -> Iterator[MergedRegion]:
        return iter(self._regions)

    def __repr__(self) -> str:
        refs = ", ".join(region.to_a1() for region in self._regions)
        return f"MergedRegistry([{refs}])"

    def is_anchor(self, row: int, col: int) -> bool:
        """True if ``(row, col)`` is the top-left cell of any region."""
        return any(region.anchor == (row, col) for region in self._regions)

    def is_covered(self, row: int, col: int) -> bool:
        """True if ``(row, col)`` lies inside a region other than at its anchor."""
        return any(
            region.contains(row, col) and region.anchor != (row, col)
            for region in self._regions
        )

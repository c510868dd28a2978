"""Rectangle algebra for multi-region selections.

``optimize`` turns any list of (possibly overlapping) rectangles into a
disjoint cover of exactly the same cells. It is a deterministic greedy scan,
not a minimal cover: cells are visited row-major, and from each unused cell a
rectangle first grows downward while the whole current column span is
selected and unused, then rightward while the whole current row span is.
Downstream code relies on this exact output shape.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Set, Tuple

from grid_engine.grid.models import CellPosition, SelectionRange

Cell = Tuple[int, int]


def covered_cells(regions: Iterable[SelectionRange]) -> Set[Cell]:
    cells: Set[Cell] = set()
    for region in regions:
        cells.update(region.cells())
    return cells


def optimize(regions: Sequence[SelectionRange]) -> List[SelectionRange]:
    cell_set = covered_cells(regions)
    if not cell_set:
        return []

    used: Set[Cell] = set()
    optimized: List[SelectionRange] = []

    def available(cell: Cell) -> bool:
        return cell in cell_set and cell not in used

    for row, col in sorted(cell_set):
        if (row, col) in used:
            continue
        min_row = max_row = row
        min_col = max_col = col

        while all(available((max_row + 1, c)) for c in range(min_col, max_col + 1)):
            max_row += 1

        while all(available((r, max_col + 1)) for r in range(min_row, max_row + 1)):
            max_col += 1

        region = SelectionRange(min_row, max_row, min_col, max_col)
        used.update(region.cells())
        optimized.append(region)

    return optimized


def split_into_cells(
    region: SelectionRange, exclude: Optional[CellPosition] = None
) -> List[SelectionRange]:
    """Explode ``region`` into unit regions, optionally dropping one cell."""

    return [
        SelectionRange.cell(row, col)
        for row, col in region.cells()
        if exclude is None or (row, col) != (exclude.row, exclude.col)
    ]


def subtract_range(region: SelectionRange, drag: SelectionRange) -> List[SelectionRange]:
    """Unit-cell decomposition of ``region`` minus ``drag``."""

    return [
        SelectionRange.cell(row, col)
        for row, col in region.cells()
        if not drag.contains(row, col)
    ]


def regions_overlap(left: SelectionRange, right: SelectionRange) -> bool:
    return left.overlaps(right)


def bounding_box(regions: Sequence[SelectionRange]) -> Optional[SelectionRange]:
    if not regions:
        return None
    return SelectionRange(
        min(region.min_row for region in regions),
        max(region.max_row for region in regions),
        min(region.min_col for region in regions),
        max(region.max_col for region in regions),
    )


def find_containing(regions: Sequence[SelectionRange], row: int, col: int) -> int:
    """Index of the first region containing ``(row, col)``, or -1."""

    for index, region in enumerate(regions):
        if region.contains(row, col):
            return index
    return -1


def index_of(regions: Sequence[SelectionRange], target: SelectionRange) -> int:
    """Index of a region with exactly ``target``'s four bounds, or -1."""

    for index, region in enumerate(regions):
        if region == target:
            return index
    return -1


__all__ = [
    "covered_cells",
    "optimize",
    "split_into_cells",
    "subtract_range",
    "regions_overlap",
    "bounding_box",
    "find_containing",
    "index_of",
]

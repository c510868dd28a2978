from grid_engine.grid import CellPosition, SelectionRange
from grid_engine.selection import (
    bounding_box,
    covered_cells,
    find_containing,
    index_of,
    optimize,
    split_into_cells,
    subtract_range,
)


def make_ranges(*bounds: tuple[int, int, int, int]) -> list[SelectionRange]:
    return [SelectionRange(*b) for b in bounds]


def assert_disjoint(regions: list[SelectionRange]) -> None:
    seen: set[tuple[int, int]] = set()
    for region in regions:
        cells = set(region.cells())
        assert not (cells & seen)
        seen |= cells


def test_optimize_merges_adjacent_units_into_rectangle() -> None:
    regions = [SelectionRange.cell(r, c) for r in range(2) for c in range(3)]

    assert optimize(regions) == [SelectionRange(0, 1, 0, 2)]


def test_optimize_grows_down_before_right() -> None:
    # L-shape: column 0 rows 0-2, plus (0, 1)
    regions = make_ranges((0, 2, 0, 0), (0, 0, 1, 1))

    assert optimize(regions) == [SelectionRange(0, 2, 0, 0), SelectionRange(0, 0, 1, 1)]


def test_optimize_resolves_overlap_into_disjoint_cover() -> None:
    regions = make_ranges((0, 1, 0, 1), (1, 2, 1, 2))

    result = optimize(regions)

    assert covered_cells(result) == covered_cells(regions)
    assert_disjoint(result)
    assert result == [
        SelectionRange(0, 1, 0, 1),
        SelectionRange(1, 2, 2, 2),
        SelectionRange(2, 2, 1, 1),
    ]


def test_optimize_is_idempotent() -> None:
    regions = make_ranges((0, 3, 0, 0), (2, 2, 0, 4), (5, 6, 5, 6), (6, 7, 6, 7))

    once = optimize(regions)

    assert optimize(once) == once
    assert covered_cells(once) == covered_cells(regions)
    assert_disjoint(once)


def test_optimize_empty() -> None:
    assert optimize([]) == []


def test_split_and_subtract_decompose_into_units() -> None:
    region = SelectionRange(0, 1, 0, 1)

    split = split_into_cells(region, exclude=CellPosition(0, 0))
    remaining = subtract_range(region, SelectionRange(0, 1, 1, 1))

    assert split == [SelectionRange.cell(0, 1), SelectionRange.cell(1, 0), SelectionRange.cell(1, 1)]
    assert remaining == [SelectionRange.cell(0, 0), SelectionRange.cell(1, 0)]


def test_lookup_helpers() -> None:
    regions = make_ranges((0, 0, 0, 0), (2, 3, 2, 3))

    assert find_containing(regions, 3, 2) == 1
    assert find_containing(regions, 1, 1) == -1
    assert index_of(regions, SelectionRange(2, 3, 2, 3)) == 1
    assert index_of(regions, SelectionRange(2, 3, 2, 2)) == -1
    assert bounding_box(regions) == SelectionRange(0, 3, 0, 3)
    assert bounding_box([]) is None

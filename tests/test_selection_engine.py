from typing import List

from grid_engine.events import EventBus
from grid_engine.grid import CellPosition, GridStore, SelectionRange
from grid_engine.selection import SelectionEngine, SelectionService


def make_multi(*cells: tuple[int, int, int, int]) -> SelectionEngine:
    """Engine in multi mode holding exactly ``cells`` as committed regions."""

    engine = SelectionEngine()
    for min_row, max_row, min_col, max_col in cells:
        engine.start_single(min_row, min_col)
        engine.update_single_end(max_row, max_col)
        engine.start_multiple(min_row, min_col)
    return engine


def test_single_range_is_normalized() -> None:
    engine = SelectionEngine()

    engine.start_single(3, 1)
    engine.update_single_end(1, 0)

    assert engine.active_cell == CellPosition(3, 1)
    assert engine.normalized_selection == SelectionRange(1, 3, 0, 1)
    assert engine.is_in_selection(2, 0)
    assert not engine.is_multiple_mode


def test_start_multiple_folds_current_range() -> None:
    engine = SelectionEngine()
    engine.start_single(0, 0)
    engine.update_single_end(1, 1)

    assert engine.start_multiple(3, 3) is None
    engine.update_multiple_end(4, 4)
    assert engine.end_multiple_drag() is True

    assert engine.is_multiple_mode
    assert engine.multi_selections == [SelectionRange(0, 1, 0, 1), SelectionRange(3, 4, 3, 4)]
    assert engine.active_cell == CellPosition(3, 3)
    assert engine.is_in_multi_selection_only(0, 0)
    assert engine.should_use_multi_selection_style(4, 4)


def test_start_multiple_inside_region_returns_index_without_mutation() -> None:
    engine = make_multi((0, 1, 0, 1))
    before = list(engine.multi_selections)

    assert engine.start_multiple(1, 1) == 0
    assert engine.multi_selections == before


def test_click_inside_larger_region_splits_it() -> None:
    engine = make_multi((0, 1, 0, 1))

    engine.end_multiple_click(0, 0)

    assert engine.multi_selections == [SelectionRange(0, 1, 1, 1), SelectionRange(1, 1, 0, 0)]
    assert not engine.is_in_selection(0, 0)
    assert engine.active_cell == CellPosition(1, 0)


def test_click_toggles_unit_region_and_refocuses_last_region() -> None:
    engine = make_multi((3, 4, 3, 4))

    engine.end_multiple_click(6, 6)
    assert engine.is_in_selection(6, 6)
    assert engine.active_cell == CellPosition(6, 6)

    engine.end_multiple_click(6, 6)
    assert engine.multi_selections == [SelectionRange(3, 4, 3, 4)]
    assert engine.active_cell == CellPosition(3, 3)


def test_removing_last_region_reverts_to_single_mode() -> None:
    engine = make_multi((2, 2, 2, 2))

    engine.end_multiple_click(2, 2)

    assert engine.multi_selections == []
    assert engine.active_cell is None
    assert not engine.is_multiple_mode


def test_cancel_drag_subtracts_from_target_region() -> None:
    engine = make_multi((0, 1, 0, 1))
    index = engine.start_multiple(0, 1)
    engine.update_multiple_end(1, 1)

    assert engine.end_multiple_drag(cancel_mode=True, target_region_index=index)

    assert engine.multi_selections == [SelectionRange(0, 1, 0, 0)]
    assert engine.active_cell == CellPosition(0, 0)
    assert engine.selection_end == CellPosition(1, 0)


def test_drag_can_discard_single_cell_origin() -> None:
    engine = SelectionEngine()
    engine.start_multiple(0, 0)
    engine.end_multiple_click(0, 0)
    engine.start_multiple(5, 5)
    engine.update_multiple_end(6, 6)

    engine.end_multiple_drag(remove_single_cell=CellPosition(0, 0))

    assert engine.multi_selections == [SelectionRange(5, 6, 5, 6)]


def test_end_multiple_drag_without_anchor_is_noop() -> None:
    assert SelectionEngine().end_multiple_drag() is False


def test_move_active_cell_clamps_and_extends() -> None:
    engine = SelectionEngine()
    engine.start_single(0, 0)

    engine.move_active_cell(1, 0, 3, 3)
    assert engine.active_cell == CellPosition(1, 0)

    engine.move_active_cell(5, 5, 3, 3)
    assert engine.active_cell == CellPosition(2, 2)

    engine.start_single(0, 0)
    engine.move_active_cell(0, 1, 3, 3, extend=True)
    assert engine.active_cell == CellPosition(0, 0)
    assert engine.normalized_selection == SelectionRange(0, 0, 0, 1)


def test_select_row_toggle_in_multi_set() -> None:
    engine = SelectionEngine()

    engine.select_row(1, 4, add_to_multi=True)
    assert engine.multi_selections == [SelectionRange(1, 1, 0, 3)]
    assert engine.is_in_selection_header(1, "row")
    assert engine.is_in_selection_header(3, "col")

    engine.select_row(1, 4, add_to_multi=True)
    assert engine.multi_selections == []
    assert engine.active_cell is None


def test_axis_helpers_replace_selection() -> None:
    engine = SelectionEngine()

    engine.select_columns(3, 1, 5)
    assert engine.normalized_selection == SelectionRange(0, 4, 1, 3)

    engine.select_all(2, 2)
    assert engine.normalized_selection == SelectionRange(0, 1, 0, 1)
    assert engine.selected_regions() == [SelectionRange(0, 1, 0, 1)]


def test_selection_changes_are_published() -> None:
    bus = EventBus()
    reasons: List[str] = []
    bus.subscribe("selection.changed", lambda payload: reasons.append(payload["reason"]))
    engine = SelectionEngine(bus=bus)

    engine.start_single(0, 0)
    engine.clear_selection()

    assert reasons == ["start_single", "clear_selection"]


def test_service_clamps_ranges_into_grid() -> None:
    grid = GridStore(3, 2)
    engine = SelectionEngine()
    service = SelectionService(grid, engine)

    service.apply_range(SelectionRange(1, 9, 1, 9))
    assert engine.normalized_selection == SelectionRange(1, 2, 1, 1)

    service.apply_range(None)
    assert engine.active_cell is None

    service.select_row(0)
    assert engine.normalized_selection == SelectionRange(0, 0, 0, 1)

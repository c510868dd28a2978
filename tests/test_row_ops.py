import pytest

from grid_engine.grid import CellChange, CellPosition, GridValidationError, SelectionRange
from grid_engine.history import HistoryActionType
from grid_engine.session import GridSession


def make_session() -> GridSession:
    return GridSession([["a", "b"], ["c", ""], ["", ""], ["g", "h"]])


def test_insert_row_below_records_forced_checkpoint() -> None:
    session = make_session()

    inserted = session.insert_row_below(0)

    assert inserted == 1
    assert session.grid.rows[1] == ("", "")
    entry = session.history.entries()[-1]
    assert entry.type is HistoryActionType.ROW_INSERT
    assert entry.is_checkpoint
    assert entry.metadata["inserted_row_index"] == 1


def test_undo_insert_restores_shape_and_selects_row() -> None:
    session = make_session()
    session.insert_row_below(2)

    session.undo()

    assert session.grid.row_count == 4
    assert session.selection.normalized_selection == SelectionRange(3, 3, 0, 1)


def test_delete_rows_records_every_removed_cell() -> None:
    session = make_session()
    session.selection_service.start_single(3, 1)

    entry = session.delete_rows([2, 0, 2])

    assert entry is not None
    assert entry.type is HistoryActionType.ROW_DELETE
    assert entry.is_checkpoint
    assert entry.metadata["deleted_row_indices"] == [0, 2]
    assert entry.delta == [
        CellChange(0, 0, "a", ""),
        CellChange(0, 1, "b", ""),
        CellChange(2, 0, "", ""),
        CellChange(2, 1, "", ""),
    ]
    assert session.grid.rows == (("c", ""), ("g", "h"))
    assert session.selection.active_cell == CellPosition(1, 1)


def test_active_cell_in_deleted_block_moves_to_lowest_index() -> None:
    session = make_session()
    session.selection_service.start_single(2, 0)

    session.delete_rows([1, 2])

    assert session.selection.active_cell == CellPosition(1, 0)


def test_active_cell_above_deleted_rows_is_untouched() -> None:
    session = make_session()
    session.selection_service.start_single(0, 1)

    session.delete_row(2)

    assert session.selection.active_cell == CellPosition(0, 1)


def test_deleting_bottom_row_clamps_active_cell() -> None:
    session = make_session()
    session.selection_service.start_single(3, 0)

    session.delete_row(3)

    assert session.selection.active_cell == CellPosition(2, 0)


def test_invalid_indices_are_rejected_before_mutation() -> None:
    session = make_session()
    before = session.grid.rows

    for bad in ([5], [], [-1], [True]):
        with pytest.raises(GridValidationError):
            session.delete_rows(bad)

    with pytest.raises(GridValidationError):
        session.insert_row_below(9)

    assert session.grid.rows == before
    assert len(session.history.entries()) == 1


def test_undo_delete_restores_rows() -> None:
    session = make_session()
    session.delete_rows([0, 1])

    result = session.undo()

    assert result is not None
    assert session.grid.rows == (("a", "b"), ("c", ""), ("", ""), ("g", "h"))
    assert session.selection.normalized_selection == SelectionRange(0, 1, 0, 1)

    session.redo()
    assert session.grid.rows == (("", ""), ("g", "h"))

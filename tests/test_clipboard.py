import asyncio
from typing import List

import pytest

from grid_engine.clipboard import (
    ClipboardUnavailableError,
    CopyContext,
    InMemoryClipboard,
    apply_paste,
    compute_copy_text,
    parse_clipboard_text,
    serialize_range,
)
from grid_engine.grid import CellPosition, GridStore, SelectionRange
from grid_engine.history import HistoryActionType
from grid_engine.session import GRID_CHANGED, GridSession


class FakeClock:
    def __init__(self, now: int = 1_000) -> None:
        self.now = now

    def __call__(self) -> int:
        self.now += 1_000
        return self.now


def make_rows() -> list[list[str]]:
    return [
        ["1", "2", "3", "4"],
        ["5", "6", "7", "8"],
        ["", "", "", ""],
        ["", "", "", ""],
    ]


def make_session(backend: InMemoryClipboard | None = None) -> GridSession:
    return GridSession(make_rows(), clock=FakeClock(), backend=backend)


def select(session: GridSession, start: tuple[int, int], end: tuple[int, int]) -> None:
    session.selection_service.start_single(*start)
    session.selection_service.update_single_end(*end)


def test_parse_splits_all_line_endings_and_pads() -> None:
    parsed = parse_clipboard_text("a\tb\r\nc\n\nd\te\tf")

    assert parsed == [
        ["a", "b", ""],
        ["c", "", ""],
        ["", "", ""],
        ["d", "e", "f"],
    ]
    assert parse_clipboard_text("x\ry") == [["x"], ["y"]]
    assert parse_clipboard_text("") == []
    assert parse_clipboard_text(None) == []


def test_serialize_then_parse_round_trips_rectangle() -> None:
    rows = make_rows()
    rng = SelectionRange(0, 2, 1, 3)

    parsed = parse_clipboard_text(serialize_range(rng, rows))

    assert parsed == [["2", "3", "4"], ["6", "7", "8"], ["", "", ""]]


def test_copy_text_sources() -> None:
    rows = make_rows()

    assert compute_copy_text(CopyContext(rows=rows, is_editing=True)) is None
    assert compute_copy_text(CopyContext(rows=rows)) is None
    assert compute_copy_text(CopyContext(rows=rows, active_cell=CellPosition(1, 2))) == "7"
    assert (
        compute_copy_text(
            CopyContext(rows=rows, normalized_selection=SelectionRange(0, 1, 0, 1))
        )
        == "1\t2\n5\t6"
    )


def test_multi_region_copy_projects_onto_bounding_box() -> None:
    rows = make_rows()
    ctx = CopyContext(
        rows=rows,
        normalized_selection=SelectionRange(1, 1, 2, 2),
        multi_selections=[SelectionRange(0, 0, 0, 0), SelectionRange(1, 1, 2, 2)],
    )

    assert compute_copy_text(ctx) == "1\t\t\n\t\t7"


def test_apply_paste_grows_grid_and_labels() -> None:
    grid = GridStore(4, 4)

    result = apply_paste([["a", "b", "c"], ["d", "e", "f"]], 5, 5, grid)

    assert result.affected_range == SelectionRange(5, 6, 5, 7)
    assert (result.rows_added, result.cols_added) == (3, 4)
    assert (grid.row_count, grid.col_count) == (7, 8)
    assert grid.column_labels[-1] == "H"
    assert all(len(row) == 8 for row in grid.rows)
    assert grid.get(6, 7) == "f"


def test_pasting_blanks_clears_target() -> None:
    grid = GridStore.from_rows(make_rows())

    apply_paste([["", ""], ["", ""]], 0, 0, grid)

    assert grid.rows[0] == ("", "", "3", "4")
    assert grid.rows[1] == ("", "", "7", "8")


def test_editable_predicate_vetoes_cells() -> None:
    grid = GridStore.from_rows(make_rows())

    apply_paste([["x", "y"]], 0, 0, grid, editable=lambda row, col: col != 1)

    assert grid.rows[0] == ("x", "2", "3", "4")


def test_paste_records_range_diff_and_selects_target() -> None:
    session = make_session()
    changed: List[object] = []
    session.bus.subscribe(GRID_CHANGED, changed.append)
    select(session, (0, 0), (1, 1))
    text = session.copy()
    session.selection_service.start_single(2, 2)

    result = session.paste(text)

    assert result is not None
    assert session.grid.rows[2] == ("", "", "1", "2")
    entry = session.history.entries()[-1]
    assert entry.type is HistoryActionType.PASTE
    assert len(entry.delta) == 4
    assert entry.metadata["selection_range"] == SelectionRange(0, 1, 0, 1)
    assert entry.metadata["redo_selection_range"] == SelectionRange(2, 3, 2, 3)
    assert session.selection.normalized_selection == SelectionRange(2, 3, 2, 3)
    assert changed


def test_paste_beyond_bounds_records_only_target_cells() -> None:
    session = GridSession([[""] * 4 for _ in range(4)], clock=FakeClock())
    session.selection.start_single(5, 5)

    session.paste("a\tb\tc\nd\te\tf")

    entry = session.history.entries()[-1]
    assert (session.grid.row_count, session.grid.col_count) == (7, 8)
    assert sorted(change.position for change in entry.delta) == [
        (5, 5),
        (5, 6),
        (5, 7),
        (6, 5),
        (6, 6),
        (6, 7),
    ]


def test_cut_paste_is_one_undoable_entry() -> None:
    session = make_session()
    select(session, (0, 0), (0, 1))
    assert session.cut() == "1\t2"
    session.selection_service.start_single(3, 0)

    session.paste("1\t2")

    entries = session.history.entries()
    assert len(entries) == 2
    entry = entries[-1]
    assert entry.metadata["is_cut_paste"] is True
    assert entry.metadata["cut_range"] == SelectionRange(0, 0, 0, 1)
    assert entry.metadata["paste_range"] == SelectionRange(3, 3, 0, 1)
    assert session.grid.rows[0] == ("", "", "3", "4")
    assert session.grid.rows[3] == ("1", "2", "", "")
    assert session.clipboard.cut_range is None

    session.undo()

    assert session.grid.rows[0] == ("1", "2", "3", "4")
    assert session.grid.rows[3] == ("", "", "", "")
    assert session.selection.normalized_selection == SelectionRange(0, 0, 0, 1)


def test_overlapping_cut_is_abandoned_without_clearing() -> None:
    session = make_session()
    select(session, (0, 0), (1, 1))
    text = session.cut()
    session.selection_service.start_single(1, 1)

    session.paste(text)

    assert session.grid.rows[0] == ("1", "2", "3", "4")
    assert session.grid.rows[1] == ("5", "1", "2", "8")
    assert session.grid.rows[2] == ("", "5", "6", "")
    assert session.clipboard.cut_range is None
    entry = session.history.entries()[-1]
    assert entry.type is HistoryActionType.PASTE
    assert "is_cut_paste" not in entry.metadata


def test_editing_defers_to_host() -> None:
    session = make_session()
    session.selection_service.start_single(0, 0)
    session.begin_edit(0, 0)

    assert session.copy() is None
    assert session.paste("x") is None

    session.end_edit()
    assert session.copy() == "1"


def test_async_copy_and_paste_through_backend() -> None:
    backend = InMemoryClipboard()
    session = make_session(backend)
    select(session, (0, 0), (1, 1))

    assert asyncio.run(session.clipboard.copy_to_clipboard()) is True
    assert backend.text == "1\t2\n5\t6"
    assert asyncio.run(session.clipboard.has_clipboard_content()) is True

    session.selection_service.start_single(2, 0)
    assert asyncio.run(session.clipboard.paste_from_clipboard()) is True
    assert session.grid.rows[3] == ("5", "6", "", "")


def test_unavailable_backend_surfaces_error() -> None:
    backend = InMemoryClipboard(available=False)
    session = make_session(backend)
    select(session, (0, 0), (0, 0))

    with pytest.raises(ClipboardUnavailableError):
        asyncio.run(session.clipboard.copy_to_clipboard())

    assert session.clipboard.copied_range is None
    assert asyncio.run(session.clipboard.has_clipboard_content()) is False


def test_plain_paste_forgets_copy_source() -> None:
    session = make_session()
    select(session, (0, 0), (0, 0))
    assert session.copy() == "1"
    session.selection_service.start_single(1, 0)
    session.paste("1")
    assert session.clipboard.copied_range is None

    session.selection_service.start_single(2, 3)
    session.paste("external")
    entry = session.history.entries()[-1]
    assert entry.metadata["selection_range"] == SelectionRange(2, 2, 3, 3)

    session.undo()

    assert session.grid.get(2, 3) == ""
    assert session.selection.normalized_selection == SelectionRange(2, 2, 3, 3)


def test_empty_cell_copies_and_cuts_as_empty_text() -> None:
    backend = InMemoryClipboard("stale")
    session = make_session(backend)
    session.selection_service.start_single(2, 0)

    assert session.cut() == ""
    assert session.clipboard.cut_range == SelectionRange(2, 2, 0, 0)

    assert asyncio.run(session.clipboard.copy_to_clipboard()) is True
    assert backend.text == ""
    assert session.clipboard.copied_range == SelectionRange(2, 2, 0, 0)
    assert session.clipboard.cut_range is None

from __future__ import annotations

import asyncio
from typing import List

from grid_engine.adapters.textual import GridUIHooks, TextualGridAdapter, render_grid
from grid_engine.clipboard import InMemoryClipboard
from grid_engine.grid import CellPosition
from grid_engine.session import GridSession


def make_adapter(
    session: GridSession | None = None,
) -> tuple[TextualGridAdapter, List[str], List[str], List[tuple[str, object | None]]]:
    session = session or GridSession([["", ""], ["", ""], ["", ""]])
    grids: List[str] = []
    statuses: List[str] = []
    events: List[tuple[str, object | None]] = []
    hooks = GridUIHooks(
        update_grid=grids.append,
        update_status=statuses.append,
        handle_event=lambda name, payload: events.append((name, payload)),
    )
    return TextualGridAdapter(session, hooks), grids, statuses, events


def test_adapter_renders_and_focuses_origin() -> None:
    adapter, grids, _, _ = make_adapter()

    assert grids
    assert adapter.session.selection.active_cell == CellPosition(0, 0)
    assert "[" in grids[-1].splitlines()[1]


def test_typing_commits_on_enter_and_undo_reverts() -> None:
    adapter, _, statuses, events = make_adapter()
    session = adapter.session

    adapter.handle_textual_key("DOWN")
    adapter.handle_textual_key("h", text="h")
    adapter.handle_textual_key("i", text="i")
    assert adapter.is_editing
    adapter.handle_textual_key("ENTER")

    assert not adapter.is_editing
    assert session.grid.get(1, 0) == "hi"
    assert session.selection.active_cell == CellPosition(2, 0)
    assert "edit:commit" in statuses

    outcome = adapter.handle_textual_key("Z", text="z", modifiers=("ctrl",))

    assert outcome.action == "undo"
    assert session.grid.get(1, 0) == ""
    assert any(name == "history.restored" for name, _ in events)


def test_escape_discards_draft() -> None:
    adapter, _, _, _ = make_adapter()

    adapter.handle_textual_key("x", text="x")
    adapter.handle_textual_key("ESC")

    assert not adapter.is_editing
    assert adapter.session.grid.get(0, 0) == ""
    assert adapter.draft == ""


def test_clipboard_keys_are_delegated_to_async_runner() -> None:
    backend = InMemoryClipboard()
    session = GridSession([["a", "b"], ["", ""]], backend=backend)
    adapter, _, statuses, _ = make_adapter(session)

    outcome = adapter.handle_textual_key("C", text="c", modifiers=("CTRL",))
    assert outcome.action == "copy"
    assert asyncio.run(adapter.run_clipboard("copy")) is True
    assert backend.text == "a"

    adapter.handle_textual_key("DOWN")
    assert asyncio.run(adapter.run_clipboard("paste")) is True
    assert session.grid.get(1, 0) == "a"
    assert statuses[-1] == "paste"


def test_row_shortcuts_insert_and_delete() -> None:
    adapter, _, _, _ = make_adapter()
    session = adapter.session

    adapter.handle_textual_key("O", text="o", modifiers=("CTRL",))
    assert session.grid.row_count == 4
    assert session.selection.active_cell == CellPosition(1, 0)

    adapter.handle_textual_key("K", text="k", modifiers=("CTRL",))
    assert session.grid.row_count == 3


def test_render_grid_marks_selection() -> None:
    session = GridSession([["abc", "d"], ["", ""]])
    session.selection_service.start_single(0, 0)
    session.selection_service.update_single_end(1, 1)

    lines = render_grid(session).splitlines()

    assert lines[0].split() == ["A", "B"]
    assert "[abc" in lines[1]
    assert "*" in lines[2]

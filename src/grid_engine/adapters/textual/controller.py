"""Textual-facing adapter that maps keys onto ``GridSession`` operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from grid_engine.grid import CellPosition
from grid_engine.session import GRID_CHANGED, HISTORY_RESTORED, GridSession

CLIPBOARD_ACTIONS = frozenset({"copy", "cut", "paste"})

_MOVES: Dict[str, tuple[int, int]] = {
    "UP": (-1, 0),
    "DOWN": (1, 0),
    "LEFT": (0, -1),
    "RIGHT": (0, 1),
}


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class GridUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_grid: Callable[[str], None]
    update_status: Callable[[str], None] = _noop
    show_draft: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


@dataclass(slots=True)
class KeyOutcome:
    action: str
    consumed: bool = True


def render_grid(session: GridSession, *, column_width: int = 8) -> str:
    """Plain-text table with headers; the active cell is bracketed."""

    grid = session.grid
    selection = session.selection
    width = column_width

    def fit(text: str) -> str:
        return text[: width - 2].ljust(width - 2)

    header = " " * 5 + "".join(f" {fit(label)} " for label in grid.column_labels)
    lines = [header]
    for row in range(grid.row_count):
        cells = []
        for col in range(grid.col_count):
            value = fit(grid.get(row, col))
            if selection.is_active(row, col):
                cells.append(f"[{value}]")
            elif selection.is_in_selection(row, col):
                cells.append(f"*{value}*")
            else:
                cells.append(f" {value} ")
        lines.append(f"{row + 1:>4} " + "".join(cells))
    return "\n".join(lines)


class TextualGridAdapter:
    """Bridges a ``GridSession`` and its bus events to a Textual-friendly surface.

    Keys are normalized the way ``App.on_key`` delivers them (``"UP"``,
    ``"ENTER"``, a single character, ...) with modifiers as upper-case names.
    While a cell is being edited, characters accumulate in ``draft`` until
    ENTER commits or ESC discards them.
    """

    def __init__(self, session: GridSession, hooks: GridUIHooks) -> None:
        self.session = session
        self.hooks = hooks
        self.draft = ""
        self._unsubscribers = [
            session.bus.subscribe(GRID_CHANGED, lambda _grid: self._refresh_grid()),
            session.bus.subscribe(
                HISTORY_RESTORED,
                lambda payload: self._handle_event(HISTORY_RESTORED, payload),
            ),
            session.bus.subscribe(
                "selection.changed",
                lambda payload: self._handle_event("selection.changed", payload),
            ),
        ]
        if session.selection.active_cell is None:
            session.selection_service.start_single(0, 0)
        self._refresh_grid()

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    @property
    def is_editing(self) -> bool:
        return self.session.editing_cell is not None

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> KeyOutcome:
        mods = {str(mod).upper() for mod in modifiers}
        self.hooks.log(f"key -> key={key!r} text={text!r} mods={sorted(mods)!r}")
        outcome = (
            self._handle_edit_key(key, text)
            if self.is_editing
            else self._handle_grid_key(key, text, mods)
        )
        if outcome.consumed and outcome.action not in CLIPBOARD_ACTIONS:
            self.hooks.update_status(outcome.action)
        self._refresh_grid()
        return outcome

    async def run_clipboard(self, action: str) -> bool:
        """Carry out a clipboard action returned by ``handle_textual_key``."""

        clipboard = self.session.clipboard
        if action == "copy":
            done = await clipboard.copy_to_clipboard()
        elif action == "cut":
            done = await clipboard.cut_to_clipboard()
        elif action == "paste":
            done = await clipboard.paste_from_clipboard()
        else:
            raise ValueError(f"Unknown clipboard action '{action}'")
        self.hooks.update_status(action if done else f"{action}:nothing")
        self._refresh_grid()
        return done

    # -- key handling ----------------------------------------------------

    def _handle_edit_key(self, key: str, text: Optional[str]) -> KeyOutcome:
        session = self.session
        if key == "ESC":
            session.end_edit()
            self.draft = ""
            self.hooks.show_draft("")
            return KeyOutcome("edit:cancel")
        if key == "ENTER":
            target = session.editing_cell
            session.end_edit()
            if target is not None:
                session.edit_cell(target.row, target.col, self.draft)
                session.selection_service.start_single(target.row + 1, target.col)
            self.draft = ""
            self.hooks.show_draft("")
            return KeyOutcome("edit:commit")
        if key == "BACKSPACE":
            self.draft = self.draft[:-1]
        elif text:
            self.draft += text
        else:
            return KeyOutcome("edit:ignored", consumed=False)
        self.hooks.show_draft(self.draft)
        return KeyOutcome("edit:draft")

    def _handle_grid_key(
        self, key: str, text: Optional[str], mods: set[str]
    ) -> KeyOutcome:
        session = self.session
        selection = session.selection
        grid = session.grid
        active = selection.active_cell or CellPosition(0, 0)

        if "CTRL" in mods and text:
            return self._handle_ctrl(text.lower(), active)

        move = _MOVES.get(key)
        if move is not None:
            selection.move_active_cell(
                move[0],
                move[1],
                grid.row_count,
                grid.col_count,
                extend="SHIFT" in mods,
            )
            return KeyOutcome("move")
        if key == "ENTER":
            session.begin_edit(active.row, active.col)
            self.draft = grid.get(active.row, active.col)
            self.hooks.show_draft(self.draft)
            return KeyOutcome("edit:begin")
        if key in {"DELETE", "BACKSPACE"}:
            session.delete_selection()
            return KeyOutcome("delete")
        if key == "ESC":
            session.clipboard.exit_copy_mode()
            selection.clear_multi_selections()
            return KeyOutcome("escape")
        if text and len(text) == 1 and text.isprintable():
            session.begin_edit(active.row, active.col)
            self.draft = text
            self.hooks.show_draft(self.draft)
            return KeyOutcome("edit:begin")
        return KeyOutcome("ignored", consumed=False)

    def _handle_ctrl(self, char: str, active: CellPosition) -> KeyOutcome:
        session = self.session
        if char == "z":
            return KeyOutcome("undo" if session.undo() else "undo:nothing")
        if char == "y":
            return KeyOutcome("redo" if session.redo() else "redo:nothing")
        if char == "c":
            return KeyOutcome("copy")
        if char == "x":
            return KeyOutcome("cut")
        if char == "v":
            return KeyOutcome("paste")
        if char == "a":
            session.selection_service.select_all()
            return KeyOutcome("select_all")
        if char == "d":
            current = session.selection.normalized_selection
            end_row = current.max_row if current is not None else active.row
            session.smart_fill(active, end_row)
            return KeyOutcome("fill")
        if char == "o":
            inserted = session.insert_row_below(active.row)
            session.selection_service.start_single(inserted, active.col)
            return KeyOutcome("row:insert")
        if char == "k":
            current = session.selection.normalized_selection
            rows = (
                range(current.min_row, current.max_row + 1)
                if current is not None
                else range(active.row, active.row + 1)
            )
            session.delete_rows(rows)
            return KeyOutcome("row:delete")
        return KeyOutcome("ignored", consumed=False)

    # -- UI refresh ------------------------------------------------------

    def _handle_event(self, name: str, payload: object | None) -> None:
        self.hooks.log(f"event -> event={name!r}")
        self.hooks.handle_event(name, payload)

    def _refresh_grid(self) -> None:
        self.hooks.update_grid(render_grid(self.session))


__all__ = [
    "TextualGridAdapter",
    "GridUIHooks",
    "KeyOutcome",
    "CLIPBOARD_ACTIONS",
    "render_grid",
]

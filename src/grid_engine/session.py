"""One editable grid with its selection, history and clipboard wired together."""

from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence

from grid_engine.clipboard import ClipboardBackend, ClipboardEngine, PasteResult
from grid_engine.config import DEFAULT_CONFIG, EngineConfig
from grid_engine.events import EventBus
from grid_engine.grid import CellPosition, EditablePredicate, GridStore, LabelGenerator, column_label
from grid_engine.history import (
    HistoryEntry,
    HistoryRestoreResult,
    HistoryTimeline,
    apply_restore,
)
from grid_engine.history.timeline import Clock
from grid_engine.ops import (
    OpsContext,
    delete_rows,
    delete_selection,
    edit_cell,
    insert_row_below,
    smart_fill,
)
from grid_engine.runtime import telemetry
from grid_engine.runtime.scheduling import Scheduler, call_soon
from grid_engine.selection import SelectionEngine, SelectionService

GRID_CHANGED = "grid.changed"
HISTORY_RESTORED = "history.restored"


class GridSession:
    """Entry point hosts drive; everything it owns is reachable as attributes.

    Every committed change emits ``grid.changed`` on ``bus`` (deferred through
    ``scheduler`` for structural ops and undo/redo).
    """

    def __init__(
        self,
        rows: Optional[Sequence[Sequence[Any]]] = None,
        *,
        config: EngineConfig = DEFAULT_CONFIG,
        editable: Optional[EditablePredicate] = None,
        label_generator: LabelGenerator = column_label,
        clock: Optional[Clock] = None,
        scheduler: Scheduler = call_soon,
        backend: Optional[ClipboardBackend] = None,
        bus: Optional[EventBus] = None,
    ) -> None:
        self.config = config
        self.bus = bus or EventBus()
        self.scheduler = scheduler
        if rows:
            self.grid = GridStore.from_rows(rows, label_generator=label_generator)
        else:
            self.grid = GridStore(
                config.default_rows, config.default_cols, label_generator=label_generator
            )
        self.selection = SelectionEngine(bus=self.bus)
        self.selection_service = SelectionService(self.grid, self.selection)
        self.history = HistoryTimeline(config=config, clock=clock, scheduler=scheduler)
        self.editing_cell: Optional[CellPosition] = None
        self.ops = OpsContext(
            grid=self.grid,
            selection=self.selection_service,
            history=self.history,
            editable=editable,
            notify=self._emit_changed,
            scheduler=scheduler,
        )
        self.clipboard = ClipboardEngine(
            self.grid,
            self.selection,
            self.history,
            selection_service=self.selection_service,
            backend=backend,
            editable=editable,
            is_editing=lambda: self.editing_cell is not None,
            notify=self._emit_changed,
        )
        self.history.initialize(self.grid.rows)
        telemetry.record_event(
            "session.created",
            level="info",
            data={"rows": self.grid.row_count, "cols": self.grid.col_count},
        )

    # -- notifications ---------------------------------------------------

    def _emit_changed(self) -> None:
        self.bus.emit(GRID_CHANGED, self.grid)

    def _emit_restored(self, result: HistoryRestoreResult) -> None:
        self.bus.emit(HISTORY_RESTORED, result)
        self._emit_changed()

    # -- editing ---------------------------------------------------------

    def begin_edit(self, row: int, col: int) -> None:
        self.editing_cell = self.grid.clamp(row, col)

    def end_edit(self) -> None:
        self.editing_cell = None

    def edit_cell(self, row: int, col: int, value: str) -> Optional[HistoryEntry]:
        return edit_cell(self.ops, row, col, value)

    def delete_selection(self) -> Optional[HistoryEntry]:
        return delete_selection(self.ops)

    def smart_fill(self, source: CellPosition, end_row: int) -> Optional[HistoryEntry]:
        return smart_fill(self.ops, source, end_row)

    def insert_row_below(self, index: int) -> int:
        return insert_row_below(self.ops, index)

    def delete_rows(self, indices: Iterable[int]) -> Optional[HistoryEntry]:
        return delete_rows(self.ops, indices)

    def delete_row(self, index: int) -> Optional[HistoryEntry]:
        return delete_rows(self.ops, [index])

    # -- clipboard -------------------------------------------------------

    def copy(self) -> Optional[str]:
        return self.clipboard.handle_copy()

    def cut(self) -> Optional[str]:
        return self.clipboard.handle_cut()

    def paste(self, text: str) -> Optional[PasteResult]:
        return self.clipboard.handle_paste(text)

    # -- history ---------------------------------------------------------

    def undo(self) -> Optional[HistoryRestoreResult]:
        result = self.history.undo(hold_guard=True)
        if result is not None:
            apply_restore(
                result,
                self.grid,
                self.selection_service,
                self._emit_restored,
                scheduler=self.scheduler,
                release=self.history.release_restore_guard,
            )
        return result

    def redo(self) -> Optional[HistoryRestoreResult]:
        result = self.history.redo(hold_guard=True)
        if result is not None:
            apply_restore(
                result,
                self.grid,
                self.selection_service,
                self._emit_restored,
                scheduler=self.scheduler,
                release=self.history.release_restore_guard,
            )
        return result

    def reset(self, rows: Sequence[Sequence[Any]]) -> None:
        """Replace the content and start a fresh history."""

        self.grid.restore(rows)
        self.clipboard.exit_copy_mode()
        self.selection.clear_selection()
        self.history.initialize(self.grid.rows)
        self._emit_changed()


__all__ = ["GridSession", "GRID_CHANGED", "HISTORY_RESTORED"]

"""Stateful copy / cut / paste bound to a grid, a selection and a timeline."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from grid_engine.grid.diff import EditablePredicate, diff_range
from grid_engine.grid.models import CellChange, SelectionRange
from grid_engine.grid.store import GridStore
from grid_engine.history.models import HistoryActionType
from grid_engine.history.timeline import HistoryTimeline
from grid_engine.runtime import telemetry
from grid_engine.selection.engine import SelectionEngine
from grid_engine.selection.service import SelectionService

from .backends import ClipboardBackend, ClipboardUnavailableError, InMemoryClipboard
from .codec import CopyContext, compute_copy_text, parse_clipboard_text
from .paste import PasteResult, apply_paste

LOGGER_NAME = telemetry.child_logger_name("clipboard")


class ClipboardEngine:
    """Copy/cut bookkeeping plus paste with history recording.

    ``copied_range`` remembers where the last copy or cut came from so undo
    can refocus it; ``cut_range`` is only set between a cut and the paste that
    consumes it.
    """

    def __init__(
        self,
        grid: GridStore,
        selection: SelectionEngine,
        history: HistoryTimeline,
        *,
        selection_service: Optional[SelectionService] = None,
        backend: Optional[ClipboardBackend] = None,
        editable: Optional[EditablePredicate] = None,
        is_editing: Optional[Callable[[], bool]] = None,
        notify: Optional[Callable[[], None]] = None,
    ) -> None:
        self.grid = grid
        self.selection = selection
        self.history = history
        self.selection_service = selection_service or SelectionService(grid, selection)
        self.backend: ClipboardBackend = backend or InMemoryClipboard()
        self.editable = editable
        self._is_editing = is_editing or (lambda: False)
        self._notify = notify
        self.copied_range: Optional[SelectionRange] = None
        self.cut_range: Optional[SelectionRange] = None

    # -- copy / cut ------------------------------------------------------

    def copy_context(self) -> CopyContext:
        return CopyContext(
            rows=self.grid.rows,
            is_editing=self._is_editing(),
            active_cell=self.selection.active_cell,
            normalized_selection=self.selection.normalized_selection,
            multi_selections=list(self.selection.multi_selections),
        )

    def _source_range(self, ctx: CopyContext) -> Optional[SelectionRange]:
        if ctx.normalized_selection is not None:
            return ctx.normalized_selection
        if ctx.active_cell is not None:
            return SelectionRange.cell(ctx.active_cell.row, ctx.active_cell.col)
        return None

    def _remember(self, ctx: CopyContext, text: str, *, cut: bool) -> None:
        source = self._source_range(ctx)
        self.copied_range = source
        self.cut_range = source if cut else None
        telemetry.record_event(
            "clipboard.cut" if cut else "clipboard.copy",
            data={"chars": len(text), "source": source},
            logger_name=LOGGER_NAME,
        )

    def handle_copy(self) -> Optional[str]:
        """Synchronous copy for host clipboard events; ``None`` defers to the host."""

        ctx = self.copy_context()
        text = compute_copy_text(ctx)
        if text is None:
            return None
        self._remember(ctx, text, cut=False)
        return text

    def handle_cut(self) -> Optional[str]:
        ctx = self.copy_context()
        text = compute_copy_text(ctx)
        if text is None:
            return None
        self._remember(ctx, text, cut=True)
        return text

    def exit_copy_mode(self) -> None:
        self.copied_range = None
        self.cut_range = None

    # -- paste -----------------------------------------------------------

    def handle_paste(self, text: Any) -> Optional[PasteResult]:
        """Paste ``text`` at the active cell (or the origin).

        Returns ``None`` when nothing was pasted: inline editing is active or
        the text parses to an empty matrix.
        """

        if self._is_editing():
            return None
        matrix = parse_clipboard_text(text)
        if not matrix:
            telemetry.record_event(
                "clipboard.paste_empty", logger_name=LOGGER_NAME
            )
            return None

        active = self.selection.active_cell
        start_row, start_col = (active.row, active.col) if active is not None else (0, 0)

        with telemetry.span(
            "clipboard::paste",
            logger_name=LOGGER_NAME,
            component="clipboard",
            metadata={"rows": len(matrix), "cols": len(matrix[0])},
        ) as handle:
            before = self.grid.snapshot()
            result = apply_paste(matrix, start_row, start_col, self.grid, self.editable)
            paste_changes = diff_range(
                before, self.grid.rows, result.affected_range, editable=self.editable
            )
            handle.add_metadata("changes", len(paste_changes))

            cut = self.cut_range
            if cut is not None and not cut.overlaps(result.affected_range):
                self._record_cut_paste(
                    cut, result, paste_changes, len(matrix), len(matrix[0])
                )
            else:
                if self.cut_range is not None:
                    telemetry.record_event(
                        "clipboard.cut_abandoned",
                        level="info",
                        data={"cut": self.cut_range, "paste": result.affected_range},
                        logger_name=LOGGER_NAME,
                    )
                    self.exit_copy_mode()
                self.history.save(
                    self.grid.rows,
                    type=HistoryActionType.PASTE,
                    changes=paste_changes or None,
                    description=f"Paste {len(matrix)}x{len(matrix[0])} cells",
                    metadata={
                        "selection_range": self.copied_range or result.affected_range,
                        "redo_selection_range": result.affected_range,
                    },
                )
                self.copied_range = None

            self.selection_service.apply_range(result.affected_range)

        telemetry.record_event(
            "clipboard.paste",
            data={
                "range": result.affected_range,
                "rows_added": result.rows_added,
                "cols_added": result.cols_added,
            },
            logger_name=LOGGER_NAME,
        )
        if self._notify is not None:
            self._notify()
        return result

    def _record_cut_paste(
        self,
        cut: SelectionRange,
        result: PasteResult,
        paste_changes: List[CellChange],
        height: int,
        width: int,
    ) -> None:
        cut_changes = self._clear_range(cut)
        combined = paste_changes + cut_changes
        if combined:
            metadata: Dict[str, Any] = {
                "is_cut_paste": True,
                "paste_range": result.affected_range,
                "cut_range": cut,
                "selection_range": cut,
                "redo_selection_range": result.affected_range,
            }
            self.history.save(
                self.grid.rows,
                type=HistoryActionType.PASTE,
                changes=combined,
                description=f"Cut and paste {height}x{width} cells",
                metadata=metadata,
            )
        self.exit_copy_mode()

    def _clear_range(self, rng: SelectionRange) -> List[CellChange]:
        changes: List[CellChange] = []
        for row, col in rng.cells():
            if row >= self.grid.row_count or col >= self.grid.col_count:
                continue
            if self.editable is not None and not self.editable(row, col):
                continue
            old_value = self.grid.get(row, col)
            if old_value != "":
                changes.append(CellChange(row, col, old_value, ""))
                self.grid.set(row, col, "")
        return changes

    # -- async, backend-driven ------------------------------------------

    async def _write(self, *, cut: bool) -> bool:
        ctx = self.copy_context()
        text = compute_copy_text(ctx)
        if text is None:
            return False
        await self.backend.write_text(text)
        self._remember(ctx, text, cut=cut)
        return True

    async def copy_to_clipboard(self) -> bool:
        """Write the selection to the backend; ``False`` when there is nothing to copy."""

        return await self._write(cut=False)

    async def cut_to_clipboard(self) -> bool:
        return await self._write(cut=True)

    async def paste_from_clipboard(self) -> bool:
        text = await self.backend.read_text()
        return self.handle_paste(text) is not None

    async def has_clipboard_content(self) -> bool:
        try:
            text = await self.backend.read_text()
        except ClipboardUnavailableError as exc:
            telemetry.record_event(
                "clipboard.unavailable",
                level="warning",
                data={"reason": str(exc)},
                logger_name=LOGGER_NAME,
            )
            return False
        return bool(text)


__all__ = ["ClipboardEngine"]

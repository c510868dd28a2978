"""Apply an undo/redo result to a live grid and selection."""

from __future__ import annotations

from typing import Callable, Optional

from grid_engine.grid.diff import changes_bounds
from grid_engine.grid.models import SelectionRange
from grid_engine.grid.store import GridStore
from grid_engine.runtime import telemetry
from grid_engine.runtime.scheduling import Scheduler, call_soon
from grid_engine.selection.service import SelectionService

from .models import HistoryRestoreResult
from .timeline import LOGGER_NAME

Notify = Callable[[HistoryRestoreResult], None]


def _row_band(grid: GridStore, first: int, last: int) -> SelectionRange:
    return SelectionRange(first, last, 0, max(0, grid.col_count - 1))


def restored_selection(
    result: HistoryRestoreResult, grid: GridStore
) -> Optional[SelectionRange]:
    """Pick the range to focus after a restore, or ``None`` to keep the cursor."""

    metadata = result.metadata
    inserted = metadata.get("inserted_row_index")
    if isinstance(inserted, int):
        return _row_band(grid, inserted, inserted)

    deleted = metadata.get("deleted_row_indices")
    if deleted:
        rows = [int(index) for index in deleted]
        return _row_band(grid, min(rows), max(rows))

    hint = result.selection_hint
    if hint is not None:
        return hint
    return changes_bounds(result.changes)


def apply_restore(
    result: HistoryRestoreResult,
    grid: GridStore,
    selection_service: SelectionService,
    notify: Optional[Notify] = None,
    *,
    scheduler: Scheduler = call_soon,
    release: Optional[Callable[[], None]] = None,
) -> None:
    """Restore ``result`` into ``grid`` and refocus the selection.

    ``notify`` and then ``release`` run together in one scheduled callback,
    so a guard passed as ``release`` is still held while observers react.
    """

    try:
        with telemetry.span(
            f"history::apply_{result.direction}",
            logger_name=LOGGER_NAME,
            component="history",
            metadata={"type": result.entry_type.value},
        ) as handle:
            grid.restore(result.state)

            target = restored_selection(result, grid)
            if target is not None:
                selection_service.apply_range(target)
                handle.add_metadata("selection", target)
            else:
                active = selection_service.selection.active_cell
                if active is not None:
                    selection_service.start_single(active.row, active.col)
    except Exception:
        if release is not None:
            release()
        raise

    def settle() -> None:
        try:
            if notify is not None:
                notify(result)
        finally:
            if release is not None:
                release()

    if notify is not None or release is not None:
        scheduler(settle)


__all__ = ["Notify", "apply_restore", "restored_selection"]

"""Structural row operations (recorded as forced checkpoints)."""

from __future__ import annotations

from typing import Iterable, List, Optional

from grid_engine.grid.models import CellChange
from grid_engine.grid.validation import ensure_position, ensure_row_indices
from grid_engine.history.models import HistoryActionType, HistoryEntry
from grid_engine.runtime import telemetry

from .context import OpsContext

LOGGER_NAME = telemetry.child_logger_name("rows")


def insert_row_below(context: OpsContext, index: int) -> int:
    """Insert a blank row under ``index`` and return the new row's index."""

    ensure_position(context.grid, index, 0)
    with telemetry.span(
        "rows::insert",
        logger_name=LOGGER_NAME,
        component="rows",
        metadata={"index": index},
    ):
        inserted = context.grid.insert_row_below(index)
        context.history.save(
            context.grid.rows,
            type=HistoryActionType.ROW_INSERT,
            force_checkpoint=True,
            description="Insert 1 row",
            metadata={"inserted_row_index": inserted, "inserted_row_count": 1},
        )
    telemetry.record_event(
        "rows.insert",
        data={"index": inserted, "row_count": context.grid.row_count},
        logger_name=LOGGER_NAME,
    )
    context.emit_sync(deferred=True)
    return inserted


def delete_row(context: OpsContext, index: int) -> Optional[HistoryEntry]:
    return delete_rows(context, [index])


def delete_rows(context: OpsContext, indices: Iterable[int]) -> Optional[HistoryEntry]:
    """Remove rows ``indices`` (deduplicated) and relocate the active cell.

    Rows go highest first so earlier removals do not shift later ones. Every
    cell of every removed row is recorded as cleared, empty or not.
    """

    grid = context.grid
    requested = list(indices)
    unique = ensure_row_indices(grid, requested)
    old_count = grid.row_count

    with telemetry.span(
        "rows::delete",
        logger_name=LOGGER_NAME,
        component="rows",
        metadata={"indices": unique},
    ):
        changes: List[CellChange] = []
        for row in sorted(unique, reverse=True):
            removed = grid.delete_row(row)
            changes.extend(
                CellChange(row, col, value, "") for col, value in enumerate(removed)
            )
        changes.sort(key=lambda change: change.position)

        entry = context.history.save(
            grid.rows,
            type=HistoryActionType.ROW_DELETE,
            changes=changes,
            force_checkpoint=True,
            description=f"Delete {len(unique)} row(s)",
            metadata={"deleted_row_indices": unique, "deleted_row_count": len(unique)},
        )
        _relocate_active_cell(context, unique)

    telemetry.record_event(
        "rows.delete",
        data={
            "indices": unique,
            "before": old_count,
            "after": grid.row_count,
        },
        logger_name=LOGGER_NAME,
    )
    context.emit_sync(deferred=True)
    return entry


def _relocate_active_cell(context: OpsContext, deleted: List[int]) -> None:
    active = context.selection.selection.active_cell
    if active is None:
        return

    if active.row in deleted:
        target_row = min(deleted)
    else:
        target_row = active.row - sum(1 for row in deleted if row < active.row)
    if target_row == active.row and active.col < context.grid.col_count:
        return
    context.selection.start_single(target_row, active.col)


__all__ = ["insert_row_below", "delete_row", "delete_rows"]

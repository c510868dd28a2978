"""Cell-level edits: single-cell writes, clearing the selection, smart fill."""

from __future__ import annotations

import math
import re
from typing import List, Optional

from grid_engine.grid.models import CellChange, CellPosition
from grid_engine.grid.validation import ensure_position
from grid_engine.history.models import HistoryActionType, HistoryEntry
from grid_engine.runtime import telemetry

from .context import OpsContext

LOGGER_NAME = telemetry.child_logger_name("cells")

_TRAILING_NUMBER = re.compile(r"^(.*?)(\d+)$")


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


def smart_value(value: str, step: int) -> str:
    """Value ``step`` rows below ``value`` in a fill series.

    ``"3"`` -> ``"3 + step"``, ``"Item1"`` -> ``"Item{1 + step}"``; anything
    else is repeated unchanged. Blank input stays blank.
    """

    if not isinstance(value, str):
        return ""
    trimmed = value.strip()
    if not trimmed:
        return ""

    try:
        return str(int(trimmed) + step)
    except ValueError:
        pass
    try:
        number = float(trimmed)
    except ValueError:
        number = None
    if number is not None and math.isfinite(number):
        return _format_number(number + step)

    match = _TRAILING_NUMBER.match(trimmed)
    if match:
        prefix, digits = match.groups()
        return f"{prefix}{int(digits) + step}"
    return value


def edit_cell(
    context: OpsContext, row: int, col: int, value: str
) -> Optional[HistoryEntry]:
    """Write one cell. Rapid edits merge into one history entry."""

    ensure_position(context.grid, row, col)
    if not context.can_edit(row, col):
        telemetry.record_event(
            "cells.edit_rejected",
            data={"row": row, "col": col},
            logger_name=LOGGER_NAME,
        )
        return None

    old_value = context.grid.get(row, col)
    new_value = "" if value is None else str(value)
    if old_value == new_value:
        return None
    context.grid.set(row, col, new_value)
    entry = context.history.save(
        context.grid.rows,
        type=HistoryActionType.CELL_EDIT,
        changes=[CellChange(row, col, old_value, new_value)],
        description=f"Edit {context.grid.label_for(col)}{row + 1}",
    )
    context.emit_sync()
    return entry


def delete_selection(context: OpsContext) -> Optional[HistoryEntry]:
    """Blank every editable cell in the current selection."""

    grid = context.grid
    regions = context.selection.selection.selected_regions()
    changes: List[CellChange] = []
    seen: set[tuple[int, int]] = set()

    with telemetry.span(
        "cells::delete",
        logger_name=LOGGER_NAME,
        component="cells",
        metadata={"regions": len(regions)},
    ) as handle:
        for region in regions:
            for row, col in region.cells():
                if (row, col) in seen:
                    continue
                seen.add((row, col))
                if row >= grid.row_count or col >= grid.col_count:
                    continue
                if not context.can_edit(row, col):
                    continue
                old_value = grid.get(row, col)
                if old_value:
                    grid.set(row, col, "")
                    changes.append(CellChange(row, col, old_value, ""))
        handle.add_metadata("cleared", len(changes))

        if not changes:
            return None
        entry = context.history.save(
            grid.rows,
            type=HistoryActionType.DELETE,
            changes=changes,
            description=f"Delete {len(changes)} cell(s)",
        )
    context.emit_sync()
    return entry


def smart_fill(
    context: OpsContext, source: CellPosition, end_row: int
) -> Optional[HistoryEntry]:
    """Fill rows ``source.row + 1 .. end_row`` of ``source.col`` from ``source``.

    Rows past the end of the grid are ignored; the grid is not grown.
    """

    grid = context.grid
    ensure_position(grid, source.row, source.col)
    base = grid.get(source.row, source.col)
    last_row = min(end_row, grid.row_count - 1)

    changes: List[CellChange] = []
    for row in range(source.row + 1, last_row + 1):
        if not context.can_edit(row, source.col):
            continue
        old_value = grid.get(row, source.col)
        new_value = smart_value(base, row - source.row)
        if old_value != new_value:
            grid.set(row, source.col, new_value)
            changes.append(CellChange(row, source.col, old_value, new_value))

    telemetry.record_event(
        "cells.fill",
        data={"source": source, "end_row": end_row, "changes": len(changes)},
        logger_name=LOGGER_NAME,
    )
    if not changes:
        return None
    entry = context.history.save(
        grid.rows,
        type=HistoryActionType.FILL,
        changes=changes,
        description=f"Fill {len(changes)} cell(s)",
        metadata={
            "fill_start_row": source.row,
            "fill_end_row": end_row,
            "fill_col": source.col,
        },
    )
    context.emit_sync()
    return entry


__all__ = ["smart_value", "edit_cell", "delete_selection", "smart_fill"]

"""Writing a parsed clipboard matrix into a grid."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from grid_engine.grid.diff import EditablePredicate
from grid_engine.grid.models import SelectionRange
from grid_engine.grid.store import GridStore
from grid_engine.grid.validation import GridValidationError


@dataclass(slots=True)
class PasteResult:
    affected_range: SelectionRange
    rows_added: int = 0
    cols_added: int = 0


def paste_target(
    matrix: Sequence[Sequence[str]], start_row: int, start_col: int
) -> SelectionRange:
    width = max(len(line) for line in matrix)
    return SelectionRange(
        start_row,
        start_row + len(matrix) - 1,
        start_col,
        start_col + max(width, 1) - 1,
    )


def apply_paste(
    matrix: Sequence[Sequence[str]],
    start_row: int,
    start_col: int,
    grid: GridStore,
    editable: Optional[EditablePredicate] = None,
) -> PasteResult:
    """Overwrite the block at ``(start_row, start_col)``, growing the grid first.

    Empty strings are written like any other value, so pasting blanks clears
    the target. Cells vetoed by ``editable`` keep their value.
    """

    if not matrix:
        raise GridValidationError("Nothing to paste")
    if start_row < 0 or start_col < 0:
        raise GridValidationError(
            f"Paste origin ({start_row}, {start_col}) is negative",
        )

    target = paste_target(matrix, start_row, start_col)
    rows_added, cols_added = grid.ensure_size(target.max_row + 1, target.max_col + 1)

    for offset_row, line in enumerate(matrix):
        row = start_row + offset_row
        for offset_col, value in enumerate(line):
            col = start_col + offset_col
            if editable is not None and not editable(row, col):
                continue
            grid.set(row, col, value)

    return PasteResult(affected_range=target, rows_added=rows_added, cols_added=cols_added)


__all__ = ["PasteResult", "apply_paste", "paste_target"]

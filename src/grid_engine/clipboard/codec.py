"""Tab/newline clipboard text: building it from a selection and parsing it back.

Cells are joined with ``\\t`` and rows with ``\\n``. There is no quoting, so
values that themselves contain tabs or line breaks do not survive a
round-trip with their shape intact.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from grid_engine.grid.models import CellPosition, Matrix, SelectionRange, cell_at
from grid_engine.selection.regions import bounding_box, find_containing

_LINE_BREAK = re.compile(r"\r\n|\n|\r")


@dataclass(slots=True)
class CopyContext:
    """Everything ``compute_copy_text`` looks at, captured at copy time."""

    rows: Sequence[Sequence[str]]
    is_editing: bool = False
    active_cell: Optional[CellPosition] = None
    normalized_selection: Optional[SelectionRange] = None
    multi_selections: Sequence[SelectionRange] = field(default_factory=list)


def serialize_range(rng: SelectionRange, rows: Sequence[Sequence[str]]) -> str:
    return "\n".join(
        "\t".join(cell_at(rows, row, col) for col in range(rng.min_col, rng.max_col + 1))
        for row in range(rng.min_row, rng.max_row + 1)
    )


def _serialize_regions(
    regions: Sequence[SelectionRange], rows: Sequence[Sequence[str]]
) -> str:
    box = bounding_box(regions)
    if box is None:
        return ""
    lines: List[str] = []
    for row in range(box.min_row, box.max_row + 1):
        cells = [
            cell_at(rows, row, col) if find_containing(regions, row, col) >= 0 else ""
            for col in range(box.min_col, box.max_col + 1)
        ]
        lines.append("\t".join(cells))
    return "\n".join(lines)


def compute_copy_text(ctx: CopyContext) -> Optional[str]:
    """Text to place on the clipboard, or ``None`` to let the host handle it.

    Several multi-regions are flattened onto their bounding box: cells in the
    box that belong to no region come out as empty strings.
    """

    if ctx.is_editing:
        return None
    if len(ctx.multi_selections) > 1:
        return _serialize_regions(ctx.multi_selections, ctx.rows)
    if ctx.normalized_selection is not None:
        return serialize_range(ctx.normalized_selection, ctx.rows)
    if ctx.active_cell is not None:
        return cell_at(ctx.rows, ctx.active_cell.row, ctx.active_cell.col)
    return None


def parse_clipboard_text(text: Any) -> Matrix:
    """Split clipboard text into a rectangular matrix.

    Every row is padded to the widest row; a blank line yields a row of empty
    strings of that width. Empty or non-string input gives ``[]``.
    """

    if not isinstance(text, str) or not text:
        return []
    parsed = [line.split("\t") if line else [] for line in _LINE_BREAK.split(text)]
    width = max(1, max(len(line) for line in parsed))
    return [line + [""] * (width - len(line)) for line in parsed]


__all__ = ["CopyContext", "compute_copy_text", "parse_clipboard_text", "serialize_range"]

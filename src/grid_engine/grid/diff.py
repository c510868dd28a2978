"""Cell-level diffing between grid snapshots."""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Sequence

from .models import CellChange, SelectionRange, cell_at

EditablePredicate = Callable[[int, int], bool]


def detect_changes(
    old: Sequence[Sequence[str]], new: Sequence[Sequence[str]]
) -> List[CellChange]:
    """Whole-grid diff; rows or cells present on only one side compare as ""."""

    changes: List[CellChange] = []
    for row in range(max(len(old), len(new))):
        old_row = old[row] if row < len(old) else ()
        new_row = new[row] if row < len(new) else ()
        for col in range(max(len(old_row), len(new_row))):
            before = old_row[col] if col < len(old_row) else ""
            after = new_row[col] if col < len(new_row) else ""
            if before != after:
                changes.append(CellChange(row, col, before, after))
    return changes


def diff_range(
    before: Sequence[Sequence[str]],
    after: Sequence[Sequence[str]],
    rng: SelectionRange,
    *,
    editable: Optional[EditablePredicate] = None,
) -> List[CellChange]:
    """Diff only the cells inside ``rng`` (row-major order)."""

    changes: List[CellChange] = []
    for row, col in rng.cells():
        if editable is not None and not editable(row, col):
            continue
        old_value = cell_at(before, row, col)
        new_value = cell_at(after, row, col)
        if old_value != new_value:
            changes.append(CellChange(row, col, old_value, new_value))
    return changes


def changes_bounds(changes: Iterable[CellChange]) -> Optional[SelectionRange]:
    rows: List[int] = []
    cols: List[int] = []
    for change in changes:
        rows.append(change.row)
        cols.append(change.col)
    if not rows:
        return None
    return SelectionRange(min(rows), max(rows), min(cols), max(cols))


__all__ = ["EditablePredicate", "detect_changes", "diff_range", "changes_bounds"]

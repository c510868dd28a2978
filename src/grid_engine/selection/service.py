"""Bounds-aware façade over ``SelectionEngine`` for history and row ops."""

from __future__ import annotations

from typing import Optional

from grid_engine.grid.models import SelectionRange
from grid_engine.grid.store import GridStore

from .engine import SelectionEngine


class SelectionService:
    """Applies ranges clamped to the grid's current shape."""

    def __init__(self, grid: GridStore, selection: SelectionEngine) -> None:
        self.grid = grid
        self.selection = selection

    def apply_range(self, rng: Optional[SelectionRange]) -> None:
        if rng is None or self.grid.row_count == 0 or self.grid.col_count == 0:
            self.selection.clear_selection()
            return
        top_left = self.grid.clamp(rng.min_row, rng.min_col)
        bottom_right = self.grid.clamp(rng.max_row, rng.max_col)
        self.selection.apply_range(SelectionRange.from_points(top_left, bottom_right))

    def start_single(self, row: int, col: int) -> None:
        target = self.grid.clamp(row, col)
        self.selection.start_single(target.row, target.col)

    def update_single_end(self, row: int, col: int) -> None:
        target = self.grid.clamp(row, col)
        self.selection.update_single_end(target.row, target.col)

    def clear(self) -> None:
        self.selection.clear_selection()

    def select_row(self, row: int, add_to_multi: bool = False) -> None:
        self.selection.select_row(row, self.grid.col_count, add_to_multi)

    def select_column(self, col: int, add_to_multi: bool = False) -> None:
        self.selection.select_column(col, self.grid.row_count, add_to_multi)

    def select_rows(self, start_row: int, end_row: int) -> None:
        self.selection.select_rows(start_row, end_row, self.grid.col_count)

    def select_columns(self, start_col: int, end_col: int) -> None:
        self.selection.select_columns(start_col, end_col, self.grid.row_count)

    def select_all(self) -> None:
        self.selection.select_all(self.grid.row_count, self.grid.col_count)


__all__ = ["SelectionService"]

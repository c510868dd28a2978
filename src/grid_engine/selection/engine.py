"""Single- and multi-region selection state machine."""

from __future__ import annotations

from typing import List, Literal, Optional

from grid_engine.events import EventBus
from grid_engine.grid.models import CellPosition, SelectionRange

from .regions import (
    find_containing,
    index_of,
    optimize,
    split_into_cells,
    subtract_range,
)

Axis = Literal["row", "col"]


class SelectionEngine:
    """Tracks the active cell, the single-mode range, and the multi-region set.

    Single mode is a plain drag between ``selection_start`` and
    ``selection_end``. Multi mode (ctrl-click / ctrl-drag in most hosts) keeps
    a disjoint list of regions in ``multi_selections``; the in-progress drag
    still lives in start/end until it is committed by ``end_multiple_click``
    or ``end_multiple_drag``.
    """

    def __init__(self, *, bus: Optional[EventBus] = None) -> None:
        self.bus = bus
        self.active_cell: Optional[CellPosition] = None
        self.selection_start: Optional[CellPosition] = None
        self.selection_end: Optional[CellPosition] = None
        self.multi_selections: List[SelectionRange] = []
        self.is_multiple_mode = False

    @property
    def normalized_selection(self) -> Optional[SelectionRange]:
        if self.selection_start is None or self.selection_end is None:
            return None
        return SelectionRange.from_points(self.selection_start, self.selection_end)

    # -- single mode -----------------------------------------------------

    def start_single(self, row: int, col: int) -> None:
        self.is_multiple_mode = False
        self.multi_selections = []
        self._anchor_at(CellPosition(row, col))
        self._changed("start_single")

    def update_single_end(self, row: int, col: int) -> None:
        self.selection_end = CellPosition(row, col)
        self._changed("update_single_end")

    update_selection_end = update_single_end

    # -- multi mode ------------------------------------------------------

    def start_multiple(self, row: int, col: int) -> Optional[int]:
        """Begin a ctrl-gesture at ``(row, col)``.

        Returns the index of an existing region containing the point (the
        caller may later remove from it in cancel mode); in that case the
        region set is left alone. Otherwise the current single-mode range is
        folded into the set and a new drag is anchored.
        """

        self.is_multiple_mode = True
        point = CellPosition(row, col)
        containing = find_containing(self.multi_selections, row, col)
        if containing >= 0:
            self._anchor_at(point)
            self._changed("start_multiple")
            return containing

        current = self.normalized_selection
        if current is not None and index_of(self.multi_selections, current) < 0:
            self.multi_selections.append(current)

        self._anchor_at(point)
        self._changed("start_multiple")
        return None

    def update_multiple_end(self, row: int, col: int) -> None:
        self.selection_end = CellPosition(row, col)
        self._changed("update_multiple_end")

    def end_multiple_click(self, row: int, col: int) -> None:
        """Toggle ``(row, col)`` in the multi-region set after a no-drag click."""

        containing = find_containing(self.multi_selections, row, col)
        if containing < 0:
            self.multi_selections.append(SelectionRange.cell(row, col))
            self.multi_selections = optimize(self.multi_selections)
            self._anchor_at(CellPosition(row, col))
            self._changed("end_multiple_click")
            return

        region = self.multi_selections.pop(containing)
        if not region.is_single_cell:
            self.multi_selections.extend(
                split_into_cells(region, exclude=CellPosition(row, col))
            )
            self.multi_selections = optimize(self.multi_selections)

        if not self.multi_selections:
            self._reset()
        elif not self._focus_neighbor_of(CellPosition(row, col)):
            self._focus_last_region()
        self._changed("end_multiple_click")

    def end_multiple_drag(
        self,
        cancel_mode: bool = False,
        target_region_index: Optional[int] = None,
        remove_single_cell: Optional[CellPosition] = None,
    ) -> bool:
        """Commit the in-progress drag rectangle.

        In ``cancel_mode`` the dragged rectangle is subtracted from the region
        at ``target_region_index``; otherwise it is added as a new region,
        optionally discarding the unit region ``remove_single_cell`` it began
        from. Returns ``False`` when there is no drag to commit.
        """

        dragged = self.normalized_selection
        if dragged is None:
            return False

        start = self.selection_start
        if (
            cancel_mode
            and target_region_index is not None
            and 0 <= target_region_index < len(self.multi_selections)
        ):
            original = self.multi_selections.pop(target_region_index)
            self.multi_selections.extend(subtract_range(original, dragged))
            self.multi_selections = optimize(self.multi_selections)

            if not self.multi_selections:
                self._reset()
            elif start is None or not (
                self._focus_containing(start) or self._focus_neighbor_of(start)
            ):
                self._focus_last_region()
            self._changed("end_multiple_drag")
            return True

        if remove_single_cell is not None:
            unit = SelectionRange.cell(remove_single_cell.row, remove_single_cell.col)
            unit_index = index_of(self.multi_selections, unit)
            if unit_index >= 0:
                del self.multi_selections[unit_index]

        self.multi_selections.append(dragged)
        self.multi_selections = optimize(self.multi_selections)

        if start is None or not self._focus_containing(start):
            self._focus_last_region()
        self._changed("end_multiple_drag")
        return True

    # -- queries ---------------------------------------------------------

    def is_active(self, row: int, col: int) -> bool:
        return self.active_cell == CellPosition(row, col)

    def is_in_selection(self, row: int, col: int) -> bool:
        if find_containing(self.multi_selections, row, col) >= 0:
            return True
        current = self.normalized_selection
        return current is not None and current.contains(row, col)

    def is_in_multi_selection_only(self, row: int, col: int) -> bool:
        current = self.normalized_selection
        if current is not None and current.contains(row, col):
            return False
        return find_containing(self.multi_selections, row, col) >= 0

    def should_use_multi_selection_style(self, row: int, col: int) -> bool:
        return bool(self.multi_selections) and self.is_in_selection(row, col)

    def is_in_selection_header(self, index: int, axis: Axis) -> bool:
        regions = list(self.multi_selections)
        current = self.normalized_selection
        if current is not None:
            regions.append(current)
        if axis == "row":
            return any(r.min_row <= index <= r.max_row for r in regions)
        return any(r.min_col <= index <= r.max_col for r in regions)

    def selected_regions(self) -> List[SelectionRange]:
        """The regions a bulk operation should act on."""

        if self.multi_selections:
            return list(self.multi_selections)
        current = self.normalized_selection
        if current is not None:
            return [current]
        if self.active_cell is not None:
            return [SelectionRange.cell(self.active_cell.row, self.active_cell.col)]
        return []

    # -- keyboard / axis helpers ----------------------------------------

    def move_active_cell(
        self,
        d_row: int,
        d_col: int,
        max_rows: int,
        max_cols: int,
        extend: bool = False,
    ) -> None:
        if self.active_cell is None:
            return
        origin = (
            self.selection_end
            if extend and self.selection_end is not None
            else self.active_cell
        )
        target = CellPosition(
            max(0, min(max_rows - 1, origin.row + d_row)),
            max(0, min(max_cols - 1, origin.col + d_col)),
        )
        if extend:
            self.selection_end = target
        else:
            self._anchor_at(target)
        self._changed("move_active_cell")

    def clear_multi_selections(self) -> None:
        self.multi_selections = []
        self._changed("clear_multi_selections")

    def clear_selection(self) -> None:
        self._reset()
        self._changed("clear_selection")

    def apply_range(self, rng: SelectionRange) -> None:
        self.is_multiple_mode = False
        self.multi_selections = []
        self.active_cell = rng.top_left
        self.selection_start = rng.top_left
        self.selection_end = rng.bottom_right
        self._changed("apply_range")

    def select_row(self, row: int, max_cols: int, add_to_multi: bool = False) -> None:
        self._select_axis(SelectionRange(row, row, 0, max_cols - 1), add_to_multi)

    def select_column(
        self, col: int, max_rows: int, add_to_multi: bool = False
    ) -> None:
        self._select_axis(SelectionRange(0, max_rows - 1, col, col), add_to_multi)

    def select_rows(self, start_row: int, end_row: int, max_cols: int) -> None:
        self.apply_range(
            SelectionRange(
                min(start_row, end_row), max(start_row, end_row), 0, max_cols - 1
            )
        )

    def select_columns(self, start_col: int, end_col: int, max_rows: int) -> None:
        self.apply_range(
            SelectionRange(
                0, max_rows - 1, min(start_col, end_col), max(start_col, end_col)
            )
        )

    def select_all(self, max_rows: int, max_cols: int) -> None:
        self.apply_range(SelectionRange(0, max_rows - 1, 0, max_cols - 1))

    # -- internals -------------------------------------------------------

    def _select_axis(self, rng: SelectionRange, add_to_multi: bool) -> None:
        if not add_to_multi:
            self.apply_range(rng)
            return

        self.is_multiple_mode = True
        existing = index_of(self.multi_selections, rng)
        if existing >= 0:
            del self.multi_selections[existing]
            if self.multi_selections:
                self._focus_last_region()
            else:
                self._reset()
        else:
            self.multi_selections.append(rng)
            self.multi_selections = optimize(self.multi_selections)
            self.active_cell = rng.top_left
            self.selection_start = rng.top_left
            self.selection_end = rng.bottom_right
        self._changed("select_axis")

    def _anchor_at(self, point: CellPosition) -> None:
        self.active_cell = point
        self.selection_start = point
        self.selection_end = point

    def _reset(self) -> None:
        self.is_multiple_mode = False
        self.multi_selections = []
        self.active_cell = None
        self.selection_start = None
        self.selection_end = None

    def _focus_containing(self, point: CellPosition) -> bool:
        index = find_containing(self.multi_selections, point.row, point.col)
        if index < 0:
            return False
        region = self.multi_selections[index]
        self.active_cell = point
        self.selection_start = point
        self.selection_end = region.bottom_right
        return True

    def _focus_neighbor_of(self, point: CellPosition) -> bool:
        return any(self._focus_containing(cell) for cell in point.neighbors())

    def _focus_last_region(self) -> None:
        last = self.multi_selections[-1]
        self.active_cell = last.top_left
        self.selection_start = last.top_left
        self.selection_end = last.bottom_right

    def _changed(self, reason: str) -> None:
        if self.bus is None:
            return
        self.bus.emit(
            "selection.changed",
            {
                "reason": reason,
                "active": self.active_cell,
                "range": self.normalized_selection,
                "regions": tuple(self.multi_selections),
                "multiple": self.is_multiple_mode,
            },
        )


__all__ = ["SelectionEngine", "Axis"]

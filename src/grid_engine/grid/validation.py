"""Validation helpers shared across grid services."""

from __future__ import annotations

from typing import Iterable, Protocol

from .models import CellPosition


class GridValidationError(RuntimeError):
    """Raised when callers address cells or rows outside the grid."""

    def __init__(self, message: str, *, position: CellPosition | None = None) -> None:
        super().__init__(message)
        self.position = position


class _Bounded(Protocol):
    @property
    def row_count(self) -> int: ...

    @property
    def col_count(self) -> int: ...


def ensure_position(grid: _Bounded, row: int, col: int) -> CellPosition:
    position = CellPosition(row, col)
    if row < 0 or row >= grid.row_count:
        raise GridValidationError("Row out of range", position=position)
    if col < 0 or col >= grid.col_count:
        raise GridValidationError("Column out of range", position=position)
    return position


def ensure_row_indices(grid: _Bounded, indices: Iterable[int]) -> list[int]:
    """Deduplicate and bounds-check row indices; returns them ascending."""

    candidates = list(indices)
    if not candidates:
        raise GridValidationError("No row indices given")
    for index in candidates:
        if isinstance(index, bool) or not isinstance(index, int):
            raise GridValidationError(f"Row index must be an int, got {index!r}")
    unique = sorted(set(candidates))
    for index in unique:
        if index < 0 or index >= grid.row_count:
            raise GridValidationError(
                "Row out of range", position=CellPosition(index, 0)
            )
    return unique


__all__ = ["GridValidationError", "ensure_position", "ensure_row_indices"]

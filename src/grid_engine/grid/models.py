"""Positions, rectangles, and cell diffs shared by every engine component."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, List, Mapping, Sequence

Matrix = List[List[str]]


@dataclass(frozen=True, slots=True)
class CellPosition:
    row: int
    col: int

    def neighbors(self) -> tuple["CellPosition", ...]:
        """Up, down, left, right -- in that order."""

        return (
            CellPosition(self.row - 1, self.col),
            CellPosition(self.row + 1, self.col),
            CellPosition(self.row, self.col - 1),
            CellPosition(self.row, self.col + 1),
        )


@dataclass(frozen=True, slots=True)
class SelectionRange:
    """Inclusive, normalized rectangle of cells."""

    min_row: int
    max_row: int
    min_col: int
    max_col: int

    def __post_init__(self) -> None:
        if self.min_row > self.max_row or self.min_col > self.max_col:
            raise ValueError(f"SelectionRange bounds are not normalized: {self!r}")

    @classmethod
    def from_points(cls, start: CellPosition, end: CellPosition) -> "SelectionRange":
        return cls(
            min_row=min(start.row, end.row),
            max_row=max(start.row, end.row),
            min_col=min(start.col, end.col),
            max_col=max(start.col, end.col),
        )

    @classmethod
    def cell(cls, row: int, col: int) -> "SelectionRange":
        return cls(row, row, col, col)

    @property
    def top_left(self) -> CellPosition:
        return CellPosition(self.min_row, self.min_col)

    @property
    def bottom_right(self) -> CellPosition:
        return CellPosition(self.max_row, self.max_col)

    @property
    def height(self) -> int:
        return self.max_row - self.min_row + 1

    @property
    def width(self) -> int:
        return self.max_col - self.min_col + 1

    @property
    def is_single_cell(self) -> bool:
        return self.min_row == self.max_row and self.min_col == self.max_col

    def contains(self, row: int, col: int) -> bool:
        return (
            self.min_row <= row <= self.max_row and self.min_col <= col <= self.max_col
        )

    def overlaps(self, other: "SelectionRange") -> bool:
        return (
            self.min_row <= other.max_row
            and self.max_row >= other.min_row
            and self.min_col <= other.max_col
            and self.max_col >= other.min_col
        )

    def cells(self) -> Iterator[tuple[int, int]]:
        for row in range(self.min_row, self.max_row + 1):
            for col in range(self.min_col, self.max_col + 1):
                yield (row, col)

    def to_dict(self) -> dict[str, int]:
        return {
            "min_row": self.min_row,
            "max_row": self.max_row,
            "min_col": self.min_col,
            "max_col": self.max_col,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SelectionRange":
        return cls(
            min_row=int(data["min_row"]),
            max_row=int(data["max_row"]),
            min_col=int(data["min_col"]),
            max_col=int(data["max_col"]),
        )


@dataclass(slots=True)
class CellChange:
    """Atomic diff unit: one cell going from ``old_value`` to ``new_value``."""

    row: int
    col: int
    old_value: str
    new_value: str

    @property
    def position(self) -> tuple[int, int]:
        return (self.row, self.col)

    def to_dict(self) -> dict[str, Any]:
        return {
            "row": self.row,
            "col": self.col,
            "old_value": self.old_value,
            "new_value": self.new_value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CellChange":
        return cls(
            row=int(data["row"]),
            col=int(data["col"]),
            old_value=str(data.get("old_value", "")),
            new_value=str(data.get("new_value", "")),
        )


def clone_matrix(rows: Sequence[Sequence[Any]]) -> Matrix:
    """Deep-copy a 2-D table, coercing every cell to ``str`` (``None`` -> "")."""

    return [["" if cell is None else str(cell) for cell in row] for row in rows]


def cell_at(rows: Sequence[Sequence[str]], row: int, col: int) -> str:
    """Read a cell, treating anything missing as an empty string."""

    if row < 0 or col < 0 or row >= len(rows):
        return ""
    line = rows[row]
    if col >= len(line):
        return ""
    return line[col]


__all__ = [
    "Matrix",
    "CellPosition",
    "SelectionRange",
    "CellChange",
    "clone_matrix",
    "cell_at",
]

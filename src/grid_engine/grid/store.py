"""Owned 2-D cell storage backing a grid widget."""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

from .labels import LabelGenerator, column_label
from .models import CellPosition, Matrix, cell_at, clone_matrix
from .validation import GridValidationError, ensure_position


class GridStore:
    """Rectangular table of string cells with independent row/column counts.

    Every mutating method leaves all rows the same length; ``version`` is
    bumped on each committed change so hosts can cheaply detect staleness.
    """

    def __init__(
        self,
        rows: int = 1,
        cols: int = 1,
        *,
        label_generator: LabelGenerator = column_label,
    ) -> None:
        if rows < 1 or cols < 1:
            raise GridValidationError(
                f"Grid needs at least one row and one column, got {rows}x{cols}"
            )
        self._labeler = label_generator
        self._cells: Matrix = [["" for _ in range(cols)] for _ in range(rows)]
        self._labels: List[str] = [label_generator(i) for i in range(cols)]
        self.version = 0

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[Any]],
        *,
        label_generator: LabelGenerator = column_label,
    ) -> "GridStore":
        store = cls(label_generator=label_generator)
        store.restore(rows)
        store.version = 0
        return store

    @property
    def row_count(self) -> int:
        return len(self._cells)

    @property
    def col_count(self) -> int:
        return len(self._labels)

    @property
    def column_labels(self) -> tuple[str, ...]:
        return tuple(self._labels)

    @property
    def rows(self) -> Sequence[Sequence[str]]:
        """Immutable copy of the rows; later edits do not show through it."""

        return tuple(tuple(row) for row in self._cells)

    def get(self, row: int, col: int) -> str:
        return cell_at(self._cells, row, col)

    def set(self, row: int, col: int, value: str) -> None:
        ensure_position(self, row, col)
        self._cells[row][col] = "" if value is None else str(value)
        self.version += 1

    def resize(self, rows: int, cols: int) -> None:
        if rows < 1 or cols < 1:
            raise GridValidationError(
                f"Grid needs at least one row and one column, got {rows}x{cols}"
            )
        if cols > self.col_count:
            self._labels.extend(
                self._labeler(i) for i in range(self.col_count, cols)
            )
        else:
            del self._labels[cols:]
        for line in self._cells:
            if len(line) < cols:
                line.extend([""] * (cols - len(line)))
            else:
                del line[cols:]
        if rows > self.row_count:
            self._cells.extend(
                ["" for _ in range(cols)] for _ in range(rows - self.row_count)
            )
        else:
            del self._cells[rows:]
        self.version += 1

    def ensure_size(self, rows: int, cols: int) -> tuple[int, int]:
        """Grow (never shrink) to at least ``rows`` x ``cols``.

        Returns the number of rows and columns that were added.
        """

        added_rows = max(0, rows - self.row_count)
        added_cols = max(0, cols - self.col_count)
        if added_rows or added_cols:
            self.resize(self.row_count + added_rows, self.col_count + added_cols)
        return added_rows, added_cols

    def snapshot(self) -> Matrix:
        return clone_matrix(self._cells)

    def restore(self, matrix: Sequence[Sequence[Any]]) -> None:
        cloned = clone_matrix(row if row is not None else () for row in matrix)
        if not cloned:
            cloned = [[""]]
        width = max(1, max(len(row) for row in cloned))
        for row in cloned:
            row.extend([""] * (width - len(row)))
        self._cells = cloned
        if width > len(self._labels):
            self._labels.extend(
                self._labeler(i) for i in range(len(self._labels), width)
            )
        else:
            del self._labels[width:]
        self.version += 1

    def insert_row_below(self, index: int) -> int:
        """Insert a blank row after ``index``; returns the new row's index."""

        ensure_position(self, index, 0)
        self._cells.insert(index + 1, ["" for _ in range(self.col_count)])
        self.version += 1
        return index + 1

    def delete_row(self, index: int) -> List[str]:
        """Remove row ``index`` and return its cells.

        The last remaining row is blanked instead so the grid never has zero
        rows.
        """

        ensure_position(self, index, 0)
        removed = self._cells.pop(index)
        if not self._cells:
            self._cells.append(["" for _ in range(self.col_count)])
        self.version += 1
        return removed

    def clamp(self, row: int, col: int) -> CellPosition:
        return CellPosition(
            max(0, min(row, self.row_count - 1)),
            max(0, min(col, self.col_count - 1)),
        )

    def to_rows(self) -> Matrix:
        return self.snapshot()

    def label_for(self, col: int) -> Optional[str]:
        if 0 <= col < self.col_count:
            return self._labels[col]
        return None


__all__ = ["GridStore"]

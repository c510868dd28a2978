"""Grid data store, cell models, and diff helpers."""

from .diff import EditablePredicate, changes_bounds, detect_changes, diff_range
from .labels import LabelGenerator, column_label, column_labels
from .models import CellChange, CellPosition, Matrix, SelectionRange, cell_at, clone_matrix
from .store import GridStore
from .validation import GridValidationError, ensure_position, ensure_row_indices

__all__ = [
    "GridStore",
    "CellChange",
    "CellPosition",
    "SelectionRange",
    "Matrix",
    "cell_at",
    "clone_matrix",
    "LabelGenerator",
    "column_label",
    "column_labels",
    "EditablePredicate",
    "detect_changes",
    "diff_range",
    "changes_bounds",
    "GridValidationError",
    "ensure_position",
    "ensure_row_indices",
]

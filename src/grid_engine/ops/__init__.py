"""Grid mutations that record themselves on the history timeline."""

from .cells import delete_selection, edit_cell, smart_fill, smart_value
from .context import OpsContext
from .rows import delete_row, delete_rows, insert_row_below

__all__ = [
    "OpsContext",
    "edit_cell",
    "delete_selection",
    "smart_fill",
    "smart_value",
    "insert_row_below",
    "delete_row",
    "delete_rows",
]
